"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Callable, Generator, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finrisk_engine.api.main import create_app
from finrisk_engine.api.dependencies import get_reference_date
from finrisk_engine.infrastructure.database.models import Base
from finrisk_engine.infrastructure.database.session import engine_options, get_db
from finrisk_engine.domain.models import LedgerItem, ScenarioParameters


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, **engine_options(TEST_DATABASE_URL))
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed "now" so date-dependent assertions never drift
AS_OF = date(2025, 3, 15)


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a pinned reference date"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_reference_date] = lambda: AS_OF
    return TestClient(app)


@pytest.fixture
def make_item() -> Callable[..., LedgerItem]:
    """Factory for AR/AP line items"""
    counter = {"n": 0}

    def _make(
        amount: str,
        due_date: Optional[date],
        kind: str = "receivable",
        settled: bool = False,
        counterparty: str = "Acme Ltd",
    ) -> LedgerItem:
        counter["n"] += 1
        return LedgerItem(
            item_id=f"item-{counter['n']:03d}",
            kind=kind,
            counterparty=counterparty,
            invoice_date=None,
            due_date=due_date,
            current_amount=Decimal(amount),
            settled=settled,
        )

    return _make


@pytest.fixture
def sample_parameters() -> ScenarioParameters:
    """FX +10%, rate +5%, inflation +2%, liquidity gap 3%"""
    return ScenarioParameters(
        fx_delta=Decimal("10"),
        rate_delta=Decimal("5"),
        inflation_delta=Decimal("2"),
        liquidity_gap=Decimal("3"),
    )
