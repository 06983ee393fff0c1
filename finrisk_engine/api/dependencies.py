"""Dependency injection for FastAPI endpoints"""

from datetime import date

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from finrisk_engine.infrastructure.database.repositories import (
    AccountRepository,
    LedgerRepository,
    SimulationRunRepository,
)
from finrisk_engine.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_reference_date() -> date:
    """The only place the service reads the clock; the engine takes this value as input"""
    return date.today()


def get_account_repository(db: Session = Depends(get_db)) -> AccountRepository:
    return AccountRepository(db)


def get_ledger_repository(db: Session = Depends(get_db)) -> LedgerRepository:
    return LedgerRepository(db)


def get_simulation_run_repository(db: Session = Depends(get_db)) -> SimulationRunRepository:
    return SimulationRunRepository(db)
