"""Data access layer feeding the engine and storing simulation runs"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from finrisk_engine.infrastructure.database.models import Account, ArApItem, SimulationRun
from finrisk_engine.domain.models import FinancialState, LedgerItem

CASH_ACCOUNT_TYPES = ("checking", "savings", "investment")
DEBT_ACCOUNT_TYPES = ("credit", "loan")


class AccountRepository:
    """Repository for account balances"""

    def __init__(self, db: Session):
        self.db = db

    def create_account(self, name: str, type: str, balance: Decimal) -> Account:
        db_account = Account(name=name, type=type, balance=balance)
        self.db.add(db_account)
        self.db.flush()
        return db_account

    def get_financial_state(self) -> Optional[FinancialState]:
        """
        Aggregate balances into cash, debt and net worth.

        Cash sums checking, savings and investment accounts; debt is the
        absolute balance of credit and loan accounts.

        Returns:
            None when there are no accounts at all
        """
        accounts = self.db.query(Account).all()
        if not accounts:
            return None

        cash = sum((Decimal(a.balance) for a in accounts if a.type in CASH_ACCOUNT_TYPES), Decimal("0"))
        debt = sum((abs(Decimal(a.balance)) for a in accounts if a.type in DEBT_ACCOUNT_TYPES), Decimal("0"))
        return FinancialState(cash=cash, debt=debt, net_worth=cash - debt)


class LedgerRepository:
    """Repository for AR/AP line items"""

    def __init__(self, db: Session):
        self.db = db

    def create_item(
        self,
        kind: str,
        counterparty: str,
        current_amount: Decimal,
        due_date: Optional[date],
        invoice_date: Optional[date] = None,
        settled: bool = False,
    ) -> ArApItem:
        db_item = ArApItem(
            kind=kind,
            counterparty=counterparty,
            current_amount=current_amount,
            due_date=due_date,
            invoice_date=invoice_date,
            settled=settled,
        )
        self.db.add(db_item)
        self.db.flush()
        return db_item

    def list_items(self, kind: str, include_settled: bool = False) -> List[LedgerItem]:
        """Fetch receivables or payables as engine input records"""
        query = self.db.query(ArApItem).filter(ArApItem.kind == kind)
        if not include_settled:
            query = query.filter(ArApItem.settled.is_(False))

        return [
            LedgerItem(
                item_id=str(row.id),
                kind=row.kind,
                counterparty=row.counterparty,
                invoice_date=row.invoice_date,
                due_date=row.due_date,
                current_amount=Decimal(row.current_amount),
                settled=row.settled,
            )
            for row in query.order_by(ArApItem.due_date, ArApItem.id).all()
        ]


class SimulationRunRepository:
    """Repository for persisted simulation runs"""

    def __init__(self, db: Session):
        self.db = db

    def create_run(
        self,
        horizon_months: int,
        parameters: Dict[str, Any],
        results: Dict[str, Any],
        cash_deficit_month: Optional[int],
    ) -> SimulationRun:
        """Persist a run; parameters and results must be JSON-ready"""
        db_run = SimulationRun(
            horizon_months=horizon_months,
            parameters=parameters,
            results=results,
            cash_deficit_month=cash_deficit_month,
        )
        self.db.add(db_run)
        self.db.flush()  # Get ID without committing
        return db_run

    def list_runs(self, limit: int = 20) -> List[SimulationRun]:
        """Fetch most recent runs first"""
        return (
            self.db.query(SimulationRun)
            .order_by(SimulationRun.created_at.desc())
            .limit(limit)
            .all()
        )
