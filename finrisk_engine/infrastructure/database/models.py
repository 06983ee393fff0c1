"""SQLAlchemy ORM models for the engine's persistence collaborator"""

import uuid
from sqlalchemy import Column, Boolean, DateTime, Date, Integer, Numeric, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Account(Base):
    """Bank, credit or loan account with its current balance"""

    __tablename__ = "account"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)  # checking | savings | investment | credit | loan
    balance = Column(Numeric(18, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ArApItem(Base):
    """Outstanding receivable or payable line item"""

    __tablename__ = "ar_ap_item"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    kind = Column(Text, nullable=False, index=True)  # receivable | payable
    counterparty = Column(Text, nullable=False)
    invoice_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)
    current_amount = Column(Numeric(18, 2), nullable=False)
    settled = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SimulationRun(Base):
    """Persisted forward simulation with its inputs and results"""

    __tablename__ = "simulation_run"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    horizon_months = Column(Integer, nullable=False)
    parameters = Column(JSON, nullable=False)
    results = Column(JSON, nullable=False)
    cash_deficit_month = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
