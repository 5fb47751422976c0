"""
Transaction model - a single owner-scoped ledger entry.
"""

import datetime as dt
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, Numeric, String
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel, Field


class ExactDecimal(TypeDecorator):
    """
    Fixed-point money column.

    Uses NUMERIC(precision, scale) where the dialect has an exact numeric
    type. SQLite only has binary floats for NUMERIC affinity, so there the
    value is stored as canonical decimal text instead.
    """

    impl = Numeric
    cache_ok = True

    def __init__(self, precision: int = 13, scale: int = 2):
        super().__init__(precision=precision, scale=scale, asdecimal=True)
        self.quantum = Decimal(1).scaleb(-scale)

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(self.impl.precision + 3))
        return dialect.type_descriptor(
            Numeric(self.impl.precision, self.impl.scale, asdecimal=True)
        )

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = Decimal(value).quantize(self.quantum)
        if dialect.name == "sqlite":
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(str(value))


class TransactionRead(SQLModel):
    """Client-facing view of a transaction, also the cached and mirrored shape."""
    id: uuid.UUID
    amount: Decimal
    description: Optional[str] = None
    date: dt.date
    account_id: Optional[uuid.UUID] = None
    budget_category_id: Optional[uuid.UUID] = None


class Transaction(SQLModel, table=True):
    """Represents an income (positive) or expense (negative) entry for an owner."""
    __tablename__ = "ledger_transaction"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    owner_id: str = Field(index=True)
    amount: Decimal = Field(sa_column=Column(ExactDecimal(13, 2), nullable=False))
    description: Optional[str] = Field(default=None, max_length=255)
    date: dt.date = Field(index=True)
    account_id: Optional[uuid.UUID] = Field(default=None)
    budget_category_id: Optional[uuid.UUID] = Field(default=None)
    # Tie-break among equal dates: higher sorts first, restamped when the date changes
    position: int = Field(default=0)
