"""
Database models for the transaction ledger.
All SQLModel table and read-model definitions are centralized here.
"""

from models.transaction import ExactDecimal, Transaction, TransactionRead

__all__ = [
    'ExactDecimal',
    'Transaction',
    'TransactionRead',
]
