"""
Repositories package for the transaction ledger.
Provides the data access layer for all durable store operations.
"""

from repositories.memory_repository import InMemoryTransactionRepository
from repositories.patch_builder import MUTABLE_FIELDS, apply_patch, build_patch
from repositories.transaction_repository import TransactionRepository

__all__ = [
    'InMemoryTransactionRepository',
    'MUTABLE_FIELDS',
    'TransactionRepository',
    'apply_patch',
    'build_patch',
]
