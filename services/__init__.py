"""
Services package for the transaction ledger.
Provides validation, caching and mutation logic separated from the data layer.
"""

from services.common import ServiceResult, ServiceStatus
from services.transaction_cache import TransactionCache
from services.transaction_service import TransactionService
from services.validation import (
    TransactionCreate,
    TransactionUpdate,
    parse_create,
    parse_id,
    parse_ids,
    parse_update
)

__all__ = [
    # Results
    'ServiceResult',
    'ServiceStatus',
    # Validation
    'TransactionCreate',
    'TransactionUpdate',
    'parse_create',
    'parse_id',
    'parse_ids',
    'parse_update',
    # Services
    'TransactionCache',
    'TransactionService',
]
