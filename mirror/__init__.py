"""
Client mirror package for the transaction ledger.
Local ordered replica kept in step with service responses.
"""

from mirror.client import TransactionMirror
from mirror.state import Created, Deleted, MirrorState, Seeded, Updated, reduce

__all__ = [
    'Created',
    'Deleted',
    'MirrorState',
    'Seeded',
    'TransactionMirror',
    'Updated',
    'reduce',
]
