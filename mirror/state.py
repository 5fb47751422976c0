"""
Client-side mirror state and its reducer.

The mirror holds the owner's transactions in display order. Intents address
transactions by stable id; positions are only a read-only view derived from
the current order.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

from models import TransactionRead
from ordering import index_of, insert_ordered, remove_ids, update_ordered

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MirrorState:
    """Immutable snapshot of the mirrored transactions, newest date first."""
    transactions: Tuple[TransactionRead, ...] = ()

    @property
    def view(self) -> Tuple[TransactionRead, ...]:
        return self.transactions

    def id_at(self, index: int) -> uuid.UUID:
        """Resolve a rendered row position to its transaction id."""
        if not 0 <= index < len(self.transactions):
            raise IndexError(f"No transaction at position {index}")
        return self.transactions[index].id

    def __len__(self) -> int:
        return len(self.transactions)


@dataclass(frozen=True)
class Seeded:
    """Replace the mirror with a full read from the service."""
    transactions: Tuple[TransactionRead, ...]


@dataclass(frozen=True)
class Created:
    transaction: TransactionRead


@dataclass(frozen=True)
class Updated:
    transaction_id: uuid.UUID
    changes: Dict[str, Any]


@dataclass(frozen=True)
class Deleted:
    transaction_ids: Tuple[uuid.UUID, ...]


Intent = Union[Seeded, Created, Updated, Deleted]


def reduce(state: MirrorState, intent: Intent) -> MirrorState:
    """
    Apply an intent to the mirror and return the new state.

    Args:
        state: Current mirror state (left untouched)
        intent: Seeded, Created, Updated or Deleted

    Returns:
        New MirrorState; the same state when an update targets an unknown id
    """
    items = state.transactions

    if isinstance(intent, Seeded):
        return MirrorState(tuple(intent.transactions))

    if isinstance(intent, Created):
        return MirrorState(tuple(insert_ordered(items, intent.transaction)))

    if isinstance(intent, Updated):
        index = index_of(items, intent.transaction_id)
        if index is None:
            logger.warning(f"Ignoring update for unknown transaction {intent.transaction_id}")
            return state
        return MirrorState(tuple(update_ordered(items, index, intent.changes)))

    if isinstance(intent, Deleted):
        return MirrorState(tuple(remove_ids(items, intent.transaction_ids)))

    raise TypeError(f"Unsupported mirror intent: {type(intent).__name__}")
