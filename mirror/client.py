"""
Optimistic client mirror of an owner's ledger.

Seeds itself from one full read, then replays each successful mutation
locally through the same ordering engine the service side uses, so no refetch
is needed after a write.
"""

import logging
from typing import Any, Sequence, Tuple

from models import TransactionRead
from mirror.state import Created, Deleted, Intent, MirrorState, Seeded, Updated, reduce
from services import ServiceResult, TransactionService, parse_create, parse_id, parse_ids, parse_update

logger = logging.getLogger(__name__)


class TransactionMirror:
    """Explicit state container for one owner's mirrored transactions."""

    def __init__(self, service: TransactionService, owner_id: str):
        self.service = service
        self.owner_id = owner_id
        self.state = MirrorState()

    @property
    def transactions(self) -> Tuple[TransactionRead, ...]:
        return self.state.view

    def dispatch(self, intent: Intent) -> MirrorState:
        self.state = reduce(self.state, intent)
        return self.state

    def load(self) -> ServiceResult:
        """Replace local state with a full read."""
        result = self.service.list(self.owner_id)
        if result.success:
            self.dispatch(Seeded(tuple(result.data)))
        else:
            logger.warning(f"Mirror load failed for owner {self.owner_id}: {result.message}")
        return result

    def create(self, payload: Any) -> ServiceResult:
        result = self.service.create(self.owner_id, payload)
        if result.success:
            fields = parse_create(payload)
            transaction = TransactionRead(id=result.data["id"], **fields.model_dump())
            self.dispatch(Created(transaction))
        return result

    def update(self, transaction_id: Any, payload: Any) -> ServiceResult:
        result = self.service.update(self.owner_id, transaction_id, payload)
        if result.success:
            changes = parse_update(payload)
            if changes:
                self.dispatch(Updated(parse_id(transaction_id), changes))
        return result

    def update_at(self, index: int, payload: Any) -> ServiceResult:
        """Update the transaction currently rendered at ``index``."""
        return self.update(self.state.id_at(index), payload)

    def delete(self, transaction_ids: Sequence[Any]) -> ServiceResult:
        result = self.service.delete_batch(self.owner_id, transaction_ids)
        if result.success:
            self.dispatch(Deleted(tuple(parse_ids(transaction_ids))))
        return result

    def delete_at(self, index: int) -> ServiceResult:
        """Delete the transaction currently rendered at ``index``."""
        return self.delete([self.state.id_at(index)])
