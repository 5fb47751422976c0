"""
In-memory Transaction repository.

Same interface as TransactionRepository, backed by per-owner lists kept in
order by the ordering engine instead of SQL ORDER BY. Used for local runs
without a database and to check the SQL ordering against the engine.
"""

import logging
import threading
import uuid
from typing import Any, Dict, List, Sequence

from models import Transaction
from ordering import index_of, insert_ordered, remove_ids, update_ordered
from repositories.patch_builder import build_patch

logger = logging.getLogger(__name__)


def _merge_row(row: Transaction, changes: Dict[str, Any]) -> Transaction:
    return Transaction(**{**row.model_dump(), **changes})


class InMemoryTransactionRepository:
    """Owner-partitioned transaction store held in process memory."""

    def __init__(self) -> None:
        self._rows: Dict[str, List[Transaction]] = {}
        self._lock = threading.Lock()

    def find_by_owner(self, owner_id: str) -> List[Transaction]:
        with self._lock:
            return list(self._rows.get(owner_id, []))

    def create(self, owner_id: str, fields: Dict[str, Any]) -> uuid.UUID:
        transaction = Transaction(
            owner_id=owner_id,
            amount=fields["amount"],
            description=fields.get("description"),
            date=fields["date"],
            account_id=fields.get("account_id") or None,
            budget_category_id=fields.get("budget_category_id") or None,
        )
        with self._lock:
            self._rows[owner_id] = insert_ordered(self._rows.get(owner_id, []), transaction)
        return transaction.id

    def update(self, owner_id: str, transaction_id: uuid.UUID, updates: Any) -> bool:
        patch = build_patch(updates)
        if not patch:
            return True

        with self._lock:
            rows = self._rows.get(owner_id, [])
            index = index_of(rows, transaction_id)
            if index is None:
                return False
            self._rows[owner_id] = update_ordered(rows, index, dict(patch), merge=_merge_row)
        return True

    def delete_many(self, owner_id: str, transaction_ids: Sequence[uuid.UUID]) -> int:
        with self._lock:
            rows = self._rows.get(owner_id, [])
            remaining = remove_ids(rows, transaction_ids)
            self._rows[owner_id] = remaining
        deleted = len(rows) - len(remaining)
        logger.debug(f"Deleted {deleted} in-memory transactions for owner {owner_id}")
        return deleted
