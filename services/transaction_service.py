"""
Transaction service - validated, cache-coherent mutations of an owner's ledger.

Each request moves through received -> validated -> applied ->
cache-invalidated -> responded. Reads are cache-aside: the cache is checked
first and repopulated from the store on a miss. Writes never patch the cache;
they invalidate the owner's entry after every successful store write.
"""

import logging
from typing import Any, Iterable, Optional

from errors import NotFoundError, StoreError, ValidationError
from models import TransactionRead
from repositories import TransactionRepository
from services.common import ServiceResult
from services.transaction_cache import TransactionCache
from services.validation import parse_create, parse_id, parse_ids, parse_update

logger = logging.getLogger(__name__)


class TransactionService:
    """
    Service for listing and mutating an owner's transactions.
    Stateless per request; the repository and cache are injected.
    """

    def __init__(self, repository: Any = TransactionRepository, cache: Optional[TransactionCache] = None):
        """
        Args:
            repository: Store adapter exposing find_by_owner, create, update
                and delete_many (the SQL repository by default)
            cache: Owner-scoped list cache (built from settings by default)
        """
        self.repository = repository
        self.cache = cache if cache is not None else TransactionCache()

    def list(self, owner_id: str) -> ServiceResult:
        """Return the owner's transactions ordered by date descending."""
        cached = self.cache.get(owner_id)
        if cached is not None:
            logger.debug(f"Cache hit for owner {owner_id}")
            return ServiceResult.ok(cached)

        try:
            rows = self.repository.find_by_owner(owner_id)
        except StoreError as e:
            logger.exception(f"Failed to list transactions for owner {owner_id}")
            return ServiceResult.from_error(e)

        transactions = [TransactionRead.model_validate(row, from_attributes=True) for row in rows]
        self.cache.set(owner_id, transactions)
        return ServiceResult.ok(transactions)

    def create(self, owner_id: str, payload: Any) -> ServiceResult:
        """
        Create a transaction from a full payload.

        Returns:
            CREATED with {"id": ...}, or VALIDATION_ERROR keyed by field
        """
        try:
            fields = parse_create(payload)
            transaction_id = self.repository.create(owner_id, fields.model_dump())
        except ValidationError as e:
            return ServiceResult.from_error(e)
        except StoreError as e:
            logger.exception(f"Failed to create transaction for owner {owner_id}")
            return ServiceResult.from_error(e)

        self.cache.invalidate(owner_id)
        logger.info(f"Created transaction {transaction_id} for owner {owner_id}")
        return ServiceResult.created({"id": transaction_id})

    def update(self, owner_id: str, transaction_id: Any, payload: Any) -> ServiceResult:
        """
        Apply the supplied fields to one transaction.
        An update that supplies no mutable fields is a successful no-op.
        """
        try:
            target = parse_id(transaction_id)
            changes = parse_update(payload)
            if not changes:
                return ServiceResult.no_content()

            if not self.repository.update(owner_id, target, changes):
                raise NotFoundError(errors={
                    "transaction_id": "Transaction does not exist or does not belong to the user"
                })
        except (ValidationError, NotFoundError) as e:
            return ServiceResult.from_error(e)
        except StoreError as e:
            logger.exception(f"Failed to update transaction {transaction_id} for owner {owner_id}")
            return ServiceResult.from_error(e)

        self.cache.invalidate(owner_id)
        return ServiceResult.no_content()

    def delete_batch(self, owner_id: str, transaction_ids: Iterable[Any]) -> ServiceResult:
        """
        Delete several transactions at once.
        An empty id list is rejected; matching none of them is NOT_FOUND.
        """
        try:
            targets = parse_ids(transaction_ids)
            deleted = self.repository.delete_many(owner_id, targets)
            if deleted == 0:
                raise NotFoundError(errors={
                    "transaction_ids": "Transaction(s) do not exist or do not belong to the user"
                })
        except (ValidationError, NotFoundError) as e:
            return ServiceResult.from_error(e)
        except StoreError as e:
            logger.exception(f"Failed to delete transactions for owner {owner_id}")
            return ServiceResult.from_error(e)

        self.cache.invalidate(owner_id)
        if deleted < len(set(targets)):
            logger.warning(
                f"Deleted {deleted} of {len(set(targets))} requested transactions for owner {owner_id}"
            )
        return ServiceResult.no_content()

    def delete(self, owner_id: str, transaction_id: Any) -> ServiceResult:
        """Delete a single transaction."""
        try:
            target = parse_id(transaction_id)
        except ValidationError as e:
            return ServiceResult.from_error(e)
        return self.delete_batch(owner_id, [target])
