"""
Transaction Repository - data access layer for Transaction model.
Every query is scoped by owner; every write runs as one atomic unit.
Optional session parameter allows transaction reuse.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import delete, func
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlmodel import Session, select
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from db_engine import get_engine, session_scope
from errors import StoreError
from models import Transaction
from repositories.patch_builder import apply_patch, build_patch

logger = logging.getLogger(__name__)


class TransactionRepository:
    """Repository for owner-scoped Transaction operations."""

    @staticmethod
    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OperationalError),
        reraise=True
    )
    def _select_by_owner(sess: Session, owner_id: str) -> List[Transaction]:
        """Run the ordered owner query, retrying transient lock errors."""
        statement = (
            select(Transaction)
            .where(Transaction.owner_id == owner_id)
            .order_by(Transaction.date.desc(), Transaction.position.desc())
        )
        return list(sess.exec(statement).all())

    @staticmethod
    def _next_position(sess: Session, owner_id: str) -> int:
        statement = select(func.max(Transaction.position)).where(Transaction.owner_id == owner_id)
        current = sess.exec(statement).one()
        return (current or 0) + 1

    @staticmethod
    def find_by_owner(owner_id: str, session: Optional[Session] = None) -> List[Transaction]:
        """
        Retrieve all transactions for an owner, newest date first.

        Args:
            owner_id: Owner whose transactions to load
            session: Optional existing session for transaction reuse

        Returns:
            List of Transaction objects ordered by date descending
        """
        try:
            if session is not None:
                return TransactionRepository._select_by_owner(session, owner_id)
            with Session(get_engine()) as session:
                return TransactionRepository._select_by_owner(session, owner_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load transactions: {type(e).__name__}") from e

    @staticmethod
    def create(owner_id: str, fields: Dict[str, Any], session: Optional[Session] = None) -> uuid.UUID:
        """
        Insert a new, pre-validated transaction.

        Args:
            owner_id: Owner of the new transaction
            fields: amount, date and the optional description, account_id
                and budget_category_id
            session: Optional existing session for transaction reuse

        Returns:
            Identifier assigned to the transaction
        """
        try:
            with session_scope(session) as sess:
                transaction = Transaction(
                    owner_id=owner_id,
                    amount=fields["amount"],
                    description=fields.get("description"),
                    date=fields["date"],
                    account_id=fields.get("account_id") or None,
                    budget_category_id=fields.get("budget_category_id") or None,
                    position=TransactionRepository._next_position(sess, owner_id),
                )
                transaction_id = transaction.id
                sess.add(transaction)
            return transaction_id
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create transaction: {type(e).__name__}") from e

    @staticmethod
    def update(
        owner_id: str,
        transaction_id: uuid.UUID,
        updates: Any,
        session: Optional[Session] = None
    ) -> bool:
        """
        Apply a partial update to one of the owner's transactions.
        Only fields present in ``updates`` are written.

        Args:
            owner_id: Owner of the transaction
            transaction_id: Transaction ID to update
            updates: Mapping or pydantic model of supplied fields
            session: Optional existing session for transaction reuse

        Returns:
            True if applied (or nothing to apply), False if no owned row matched
        """
        patch = build_patch(updates)
        if not patch:
            return True

        try:
            with session_scope(session) as sess:
                statement = select(Transaction).where(
                    Transaction.id == transaction_id,
                    Transaction.owner_id == owner_id
                )
                transaction = sess.exec(statement).first()
                if transaction is None:
                    return False

                previous_date = transaction.date
                apply_patch(transaction, patch)
                if transaction.date != previous_date:
                    # Moves ahead of existing rows sharing the new date
                    transaction.position = TransactionRepository._next_position(sess, owner_id)
                sess.add(transaction)
            return True
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update transaction: {type(e).__name__}") from e

    @staticmethod
    def delete_many(
        owner_id: str,
        transaction_ids: Sequence[uuid.UUID],
        session: Optional[Session] = None
    ) -> int:
        """
        Delete the owner's transactions matching the given IDs.

        Args:
            owner_id: Owner of the transactions
            transaction_ids: Transaction IDs to delete
            session: Optional existing session for transaction reuse

        Returns:
            Number of transactions deleted
        """
        if not transaction_ids:
            return 0

        try:
            with session_scope(session) as sess:
                statement = delete(Transaction).where(
                    Transaction.owner_id == owner_id,
                    Transaction.id.in_(list(transaction_ids))
                )
                result = sess.execute(statement)
                count = result.rowcount
            return count
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to delete transactions: {type(e).__name__}") from e
