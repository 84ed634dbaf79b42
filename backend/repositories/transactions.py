"""
Transaction control shared by repositories and the unit of work.

The active transaction handle is stored in ``session.info`` so every
repository and unit of work built over the same session sees the same
explicit transaction. A session holds at most one; beginning a second one
before the first is committed or rolled back is not guarded against.

Release always runs in a finally block: if the handle is still the
session's open transaction when it is released (commit failed, caller
bailed out), it is rolled back.

Every flush, autoflush included, adds the number of entities it wrote to a
counter in ``session.info``; save_changes reports and resets it. A rollback
or a release also resets it.
"""

from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar
import logging

from sqlalchemy import event
from sqlalchemy.orm import Session, SessionTransaction

logger = logging.getLogger(__name__)

R = TypeVar('R')

ACTIVE_TRANSACTION_KEY = 'active_transaction'
FLUSHED_CHANGES_KEY = 'flushed_changes'


@event.listens_for(Session, "after_flush")
def _count_flushed_changes(session, flush_context):
    """Accumulate entity writes of every flush, autoflushes included."""
    written = (
        len(session.new)
        + len(session.deleted)
        + sum(1 for obj in session.dirty if session.is_modified(obj))
    )
    session.info[FLUSHED_CHANGES_KEY] = session.info.get(FLUSHED_CHANGES_KEY, 0) + written


@event.listens_for(Session, "after_rollback")
def _reset_flushed_changes(session):
    session.info.pop(FLUSHED_CHANGES_KEY, None)


class TransactionManager:
    """Explicit transaction lifecycle over one SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    @property
    def active(self) -> Optional[SessionTransaction]:
        """The explicitly begun transaction, or None."""
        return self.db.info.get(ACTIVE_TRANSACTION_KEY)

    def begin(self) -> SessionTransaction:
        """
        Begin an explicit transaction.

        The session autobegins on first use, so if it is already inside a
        transaction that transaction becomes the explicit one.
        """
        if self.db.in_transaction():
            transaction = self.db.get_transaction()
        else:
            transaction = self.db.begin()
        self.db.info[ACTIVE_TRANSACTION_KEY] = transaction
        logger.debug("Transaction begun")
        return transaction

    def commit(self) -> None:
        """
        Flush pending changes and commit.

        On failure the transaction is rolled back and the error re-raised.
        The handle is released on every path.
        """
        try:
            self.db.flush()
            transaction = self.active
            if transaction is None:
                self.db.commit()
            else:
                transaction.commit()
            logger.debug("Transaction committed")
        except Exception as e:
            logger.warning(f"Commit failed, rolling back: {e}")
            self.db.rollback()
            raise
        finally:
            self.release()

    def rollback(self) -> None:
        """Roll back and release the active transaction. No-op without one."""
        if self.active is None:
            return
        logger.info("Rolling back transaction")
        self.release()

    def release(self) -> None:
        """
        Drop the transaction handle, rolling it back if still open.

        Idempotent; safe to call after commit, after rollback, or twice.
        """
        self.db.info.pop(FLUSHED_CHANGES_KEY, None)
        transaction = self.db.info.pop(ACTIVE_TRANSACTION_KEY, None)
        if transaction is not None and self.db.get_transaction() is transaction:
            self.db.rollback()

    def save_changes(self) -> int:
        """
        Persist staged inserts, updates and deletes.

        Inside an explicit transaction the changes are flushed and stay
        uncommitted; otherwise they are committed immediately.

        Returns:
            Number of entity changes written since the previous save,
            including those already written by autoflush
        """
        if self.active is not None:
            self.db.flush()
        else:
            self.db.commit()
        return self.db.info.pop(FLUSHED_CHANGES_KEY, 0)

    def execute(self, operation: Callable[[], R]) -> R:
        """
        Run operation inside a transaction.

        Commits when operation returns, rolls back and re-raises when it
        raises. Side-effect-only operations simply return None.
        """
        self.begin()
        try:
            result = operation()
            self.commit()
            return result
        except Exception:
            self.rollback()
            raise

    @contextmanager
    def scope(self) -> Iterator[Session]:
        """Context manager form of execute()."""
        self.begin()
        try:
            yield self.db
        except Exception:
            self.rollback()
            raise
        else:
            self.commit()
        finally:
            self.release()
