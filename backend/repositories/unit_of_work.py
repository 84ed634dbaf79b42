"""
Unit of Work

Coordinates the repositories that share one session so their writes commit
or roll back together. One unit of work per logical operation (one per HTTP
request); it owns the session and closes it when disposed.

Usage::

    with UnitOfWork(SessionLocal()) as uow:
        product_id = uow.execute_transaction(lambda: create(uow))

    # or scoped
    with UnitOfWork(SessionLocal()) as uow, uow.transaction():
        uow.products.add(product)
"""

from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional, Type, TypeVar
import logging

from sqlalchemy.orm import Session

from exceptions import RepositoryError
from models import Product
from .base_repository import GenericRepository
from .product_repository import ProductRepository
from .transactions import TransactionManager

logger = logging.getLogger(__name__)

R = TypeVar('R')


class UnitOfWork:
    """
    Transactional scope over one session and its repository set.

    Repositories are created on first access from REPOSITORY_TYPES; models
    without a dedicated repository get a GenericRepository.
    """

    REPOSITORY_TYPES: Dict[type, Callable[[Session], GenericRepository]] = {
        Product: ProductRepository,
    }

    def __init__(self, db: Session, product_repository: Optional[ProductRepository] = None):
        """
        Initialize the unit of work.

        Args:
            db: SQLAlchemy session owned by this unit of work
            product_repository: Optional pre-built product repository; must
                use the same session

        Raises:
            RepositoryError: If db is missing or the repository uses another session
        """
        if db is None:
            raise RepositoryError("init", "A database session is required")
        if product_repository is not None and product_repository.db is not db:
            raise RepositoryError("init", "Product repository must share the unit of work session")

        self.db = db
        self._transactions = TransactionManager(db)
        self._repositories: Dict[type, GenericRepository] = {}
        if product_repository is not None:
            self._repositories[Product] = product_repository
        self._disposed = False

    @property
    def products(self) -> ProductRepository:
        return self.repository(Product)

    def repository(self, model: Type) -> GenericRepository:
        """Repository for model, sharing this unit of work's session."""
        if model not in self._repositories:
            factory = self.REPOSITORY_TYPES.get(model)
            self._repositories[model] = factory(self.db) if factory else GenericRepository(self.db, model)
        return self._repositories[model]

    @property
    def has_active_transaction(self) -> bool:
        return self._transactions.active is not None

    def begin_transaction(self) -> None:
        self._transactions.begin()

    def commit_transaction(self) -> None:
        """
        Save pending changes and commit.

        If saving or committing fails the transaction is rolled back before
        the error is re-raised. The handle is released either way.
        """
        self._transactions.commit()

    def rollback_transaction(self) -> None:
        """Roll back the active transaction; no-op when none is active."""
        self._transactions.rollback()

    def save_changes(self) -> int:
        """
        Persist staged changes from every repository.

        Returns:
            Number of staged entity changes written
        """
        return self._transactions.save_changes()

    def execute_transaction(self, operation: Callable[[], R]) -> R:
        """
        Run operation in a transaction.

        Commits when operation returns and returns its result (None for
        side-effect-only operations); rolls back and re-raises on failure.
        """
        return self._transactions.execute(operation)

    @contextmanager
    def transaction(self) -> Iterator["UnitOfWork"]:
        with self._transactions.scope():
            yield self

    def close(self) -> None:
        """Release any transaction and close the session. Safe to call repeatedly."""
        if self._disposed:
            return
        self._disposed = True
        try:
            self._transactions.release()
        finally:
            self.db.close()
            self._repositories.clear()

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
