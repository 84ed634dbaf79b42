"""
Generic repository providing CRUD and specification-based reads.

Writes are staged on the session and only reach the database on
save_changes / commit_transaction. Reads take a Specification and go through
the specification evaluator.
"""

from contextlib import contextmanager
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, Tuple, Type, TypeVar
import logging

from sqlalchemy import inspect
from sqlalchemy.orm import Query, Session
from sqlalchemy.orm.attributes import flag_modified

from constants import ExecutionOptions
from exceptions import RepositoryError
from models import AuditEntity
from .specification_evaluator import get_query
from .specifications import Specification
from .transactions import TransactionManager

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


class GenericRepository(Generic[T]):
    """
    Repository over exactly one mapped entity type.

    Holds a session and a model class; entity-specific repositories subclass
    it only to bind the model.
    """

    def __init__(self, db: Session, model: Type[T]):
        """
        Initialize the repository.

        Args:
            db: SQLAlchemy database session
            model: SQLAlchemy model class

        Raises:
            RepositoryError: If db or model is missing
        """
        if db is None:
            raise RepositoryError("init", "A database session is required")
        if model is None:
            raise RepositoryError("init", "A model class is required")
        self.db = db
        self.model = model
        self._transactions = TransactionManager(db)

    # Staged writes

    def add(self, entity: T) -> T:
        """Stage an insert. The entity already carries its id."""
        self.db.add(entity)
        return entity

    def add_range(self, entities: Iterable[T]) -> None:
        self.db.add_all(list(entities))

    def update(self, entity: T, updated_by: Optional[str] = None) -> T:
        """
        Mark every loaded column of the entity as changed (full-row update).

        Audited entities get their update timestamp and updater stamped.
        Detached instances are merged into the session and the merged
        instance is returned.

        Raises:
            RepositoryError: If the entity has no id or was never persisted
        """
        if isinstance(entity, AuditEntity):
            entity.mark_updated(updated_by)
        return self._stage_update(entity)

    def update_range(self, entities: Iterable[T], updated_by: Optional[str] = None) -> None:
        for entity in entities:
            self.update(entity, updated_by)

    def delete(self, entity: T) -> T:
        """Stage physical removal of the row."""
        state = inspect(entity)
        if state.pending:
            # Never flushed: dropping it from the session cancels the insert
            self.db.expunge(entity)
        elif state.detached:
            self.db.delete(self.db.merge(entity))
        else:
            self.db.delete(entity)
        return entity

    def delete_range(self, entities: Iterable[T]) -> None:
        for entity in entities:
            self.delete(entity)

    def soft_delete(self, entity: T, deleted_by: Optional[str] = None) -> T:
        """
        Flag an audited entity as deleted and stage the update.

        The row stays in the table; specifications exclude it from reads
        unless they opt in with include_deleted.

        Raises:
            RepositoryError: If the entity type has no soft-delete flag
        """
        if not isinstance(entity, AuditEntity):
            raise RepositoryError("soft_delete", f"{type(entity).__name__} does not support soft delete")
        entity.mark_deleted(deleted_by)
        return self._stage_update(entity)

    def _stage_update(self, entity: T) -> T:
        if getattr(entity, 'id', None) is None:
            raise RepositoryError("update", f"{type(entity).__name__} has no id")

        state = inspect(entity)
        if state.transient:
            raise RepositoryError("update", f"{type(entity).__name__} {entity.id} is not a persisted entity")
        if state.detached:
            entity = self.db.merge(entity)
            state = inspect(entity)

        for attr in state.mapper.column_attrs:
            if attr.key in state.dict and not any(column.primary_key for column in attr.columns):
                flag_modified(entity, attr.key)
        return entity

    # Specification reads

    def _apply_specification(self, spec: Specification[T], ignore_paging: bool = False) -> Query:
        return get_query(self.db.query(self.model), spec, ignore_paging)

    def _materialize(self, query: Query) -> List[T]:
        """Run the query; detach newly loaded objects for no-tracking reads."""
        if not query.get_execution_options().get(ExecutionOptions.NO_TRACKING):
            return query.all()

        if self.db.autoflush:
            # Flush first so staged objects are not mistaken for freshly loaded ones
            self.db.flush()
        tracked = set(self.db.identity_map.keys())
        results = query.all()
        for key in list(self.db.identity_map.keys()):
            if key in tracked:
                continue
            obj = self.db.identity_map.get(key)
            if obj is not None and obj in self.db:
                self.db.expunge(obj)
        return results

    def _project(self, query: Query, projector) -> List[Any]:
        if projector is None:
            return self._materialize(query)
        if isinstance(projector, (list, tuple)):
            return query.with_entities(*projector).all()
        return [projector(entity) for entity in self._materialize(query)]

    def list(self, spec: Specification[T], projector: Optional[Any] = None) -> List[Any]:
        """
        All entities matching the specification.

        No implicit limit: bound the result with paging on the specification.

        Args:
            spec: Query specification
            projector: Optional projection, either a list/tuple of column
                expressions (selected in SQL, rows returned) or a callable
                applied to each entity

        Returns:
            Entities, rows or projected values
        """
        return self._project(self._apply_specification(spec), projector)

    def first_or_default(self, spec: Specification[T]) -> Optional[T]:
        """First match in the specification's order, or None when nothing matches."""
        results = self._materialize(self._apply_specification(spec).limit(1))
        return results[0] if results else None

    def count(self, spec: Specification[T]) -> int:
        """Number of matches; paging on the specification is ignored."""
        return self._apply_specification(spec, ignore_paging=True).count()

    def any(self, spec: Specification[T]) -> bool:
        """Whether anything matches; paging on the specification is ignored."""
        query = self._apply_specification(spec, ignore_paging=True)
        return bool(self.db.query(query.exists()).scalar())

    def list_with_total_count(
        self,
        spec: Specification[T],
        projector: Optional[Any] = None
    ) -> Tuple[List[Any], int]:
        """
        One page of results plus the unpaged total.

        The two reads are independent queries and are only snapshot
        consistent if the database isolation level makes them so.

        Returns:
            (items, total_count)
        """
        total_count = self.count(spec)
        items = self.list(spec, projector)
        return items, total_count

    # Transactions

    def save_changes(self) -> int:
        return self._transactions.save_changes()

    def begin_transaction(self) -> None:
        self._transactions.begin()

    def commit_transaction(self) -> None:
        """Flush pending changes and commit. The handle is released either way."""
        self._transactions.commit()

    def rollback_transaction(self) -> None:
        self._transactions.rollback()

    def execute_transaction(self, operation: Callable[[], R]) -> R:
        """Begin, run operation, commit; on failure roll back and re-raise."""
        return self._transactions.execute(operation)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        with self._transactions.scope() as db:
            yield db
