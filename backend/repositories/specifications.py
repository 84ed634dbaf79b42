"""
Specification Pattern Implementation

Provides a way to encapsulate query shape in reusable, composable specifications.
A specification describes everything a read needs: the filter predicate,
which relationships to eager load, a single ordering rule, optional paging,
and read-mode flags. It never executes anything; the specification evaluator
turns it into a SQLAlchemy query.

Specifications are read-only once constructed. Subclasses configure
themselves in __init__ through the protected _apply_* / _add_include helpers;
the public composition methods (where, or_, where_if, or_if, &, |, ~) always
return a new specification and leave the original untouched, so a single
instance can be shared across callers.

Predicates are plain SQLAlchemy boolean expressions, e.g. ``Product.price > 10``.
"""

import copy
from typing import Any, Generic, List, Optional, Tuple, TypeVar, Union

from sqlalchemy import and_, or_, not_, false
from sqlalchemy.orm import QueryableAttribute


T = TypeVar('T')

Include = Union[QueryableAttribute, str]


class Specification(Generic[T]):
    """
    Declarative description of a query over one entity type.

    Attributes (read-only):
        criteria: SQLAlchemy boolean expression, or None for no filter
        includes: Relationship attributes to eager load, in declaration order
        include_strings: Dotted relationship paths to eager load
        order_by / order_by_descending: At most one ordering expression
        skip / take: Paging values, only used when is_paging_enabled
        as_no_tracking: Loaded entities are detached from the session
        as_split_query: Relationships load with a separate SELECT each
        include_deleted: Soft-deleted rows are returned too
    """

    def __init__(self, criteria=None):
        self._criteria = criteria
        self._includes: List[QueryableAttribute] = []
        self._include_strings: List[str] = []
        self._order_by = None
        self._order_by_descending = None
        self._skip: Optional[int] = None
        self._take: Optional[int] = None
        self._is_paging_enabled = False
        self._as_no_tracking = False
        self._as_split_query = False
        self._include_deleted = False

    @property
    def criteria(self):
        return self._criteria

    @property
    def includes(self) -> Tuple[QueryableAttribute, ...]:
        return tuple(self._includes)

    @property
    def include_strings(self) -> Tuple[str, ...]:
        return tuple(self._include_strings)

    @property
    def order_by(self):
        return self._order_by

    @property
    def order_by_descending(self):
        return self._order_by_descending

    @property
    def skip(self) -> Optional[int]:
        return self._skip

    @property
    def take(self) -> Optional[int]:
        return self._take

    @property
    def is_paging_enabled(self) -> bool:
        return self._is_paging_enabled

    @property
    def as_no_tracking(self) -> bool:
        return self._as_no_tracking

    @property
    def as_split_query(self) -> bool:
        return self._as_split_query

    @property
    def include_deleted(self) -> bool:
        return self._include_deleted

    # Construction helpers for subclasses

    def _add_include(self, include: Include) -> None:
        """Eager load a relationship attribute or a dotted relationship path."""
        if isinstance(include, str):
            self._include_strings.append(include)
        else:
            self._includes.append(include)

    def _apply_order_by(self, expression: Any) -> None:
        self._order_by = expression
        self._order_by_descending = None

    def _apply_order_by_descending(self, expression: Any) -> None:
        self._order_by_descending = expression
        self._order_by = None

    def _apply_paging(self, skip: int, take: int) -> None:
        """
        Enable paging.

        Args:
            skip: Number of rows to skip (>= 0)
            take: Maximum number of rows to return (>= 1)

        Raises:
            ValueError: If skip or take is out of range
        """
        if skip < 0:
            raise ValueError("skip must be non-negative")
        if take < 1:
            raise ValueError("take must be at least 1")
        self._skip = skip
        self._take = take
        self._is_paging_enabled = True

    def _apply_as_no_tracking(self) -> None:
        self._as_no_tracking = True

    def _apply_as_split_query(self) -> None:
        self._as_split_query = True

    def _apply_include_deleted(self) -> None:
        self._include_deleted = True

    # Composition (always returns a new specification)

    def _copy(self) -> "Specification[T]":
        clone = copy.copy(self)
        clone._includes = list(self._includes)
        clone._include_strings = list(self._include_strings)
        return clone

    def _with_criteria(self, criteria) -> "Specification[T]":
        clone = self._copy()
        clone._criteria = criteria
        return clone

    def where(self, predicate) -> "Specification[T]":
        """Return a copy whose criteria is this criteria AND predicate."""
        if self._criteria is None:
            return self._with_criteria(predicate)
        return self._with_criteria(and_(self._criteria, predicate))

    def or_(self, predicate) -> "Specification[T]":
        """Return a copy whose criteria is this criteria OR predicate."""
        if self._criteria is None:
            return self._with_criteria(predicate)
        return self._with_criteria(or_(self._criteria, predicate))

    def where_if(self, condition: bool, predicate) -> "Specification[T]":
        return self.where(predicate) if condition else self

    def or_if(self, condition: bool, predicate) -> "Specification[T]":
        return self.or_(predicate) if condition else self

    def reset_criteria(self) -> "Specification[T]":
        """Return a copy with no filter predicate."""
        return self._with_criteria(None)

    def _merge_includes(self, other: "Specification[T]") -> None:
        for include in other._includes:
            if not any(include is existing for existing in self._includes):
                self._includes.append(include)
        for path in other._include_strings:
            if path not in self._include_strings:
                self._include_strings.append(path)

    def __and__(self, other: "Specification[T]") -> "Specification[T]":
        """Combine specifications with AND, keeping this one's ordering, paging and flags."""
        combined = self.where(other.criteria) if other.criteria is not None else self._copy()
        combined._merge_includes(other)
        return combined

    def __or__(self, other: "Specification[T]") -> "Specification[T]":
        """Combine specifications with OR, keeping this one's ordering, paging and flags."""
        if self._criteria is None or other.criteria is None:
            # A missing predicate matches everything, so the union does too
            combined = self._with_criteria(None)
        else:
            combined = self.or_(other.criteria)
        combined._merge_includes(other)
        return combined

    def __invert__(self) -> "Specification[T]":
        """Negate the predicate. The negation of "no filter" matches nothing."""
        if self._criteria is None:
            return self._with_criteria(false())
        return self._with_criteria(not_(self._criteria))

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(criteria={self._criteria}, "
            f"paging={(self._skip, self._take) if self._is_paging_enabled else None})"
        )
