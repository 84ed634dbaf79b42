"""
Specification Evaluator

Translates a Specification into an executable SQLAlchemy Query. This is the
only place where specification fields are interpreted, so every repository
read goes through the same rules in the same order:

1. no-tracking read mode (execution option checked by the repository)
2. split-query read mode (picks the eager loading strategy for step 5)
3. filter: soft-delete exclusion for audited entities, then the predicate
4. ordering: ascending wins over descending
5. includes: relationship attributes, then dotted string paths
6. paging: only when enabled on the specification and not ignored

The evaluator never executes the query and never touches the session, so it
can be called concurrently with independent query handles.
"""

from sqlalchemy import desc
from sqlalchemy.orm import Query, RelationshipProperty, joinedload, selectinload

from constants import ExecutionOptions
from models import AuditEntity
from .specifications import Specification


def _query_entity(query: Query):
    """Mapped class the query selects from."""
    return query.column_descriptions[0]['entity']


def _resolve_path(entity, path: str, split_query: bool):
    """
    Build a loader option for a dotted relationship path like "reviews.author".

    Raises:
        ValueError: If a path segment is not a relationship
    """
    option = None
    current = entity
    for segment in path.split('.'):
        attribute = getattr(current, segment, None)
        prop = getattr(attribute, 'property', None)
        if not isinstance(prop, RelationshipProperty):
            raise ValueError(f"'{segment}' in include path '{path}' is not a relationship of {current.__name__}")

        if option is None:
            option = selectinload(attribute) if split_query else joinedload(attribute)
        else:
            option = option.selectinload(attribute) if split_query else option.joinedload(attribute)
        current = prop.mapper.class_
    return option


def get_query(input_query: Query, spec: Specification, ignore_paging: bool = False) -> Query:
    """
    Apply a specification to a base query.

    Args:
        input_query: Query over the specification's entity, e.g. session.query(Product)
        spec: Specification to apply
        ignore_paging: Skip offset/limit even if the specification pages.
            Used by count/any/total-count reads that report the logical total.

    Returns:
        New Query with the specification applied
    """
    query = input_query
    entity = _query_entity(query)

    if spec.as_no_tracking:
        query = query.execution_options(**{ExecutionOptions.NO_TRACKING: True})

    loader = selectinload if spec.as_split_query else joinedload

    if not spec.include_deleted and isinstance(entity, type) and issubclass(entity, AuditEntity):
        query = query.filter(entity.is_deleted == False)

    if spec.criteria is not None:
        query = query.filter(spec.criteria)

    if spec.order_by is not None:
        query = query.order_by(spec.order_by)
    elif spec.order_by_descending is not None:
        query = query.order_by(desc(spec.order_by_descending))

    for include in spec.includes:
        query = query.options(loader(include))

    for path in spec.include_strings:
        query = query.options(_resolve_path(entity, path, spec.as_split_query))

    if not ignore_paging and spec.is_paging_enabled:
        if spec.skip is not None:
            query = query.offset(spec.skip)
        if spec.take is not None:
            query = query.limit(spec.take)

    return query
