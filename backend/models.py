from sqlalchemy import Column, String, Integer, Boolean, DateTime, Numeric, Index, inspect
from sqlalchemy.orm import validates
from datetime import datetime, timezone
import uuid
from database import Base
from constants import ProductLimits
from exceptions import EntityIdentityError


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (SQLite drops tzinfo on round trip)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseEntity(Base):
    """
    Identity shared by all persisted objects.

    The id is assigned when the object is constructed, not when it is flushed,
    so it can be returned to callers before anything reaches the database.
    Once assigned it cannot be replaced.
    """
    __abstract__ = True

    id = Column(String(36), primary_key=True)

    def __init__(self, **kwargs):
        if kwargs.get('id') is None:
            kwargs['id'] = generate_uuid()
        super().__init__(**kwargs)

    @validates('id')
    def _validate_id(self, key, value):
        current = self.__dict__.get(key)
        if current is None:
            # Expired persistent instances still know their identity
            identity = inspect(self).identity
            current = identity[0] if identity else None
        if current is not None and value != current:
            raise EntityIdentityError(type(self).__name__, key)
        return value

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash((self.__class__, self.id))

    def __repr__(self):
        return f"{self.__class__.__name__}(id={self.id})"


class AuditEntity(BaseEntity):
    """
    Entity with soft-delete flag and creation/update audit trail.

    created_at is stamped at construction and is immutable. updated_at and
    updated_by stay empty until the entity is first changed through
    mark_updated (or mark_deleted / restore).
    """
    __abstract__ = True

    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    created_by = Column(String(100), nullable=True)
    updated_at = Column(DateTime, nullable=True)
    updated_by = Column(String(100), nullable=True)

    def __init__(self, **kwargs):
        if kwargs.get('is_deleted') is None:
            kwargs['is_deleted'] = False
        if kwargs.get('created_at') is None:
            kwargs['created_at'] = utc_now()
        super().__init__(**kwargs)

    @validates('created_at')
    def _validate_created_at(self, key, value):
        current = self.__dict__.get(key)
        if current is not None and value != current:
            raise EntityIdentityError(type(self).__name__, key)
        return value

    def mark_updated(self, updated_by: str | None = None) -> None:
        self.updated_at = utc_now()
        self.updated_by = updated_by

    def mark_deleted(self, deleted_by: str | None = None) -> None:
        """Soft-delete: the row stays, normal reads stop returning it."""
        self.is_deleted = True
        self.mark_updated(deleted_by)

    def restore(self, restored_by: str | None = None) -> None:
        self.is_deleted = False
        self.mark_updated(restored_by)


class Product(AuditEntity):
    __tablename__ = 'products'

    name = Column(String(ProductLimits.NAME_MAX_LENGTH), nullable=False)
    price = Column(
        Numeric(ProductLimits.PRICE_PRECISION, ProductLimits.PRICE_SCALE),
        nullable=False,
        default=0
    )
    stock = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index('idx_products_is_deleted', 'is_deleted'),
        Index('idx_products_name', 'name'),
    )

    def __repr__(self):
        return f"Product(id={self.id}, name={self.name!r}, price={self.price}, stock={self.stock})"
