"""
Dependency injection providers for FastAPI.

Each request gets one session, one unit of work over it, and handlers built
on that unit of work. The unit of work is closed when the request ends.
"""

from typing import Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from database import get_db
from repositories.unit_of_work import UnitOfWork
from services.product_handlers import CreateProductHandler, GetProductByIdHandler


def get_unit_of_work(db: Session = Depends(get_db)) -> Iterator[UnitOfWork]:
    """
    Request-scoped unit of work.

    Args:
        db: Database session (injected)

    Yields:
        UnitOfWork over the request's session
    """
    uow = UnitOfWork(db)
    try:
        yield uow
    finally:
        uow.close()


def get_create_product_handler(uow: UnitOfWork = Depends(get_unit_of_work)) -> CreateProductHandler:
    return CreateProductHandler(uow)


def get_product_by_id_handler(uow: UnitOfWork = Depends(get_unit_of_work)) -> GetProductByIdHandler:
    return GetProductByIdHandler(uow)
