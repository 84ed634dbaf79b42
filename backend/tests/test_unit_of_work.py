import pytest
from sqlalchemy.exc import IntegrityError

from exceptions import RepositoryError
from models import Product
from repositories.base_repository import GenericRepository
from repositories.product_repository import ProductRepository
from repositories.product_specifications import ProductByIdSpec, ProductsInStockSpec
from repositories.unit_of_work import UnitOfWork


def stored_names(session_factory):
    """Names of every product row, read through a fresh session"""
    session = session_factory()
    try:
        return sorted(name for (name,) in session.query(Product.name))
    finally:
        session.close()


def test_requires_session():
    with pytest.raises(RepositoryError):
        UnitOfWork(None)


def test_rejects_repository_on_another_session(session_factory):
    other = session_factory()
    try:
        with pytest.raises(RepositoryError):
            UnitOfWork(session_factory(), product_repository=ProductRepository(other))
    finally:
        other.close()


def test_products_repository_is_cached_and_shares_session(uow):
    assert isinstance(uow.products, ProductRepository)
    assert uow.products is uow.products
    assert uow.products.db is uow.db


def test_injected_repository_is_used(session_factory):
    session = session_factory()
    repository = ProductRepository(session)

    with UnitOfWork(session, product_repository=repository) as uow:
        assert uow.products is repository


def test_unregistered_model_gets_generic_repository(uow):
    class Dummy:
        pass

    repository = uow.repository(Dummy)
    assert type(repository) is GenericRepository
    assert repository.model is Dummy


def test_begin_and_commit_persists(uow, session_factory, make_product):
    uow.begin_transaction()
    assert uow.has_active_transaction

    uow.products.add(make_product("Committed"))
    uow.commit_transaction()

    assert not uow.has_active_transaction
    assert stored_names(session_factory) == ["Committed"]


def test_rollback_discards_flushed_changes(uow, session_factory, make_product):
    uow.begin_transaction()
    uow.products.add(make_product("Discarded"))
    assert uow.save_changes() == 1

    uow.rollback_transaction()

    assert not uow.has_active_transaction
    assert stored_names(session_factory) == []


def test_rollback_without_transaction_is_noop(uow):
    uow.rollback_transaction()
    uow.rollback_transaction()
    assert not uow.has_active_transaction


def test_save_changes_without_transaction_commits(uow, session_factory, make_product):
    uow.products.add_range([make_product("A"), make_product("B")])

    assert uow.save_changes() == 2
    assert stored_names(session_factory) == ["A", "B"]


def test_save_changes_counts_updates_and_deletes(uow, make_product):
    keep, drop = make_product("Keep"), make_product("Drop")
    uow.products.add_range([keep, drop])
    uow.save_changes()

    keep.stock = 42
    uow.products.update(keep)
    uow.products.delete(drop)

    assert uow.save_changes() == 2


def test_save_changes_with_nothing_staged(uow):
    assert uow.save_changes() == 0


def test_save_changes_counts_rows_written_by_an_earlier_read(uow, session_factory, make_product):
    product = make_product("Read before save")
    uow.products.add(product)

    # No-tracking lookups flush staged objects before querying
    assert uow.products.first_or_default(ProductByIdSpec(product.id)) is product

    assert uow.save_changes() == 1
    assert stored_names(session_factory) == ["Read before save"]


def test_save_changes_counts_autoflushed_rows_in_transaction(uow, make_product):
    uow.begin_transaction()
    uow.products.add_range([make_product("A", stock=3), make_product("B", stock=4)])

    assert uow.products.any(ProductsInStockSpec()) is True

    assert uow.save_changes() == 2
    assert uow.save_changes() == 0
    uow.commit_transaction()


def test_rollback_resets_change_count(uow, make_product):
    uow.begin_transaction()
    uow.products.add(make_product("Discarded"))
    assert uow.products.count(ProductsInStockSpec()) == 1

    uow.rollback_transaction()

    assert uow.save_changes() == 0


def test_execute_transaction_returns_result_and_commits(uow, session_factory, make_product):
    product = make_product("Created")

    def create():
        uow.products.add(product)
        uow.save_changes()
        return product.id

    result = uow.execute_transaction(create)

    assert result == product.id
    assert not uow.has_active_transaction
    assert stored_names(session_factory) == ["Created"]


def test_execute_transaction_with_side_effect_only_operation(uow, session_factory, make_product):
    assert uow.execute_transaction(lambda: uow.products.add_range([make_product("Quiet")])) is None
    assert stored_names(session_factory) == ["Quiet"]


def test_execute_transaction_rolls_back_when_operation_raises(uow, session_factory, make_product):
    def fail_after_write():
        uow.products.add(make_product("Half done"))
        uow.save_changes()
        raise RuntimeError("downstream failure")

    with pytest.raises(RuntimeError, match="downstream failure"):
        uow.execute_transaction(fail_after_write)

    assert not uow.has_active_transaction
    assert stored_names(session_factory) == []


def test_transaction_scope_commits(uow, session_factory, make_product):
    with uow.transaction() as scoped:
        assert scoped is uow
        assert uow.has_active_transaction
        uow.products.add(make_product("Scoped"))

    assert not uow.has_active_transaction
    assert stored_names(session_factory) == ["Scoped"]


def test_transaction_scope_rolls_back_on_error(uow, session_factory, make_product):
    with pytest.raises(ValueError):
        with uow.transaction():
            uow.products.add(make_product("Scoped"))
            uow.save_changes()
            raise ValueError("abort")

    assert not uow.has_active_transaction
    assert stored_names(session_factory) == []


def test_commit_failure_rolls_back_and_releases(uow, session_factory, make_product):
    existing = make_product("Existing")
    seed = session_factory()
    seed.add(existing)
    seed.commit()
    existing_id = existing.id
    seed.close()

    uow.begin_transaction()
    uow.products.add(make_product("Duplicate", id=existing_id))

    with pytest.raises(IntegrityError):
        uow.commit_transaction()

    assert not uow.has_active_transaction

    # The session is usable again after the failed commit
    uow.db.expunge_all()
    uow.products.add(make_product("After failure"))
    uow.save_changes()
    assert stored_names(session_factory) == ["After failure", "Existing"]


def test_close_rolls_back_open_transaction(session_factory, make_product):
    uow = UnitOfWork(session_factory())
    uow.begin_transaction()
    uow.products.add(make_product("Abandoned"))
    uow.save_changes()

    uow.close()

    assert stored_names(session_factory) == []


def test_close_is_idempotent(session_factory):
    uow = UnitOfWork(session_factory())
    uow.close()
    uow.close()


def test_context_manager_closes(session_factory, make_product):
    with UnitOfWork(session_factory()) as uow:
        uow.begin_transaction()
        uow.products.add(make_product("Inside"))
        uow.save_changes()

    assert not uow.has_active_transaction
    assert stored_names(session_factory) == []
