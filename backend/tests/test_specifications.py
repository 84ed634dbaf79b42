from decimal import Decimal

import pytest

from models import Product
from repositories.product_specifications import (
    ProductByIdSpec,
    ProductPageSpec,
    ProductsByPriceRangeSpec,
    ProductsInStockSpec,
)
from repositories.specifications import Specification


class OrderedSpec(Specification[Product]):
    def __init__(self, ascending_first: bool):
        super().__init__()
        if ascending_first:
            self._apply_order_by(Product.name)
            self._apply_order_by_descending(Product.price)
        else:
            self._apply_order_by_descending(Product.price)
            self._apply_order_by(Product.name)


class PagedSpec(Specification[Product]):
    def __init__(self, skip: int, take: int):
        super().__init__()
        self._apply_paging(skip, take)


class IncludeSpec(Specification[Product]):
    def __init__(self, *includes):
        super().__init__()
        for include in includes:
            self._add_include(include)


def test_defaults():
    spec = Specification()

    assert spec.criteria is None
    assert spec.includes == ()
    assert spec.include_strings == ()
    assert spec.order_by is None
    assert spec.order_by_descending is None
    assert spec.is_paging_enabled is False
    assert spec.as_no_tracking is False
    assert spec.as_split_query is False
    assert spec.include_deleted is False


def test_where_returns_new_spec_and_leaves_original_untouched():
    base = ProductsInStockSpec()
    original_criteria = base.criteria

    narrowed = base.where(Product.price > 10)

    assert narrowed is not base
    assert base.criteria is original_criteria
    assert narrowed.criteria is not original_criteria
    assert isinstance(narrowed, ProductsInStockSpec)


def test_where_on_empty_spec_uses_predicate():
    predicate = Product.stock > 0
    spec = Specification().where(predicate)
    assert spec.criteria is predicate


def test_or_returns_new_spec():
    base = ProductsInStockSpec()
    widened = base.or_(Product.price == 0)

    assert widened is not base
    assert "OR" in str(widened.criteria)
    assert "OR" not in str(base.criteria)


def test_conditional_variants():
    base = ProductsInStockSpec()

    assert base.where_if(False, Product.price > 1) is base
    assert base.or_if(False, Product.price > 1) is base
    assert base.where_if(True, Product.price > 1) is not base
    assert base.or_if(True, Product.price > 1) is not base


def test_reset_criteria_returns_copy_without_filter():
    base = ProductsInStockSpec()
    reset = base.reset_criteria()

    assert reset.criteria is None
    assert base.criteria is not None


def test_setting_one_ordering_clears_the_other():
    ascending_last = OrderedSpec(ascending_first=False)
    assert ascending_last.order_by is not None
    assert ascending_last.order_by_descending is None

    descending_last = OrderedSpec(ascending_first=True)
    assert descending_last.order_by is None
    assert descending_last.order_by_descending is not None


def test_paging_is_opt_in():
    assert ProductsInStockSpec().is_paging_enabled is False

    paged = PagedSpec(skip=10, take=5)
    assert paged.is_paging_enabled is True
    assert (paged.skip, paged.take) == (10, 5)


@pytest.mark.parametrize("skip,take", [(-1, 5), (0, 0), (0, -3)])
def test_paging_rejects_out_of_range_values(skip, take):
    with pytest.raises(ValueError):
        PagedSpec(skip=skip, take=take)


def test_product_page_spec():
    spec = ProductPageSpec(page=3, page_size=10)

    assert (spec.skip, spec.take) == (20, 10)
    assert spec.order_by is not None
    assert spec.as_no_tracking is True

    with pytest.raises(ValueError):
        ProductPageSpec(page=0)


def test_product_by_id_spec_flags():
    spec = ProductByIdSpec("abc")
    assert spec.as_no_tracking is True
    assert spec.as_split_query is True
    assert spec.include_deleted is False
    assert "is_deleted" not in str(spec.criteria)

    tracked = ProductByIdSpec("abc", as_no_tracking=False, as_split_query=False)
    assert tracked.as_no_tracking is False
    assert tracked.as_split_query is False


def test_includes_split_by_kind_and_are_read_only():
    spec = IncludeSpec("reviews.author", "tags")

    assert spec.include_strings == ("reviews.author", "tags")
    assert spec.includes == ()
    with pytest.raises(AttributeError):
        spec.includes.append("x")


def test_and_operator_combines_and_merges_includes():
    left = ProductsByPriceRangeSpec(max_price=Decimal("50"))
    right = IncludeSpec("reviews")

    combined = left & ProductsInStockSpec()
    assert "AND" in str(combined.criteria)
    assert combined.order_by is left.order_by

    with_includes = left & right
    assert with_includes.include_strings == ("reviews",)
    assert left.include_strings == ()


def test_or_operator_with_unfiltered_side_matches_everything():
    combined = ProductsInStockSpec() | Specification()
    assert combined.criteria is None


def test_or_operator_combines_predicates():
    combined = ProductsInStockSpec() | ProductsByPriceRangeSpec(max_price=Decimal("5"))
    assert "OR" in str(combined.criteria)


def test_invert_operator():
    negated = ~ProductsInStockSpec()
    assert "NOT" in str(negated.criteria) or "<" in str(negated.criteria)

    nothing = ~Specification()
    assert nothing.criteria is not None
