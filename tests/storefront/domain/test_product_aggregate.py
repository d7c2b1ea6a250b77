"""Tests for the Product aggregate's stock handling."""

import pytest

from storefront.catalogue.events import ProductAdded, StockDecremented, StockRestored
from storefront.catalogue.product import Product
from storefront.errors import StockError, ValidationError


def _product(quantity=5, is_active=True):
    product = Product.add(sku="WID-1", name="Widget", price=12.5, quantity=quantity, is_active=is_active)
    return product


class TestAddProduct:
    def test_raises_product_added(self):
        product = _product()
        assert isinstance(product._events[-1], ProductAdded)
        assert product._events[-1].sku == "WID-1"


class TestDecrementStock:
    def test_reduces_quantity(self):
        product = _product(quantity=5)
        product.decrement_stock(3, order_number="QH-20250110-00001")

        assert product.quantity == 2
        event = product._events[-1]
        assert isinstance(event, StockDecremented)
        assert event.remaining == 2
        assert event.order_number == "QH-20250110-00001"

    def test_can_take_the_last_unit(self):
        product = _product(quantity=1)
        product.decrement_stock(1)
        assert product.quantity == 0

    def test_never_goes_negative(self):
        product = _product(quantity=2)

        with pytest.raises(StockError, match="Insufficient stock for Widget"):
            product.decrement_stock(3)
        assert product.quantity == 2

    def test_inactive_product_is_unavailable(self):
        product = _product(is_active=False)

        with pytest.raises(StockError, match="no longer available"):
            product.decrement_stock(1)

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            _product().decrement_stock(0)


class TestRestock:
    def test_adds_quantity(self):
        product = _product(quantity=2)
        product.restock(3, reason="manual")

        assert product.quantity == 5
        assert isinstance(product._events[-1], StockRestored)
        assert product._events[-1].available == 5


class TestAvailability:
    def test_is_available(self):
        product = _product(quantity=2)
        assert product.is_available(2)
        assert not product.is_available(3)

    def test_deactivate_and_activate(self):
        product = _product()
        product.deactivate()
        assert not product.is_available(1)
        product.activate()
        assert product.is_available(1)
