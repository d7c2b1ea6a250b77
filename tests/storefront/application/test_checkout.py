"""Application tests for checkout — validation order, atomicity and retries."""

import re

import pytest
from protean import current_domain
from protean.exceptions import ExpectedVersionError
from protean.exceptions import ValidationError as ProteanValidationError

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.management import DeactivateProduct
from storefront.catalogue.product import Product
from storefront.checkout.placement import place_order
from storefront.errors import (
    AuthError,
    EmptyCartError,
    InvalidAddressError,
    PersistenceError,
    StockError,
    ValidationError,
)
from storefront.order.order import Order
from storefront.order.status import OrderStatus, PaymentStatus
from storefront.settings import get_settings


@pytest.fixture()
def ready_cart(add_product, add_address, add_to_cart):
    """cust-001 with a $30 and a 2 x $10 item in the cart and one address."""
    widget = add_product(sku="WID-1", name="Widget", price=30.0, quantity=5)
    gadget = add_product(sku="GAD-1", name="Gadget", price=10.0, quantity=5)
    add_to_cart(widget, 1)
    add_to_cart(gadget, 2)
    address_id = add_address()
    return {"widget": widget, "gadget": gadget, "address_id": address_id}


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).quantity


def _cart_items(customer_id="cust-001"):
    cart = current_domain.repository_for(ShoppingCart).find_for_customer(customer_id)
    return [] if cart is None else list(cart.items)


def _orders(customer_id="cust-001"):
    return current_domain.repository_for(Order).find_for_customer(customer_id)


class TestSuccessfulCheckout:
    def test_creates_order_with_snapshot(self, ready_cart):
        order = place_order("cust-001", ready_cart["address_id"], "CARD", notes="Leave at the door")

        assert re.match(r"^QH-\d{8}-\d{5}$", order.order_number)
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.pricing.subtotal == 50.0
        assert order.pricing.tax == 9.0
        assert order.pricing.shipping_cost == 0.0
        assert order.pricing.total == 59.0
        assert order.notes == "Leave at the door"
        assert sorted((item.sku, item.quantity, item.price) for item in order.items) == [
            ("GAD-1", 2, 10.0),
            ("WID-1", 1, 30.0),
        ]

    def test_decrements_stock_and_clears_cart(self, ready_cart):
        place_order("cust-001", ready_cart["address_id"], "CARD")

        assert _stock(ready_cart["widget"]) == 4
        assert _stock(ready_cart["gadget"]) == 3
        assert _cart_items() == []

    def test_cash_on_delivery_starts_confirmed(self, ready_cart):
        order = place_order("cust-001", ready_cart["address_id"], "CASH_ON_DELIVERY")
        assert order.status == OrderStatus.CONFIRMED.value

    def test_snapshot_survives_price_change(self, ready_cart):
        from storefront.catalogue.management import UpdateProductPrice

        order = place_order("cust-001", ready_cart["address_id"], "CARD")
        current_domain.process(UpdateProductPrice(product_id=ready_cart["widget"], price=99.0), asynchronous=False)

        reloaded = current_domain.repository_for(Order).get(order.id)
        assert reloaded.pricing.total == 59.0
        assert {item.sku: item.price for item in reloaded.items}["WID-1"] == 30.0


class TestValidationOrder:
    def test_missing_identity(self, ready_cart):
        with pytest.raises(AuthError):
            place_order(None, ready_cart["address_id"], "CARD")

    def test_missing_address_and_payment_method(self):
        # Checked before the (empty) cart is even looked at
        with pytest.raises(ValidationError, match="Address and payment method are required"):
            place_order("cust-001", None, None)

    def test_unknown_payment_method(self, ready_cart):
        with pytest.raises(ValidationError):
            place_order("cust-001", ready_cart["address_id"], "BITCOIN")

    def test_empty_cart(self, add_address):
        address_id = add_address()
        with pytest.raises(EmptyCartError, match="Cart is empty"):
            place_order("cust-001", address_id, "CARD")

    def test_empty_cart_is_reported_before_bad_address(self):
        with pytest.raises(EmptyCartError):
            place_order("cust-001", "no-such-address", "CARD")

    def test_unknown_address(self, ready_cart):
        with pytest.raises(InvalidAddressError, match="Invalid address"):
            place_order("cust-001", "no-such-address", "CARD")

    def test_someone_elses_address(self, ready_cart, add_address):
        foreign_address = add_address(customer_id="cust-999")
        with pytest.raises(InvalidAddressError):
            place_order("cust-001", foreign_address, "CARD")

    def test_insufficient_stock_names_the_product(self, add_product, add_address, add_to_cart):
        product_id = add_product(sku="LIM-1", name="Limited Print", quantity=1)
        add_to_cart(product_id, 2)
        address_id = add_address()

        with pytest.raises(StockError, match="Insufficient stock for Limited Print"):
            place_order("cust-001", address_id, "CARD")

    def test_deactivated_product(self, ready_cart):
        current_domain.process(DeactivateProduct(product_id=ready_cart["gadget"]), asynchronous=False)

        with pytest.raises(StockError, match="Gadget is no longer available"):
            place_order("cust-001", ready_cart["address_id"], "CARD")

    def test_failed_validation_changes_nothing(self, add_product, add_address, add_to_cart):
        plenty = add_product(sku="PLN-1", name="Plenty", quantity=10)
        scarce = add_product(sku="SCR-1", name="Scarce", quantity=1)
        add_to_cart(plenty, 2)
        add_to_cart(scarce, 5)
        address_id = add_address()

        with pytest.raises(StockError):
            place_order("cust-001", address_id, "CARD")

        assert _stock(plenty) == 10
        assert _stock(scarce) == 1
        assert len(_cart_items()) == 2
        assert _orders() == []


class TestAtomicity:
    def test_failure_after_order_write_rolls_everything_back(self, ready_cart, monkeypatch):
        def broken_clear(self, order_number=None):
            raise RuntimeError("cart store went away")

        monkeypatch.setattr(ShoppingCart, "clear", broken_clear)

        with pytest.raises(RuntimeError):
            place_order("cust-001", ready_cart["address_id"], "CARD")

        assert _orders() == []
        assert _stock(ready_cart["widget"]) == 5
        assert _stock(ready_cart["gadget"]) == 5
        assert len(_cart_items()) == 2


class TestCompetingCheckouts:
    def test_last_unit_goes_to_one_customer(self, add_product, add_address, add_to_cart):
        product_id = add_product(sku="ONE-1", name="Last One", quantity=1)
        add_to_cart(product_id, 1, customer_id="alice")
        add_to_cart(product_id, 1, customer_id="bob")
        alice_address = add_address(customer_id="alice")
        bob_address = add_address(customer_id="bob")

        order = place_order("alice", alice_address, "CARD")
        with pytest.raises(StockError, match="Insufficient stock for Last One"):
            place_order("bob", bob_address, "CARD")

        assert order.order_number
        assert _stock(product_id) == 0
        assert len(_orders("alice")) == 1
        assert _orders("bob") == []
        assert len(_cart_items("bob")) == 1


class TestRetries:
    def test_version_conflict_reruns_checkout(self, ready_cart, monkeypatch):
        real_decrement = Product.decrement_stock
        calls = {"count": 0}

        def conflicting_once(self, quantity, order_number=None):
            calls["count"] += 1
            if calls["count"] == 1:
                raise ExpectedVersionError("Product was modified concurrently")
            return real_decrement(self, quantity, order_number=order_number)

        monkeypatch.setattr(Product, "decrement_stock", conflicting_once)

        order = place_order("cust-001", ready_cart["address_id"], "CARD")

        assert order.pricing.total == 59.0
        assert _stock(ready_cart["widget"]) == 4
        assert len(_orders()) == 1

    def test_persistent_conflict_gives_up(self, ready_cart, monkeypatch):
        def always_conflicting(self, quantity, order_number=None):
            raise ExpectedVersionError("Product was modified concurrently")

        monkeypatch.setattr(Product, "decrement_stock", always_conflicting)
        monkeypatch.setenv("STORE_CHECKOUT_MAX_ATTEMPTS", "2")
        get_settings.cache_clear()

        with pytest.raises(PersistenceError) as exc_info:
            place_order("cust-001", ready_cart["address_id"], "CARD")

        assert exc_info.value.retryable is True
        assert _orders() == []
        assert _stock(ready_cart["widget"]) == 5

    def test_order_number_taken_at_insert_is_retried(self, ready_cart, monkeypatch):
        from storefront.order.repository import OrderRepository

        real_add = OrderRepository.add
        calls = {"count": 0}

        def clashing_once(self, aggregate):
            calls["count"] += 1
            if calls["count"] == 1:
                raise ProteanValidationError({"order_number": ["Order with this order number already exists"]})
            return real_add(self, aggregate)

        monkeypatch.setattr(OrderRepository, "add", clashing_once)

        order = place_order("cust-001", ready_cart["address_id"], "CARD")

        assert calls["count"] == 2
        assert len(_orders()) == 1
        assert _orders()[0].order_number == order.order_number

    def test_other_validation_errors_are_not_retried(self, ready_cart, monkeypatch):
        from storefront.order.repository import OrderRepository

        calls = {"count": 0}

        def invalid(self, aggregate):
            calls["count"] += 1
            raise ProteanValidationError({"notes": ["too long"]})

        monkeypatch.setattr(OrderRepository, "add", invalid)

        with pytest.raises(ProteanValidationError):
            place_order("cust-001", ready_cart["address_id"], "CARD")
        assert calls["count"] == 1

    def test_failed_uniqueness_check_is_not_retried(self, ready_cart, monkeypatch):
        from storefront.order.repository import OrderRepository

        def unreachable(self, order_number):
            raise ConnectionError("database is down")

        monkeypatch.setattr(OrderRepository, "order_number_exists", unreachable)

        with pytest.raises(PersistenceError):
            place_order("cust-001", ready_cart["address_id"], "CARD")
        assert _stock(ready_cart["widget"]) == 5
