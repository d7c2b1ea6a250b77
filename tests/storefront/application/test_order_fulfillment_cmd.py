"""Application tests for the fulfillment and payment entry points."""

import pytest
from protean import current_domain

from storefront.checkout.placement import place_order
from storefront.errors import StateConflictError
from storefront.order.fulfillment import (
    ConfirmOrder,
    MarkProcessing,
    RecordDelivery,
    RecordShipment,
    RefundOrder,
)
from storefront.order.order import Order
from storefront.order.payment import RecordPaymentStatus
from storefront.order.status import OrderStatus, PaymentStatus, ShipmentStatus


@pytest.fixture()
def order_id(add_product, add_address, add_to_cart):
    add_to_cart(add_product(price=60.0), 1)
    return str(place_order("cust-001", add_address(), "STRIPE").id)


def _process(command):
    current_domain.process(command, asynchronous=False)


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


class TestFulfillmentFlow:
    def test_full_happy_path(self, order_id):
        _process(RecordPaymentStatus(order_id=order_id, payment_status="PAID"))
        _process(MarkProcessing(order_id=order_id))
        _process(ConfirmOrder(order_id=order_id))
        _process(RecordShipment(order_id=order_id, carrier="UPS", tracking_number="1Z999"))
        _process(RecordDelivery(order_id=order_id))

        order = _order(order_id)
        assert order.status == OrderStatus.DELIVERED.value
        assert order.payment_status == PaymentStatus.PAID.value
        assert order.shipment.tracking_number == "1Z999"
        assert order.shipment.status == ShipmentStatus.DELIVERED.value

    def test_shipment_requires_confirmation(self, order_id):
        with pytest.raises(StateConflictError):
            _process(RecordShipment(order_id=order_id, carrier="UPS", tracking_number="1Z999"))
        assert _order(order_id).status == OrderStatus.PENDING.value

    def test_unpaid_order_is_not_delivered(self, order_id):
        _process(MarkProcessing(order_id=order_id))
        _process(ConfirmOrder(order_id=order_id))
        _process(RecordShipment(order_id=order_id, carrier="UPS", tracking_number="1Z999"))

        with pytest.raises(StateConflictError):
            _process(RecordDelivery(order_id=order_id))
        assert _order(order_id).status == OrderStatus.SHIPPED.value


class TestPayment:
    def test_failed_payment_can_be_retried(self, order_id):
        _process(RecordPaymentStatus(order_id=order_id, payment_status="FAILED"))
        _process(RecordPaymentStatus(order_id=order_id, payment_status="PROCESSING"))
        _process(RecordPaymentStatus(order_id=order_id, payment_status="PAID"))

        assert _order(order_id).payment_status == PaymentStatus.PAID.value

    def test_refund_requires_payment_first(self, order_id):
        with pytest.raises(StateConflictError):
            _process(RecordPaymentStatus(order_id=order_id, payment_status="REFUNDED"))


class TestRefund:
    def test_refund_paid_order(self, order_id):
        _process(RecordPaymentStatus(order_id=order_id, payment_status="PAID"))
        _process(RefundOrder(order_id=order_id))

        order = _order(order_id)
        assert order.status == OrderStatus.REFUNDED.value
        assert order.payment_status == PaymentStatus.REFUNDED.value
