"""Order aggregate — the durable record of a completed checkout.

An order is created once, atomically with its line items, and is never
deleted. Its financial snapshot (subtotal, tax, shipping, discount, total) and
line-item snapshots (name, sku, price) are fixed at creation and never
recomputed from live product data. The delivery address is copied onto the
order as well, so later edits to the customer's address book do not rewrite
history.

Order status and payment status are tracked as a pair with separate
transition tables (see ``storefront.order.status``). The one rule tying them
together: an order paid by card or Stripe cannot be marked delivered until its
payment is PAID, and delivering a cash-on-delivery order records the payment.
"""

from datetime import UTC, date, datetime, timedelta

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    HasOne,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.checkout.pricing import LineItem, calculate_subtotal
from storefront.domain import storefront
from storefront.errors import StateConflictError
from storefront.order.events import (
    OrderCancelled,
    OrderNotesUpdated,
    OrderPlaced,
    OrderRefunded,
    OrderShipped,
    OrderStatusChanged,
    PaymentStatusChanged,
)
from storefront.order.status import (
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ShipmentStatus,
    can_cancel,
    can_modify,
    can_transition,
    can_transition_payment,
    initial_statuses,
    order_status_label,
)

ESTIMATED_DELIVERY_DAYS = 7


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """The delivery address as it was when the order was placed."""

    full_name = String(required=True, max_length=255)
    phone = String(required=True, max_length=20)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


@storefront.value_object(part_of="Order")
class OrderPricing:
    """Financial snapshot of an order, locked at checkout."""

    subtotal = Float(default=0.0, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    shipping_cost = Float(default=0.0, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0)
    currency = String(max_length=3, default="USD")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """Line-item snapshot. ``total`` is ``price * quantity``, computed once."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    sku = String(required=True, max_length=50)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    total = Float(required=True, min_value=0.0)


@storefront.entity(part_of="Order")
class Shipment:
    """Fulfillment tracking, written by the fulfillment entry points only."""

    carrier = String(max_length=100)
    tracking_number = String(max_length=255)
    status = String(choices=ShipmentStatus, default=ShipmentStatus.PENDING.value)
    shipped_at = DateTime()
    delivered_at = DateTime()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, unique=True, max_length=32)
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    shipping_address = ValueObject(ShippingAddress)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_method = String(required=True, choices=PaymentMethod)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    items = HasMany(OrderItem)
    pricing = ValueObject(OrderPricing)
    shipment = HasOne(Shipment)
    notes = Text()
    cancelled_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def delivered_prepaid_orders_must_be_paid(self):
        if (
            self.status == OrderStatus.DELIVERED.value
            and self.payment_method != PaymentMethod.CASH_ON_DELIVERY.value
            and self.payment_status != PaymentStatus.PAID.value
        ):
            raise ValidationError({"payment_status": ["A prepaid order cannot be delivered before it is paid"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        customer_id,
        address,
        payment_method,
        items_data,
        totals,
        currency="USD",
        notes=None,
    ):
        """Create an order from checkout data.

        Args:
            order_number: A unique, already allocated order number.
            customer_id: The customer placing the order.
            address: The customer's ``Address`` aggregate; it is snapshotted.
            payment_method: A ``PaymentMethod`` or its literal.
            items_data: List of dicts with product_id, name, sku, quantity, price.
            totals: ``OrderTotals`` from the pricing calculator.
        """
        method = payment_method if isinstance(payment_method, PaymentMethod) else PaymentMethod(payment_method)
        status, payment_status = initial_statuses(method)
        now = datetime.now(UTC)

        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            address_id=str(address.id),
            shipping_address=ShippingAddress(
                full_name=address.full_name,
                phone=address.phone,
                street=address.street,
                city=address.city,
                state=address.state,
                postal_code=address.postal_code,
                country=address.country,
            ),
            status=status.value,
            payment_method=method.value,
            payment_status=payment_status.value,
            items=[
                OrderItem(
                    product_id=item["product_id"],
                    name=item["name"],
                    sku=item["sku"],
                    quantity=item["quantity"],
                    price=item["price"],
                    total=float(calculate_subtotal([LineItem(item["price"], item["quantity"])])),
                )
                for item in items_data
            ],
            pricing=OrderPricing(currency=currency, **totals.as_floats()),
            notes=notes,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                status=status.value,
                payment_method=method.value,
                item_count=len(order.items),
                total=order.pricing.total,
                currency=currency,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_owned_by(self, customer_id) -> bool:
        return str(self.customer_id) == str(customer_id)

    def estimated_delivery(self) -> date | None:
        if self.created_at is None:
            return None
        return (self.created_at + timedelta(days=ESTIMATED_DELIVERY_DAYS)).date()

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _transition_to(self, target: OrderStatus, now: datetime):
        current = OrderStatus(self.status)
        if not can_transition(current, target):
            raise StateConflictError(
                f"Cannot move order {self.order_number} from {order_status_label(current)} "
                f"to {order_status_label(target)}"
            )
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    def record_payment(self, payment_status):
        """Move the payment status along its own transition table."""
        target = payment_status if isinstance(payment_status, PaymentStatus) else PaymentStatus(payment_status)
        current = PaymentStatus(self.payment_status)
        if not can_transition_payment(current, target):
            raise StateConflictError(f"Cannot move payment from {current.value} to {target.value}")

        now = datetime.now(UTC)
        self.payment_status = target.value
        self.updated_at = now
        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def mark_processing(self):
        self._transition_to(OrderStatus.PROCESSING, datetime.now(UTC))

    def confirm(self):
        self._transition_to(OrderStatus.CONFIRMED, datetime.now(UTC))

    def record_shipment(self, carrier, tracking_number):
        now = datetime.now(UTC)
        self._transition_to(OrderStatus.SHIPPED, now)
        self.shipment = Shipment(
            carrier=carrier,
            tracking_number=tracking_number,
            status=ShipmentStatus.SHIPPED.value,
            shipped_at=now,
        )
        self.raise_(
            OrderShipped(
                order_id=str(self.id),
                carrier=carrier,
                tracking_number=tracking_number,
                shipped_at=now,
            )
        )

    def record_delivery(self):
        if OrderStatus(self.status) != OrderStatus.SHIPPED:
            raise StateConflictError(f"Order {self.order_number} has not been shipped")

        if self.payment_method == PaymentMethod.CASH_ON_DELIVERY.value:
            if self.payment_status != PaymentStatus.PAID.value:
                # Cash is collected on the doorstep
                self.record_payment(PaymentStatus.PAID)
        elif self.payment_status != PaymentStatus.PAID.value:
            raise StateConflictError(f"Order {self.order_number} cannot be delivered before payment is received")

        now = datetime.now(UTC)
        self._transition_to(OrderStatus.DELIVERED, now)
        if self.shipment:
            self.shipment.status = ShipmentStatus.DELIVERED.value
            self.shipment.delivered_at = now

    def update_notes(self, notes):
        """Replace the delivery notes. Allowed only while the order is still PENDING."""
        if not can_modify(self.status):
            raise StateConflictError(
                f"Order {self.order_number} can no longer be changed while {order_status_label(self.status)}"
            )

        now = datetime.now(UTC)
        self.notes = notes
        self.updated_at = now
        self.raise_(OrderNotesUpdated(order_id=str(self.id), notes=notes, updated_at=now))

    def cancel(self):
        """Cancel on the customer's behalf. Only PENDING and PROCESSING orders qualify."""
        current = OrderStatus(self.status)
        if not can_cancel(current):
            raise StateConflictError(
                f"Order {self.order_number} cannot be cancelled while {order_status_label(current)}"
            )

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                previous_status=current.value,
                cancelled_at=now,
            )
        )

    def refund(self):
        if not can_transition(self.status, OrderStatus.REFUNDED):
            raise StateConflictError(f"Order {self.order_number} cannot be refunded")

        now = datetime.now(UTC)
        if self.payment_status == PaymentStatus.PAID.value:
            self.record_payment(PaymentStatus.REFUNDED)
        self._transition_to(OrderStatus.REFUNDED, now)
        self.raise_(
            OrderRefunded(
                order_id=str(self.id),
                amount=self.pricing.total if self.pricing else 0.0,
                refunded_at=now,
            )
        )
