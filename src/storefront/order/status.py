"""Order, payment and shipment status model.

Statuses are persisted as their literal names (``"PENDING"``, ``"SHIPPED"``,
...). Every display table below must cover its enum completely; an incomplete
table raises at import time so a new status cannot ship without its label,
colour and progress value.

Order state machine:
    PENDING → PROCESSING → CONFIRMED → SHIPPED → DELIVERED
    CANCELLED and REFUNDED are reachable from every non-terminal state.
    DELIVERED, CANCELLED and REFUNDED are terminal.
"""

from enum import Enum
from types import MappingProxyType


class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class PaymentMethod(Enum):
    CARD = "CARD"
    STRIPE = "STRIPE"
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"


class ShipmentStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"


def _exhaustive(enum_cls, table):
    """Freeze ``table`` after checking it has exactly one entry per member of ``enum_cls``."""
    missing = set(enum_cls) - set(table)
    extra = set(table) - set(enum_cls)
    if missing or extra:
        raise RuntimeError(
            f"{enum_cls.__name__} mapping is not exhaustive: "
            f"missing={sorted(m.name for m in missing)}, extra={sorted(str(e) for e in extra)}"
        )
    return MappingProxyType(dict(table))


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------
TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED})

_SIDE_EXITS = {OrderStatus.CANCELLED, OrderStatus.REFUNDED}

ORDER_TRANSITIONS = _exhaustive(
    OrderStatus,
    {
        OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, *_SIDE_EXITS}),
        OrderStatus.PROCESSING: frozenset({OrderStatus.CONFIRMED, *_SIDE_EXITS}),
        OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED, *_SIDE_EXITS}),
        OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, *_SIDE_EXITS}),
        OrderStatus.DELIVERED: frozenset(),
        OrderStatus.CANCELLED: frozenset(),
        OrderStatus.REFUNDED: frozenset(),
    },
)

PAYMENT_TRANSITIONS = _exhaustive(
    PaymentStatus,
    {
        PaymentStatus.PENDING: frozenset({PaymentStatus.PROCESSING, PaymentStatus.PAID, PaymentStatus.FAILED}),
        PaymentStatus.PROCESSING: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED}),
        PaymentStatus.FAILED: frozenset({PaymentStatus.PROCESSING}),
        PaymentStatus.PAID: frozenset({PaymentStatus.REFUNDED}),
        PaymentStatus.REFUNDED: frozenset(),
    },
)

# Statuses from which the customer may cancel
_CANCELLABLE = frozenset({OrderStatus.PENDING, OrderStatus.PROCESSING})

# Statuses in which the order contents may still change
_MODIFIABLE = frozenset({OrderStatus.PENDING})


# ---------------------------------------------------------------------------
# Display metadata
# ---------------------------------------------------------------------------
ORDER_STATUS_LABELS = _exhaustive(
    OrderStatus,
    {
        OrderStatus.PENDING: "Pending",
        OrderStatus.PROCESSING: "Processing",
        OrderStatus.CONFIRMED: "Confirmed",
        OrderStatus.SHIPPED: "Shipped",
        OrderStatus.DELIVERED: "Delivered",
        OrderStatus.CANCELLED: "Cancelled",
        OrderStatus.REFUNDED: "Refunded",
    },
)

ORDER_STATUS_COLORS = _exhaustive(
    OrderStatus,
    {
        OrderStatus.PENDING: "text-yellow-600 bg-yellow-50",
        OrderStatus.PROCESSING: "text-blue-600 bg-blue-50",
        OrderStatus.CONFIRMED: "text-green-600 bg-green-50",
        OrderStatus.SHIPPED: "text-purple-600 bg-purple-50",
        OrderStatus.DELIVERED: "text-green-700 bg-green-100",
        OrderStatus.CANCELLED: "text-red-600 bg-red-50",
        OrderStatus.REFUNDED: "text-orange-600 bg-orange-50",
    },
)

# Display only; not a workflow signal
ORDER_PROGRESS = _exhaustive(
    OrderStatus,
    {
        OrderStatus.PENDING: 10,
        OrderStatus.PROCESSING: 25,
        OrderStatus.CONFIRMED: 50,
        OrderStatus.SHIPPED: 75,
        OrderStatus.DELIVERED: 100,
        OrderStatus.CANCELLED: 0,
        OrderStatus.REFUNDED: 0,
    },
)

PAYMENT_STATUS_LABELS = _exhaustive(
    PaymentStatus,
    {
        PaymentStatus.PENDING: "Pending",
        PaymentStatus.PROCESSING: "Processing",
        PaymentStatus.PAID: "Paid",
        PaymentStatus.FAILED: "Failed",
        PaymentStatus.REFUNDED: "Refunded",
    },
)

PAYMENT_STATUS_COLORS = _exhaustive(
    PaymentStatus,
    {
        PaymentStatus.PENDING: "text-yellow-600 bg-yellow-50",
        PaymentStatus.PROCESSING: "text-blue-600 bg-blue-50",
        PaymentStatus.PAID: "text-green-600 bg-green-50",
        PaymentStatus.FAILED: "text-red-600 bg-red-50",
        PaymentStatus.REFUNDED: "text-orange-600 bg-orange-50",
    },
)

SHIPMENT_STATUS_LABELS = _exhaustive(
    ShipmentStatus,
    {
        ShipmentStatus.PENDING: "Pending",
        ShipmentStatus.PROCESSING: "Processing",
        ShipmentStatus.SHIPPED: "Shipped",
        ShipmentStatus.IN_TRANSIT: "In Transit",
        ShipmentStatus.DELIVERED: "Delivered",
        ShipmentStatus.FAILED: "Failed",
    },
)


# ---------------------------------------------------------------------------
# Helpers accept either the enum member or its persisted literal
# ---------------------------------------------------------------------------
def _order_status(status) -> OrderStatus:
    return status if isinstance(status, OrderStatus) else OrderStatus(status)


def _payment_status(status) -> PaymentStatus:
    return status if isinstance(status, PaymentStatus) else PaymentStatus(status)


def can_cancel(status) -> bool:
    return _order_status(status) in _CANCELLABLE


def can_modify(status) -> bool:
    return _order_status(status) in _MODIFIABLE


def is_terminal(status) -> bool:
    return _order_status(status) in TERMINAL_STATUSES


def can_transition(current, target) -> bool:
    return _order_status(target) in ORDER_TRANSITIONS[_order_status(current)]


def can_transition_payment(current, target) -> bool:
    return _payment_status(target) in PAYMENT_TRANSITIONS[_payment_status(current)]


def progress_percent(status) -> int:
    return ORDER_PROGRESS[_order_status(status)]


def order_status_label(status) -> str:
    return ORDER_STATUS_LABELS[_order_status(status)]


def order_status_color(status) -> str:
    return ORDER_STATUS_COLORS[_order_status(status)]


def payment_status_label(status) -> str:
    return PAYMENT_STATUS_LABELS[_payment_status(status)]


def payment_status_color(status) -> str:
    return PAYMENT_STATUS_COLORS[_payment_status(status)]


def shipment_status_label(status) -> str:
    status = status if isinstance(status, ShipmentStatus) else ShipmentStatus(status)
    return SHIPMENT_STATUS_LABELS[status]


def initial_statuses(payment_method) -> tuple[OrderStatus, PaymentStatus]:
    """Status pair a new order starts in.

    Cash-on-delivery orders need no gateway confirmation and start CONFIRMED;
    everything else waits in PENDING for the payment gateway.
    """
    method = payment_method if isinstance(payment_method, PaymentMethod) else PaymentMethod(payment_method)
    if method is PaymentMethod.CASH_ON_DELIVERY:
        return OrderStatus.CONFIRMED, PaymentStatus.PENDING
    return OrderStatus.PENDING, PaymentStatus.PENDING
