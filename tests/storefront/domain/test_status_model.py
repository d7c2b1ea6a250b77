"""Tests for the order/payment status model and its display tables."""

import pytest

from storefront.order.status import (
    ORDER_PROGRESS,
    ORDER_STATUS_COLORS,
    ORDER_STATUS_LABELS,
    ORDER_TRANSITIONS,
    PAYMENT_STATUS_COLORS,
    PAYMENT_STATUS_LABELS,
    SHIPMENT_STATUS_LABELS,
    TERMINAL_STATUSES,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ShipmentStatus,
    _exhaustive,
    can_cancel,
    can_modify,
    can_transition,
    can_transition_payment,
    initial_statuses,
    is_terminal,
    order_status_label,
    progress_percent,
)


class TestCanCancel:
    @pytest.mark.parametrize(
        "status, expected",
        [
            (OrderStatus.PENDING, True),
            (OrderStatus.PROCESSING, True),
            (OrderStatus.CONFIRMED, False),
            (OrderStatus.SHIPPED, False),
            (OrderStatus.DELIVERED, False),
            (OrderStatus.CANCELLED, False),
            (OrderStatus.REFUNDED, False),
        ],
    )
    def test_truth_table(self, status, expected):
        assert can_cancel(status) is expected

    def test_accepts_persisted_literal(self):
        assert can_cancel("PENDING") is True
        assert can_cancel("SHIPPED") is False

    def test_unknown_literal_is_rejected(self):
        with pytest.raises(ValueError):
            can_cancel("LOST")


class TestCanModify:
    @pytest.mark.parametrize("status", list(OrderStatus))
    def test_only_pending_orders_are_modifiable(self, status):
        assert can_modify(status) is (status == OrderStatus.PENDING)


class TestOrderTransitions:
    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatus.PENDING, OrderStatus.PROCESSING),
            (OrderStatus.PROCESSING, OrderStatus.CONFIRMED),
            (OrderStatus.CONFIRMED, OrderStatus.SHIPPED),
            (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
        ],
    )
    def test_linear_path(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize("status", [s for s in OrderStatus if s not in TERMINAL_STATUSES])
    def test_side_exits_from_every_open_status(self, status):
        assert can_transition(status, OrderStatus.CANCELLED)
        assert can_transition(status, OrderStatus.REFUNDED)

    @pytest.mark.parametrize("status", sorted(TERMINAL_STATUSES, key=lambda s: s.value))
    def test_terminal_statuses_have_no_exits(self, status):
        assert is_terminal(status)
        assert ORDER_TRANSITIONS[status] == frozenset()

    def test_no_skipping_ahead(self):
        assert not can_transition(OrderStatus.PENDING, OrderStatus.SHIPPED)
        assert not can_transition(OrderStatus.CONFIRMED, OrderStatus.DELIVERED)

    def test_no_going_back(self):
        assert not can_transition(OrderStatus.SHIPPED, OrderStatus.PENDING)


class TestPaymentTransitions:
    def test_allowed(self):
        assert can_transition_payment(PaymentStatus.PENDING, PaymentStatus.PAID)
        assert can_transition_payment(PaymentStatus.PENDING, PaymentStatus.PROCESSING)
        assert can_transition_payment(PaymentStatus.PROCESSING, PaymentStatus.FAILED)
        assert can_transition_payment(PaymentStatus.FAILED, PaymentStatus.PROCESSING)
        assert can_transition_payment(PaymentStatus.PAID, PaymentStatus.REFUNDED)

    def test_disallowed(self):
        assert not can_transition_payment(PaymentStatus.PENDING, PaymentStatus.REFUNDED)
        assert not can_transition_payment(PaymentStatus.REFUNDED, PaymentStatus.PAID)
        assert not can_transition_payment(PaymentStatus.PAID, PaymentStatus.PENDING)


class TestDisplayTables:
    @pytest.mark.parametrize(
        "table, enum_cls",
        [
            (ORDER_STATUS_LABELS, OrderStatus),
            (ORDER_STATUS_COLORS, OrderStatus),
            (ORDER_PROGRESS, OrderStatus),
            (ORDER_TRANSITIONS, OrderStatus),
            (PAYMENT_STATUS_LABELS, PaymentStatus),
            (PAYMENT_STATUS_COLORS, PaymentStatus),
            (SHIPMENT_STATUS_LABELS, ShipmentStatus),
        ],
    )
    def test_every_member_is_covered(self, table, enum_cls):
        assert set(table) == set(enum_cls)

    def test_incomplete_table_is_refused(self):
        with pytest.raises(RuntimeError, match="not exhaustive"):
            _exhaustive(OrderStatus, {OrderStatus.PENDING: "Pending"})

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            ORDER_STATUS_LABELS[OrderStatus.PENDING] = "Waiting"

    def test_progress_values(self):
        assert [progress_percent(s) for s in OrderStatus] == [10, 25, 50, 75, 100, 0, 0]

    def test_label(self):
        assert order_status_label("REFUNDED") == "Refunded"


class TestInitialStatuses:
    def test_cash_on_delivery_starts_confirmed(self):
        assert initial_statuses(PaymentMethod.CASH_ON_DELIVERY) == (OrderStatus.CONFIRMED, PaymentStatus.PENDING)

    @pytest.mark.parametrize("method", ["CARD", "STRIPE"])
    def test_prepaid_methods_start_pending(self, method):
        assert initial_statuses(method) == (OrderStatus.PENDING, PaymentStatus.PENDING)
