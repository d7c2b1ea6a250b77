"""Order pricing — pure functions from line items to an order's totals.

The result is persisted as the order's financial snapshot, so nothing here
reads the clock, the store or any other mutable state.

Amounts are handled as ``Decimal`` and rounded half-up to currency precision
(two places) at each step: subtotal, tax and total.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

from storefront.settings import StoreSettings

CENT = Decimal("0.01")


class LineItem(NamedTuple):
    unit_price: Decimal | float | int | str
    quantity: int


class ShippingPolicy(NamedTuple):
    """Flat fee below ``threshold``, free at or above it."""

    threshold: Decimal
    flat_fee: Decimal


class OrderTotals(NamedTuple):
    """Result of an order total calculation."""

    subtotal: Decimal
    tax: Decimal
    shipping_cost: Decimal
    discount: Decimal
    total: Decimal

    def as_floats(self) -> dict[str, float]:
        return {name: float(value) for name, value in self._asdict().items()}


def round_money(amount: Decimal) -> Decimal:
    """Round to currency precision (half-up)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _to_decimal(value) -> Decimal:
    # Floats go through str() so 29.99 stays 29.99 rather than its binary expansion
    return value if isinstance(value, Decimal) else Decimal(str(value))


def calculate_subtotal(items: Iterable[LineItem]) -> Decimal:
    """Sum of ``unit_price * quantity`` over all line items."""
    subtotal = Decimal("0")
    for item in items:
        price = _to_decimal(item.unit_price)
        if price < 0:
            raise ValueError(f"Unit price cannot be negative: {item.unit_price}")
        if item.quantity < 0:
            raise ValueError(f"Quantity cannot be negative: {item.quantity}")
        subtotal += price * item.quantity
    return round_money(subtotal)


def calculate_tax(subtotal: Decimal, tax_rate: Decimal) -> Decimal:
    return round_money(_to_decimal(subtotal) * _to_decimal(tax_rate))


def calculate_shipping(subtotal: Decimal, policy: ShippingPolicy) -> Decimal:
    if _to_decimal(subtotal) >= _to_decimal(policy.threshold):
        return Decimal("0.00")
    return round_money(_to_decimal(policy.flat_fee))


def calculate_totals(
    items: Iterable[LineItem],
    *,
    tax_rate: Decimal,
    shipping: ShippingPolicy,
    discount: Decimal = Decimal("0"),
) -> OrderTotals:
    """Compute subtotal, tax, shipping and grand total for a set of line items.

    ``discount`` is reserved for coupon support and is always zero today.
    """
    subtotal = calculate_subtotal(items)
    tax = calculate_tax(subtotal, tax_rate)
    shipping_cost = calculate_shipping(subtotal, shipping)
    discount = round_money(_to_decimal(discount))
    total = round_money(subtotal + tax + shipping_cost - discount)
    return OrderTotals(
        subtotal=subtotal,
        tax=tax,
        shipping_cost=shipping_cost,
        discount=discount,
        total=total,
    )


def totals_for(items: Iterable[LineItem], settings: StoreSettings) -> OrderTotals:
    """Calculate totals with the tax rate and shipping policy from ``settings``."""
    return calculate_totals(
        items,
        tax_rate=settings.tax_rate,
        shipping=ShippingPolicy(
            threshold=settings.free_shipping_threshold,
            flat_fee=settings.flat_shipping_fee,
        ),
    )
