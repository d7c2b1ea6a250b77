"""Read side of the cart: items with live product data and an estimate."""

from decimal import Decimal
from typing import NamedTuple

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.checkout.pricing import LineItem, OrderTotals, totals_for
from storefront.settings import StoreSettings, get_settings

# Nothing to ship, nothing to charge
EMPTY_TOTALS = OrderTotals(*([Decimal("0.00")] * len(OrderTotals._fields)))


class CartLine(NamedTuple):
    item_id: str
    product_id: str
    name: str | None
    sku: str | None
    unit_price: float
    quantity: int
    available: bool


class CartSummary(NamedTuple):
    cart_id: str | None
    lines: list[CartLine]
    totals: OrderTotals


def view_cart(customer_id, settings: StoreSettings | None = None) -> CartSummary:
    """Return the customer's cart priced at current catalogue prices.

    Products that have since been removed from the catalogue are listed as
    unavailable and left out of the estimate.
    """
    settings = settings or get_settings()
    cart = current_domain.repository_for(ShoppingCart).find_for_customer(customer_id)
    if cart is None:
        return CartSummary(cart_id=None, lines=[], totals=EMPTY_TOTALS)

    products = current_domain.repository_for(Product)
    lines = []
    for item in cart.items:
        try:
            product = products.get(item.product_id)
        except ObjectNotFoundError:
            lines.append(CartLine(str(item.id), str(item.product_id), None, None, 0.0, item.quantity, False))
            continue

        lines.append(
            CartLine(
                item_id=str(item.id),
                product_id=str(item.product_id),
                name=product.name,
                sku=product.sku,
                unit_price=product.price,
                quantity=item.quantity,
                available=product.is_available(item.quantity),
            )
        )

    priced = [LineItem(line.unit_price, line.quantity) for line in lines if line.name is not None]
    totals = totals_for(priced, settings) if priced else EMPTY_TOTALS
    return CartSummary(cart_id=str(cart.id), lines=lines, totals=totals)
