"""Read side of the wishlist: saved products with live catalogue data."""

from datetime import datetime
from typing import NamedTuple

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.wishlist.item import WishlistItem


class WishlistLine(NamedTuple):
    item_id: str
    product_id: str
    name: str | None
    price: float | None
    in_stock: bool
    added_at: datetime | None


def view_wishlist(customer_id) -> list[WishlistLine]:
    """The customer's saved products, most recently saved first.

    A product deleted from the catalogue stays on the list with no name or
    price so the customer can still remove it.
    """
    products = current_domain.repository_for(Product)
    lines = []
    for item in current_domain.repository_for(WishlistItem).find_for_customer(customer_id):
        try:
            product = products.get(item.product_id)
        except ObjectNotFoundError:
            lines.append(WishlistLine(str(item.id), str(item.product_id), None, None, False, item.created_at))
            continue

        lines.append(
            WishlistLine(
                item_id=str(item.id),
                product_id=str(item.product_id),
                name=product.name,
                price=product.price,
                in_stock=product.is_available(1),
                added_at=item.created_at,
            )
        )
    return lines
