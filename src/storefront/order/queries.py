"""Read-only order queries, always scoped to the requesting customer."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.order.order import Order


def list_orders(customer_id) -> list[Order]:
    """The customer's orders, newest first, with items and address snapshot loaded."""
    return current_domain.repository_for(Order).find_for_customer(customer_id)


def get_order(customer_id, order_id) -> Order:
    """Return the order if ``customer_id`` owns it.

    Raises:
        NotFoundOrForbidden: the order does not exist or belongs to someone else.
    """
    return current_domain.repository_for(Order).find_owned(order_id, customer_id)


def product_summaries(orders) -> dict[str, Product]:
    """Current catalogue entries for every product on ``orders``, keyed by id.

    Products removed from the catalogue since the order was placed are left
    out; the item snapshot still carries their name and price.
    """
    products = current_domain.repository_for(Product)
    found = {}
    for order in orders:
        for item in order.items:
            product_id = str(item.product_id)
            if product_id in found:
                continue
            try:
                found[product_id] = products.get(product_id)
            except ObjectNotFoundError:
                continue
    return found
