"""Storefront bounded context — catalogue, carts, addresses and orders.

Handles the shopping cart, the address book, the checkout flow that converts
a cart into an order, and the order status lifecycle.
"""

import structlog
from protean.domain import Domain

from storefront.utils.logging import configure_logging

configure_logging()

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
