"""Order cancellation — command and handler.

A customer may cancel their own order while it is PENDING or PROCESSING.
The ordered quantities go back on the shelf unless ``restock_on_cancel`` is
switched off.
"""

import structlog
from protean import handle
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import PersistenceError
from storefront.order.order import Order
from storefront.settings import get_settings

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    restock = Boolean(default=True)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_owned(command.order_id, command.customer_id)
        order.cancel()
        repo.add(order)

        if command.restock:
            products = current_domain.repository_for(Product)
            for item in order.items:
                try:
                    product = products.get(item.product_id)
                except ObjectNotFoundError:
                    logger.warning(
                        "Skipping restock for missing product",
                        order_number=order.order_number,
                        product_id=str(item.product_id),
                    )
                    continue
                product.restock(item.quantity, reason=f"cancelled {order.order_number}")
                products.add(product)

        return str(order.id)


def cancel_order(customer_id, order_id, restock: bool | None = None) -> Order:
    """Cancel the customer's order and return it in its new state.

    A version conflict on a restocked product re-runs the cancellation from
    fresh reads, up to ``checkout_max_attempts`` times.

    Raises:
        NotFoundOrForbidden: the order does not exist or is not theirs.
        StateConflictError: the order is past the point of cancellation.
        PersistenceError: the cancellation kept conflicting with concurrent writes.
    """
    settings = get_settings()
    if restock is None:
        restock = settings.restock_on_cancel

    max_attempts = settings.checkout_max_attempts
    for attempt in range(1, max_attempts + 1):
        try:
            current_domain.process(
                CancelOrder(order_id=str(order_id), customer_id=str(customer_id), restock=restock),
                asynchronous=False,
            )
        except ExpectedVersionError as exc:
            logger.warning(
                "Cancellation hit a concurrent update, retrying",
                order_id=str(order_id),
                attempt=attempt,
                error=str(exc),
            )
            continue

        logger.info(
            "Order cancelled",
            order_id=str(order_id),
            customer_id=str(customer_id),
            restocked=restock,
            attempt=attempt,
        )
        return current_domain.repository_for(Order).get(order_id)

    logger.error("Cancellation gave up after repeated conflicts", order_id=str(order_id), attempts=max_attempts)
    raise PersistenceError()
