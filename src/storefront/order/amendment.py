"""Order amendment — customers may change their delivery notes until the
warehouse picks the order up (status PENDING).
"""

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderNotes:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    notes = Text()


@storefront.command_handler(part_of=Order)
class UpdateOrderNotesHandler:
    @handle(UpdateOrderNotes)
    def update_notes(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_owned(command.order_id, command.customer_id)
        order.update_notes(command.notes)
        repo.add(order)
        return str(order.id)


def update_order_notes(customer_id, order_id, notes) -> Order:
    """Replace the notes on the customer's order and return it.

    Raises:
        NotFoundOrForbidden: the order does not exist or is not theirs.
        StateConflictError: the order is no longer PENDING.
    """
    current_domain.process(
        UpdateOrderNotes(order_id=str(order_id), customer_id=str(customer_id), notes=notes),
        asynchronous=False,
    )
    logger.info("Order notes updated", order_id=str(order_id), customer_id=str(customer_id))
    return current_domain.repository_for(Order).get(order_id)
