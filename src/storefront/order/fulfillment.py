"""Order fulfillment — commands and handler.

Entry points for the warehouse and carrier integrations. None of these are
exposed to customers; each one moves the order along the status table and
rejects anything else with ``StateConflictError``.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class MarkProcessing:
    """The warehouse has started picking and packing."""

    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class RecordShipment:
    order_id = Identifier(required=True)
    carrier = String(required=True, max_length=100)
    tracking_number = String(required=True, max_length=255)


@storefront.command(part_of="Order")
class RecordDelivery:
    """The carrier has confirmed delivery to the customer."""

    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class RefundOrder:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class RecordFulfillmentHandler:
    @handle(MarkProcessing)
    def mark_processing(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_processing()
        repo.add(order)

    @handle(ConfirmOrder)
    def confirm_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.confirm()
        repo.add(order)

    @handle(RecordShipment)
    def record_shipment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_shipment(carrier=command.carrier, tracking_number=command.tracking_number)
        repo.add(order)

    @handle(RecordDelivery)
    def record_delivery(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_delivery()
        repo.add(order)

    @handle(RefundOrder)
    def refund_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.refund()
        repo.add(order)
