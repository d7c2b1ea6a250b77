"""Order payment — command and handler.

Payment status moves independently of order status, along its own table:
PENDING → PROCESSING/PAID/FAILED, PROCESSING → PAID/FAILED,
FAILED → PROCESSING (retry) and PAID → REFUNDED.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.order.status import PaymentStatus


@storefront.command(part_of="Order")
class RecordPaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, choices=PaymentStatus)


@storefront.command_handler(part_of=Order)
class RecordPaymentHandler:
    @handle(RecordPaymentStatus)
    def record_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_payment(command.payment_status)
        repo.add(order)
