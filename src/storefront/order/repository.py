"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.errors import NotFoundOrForbidden
from storefront.order.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_for_customer(self, customer_id) -> list[Order]:
        """All orders belonging to ``customer_id``, newest first."""
        return self._dao.query.filter(customer_id=str(customer_id)).order_by("-created_at").all().items

    def find_owned(self, order_id, customer_id) -> Order:
        """Load an order only if ``customer_id`` owns it.

        Missing and foreign orders raise the same ``NotFoundOrForbidden``.
        """
        try:
            order = self.get(order_id)
        except ObjectNotFoundError as exc:
            raise NotFoundOrForbidden("Order not found") from exc

        if not order.is_owned_by(customer_id):
            raise NotFoundOrForbidden("Order not found")
        return order

    def order_number_exists(self, order_number: str) -> bool:
        return self._dao.query.filter(order_number=order_number).all().total > 0
