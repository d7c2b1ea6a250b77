"""Repository for the ShoppingCart aggregate."""

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def find_for_customer(self, customer_id) -> ShoppingCart | None:
        """The customer's cart, or ``None`` if they never added anything."""
        return self._dao.query.filter(customer_id=str(customer_id)).all().first
