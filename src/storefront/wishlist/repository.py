"""Repository for the WishlistItem aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.errors import NotFoundOrForbidden
from storefront.wishlist.item import WishlistItem


@storefront.repository(part_of=WishlistItem)
class WishlistItemRepository:
    def find_for_customer(self, customer_id) -> list[WishlistItem]:
        """The customer's saved products, most recently saved first."""
        return self._dao.query.filter(customer_id=str(customer_id)).order_by("-created_at").all().items

    def find_entry(self, customer_id, product_id) -> WishlistItem | None:
        return self._dao.query.filter(customer_id=str(customer_id), product_id=str(product_id)).all().first

    def find_owned(self, item_id, customer_id) -> WishlistItem:
        """Load an entry only if ``customer_id`` owns it."""
        try:
            item = self.get(item_id)
        except ObjectNotFoundError as exc:
            raise NotFoundOrForbidden("Wishlist item not found") from exc

        if not item.is_owned_by(customer_id):
            raise NotFoundOrForbidden("Wishlist item not found")
        return item

    def remove(self, item: WishlistItem):
        self._dao.delete(item)
