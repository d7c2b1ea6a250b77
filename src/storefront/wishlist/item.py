"""WishlistItem aggregate — a product a customer has saved for later.

Each entry is its own aggregate so that saving and removing never contend
with each other. A product appears at most once per customer; the handlers
in ``storefront.wishlist.management`` return the existing entry instead of
adding a second one.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier

from storefront.domain import storefront
from storefront.wishlist.events import ProductSaved


@storefront.aggregate
class WishlistItem:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    created_at = DateTime()

    @classmethod
    def save(cls, customer_id, product_id):
        item = cls(customer_id=customer_id, product_id=product_id, created_at=datetime.now(UTC))
        item.raise_(
            ProductSaved(
                wishlist_item_id=str(item.id),
                customer_id=str(customer_id),
                product_id=str(product_id),
            )
        )
        return item

    def is_owned_by(self, customer_id) -> bool:
        return str(self.customer_id) == str(customer_id)
