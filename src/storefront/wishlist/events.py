"""Domain events for the WishlistItem aggregate."""

from protean.fields import Identifier

from storefront.domain import storefront


@storefront.event(part_of="WishlistItem")
class ProductSaved:
    __version__ = 1

    wishlist_item_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
