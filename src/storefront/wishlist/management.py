"""Wishlist management — commands and handler.

Saving a product that is already on the list is a no-op that returns the
existing entry. Removing an entry owned by someone else is reported exactly
like a missing one.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import NotFoundOrForbidden
from storefront.wishlist.item import WishlistItem


@storefront.command(part_of="WishlistItem")
class AddToWishlist:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="WishlistItem")
class RemoveFromWishlist:
    customer_id = Identifier(required=True)
    wishlist_item_id = Identifier(required=True)


@storefront.command_handler(part_of=WishlistItem)
class ManageWishlistHandler:
    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        try:
            current_domain.repository_for(Product).get(command.product_id)
        except ObjectNotFoundError as exc:
            raise NotFoundOrForbidden("Product not found") from exc

        repo = current_domain.repository_for(WishlistItem)
        existing = repo.find_entry(command.customer_id, command.product_id)
        if existing is not None:
            return str(existing.id)

        item = WishlistItem.save(customer_id=command.customer_id, product_id=command.product_id)
        repo.add(item)
        return str(item.id)

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        repo = current_domain.repository_for(WishlistItem)
        item = repo.find_owned(command.wishlist_item_id, command.customer_id)
        repo.remove(item)
