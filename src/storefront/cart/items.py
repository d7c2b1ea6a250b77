"""Cart item management — commands and handler.

Every command is scoped by ``customer_id``: a customer can only ever touch
the items of their own cart.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import NotFoundOrForbidden, StockError


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    def _customer_cart(self, customer_id) -> ShoppingCart:
        cart = current_domain.repository_for(ShoppingCart).find_for_customer(customer_id)
        if cart is None:
            raise NotFoundOrForbidden("Cart item not found")
        return cart

    @handle(AddToCart)
    def add_to_cart(self, command):
        try:
            product = current_domain.repository_for(Product).get(command.product_id)
        except ObjectNotFoundError as exc:
            raise NotFoundOrForbidden("Product not found") from exc
        if not product.is_active:
            raise StockError(product.name, f"{product.name} is no longer available")

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_for_customer(command.customer_id) or ShoppingCart.create(command.customer_id)
        item_id = cart.add_item(product_id=command.product_id, quantity=command.quantity)
        repo.add(cart)
        return item_id

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        cart = self._customer_cart(command.customer_id)
        cart.update_item_quantity(item_id=command.item_id, new_quantity=command.new_quantity)
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = self._customer_cart(command.customer_id)
        cart.remove_item(item_id=command.item_id)
        current_domain.repository_for(ShoppingCart).add(cart)
