"""Catalogue administration — commands and handler.

The storefront does not own the catalogue; these entry points exist so that
products can be seeded, repriced and restocked.
"""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class AddProduct:
    sku = String(required=True, max_length=50)
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    quantity = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)


@storefront.command(part_of="Product")
class UpdateProductPrice:
    product_id = Identifier(required=True)
    price = Float(required=True, min_value=0.0)


@storefront.command(part_of="Product")
class RestockProduct:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Product")
class ActivateProduct:
    product_id = Identifier(required=True)


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.add(
            sku=command.sku,
            name=command.name,
            description=command.description,
            price=command.price,
            quantity=command.quantity,
            is_active=command.is_active,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProductPrice)
    def update_price(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.change_price(command.price)
        repo.add(product)

    @handle(RestockProduct)
    def restock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.quantity, reason="manual")
        repo.add(product)

    @handle(ActivateProduct)
    def activate(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.activate()
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)
