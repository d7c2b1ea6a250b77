"""Product aggregate — the slice of the catalogue that checkout depends on.

Checkout reads ``name``, ``sku``, ``price``, ``quantity`` and ``is_active``
and decrements ``quantity`` inside its own Unit of Work. Stock never goes
negative: a decrement larger than what is available raises ``StockError``
instead of clamping.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from storefront.catalogue.events import (
    ProductActivated,
    ProductAdded,
    ProductDeactivated,
    ProductPriceChanged,
    StockDecremented,
    StockRestored,
)
from storefront.domain import storefront
from storefront.errors import StockError, ValidationError


@storefront.aggregate
class Product:
    sku = String(required=True, unique=True, max_length=50)
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    quantity = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def add(cls, sku, name, price, quantity=0, description=None, is_active=True):
        now = datetime.now(UTC)
        product = cls(
            sku=sku,
            name=name,
            description=description,
            price=price,
            quantity=quantity,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                sku=sku,
                name=name,
                price=price,
                quantity=quantity,
                added_at=now,
            )
        )
        return product

    def is_available(self, requested: int) -> bool:
        return bool(self.is_active) and self.quantity >= requested

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def decrement_stock(self, quantity: int, order_number: str | None = None):
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        if not self.is_active:
            raise StockError(self.name, f"{self.name} is no longer available")
        if self.quantity < quantity:
            raise StockError(self.name)

        self.quantity -= quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockDecremented(
                product_id=str(self.id),
                quantity=quantity,
                remaining=self.quantity,
                order_number=order_number,
            )
        )

    def restock(self, quantity: int, reason: str | None = None):
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        self.quantity += quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockRestored(
                product_id=str(self.id),
                quantity=quantity,
                available=self.quantity,
                reason=reason,
            )
        )

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def change_price(self, new_price: float):
        if new_price < 0:
            raise ValidationError("Price cannot be negative")

        previous = self.price
        now = datetime.now(UTC)
        self.price = new_price
        self.updated_at = now
        self.raise_(
            ProductPriceChanged(
                product_id=str(self.id),
                previous_price=previous,
                new_price=new_price,
                changed_at=now,
            )
        )

    def activate(self):
        if self.is_active:
            return
        now = datetime.now(UTC)
        self.is_active = True
        self.updated_at = now
        self.raise_(ProductActivated(product_id=str(self.id), activated_at=now))

    def deactivate(self):
        if not self.is_active:
            return
        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self.raise_(ProductDeactivated(product_id=str(self.id), deactivated_at=now))
