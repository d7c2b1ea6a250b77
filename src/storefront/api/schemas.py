"""Pydantic request/response schemas for the Storefront API.

These are the external contracts, kept separate from the internal Protean
commands. Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from storefront.order.status import (
    can_cancel,
    can_modify,
    order_status_color,
    order_status_label,
    payment_status_color,
    payment_status_label,
    progress_percent,
    shipment_status_label,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(CamelModel):
    # Optional here so that a missing field gets the domain's own message
    address_id: str | None = None
    payment_method: str | None = None
    notes: str | None = Field(None, max_length=1000)


class OrderActionRequest(CamelModel):
    action: str
    notes: str | None = Field(None, max_length=1000)


class ProductSummaryResponse(CamelModel):
    """The live catalogue entry behind an order line."""

    name: str
    is_active: bool


class OrderItemResponse(CamelModel):
    id: str
    product_id: str
    name: str
    sku: str
    quantity: int
    price: float
    total: float
    product: ProductSummaryResponse | None = None


def _product_summary(product) -> ProductSummaryResponse | None:
    if product is None:
        return None
    return ProductSummaryResponse(name=product.name, is_active=bool(product.is_active))


class ShippingAddressResponse(CamelModel):
    full_name: str
    phone: str
    street: str
    city: str
    state: str
    postal_code: str
    country: str


class ShipmentResponse(CamelModel):
    carrier: str | None = None
    tracking_number: str | None = None
    status: str
    status_label: str
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None


class OrderResponse(CamelModel):
    id: str
    order_number: str
    status: str
    status_label: str
    status_color: str
    progress: int
    can_cancel: bool
    can_modify: bool
    payment_method: str
    payment_status: str
    payment_status_label: str
    payment_status_color: str
    subtotal: float
    tax: float
    shipping_cost: float
    discount: float
    total: float
    currency: str
    notes: str | None = None
    address_id: str
    shipping_address: ShippingAddressResponse | None = None
    items: list[OrderItemResponse]
    shipment: ShipmentResponse | None = None
    estimated_delivery: date | None = None
    cancelled_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order, products=None) -> "OrderResponse":
        """Build the response. ``products`` maps product ids to live catalogue entries."""
        products = products or {}
        pricing = order.pricing
        address = order.shipping_address
        shipment = order.shipment
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            status=order.status,
            status_label=order_status_label(order.status),
            status_color=order_status_color(order.status),
            progress=progress_percent(order.status),
            can_cancel=can_cancel(order.status),
            can_modify=can_modify(order.status),
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            payment_status_label=payment_status_label(order.payment_status),
            payment_status_color=payment_status_color(order.payment_status),
            subtotal=pricing.subtotal,
            tax=pricing.tax,
            shipping_cost=pricing.shipping_cost,
            discount=pricing.discount,
            total=pricing.total,
            currency=pricing.currency,
            notes=order.notes,
            address_id=str(order.address_id),
            shipping_address=(
                ShippingAddressResponse(
                    full_name=address.full_name,
                    phone=address.phone,
                    street=address.street,
                    city=address.city,
                    state=address.state,
                    postal_code=address.postal_code,
                    country=address.country,
                )
                if address
                else None
            ),
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    name=item.name,
                    sku=item.sku,
                    quantity=item.quantity,
                    price=item.price,
                    total=item.total,
                    product=_product_summary(products.get(str(item.product_id))),
                )
                for item in order.items
            ],
            shipment=(
                ShipmentResponse(
                    carrier=shipment.carrier,
                    tracking_number=shipment.tracking_number,
                    status=shipment.status,
                    status_label=shipment_status_label(shipment.status),
                    shipped_at=shipment.shipped_at,
                    delivered_at=shipment.delivered_at,
                )
                if shipment
                else None
            ),
            estimated_delivery=order.estimated_delivery(),
            cancelled_at=order.cancelled_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------
class AddAddressRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "fullName": "Ada Lovelace",
                    "phone": "5551234567",
                    "street": "12 Analytical Row",
                    "city": "London",
                    "state": "Greater London",
                    "postalCode": "NW1 6XE",
                    "country": "UK",
                    "isDefault": True,
                }
            ]
        },
    )

    full_name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=10, max_length=20)
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    is_default: bool = False


class UpdateAddressRequest(CamelModel):
    full_name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, min_length=10, max_length=20)
    street: str | None = Field(None, min_length=1, max_length=255)
    city: str | None = Field(None, min_length=1, max_length=100)
    state: str | None = Field(None, min_length=1, max_length=100)
    postal_code: str | None = Field(None, min_length=1, max_length=20)
    country: str | None = Field(None, min_length=1, max_length=100)
    is_default: bool | None = None


class AddressResponse(CamelModel):
    id: str
    full_name: str
    phone: str
    street: str
    city: str
    state: str
    postal_code: str
    country: str
    is_default: bool

    @classmethod
    def from_address(cls, address) -> "AddressResponse":
        return cls(
            id=str(address.id),
            full_name=address.full_name,
            phone=address.phone,
            street=address.street,
            city=address.city,
            state=address.state,
            postal_code=address.postal_code,
            country=address.country,
            is_default=bool(address.is_default),
        )


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(CamelModel):
    product_id: str
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemRequest(CamelModel):
    quantity: int = Field(ge=1)


class CartLineResponse(CamelModel):
    id: str
    product_id: str
    name: str | None = None
    sku: str | None = None
    unit_price: float
    quantity: int
    available: bool


class CartResponse(CamelModel):
    id: str | None = None
    items: list[CartLineResponse]
    subtotal: float
    tax: float
    shipping_cost: float
    discount: float
    total: float

    @classmethod
    def from_summary(cls, summary) -> "CartResponse":
        return cls(
            id=summary.cart_id,
            items=[
                CartLineResponse(
                    id=line.item_id,
                    product_id=line.product_id,
                    name=line.name,
                    sku=line.sku,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    available=line.available,
                )
                for line in summary.lines
            ],
            **summary.totals.as_floats(),
        )


# ---------------------------------------------------------------------------
# Wishlist
# ---------------------------------------------------------------------------
class AddToWishlistRequest(CamelModel):
    product_id: str


class WishlistLineResponse(CamelModel):
    id: str
    product_id: str
    name: str | None = None
    price: float | None = None
    in_stock: bool
    added_at: datetime | None = None


class WishlistResponse(CamelModel):
    items: list[WishlistLineResponse]

    @classmethod
    def from_lines(cls, lines) -> "WishlistResponse":
        return cls(
            items=[
                WishlistLineResponse(
                    id=line.item_id,
                    product_id=line.product_id,
                    name=line.name,
                    price=line.price,
                    in_stock=line.in_stock,
                    added_at=line.added_at,
                )
                for line in lines
            ]
        )


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class AddProductRequest(CamelModel):
    sku: str = Field(..., max_length=50)
    name: str = Field(..., max_length=255)
    description: str | None = None
    price: float = Field(..., ge=0)
    quantity: int = Field(default=0, ge=0)
    is_active: bool = True


class ProductResponse(CamelModel):
    id: str
    sku: str
    name: str
    description: str | None = None
    price: float
    quantity: int
    is_active: bool

    @classmethod
    def from_product(cls, product) -> "ProductResponse":
        return cls(
            id=str(product.id),
            sku=product.sku,
            name=product.name,
            description=product.description,
            price=product.price,
            quantity=product.quantity,
            is_active=bool(product.is_active),
        )


class IdResponse(CamelModel):
    id: str


class StatusResponse(CamelModel):
    status: str = "ok"
