"""FastAPI routes for the Storefront — orders, addresses, cart, products and wishlist.

The caller's identity comes from the ``X-User-Id`` header; every customer
route is scoped to it.
"""

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.account.address import Address
from storefront.account.addresses import AddAddress, RemoveAddress, UpdateAddress
from storefront.api.dependencies import current_customer_id
from storefront.api.schemas import (
    AddAddressRequest,
    AddProductRequest,
    AddressResponse,
    AddToCartRequest,
    AddToWishlistRequest,
    CartResponse,
    IdResponse,
    OrderActionRequest,
    OrderResponse,
    PlaceOrderRequest,
    ProductResponse,
    StatusResponse,
    UpdateAddressRequest,
    UpdateCartItemRequest,
    WishlistResponse,
)
from storefront.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.queries import view_cart
from storefront.catalogue.management import AddProduct
from storefront.catalogue.product import Product
from storefront.checkout.placement import place_order
from storefront.errors import NotFoundOrForbidden, ValidationError
from storefront.order.amendment import update_order_notes
from storefront.order.cancellation import cancel_order
from storefront.order.queries import get_order, list_orders, product_summaries
from storefront.wishlist.management import AddToWishlist, RemoveFromWishlist
from storefront.wishlist.queries import view_wishlist

# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=list[OrderResponse])
async def list_customer_orders(customer_id: str = Depends(current_customer_id)) -> list[OrderResponse]:
    orders = list_orders(customer_id)
    products = product_summaries(orders)
    return [OrderResponse.from_order(order, products) for order in orders]


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: PlaceOrderRequest, customer_id: str = Depends(current_customer_id)) -> OrderResponse:
    order = place_order(
        customer_id=customer_id,
        address_id=body.address_id,
        payment_method=body.payment_method,
        notes=body.notes,
    )
    return OrderResponse.from_order(order, product_summaries([order]))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_customer_order(order_id: str, customer_id: str = Depends(current_customer_id)) -> OrderResponse:
    order = get_order(customer_id, order_id)
    return OrderResponse.from_order(order, product_summaries([order]))


@order_router.patch("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: str,
    body: OrderActionRequest,
    customer_id: str = Depends(current_customer_id),
) -> OrderResponse:
    if body.action == "cancel":
        order = cancel_order(customer_id, order_id)
    elif body.action == "update_notes":
        order = update_order_notes(customer_id, order_id, body.notes)
    else:
        raise ValidationError("Invalid action")
    return OrderResponse.from_order(order, product_summaries([order]))


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------
address_router = APIRouter(prefix="/addresses", tags=["addresses"])


@address_router.get("", response_model=list[AddressResponse])
async def list_addresses(customer_id: str = Depends(current_customer_id)) -> list[AddressResponse]:
    addresses = current_domain.repository_for(Address).find_for_customer(customer_id)
    return [AddressResponse.from_address(address) for address in addresses]


@address_router.post("", status_code=201, response_model=AddressResponse)
async def add_address(body: AddAddressRequest, customer_id: str = Depends(current_customer_id)) -> AddressResponse:
    command = AddAddress(customer_id=customer_id, **body.model_dump())
    address_id = current_domain.process(command, asynchronous=False)
    return AddressResponse.from_address(current_domain.repository_for(Address).get(address_id))


@address_router.patch("/{address_id}", response_model=AddressResponse)
async def update_address(
    address_id: str,
    body: UpdateAddressRequest,
    customer_id: str = Depends(current_customer_id),
) -> AddressResponse:
    command = UpdateAddress(customer_id=customer_id, address_id=address_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return AddressResponse.from_address(current_domain.repository_for(Address).get(address_id))


@address_router.delete("/{address_id}", response_model=StatusResponse)
async def remove_address(address_id: str, customer_id: str = Depends(current_customer_id)) -> StatusResponse:
    current_domain.process(RemoveAddress(customer_id=customer_id, address_id=address_id), asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(customer_id: str = Depends(current_customer_id)) -> CartResponse:
    return CartResponse.from_summary(view_cart(customer_id))


@cart_router.post("/items", status_code=201, response_model=CartResponse)
async def add_cart_item(body: AddToCartRequest, customer_id: str = Depends(current_customer_id)) -> CartResponse:
    command = AddToCart(customer_id=customer_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return CartResponse.from_summary(view_cart(customer_id))


@cart_router.patch("/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    customer_id: str = Depends(current_customer_id),
) -> CartResponse:
    command = UpdateCartQuantity(customer_id=customer_id, item_id=item_id, new_quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return CartResponse.from_summary(view_cart(customer_id))


@cart_router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_cart_item(item_id: str, customer_id: str = Depends(current_customer_id)) -> CartResponse:
    current_domain.process(RemoveFromCart(customer_id=customer_id, item_id=item_id), asynchronous=False)
    return CartResponse.from_summary(view_cart(customer_id))


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=IdResponse)
async def add_product(body: AddProductRequest) -> IdResponse:
    product_id = current_domain.process(AddProduct(**body.model_dump()), asynchronous=False)
    return IdResponse(id=product_id)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError as exc:
        raise NotFoundOrForbidden("Product not found") from exc
    return ProductResponse.from_product(product)


# ---------------------------------------------------------------------------
# Wishlist
# ---------------------------------------------------------------------------
wishlist_router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@wishlist_router.get("", response_model=WishlistResponse)
async def get_wishlist(customer_id: str = Depends(current_customer_id)) -> WishlistResponse:
    return WishlistResponse.from_lines(view_wishlist(customer_id))


@wishlist_router.post("", status_code=201, response_model=WishlistResponse)
async def add_wishlist_item(
    body: AddToWishlistRequest,
    customer_id: str = Depends(current_customer_id),
) -> WishlistResponse:
    current_domain.process(AddToWishlist(customer_id=customer_id, product_id=body.product_id), asynchronous=False)
    return WishlistResponse.from_lines(view_wishlist(customer_id))


@wishlist_router.delete("/{item_id}", response_model=WishlistResponse)
async def remove_wishlist_item(item_id: str, customer_id: str = Depends(current_customer_id)) -> WishlistResponse:
    current_domain.process(RemoveFromWishlist(customer_id=customer_id, wishlist_item_id=item_id), asynchronous=False)
    return WishlistResponse.from_lines(view_wishlist(customer_id))
