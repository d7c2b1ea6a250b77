"""Checkout — converts a customer's cart into an order.

Validation runs in a fixed order and nothing is written until every check has
passed:

1. an address and a supported payment method were supplied,
2. the cart exists and has items,
3. the address exists and belongs to the customer,
4. every product is active and has enough stock.

The ``PlaceOrder`` handler then prices the cart, allocates an order number,
writes the order with its item snapshots, decrements stock and clears the
cart. The handler runs in a single Unit of Work, so a failure at any step
leaves the store untouched.

``place_order`` wraps the command with a bounded retry: a version conflict on
a product or cart, or an order number taken between the check and the insert,
re-runs the whole transaction from fresh reads.
"""

import structlog
from protean import handle
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.exceptions import ValidationError as ProteanValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.account.address import Address
from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.checkout.pricing import LineItem, totals_for
from storefront.domain import storefront
from storefront.errors import (
    AuthError,
    EmptyCartError,
    InvalidAddressError,
    NotFoundOrForbidden,
    PersistenceError,
    StockError,
    ValidationError,
)
from storefront.order.numbering import allocate_order_number
from storefront.order.order import Order
from storefront.order.status import PaymentMethod
from storefront.settings import get_settings

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    payment_method = String(required=True, choices=PaymentMethod)
    notes = Text()


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        settings = get_settings()
        carts = current_domain.repository_for(ShoppingCart)
        addresses = current_domain.repository_for(Address)
        products = current_domain.repository_for(Product)
        orders = current_domain.repository_for(Order)

        cart = carts.find_for_customer(command.customer_id)
        if cart is None or cart.is_empty:
            raise EmptyCartError()

        try:
            address = addresses.find_owned(command.address_id, command.customer_id)
        except NotFoundOrForbidden as exc:
            raise InvalidAddressError() from exc

        # Fresh reads; the first unavailable item stops checkout
        reserved = []
        for item in cart.items:
            try:
                product = products.get(item.product_id)
            except ObjectNotFoundError as exc:
                raise StockError(str(item.product_id), "A product in your cart is no longer available") from exc
            if not product.is_active:
                raise StockError(product.name, f"{product.name} is no longer available")
            if product.quantity < item.quantity:
                raise StockError(product.name)
            reserved.append((product, item.quantity))

        totals = totals_for([LineItem(product.price, quantity) for product, quantity in reserved], settings)
        order_number = allocate_order_number(
            orders.order_number_exists,
            prefix=settings.order_number_prefix,
            max_attempts=settings.order_number_max_attempts,
        )

        order = Order.place(
            order_number=order_number,
            customer_id=command.customer_id,
            address=address,
            payment_method=command.payment_method,
            items_data=[
                {
                    "product_id": str(product.id),
                    "name": product.name,
                    "sku": product.sku,
                    "quantity": quantity,
                    "price": product.price,
                }
                for product, quantity in reserved
            ],
            totals=totals,
            currency=settings.currency,
            notes=command.notes,
        )
        orders.add(order)

        for product, quantity in reserved:
            product.decrement_stock(quantity, order_number=order_number)
            products.add(product)

        cart.clear(order_number=order_number)
        carts.add(cart)

        return str(order.id)


def _is_order_number_clash(exc: ProteanValidationError) -> bool:
    messages = getattr(exc, "messages", None) or {}
    return "order_number" in messages


def place_order(customer_id, address_id, payment_method, notes=None) -> Order:
    """Place an order from the customer's cart and return it.

    Raises:
        AuthError: no customer identity.
        ValidationError: address or payment method missing, or the method is unknown.
        EmptyCartError, InvalidAddressError, StockError: see the module docstring.
        OrderNumberExhaustedError: no free order number could be found.
        PersistenceError: the transaction kept conflicting with concurrent writes.
    """
    if not customer_id:
        raise AuthError()
    if not address_id or not payment_method:
        raise ValidationError("Address and payment method are required")
    try:
        method = PaymentMethod(payment_method)
    except ValueError as exc:
        raise ValidationError(f"Unsupported payment method: {payment_method}") from exc

    max_attempts = get_settings().checkout_max_attempts
    for attempt in range(1, max_attempts + 1):
        command = PlaceOrder(
            customer_id=str(customer_id),
            address_id=str(address_id),
            payment_method=method.value,
            notes=notes,
        )
        try:
            order_id = current_domain.process(command, asynchronous=False)
        except ExpectedVersionError as exc:
            logger.warning(
                "Checkout hit a concurrent update, retrying",
                customer_id=str(customer_id),
                attempt=attempt,
                error=str(exc),
            )
            continue
        except ProteanValidationError as exc:
            if not _is_order_number_clash(exc):
                raise
            logger.warning("Order number taken at insert, retrying", customer_id=str(customer_id), attempt=attempt)
            continue

        order = current_domain.repository_for(Order).get(order_id)
        logger.info(
            "Order placed",
            order_id=order_id,
            order_number=order.order_number,
            customer_id=str(customer_id),
            total=order.pricing.total,
            attempt=attempt,
        )
        return order

    logger.error("Checkout gave up after repeated conflicts", customer_id=str(customer_id), attempts=max_attempts)
    raise PersistenceError()
