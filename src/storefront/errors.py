"""Storefront exceptions.

Every business-rule violation surfaces as a subclass of ``StorefrontError``.
Each class carries the HTTP status the API answers with, so the web layer
needs only one exception handler.
"""


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Invalid request"


class AuthError(StorefrontError):
    """The caller is not authenticated."""

    status_code = 401
    default_message = "Unauthorized"


class NotFoundOrForbidden(StorefrontError):
    """The resource does not exist or belongs to someone else.

    Both cases produce the same error so that non-owners learn nothing about
    which identifiers exist.
    """

    status_code = 404
    default_message = "Not found"


class EmptyCartError(StorefrontError):
    status_code = 400
    default_message = "Cart is empty"


class InvalidAddressError(StorefrontError):
    status_code = 400
    default_message = "Invalid address"


class StockError(StorefrontError):
    """A product cannot be ordered in the requested quantity."""

    status_code = 400

    def __init__(self, product_name: str, message: str | None = None):
        self.product_name = product_name
        super().__init__(message or f"Insufficient stock for {product_name}")


class StateConflictError(StorefrontError):
    """The requested change is not allowed from the current status."""

    status_code = 409
    default_message = "Operation not allowed in the current state"


class PersistenceError(StorefrontError):
    """The store failed in a way that is not a business-rule violation."""

    status_code = 500
    default_message = "The order could not be saved, please try again"
    retryable = True


class OrderNumberExhaustedError(PersistenceError):
    """No free order number was found within the allowed attempts."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not allocate a unique order number after {attempts} attempts")
