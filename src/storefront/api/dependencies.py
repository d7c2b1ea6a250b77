"""Request-scoped dependencies."""

from fastapi import Header

from storefront.errors import AuthError


async def current_customer_id(x_user_id: str | None = Header(default=None)) -> str:
    """Identity of the caller, as established by the upstream auth layer."""
    if not x_user_id:
        raise AuthError()
    return x_user_id
