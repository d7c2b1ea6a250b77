import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.api import (
    address_router,
    cart_router,
    order_router,
    product_router,
    register_error_handlers,
    wishlist_router,
)


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(order_router)
    app.include_router(address_router)
    app.include_router(cart_router)
    app.include_router(product_router)
    app.include_router(wishlist_router)
    register_error_handlers(app)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def alice():
    return {"X-User-Id": "alice"}


@pytest.fixture()
def bob():
    return {"X-User-Id": "bob"}
