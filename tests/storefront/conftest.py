import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from storefront.account.addresses import AddAddress
from storefront.cart.items import AddToCart
from storefront.catalogue.management import AddProduct


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Seeding helpers
# ---------------------------------------------------------------------------
@pytest.fixture()
def add_product():
    def _add(sku="SKU-001", name="Widget", price=10.0, quantity=10, is_active=True):
        return current_domain.process(
            AddProduct(sku=sku, name=name, price=price, quantity=quantity, is_active=is_active),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def add_address():
    def _add(customer_id="cust-001", **overrides):
        fields = {
            "full_name": "Ada Lovelace",
            "phone": "5551234567",
            "street": "12 Analytical Row",
            "city": "London",
            "state": "Greater London",
            "postal_code": "NW1 6XE",
            "country": "UK",
        }
        fields.update(overrides)
        return current_domain.process(AddAddress(customer_id=customer_id, **fields), asynchronous=False)

    return _add


@pytest.fixture()
def add_to_cart():
    def _add(product_id, quantity=1, customer_id="cust-001"):
        return current_domain.process(
            AddToCart(customer_id=customer_id, product_id=product_id, quantity=quantity),
            asynchronous=False,
        )

    return _add
