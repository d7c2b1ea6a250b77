"""Address aggregate — a customer's saved delivery addresses.

A customer has at most one default address. The handlers in
``storefront.account.addresses`` keep that true by clearing the flag on the
customer's other addresses whenever one is made default.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Identifier, String

from storefront.account.events import AddressAdded, AddressUpdated
from storefront.domain import storefront

EDITABLE_FIELDS = ("full_name", "phone", "street", "city", "state", "postal_code", "country")


@storefront.aggregate
class Address:
    customer_id = Identifier(required=True)
    full_name = String(required=True, max_length=255)
    phone = String(required=True, min_length=10, max_length=20)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
    is_default = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id, is_default=False, **fields):
        now = datetime.now(UTC)
        address = cls(customer_id=customer_id, is_default=is_default, created_at=now, updated_at=now, **fields)
        address.raise_(
            AddressAdded(
                address_id=str(address.id),
                customer_id=str(customer_id),
                is_default=is_default,
            )
        )
        return address

    def is_owned_by(self, customer_id) -> bool:
        return str(self.customer_id) == str(customer_id)

    def update(self, **changes):
        """Apply a partial update. Keys not in ``EDITABLE_FIELDS`` are ignored."""
        for field in EDITABLE_FIELDS:
            if changes.get(field) is not None:
                setattr(self, field, changes[field])
        if changes.get("is_default") is not None:
            self.is_default = changes["is_default"]

        self.updated_at = datetime.now(UTC)
        self.raise_(
            AddressUpdated(
                address_id=str(self.id),
                customer_id=str(self.customer_id),
                is_default=self.is_default,
            )
        )

    def unset_default(self):
        self.is_default = False
        self.updated_at = datetime.now(UTC)
