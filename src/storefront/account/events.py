"""Domain events for the Address aggregate."""

from protean.fields import Boolean, Identifier

from storefront.domain import storefront


@storefront.event(part_of="Address")
class AddressAdded:
    __version__ = 1

    address_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    is_default = Boolean(default=False)


@storefront.event(part_of="Address")
class AddressUpdated:
    __version__ = 1

    address_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    is_default = Boolean(default=False)
