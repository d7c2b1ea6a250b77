"""Address book management — commands and handler.

Every command carries the acting ``customer_id``; an address owned by
someone else is reported exactly like a missing one.
"""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.account.address import Address
from storefront.domain import storefront


@storefront.command(part_of="Address")
class AddAddress:
    customer_id = Identifier(required=True)
    full_name = String(required=True, max_length=255)
    phone = String(required=True, min_length=10, max_length=20)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
    is_default = Boolean(default=False)


@storefront.command(part_of="Address")
class UpdateAddress:
    """Partial update; fields left as ``None`` keep their value."""

    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    full_name = String(max_length=255)
    phone = String(min_length=10, max_length=20)
    street = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=100)
    is_default = Boolean()


@storefront.command(part_of="Address")
class RemoveAddress:
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)


@storefront.command_handler(part_of=Address)
class ManageAddressesHandler:
    def _unset_other_defaults(self, customer_id, keep_id):
        repo = current_domain.repository_for(Address)
        for other in repo.find_defaults(customer_id, exclude_id=keep_id):
            other.unset_default()
            repo.add(other)

    @handle(AddAddress)
    def add_address(self, command):
        repo = current_domain.repository_for(Address)
        first_address = not repo.find_for_customer(command.customer_id)

        address = Address.create(
            customer_id=command.customer_id,
            is_default=bool(command.is_default) or first_address,
            full_name=command.full_name,
            phone=command.phone,
            street=command.street,
            city=command.city,
            state=command.state,
            postal_code=command.postal_code,
            country=command.country,
        )
        if address.is_default:
            self._unset_other_defaults(command.customer_id, keep_id=address.id)
        repo.add(address)
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        repo = current_domain.repository_for(Address)
        address = repo.find_owned(command.address_id, command.customer_id)

        updates = {}
        for field in ("full_name", "phone", "street", "city", "state", "postal_code", "country", "is_default"):
            value = getattr(command, field, None)
            if value is not None:
                updates[field] = value

        if updates.get("is_default"):
            self._unset_other_defaults(command.customer_id, keep_id=address.id)
        address.update(**updates)
        repo.add(address)

    @handle(RemoveAddress)
    def remove_address(self, command):
        repo = current_domain.repository_for(Address)
        address = repo.find_owned(command.address_id, command.customer_id)
        repo.remove(address)
