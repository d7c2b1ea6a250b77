"""Repository for the Address aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.account.address import Address
from storefront.domain import storefront
from storefront.errors import NotFoundOrForbidden


@storefront.repository(part_of=Address)
class AddressRepository:
    def find_for_customer(self, customer_id) -> list[Address]:
        """The customer's addresses, default first, then oldest first."""
        addresses = self._dao.query.filter(customer_id=str(customer_id)).order_by("created_at").all().items
        return sorted(addresses, key=lambda address: not address.is_default)

    def find_owned(self, address_id, customer_id) -> Address:
        """Load an address only if ``customer_id`` owns it."""
        try:
            address = self.get(address_id)
        except ObjectNotFoundError as exc:
            raise NotFoundOrForbidden("Address not found") from exc

        if not address.is_owned_by(customer_id):
            raise NotFoundOrForbidden("Address not found")
        return address

    def find_defaults(self, customer_id, exclude_id=None) -> list[Address]:
        defaults = self._dao.query.filter(customer_id=str(customer_id), is_default=True).all().items
        return [address for address in defaults if str(address.id) != str(exclude_id)]

    def remove(self, address: Address):
        self._dao.delete(address)
