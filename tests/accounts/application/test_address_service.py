"""AddressService default-address handling"""

import pytest

from storefront.api.v1.users.schemas import AddressCreate, AddressUpdate
from storefront.api.v1.users.services import AddressService
from storefront.core.exceptions import NotFoundException


def _address(**overrides):
    data = {
        "full_name": "Ada Lovelace",
        "address_line1": "12 Analytical Row",
        "city": "London",
        "state": "Greater London",
        "postal_code": "N1 9GU",
        "country": "United Kingdom",
        "phone_number": "+447700900000",
    }
    data.update(overrides)
    return AddressCreate(**data)


async def _defaults(service, user):
    return [a.id for a in await service.list_addresses(user.id) if a.is_default]


class TestAddressService:
    async def test_new_default_replaces_previous_default(self, seed, db):
        user = await seed.user()
        service = AddressService(db)

        first = await service.create_address(user.id, _address(is_default=True))
        second = await service.create_address(user.id, _address(is_default=True))

        assert await _defaults(service, user) == [second.id]
        assert first.is_default is False

    async def test_promoting_on_update_demotes_others(self, seed, db):
        user = await seed.user()
        service = AddressService(db)
        first = await service.create_address(user.id, _address(is_default=True))
        second = await service.create_address(user.id, _address())

        await service.update_address(user.id, second.id, AddressUpdate(is_default=True))

        assert await _defaults(service, user) == [second.id]
        assert (await service.get_address(user.id, first.id)).is_default is False

    async def test_defaults_are_per_user(self, seed, db):
        alice = await seed.user()
        bob = await seed.user()
        service = AddressService(db)

        alice_default = await service.create_address(alice.id, _address(is_default=True))
        await service.create_address(bob.id, _address(is_default=True))

        assert await _defaults(service, alice) == [alice_default.id]

    async def test_default_is_listed_first(self, seed, db):
        user = await seed.user()
        service = AddressService(db)
        await service.create_address(user.id, _address(city="Leeds"))
        default = await service.create_address(user.id, _address(city="York", is_default=True))

        addresses = await service.list_addresses(user.id)

        assert addresses[0].id == default.id

    async def test_other_users_address_is_not_found(self, seed, db):
        owner = await seed.user()
        intruder = await seed.user()
        address = await seed.address(owner)
        service = AddressService(db)

        with pytest.raises(NotFoundException):
            await service.get_address(intruder.id, address.id)
        with pytest.raises(NotFoundException):
            await service.delete_address(intruder.id, address.id)

    async def test_update_can_clear_second_line(self, seed, db):
        user = await seed.user()
        service = AddressService(db)
        address = await service.create_address(user.id, _address(address_line2="Flat 3"))

        updated = await service.update_address(user.id, address.id, AddressUpdate(address_line2=None))

        assert updated.address_line2 is None
        assert updated.city == "London"
