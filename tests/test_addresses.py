"""Tests for the customer address book."""

import pytest

from storefront.domain.schemas import AddressIn
from storefront.errors import AddressNotFoundError, UnauthorizedError, UserNotFoundError
from storefront.services.address_service import AddressService


def address_in(**kw):
    data = {"location": "MG Road", "city": "Kochi", "state": "Kerala", "zip": "682001"}
    data.update(kw)
    return AddressIn(**data)


class TestCreateAddress:
    def test_first_address_is_default(self, db, factory):
        user = factory.user()

        address = AddressService(db).create_address(user.id, address_in())

        assert address.is_default is True
        assert address.address_type == "Home"
        assert address.country == "India"

    def test_second_address_keeps_first_default(self, db, factory):
        user = factory.user()
        svc = AddressService(db)
        first = svc.create_address(user.id, address_in())

        second = svc.create_address(user.id, address_in(city="Chennai", state="Tamil Nadu"))

        assert second.is_default is False
        db.refresh(first)
        assert first.is_default is True

    def test_new_default_replaces_old(self, db, factory):
        user = factory.user()
        svc = AddressService(db)
        first = svc.create_address(user.id, address_in())

        second = svc.create_address(user.id, address_in(city="Chennai", is_default=True))

        db.refresh(first)
        assert second.is_default is True
        assert first.is_default is False

    def test_default_is_per_user(self, db, factory):
        asha = factory.user()
        ravi = factory.user(name="Ravi")
        svc = AddressService(db)
        ravis = svc.create_address(ravi.id, address_in())

        svc.create_address(asha.id, address_in(is_default=True))

        db.refresh(ravis)
        assert ravis.is_default is True

    def test_unknown_user(self, db):
        with pytest.raises(UserNotFoundError):
            AddressService(db).create_address(404, address_in())


class TestAddressBook:
    def test_list_puts_default_first(self, db, factory):
        user = factory.user()
        factory.address(user, city="Kochi")
        default = factory.address(user, city="Chennai", is_default=True)

        listed = AddressService(db).list_addresses(user.id)

        assert [a.id for a in listed][0] == default.id
        assert len(listed) == 2

    def test_update_fields(self, db, factory):
        user = factory.user()
        address = factory.address(user, is_default=True)

        updated = AddressService(db).update_address(
            address.id, user.id, address_in(city="Thrissur", custom_name="Parents")
        )

        assert updated.city == "Thrissur"
        assert updated.custom_name == "Parents"
        assert updated.is_default is True

    def test_set_default(self, db, factory):
        user = factory.user()
        first = factory.address(user, is_default=True)
        second = factory.address(user, city="Chennai")

        AddressService(db).set_default(second.id, user.id)

        db.refresh(first)
        db.refresh(second)
        assert second.is_default is True
        assert first.is_default is False

    def test_delete_default_promotes_oldest(self, db, factory):
        user = factory.user()
        first = factory.address(user, is_default=True)
        second = factory.address(user, city="Chennai")
        third = factory.address(user, city="Madurai")

        AddressService(db).delete_address(first.id, user.id)

        remaining = AddressService(db).list_addresses(user.id)
        assert [a.id for a in remaining] == [second.id, third.id]
        assert remaining[0].is_default is True
        assert remaining[1].is_default is False

    def test_other_users_address(self, db, factory):
        address = factory.address(factory.user())
        intruder = factory.user(name="Other")

        with pytest.raises(UnauthorizedError):
            AddressService(db).get_address(address.id, intruder.id)
        with pytest.raises(UnauthorizedError):
            AddressService(db).delete_address(address.id, intruder.id)

    def test_unknown_address(self, db, factory):
        with pytest.raises(AddressNotFoundError):
            AddressService(db).get_address(999, factory.user().id)

    def test_shipping_details_from_address(self, db, factory):
        user = factory.user(name="Asha")
        address = factory.address(user, landmark="Near the park")

        shipping = AddressService(db).shipping_details(address.id, user.id, "9876543210")

        assert shipping == {
            "name": "Asha",
            "mobile": "9876543210",
            "alternate_mobile": None,
            "location": "MG Road",
            "city": "Kochi",
            "state": "Kerala",
            "landmark": "Near the park",
            "zip": "682001",
        }
