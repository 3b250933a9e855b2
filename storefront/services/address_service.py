# storefront/services/address_service.py
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.domain.schemas import AddressIn
from storefront.errors import AddressNotFoundError, UnauthorizedError, UserNotFoundError
from storefront.repos.address_repo import AddressRepo
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ADDRESS_FIELDS = ("custom_name", "address_type", "location", "city", "state", "country", "landmark", "zip")


class AddressService:
    """
    Customer address book. A user with at least one address always has
    exactly one default: the first address becomes it, and deleting the
    default promotes the oldest remaining one.
    """

    def __init__(self, db: Session):
        self.repo = AddressRepo(db)
        self.users = UserRepo(db)

    def list_addresses(self, user_id: int) -> list[AddressModel]:
        return self.repo.list_user_addresses(user_id)

    def get_address(self, address_id: int, user_id: int) -> AddressModel:
        address = self.repo.get_address(address_id)
        if not address:
            raise AddressNotFoundError(address_id)
        if address.user_id != user_id:
            raise UnauthorizedError("Address belongs to another user")
        return address

    def create_address(self, user_id: int, payload: AddressIn) -> AddressModel:
        if not self.users.get_user(user_id):
            raise UserNotFoundError(user_id)

        is_first = not self.repo.list_user_addresses(user_id)
        try:
            address = self.repo.add_address(
                AddressModel(
                    user_id=user_id,
                    is_default=is_first or payload.is_default,
                    **payload.model_dump(include=set(ADDRESS_FIELDS)),
                )
            )
            if address.is_default:
                self.repo.clear_default(user_id, keep_id=address.id)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Address {address.id} added for user {user_id}")
        return self.repo.refresh(address)

    def update_address(self, address_id: int, user_id: int, payload: AddressIn) -> AddressModel:
        address = self.get_address(address_id, user_id)
        for name, value in payload.model_dump(include=set(ADDRESS_FIELDS)).items():
            setattr(address, name, value)
        self.repo.commit()

        if payload.is_default and not address.is_default:
            return self.set_default(address_id, user_id)
        return self.repo.refresh(address)

    def set_default(self, address_id: int, user_id: int) -> AddressModel:
        address = self.get_address(address_id, user_id)
        try:
            self.repo.clear_default(user_id, keep_id=address.id)
            address.is_default = True
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Address {address_id} is now the default of user {user_id}")
        return self.repo.refresh(address)

    def delete_address(self, address_id: int, user_id: int) -> None:
        address = self.get_address(address_id, user_id)
        was_default = address.is_default
        try:
            self.repo.delete_address(address)
            if was_default:
                remaining = self.repo.list_user_addresses(user_id)
                if remaining:
                    oldest = min(remaining, key=lambda a: a.id)
                    oldest.is_default = True
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Address {address_id} of user {user_id} deleted")

    def shipping_details(self, address_id: int, user_id: int, mobile: str) -> dict:
        """Shipping fields for order placement, filled from a saved address and the account name."""
        address = self.get_address(address_id, user_id)
        user = self.users.get_user(user_id)
        return {
            "name": user.name,
            "mobile": mobile,
            "alternate_mobile": None,
            "location": address.location,
            "city": address.city,
            "state": address.state,
            "landmark": address.landmark,
            "zip": address.zip,
        }
