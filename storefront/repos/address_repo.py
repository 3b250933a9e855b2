# storefront/repos/address_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel


class AddressRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_address(self, address_id: int) -> AddressModel | None:
        return self.db.get(AddressModel, address_id)

    def list_user_addresses(self, user_id: int) -> list[AddressModel]:
        return list(
            self.db.execute(
                select(AddressModel)
                .where(AddressModel.user_id == user_id)
                .order_by(AddressModel.is_default.desc(), AddressModel.id)
            ).scalars().all()
        )

    def add_address(self, address: AddressModel) -> AddressModel:
        self.db.add(address)
        self.db.flush()
        return address

    def clear_default(self, user_id: int, keep_id: int | None = None) -> int:
        """Unset is_default on every address of the user except keep_id."""
        stmt = update(AddressModel).where(
            AddressModel.user_id == user_id,
            AddressModel.is_default.is_(True),
        )
        if keep_id is not None:
            stmt = stmt.where(AddressModel.id != keep_id)
        result = self.db.execute(
            stmt.values(is_default=False).execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def delete_address(self, address: AddressModel):
        self.db.delete(address)
        self.db.flush()

    def refresh(self, address: AddressModel) -> AddressModel:
        self.db.refresh(address)
        return address

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
