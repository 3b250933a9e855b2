# storefront/repos/cart_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .options(selectinload(CartModel.items))
            .where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def add_cart_item(self, cart: CartModel, item: CartItemModel) -> CartItemModel:
        cart.items.append(item)
        return item

    def delete_cart_item(self, cart: CartModel, product_id: int) -> int:
        lines = [i for i in cart.items if i.product_id == product_id]
        for line in lines:
            cart.items.remove(line)
        return len(lines)

    def update_cart_version(
        self,
        cart_id: int,
        old_version: int,
        new_data: dict | None = None,
        require_no_coupon: bool = False,
    ) -> int:
        """
        Optimistic locking: UPDATE carts SET version = old + 1 ... WHERE id = :id AND version = :old.
        Returns rowcount, 0 means someone else changed the cart first.
        """
        values = {"version": old_version + 1}
        values.update(new_data or {})

        stmt = update(CartModel).where(
            CartModel.id == cart_id,
            CartModel.version == old_version,
        )
        if require_no_coupon:
            stmt = stmt.where(CartModel.applied_coupon.is_(None))

        result = self.db.execute(
            stmt.values(**values).execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_cart(self, cart: CartModel) -> None:
        #items go with it (delete-orphan)
        self.db.delete(cart)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
