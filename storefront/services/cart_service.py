# storefront/services/cart_service.py
from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.errors import (
    ConcurrencyConflictError,
    InvalidQuantityError,
    OutOfStockError,
    ProductNotFoundError,
    UserNotFoundError,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services import pricing
from storefront.utils.money import to_money
from storefront.utils.settings import SHIPPING_CHARGE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def cart_to_dict(cart: CartModel) -> Dict[str, Any]:
    return {
        "cart_id": cart.id,
        "user_id": cart.user_id,
        "items": [
            {
                "product_id": i.product_id,
                "name": i.name,
                "price": to_money(i.price),
                "quantity": i.quantity,
                "subtotal": to_money(i.subtotal),
            }
            for i in cart.items
        ],
        "shipping_charge": to_money(cart.shipping_charge),
        "total": to_money(cart.total),
        "applied_coupon": cart.applied_coupon,
        "discount_applied": to_money(cart.discount_applied),
        "final_total": to_money(cart.final_total),
        "version": cart.version,
    }


class CartService:
    """
    Cart aggregate use cases.
    Commands (add/update, remove) claim the cart version first, mutate the
    lines, then let CartModel.calculate_totals() rewrite the totals.
    Query (get) only reads, apart from creating a missing cart.
    """

    def __init__(self, db: Session, shipping_charge: Decimal = SHIPPING_CHARGE):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)
        self.shipping_charge = to_money(shipping_charge)

    def _get_or_create(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        if not self.users.get_user(user_id):
            raise UserNotFoundError(user_id)

        cart = CartModel(
            user_id=user_id,
            shipping_charge=self.shipping_charge,
            discount_applied=Decimal("0.00"),
            version=1,
        )
        cart.calculate_totals()
        created = self.repo.create_cart(cart)
        logger.info(f"Created cart {created.id} for user {user_id}")
        return created

    def _claim(self, cart: CartModel):
        #optimistic locking: UPDATE carts SET version = v + 1 WHERE id = :id AND version = v
        rowcount = self.repo.update_cart_version(cart.id, cart.version)
        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrencyConflictError(
                "Cart was modified by another request, please retry"
            )

    #query
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self._get_or_create(user_id)
        self.repo.commit()
        return cart_to_dict(cart)

    #commands
    def add_or_update_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidQuantityError(quantity)

        product = self.products.get_product(product_id)
        if not product or not product.is_active:
            raise ProductNotFoundError(product_id)

        if quantity > product.stock:
            logger.warning(f"Product {product_id}: requested {quantity}, in stock {product.stock}")
            raise OutOfStockError(product_id, product.stock)

        price = pricing.discounted_price(
            product.price,
            product.offer,
            product.category.offer if product.category else None,
        )

        try:
            cart = self._get_or_create(user_id)
            self._claim(cart)

            line = next((i for i in cart.items if i.product_id == product_id), None)
            if line:
                logger.info(
                    f"Product {product_id} already in cart {cart.id}, "
                    f"quantity {line.quantity} -> {quantity}"
                )
                line.set_quantity(quantity, price)
            else:
                line = CartItemModel(product_id=product.id, name=product.name)
                line.set_quantity(quantity, price)
                self.repo.add_cart_item(cart, line)

            cart.calculate_totals()
            self.repo.commit()
        except ConcurrencyConflictError:
            raise
        except Exception as e:
            logger.error(f"Failed to add product {product_id} for user {user_id}: {e}")
            self.repo.rollback()
            raise

        logger.info(f"Cart {cart.id}: product {product_id} x{quantity} at {price}")
        return cart_to_dict(cart)

    def remove_item(self, user_id: int, product_id: int) -> Dict[str, Any]:
        try:
            cart = self._get_or_create(user_id)
            self._claim(cart)

            #removing a line that is not there is a no-op
            removed = self.repo.delete_cart_item(cart, product_id)
            cart.calculate_totals()
            self.repo.commit()
        except ConcurrencyConflictError:
            raise
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Cart {cart.id}: removed product {product_id} ({removed} line(s))")
        return cart_to_dict(cart)
