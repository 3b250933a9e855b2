# storefront/repos/order_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.product import ProductModel
from storefront.domain.enums import OrderStatus


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        #no commit: placement commits once for order + items + stock + cart
        self.db.add(order)
        self.db.flush()
        return order

    def add_order_item(self, order: OrderModel, item: OrderItemModel) -> OrderItemModel:
        order.items.append(item)
        return item

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_user_orders(self, user_id: int) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.items))
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars().all()
        )

    def list_orders(self) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.items))
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars().all()
        )

    def list_invoice_lines(self, order_id: int) -> list[tuple]:
        """(order_item, product) pairs in item order."""
        rows = self.db.execute(
            select(OrderItemModel, ProductModel)
            .join(ProductModel, OrderItemModel.product_id == ProductModel.id)
            .where(OrderItemModel.order_id == order_id)
            .order_by(OrderItemModel.id)
        ).all()
        return [tuple(row) for row in rows]

    def list_sales_between(self, start, end) -> list[OrderModel]:
        #cancelled orders and open cancellation requests are not sales
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.items))
                .where(
                    OrderModel.created_at >= start,
                    OrderModel.created_at < end,
                    OrderModel.is_cancelled.is_(False),
                    OrderModel.status != OrderStatus.CANCELLED.value,
                )
                .order_by(OrderModel.created_at, OrderModel.id)
            ).scalars().all()
        )

    def update_order_status(self, order_id: int, expected_status: str, new_data: dict) -> int:
        """Compare-and-set on status; 0 rows means the order moved on in the meantime."""
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == expected_status)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def refresh(self, order: OrderModel) -> OrderModel:
        self.db.refresh(order)
        return order

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
