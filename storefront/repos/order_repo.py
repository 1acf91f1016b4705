# storefront/repos/order_repo.py
from datetime import datetime

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_user_order(self, order_id: int, user_id: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(OrderModel.id == order_id, OrderModel.user_id == user_id)
        ).scalar_one_or_none()

    def delete_unpaid_orders(self, user_id: str) -> int:
        result = self.db.execute(
            delete(OrderModel)
            .where(OrderModel.user_id == user_id, OrderModel.is_paid.is_(False))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_unpaid_orders_before(self, cutoff: datetime) -> int:
        result = self.db.execute(
            delete(OrderModel)
            .where(OrderModel.is_paid.is_(False), OrderModel.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def list_paid_orders(self, user_id: str | None = None) -> list[OrderModel]:
        stmt = select(OrderModel).where(OrderModel.is_paid.is_(True))
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
