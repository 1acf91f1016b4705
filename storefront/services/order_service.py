# storefront/services/order_service.py
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import NotFound
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.pricing import PricingEngine
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Orders: checkout (cart -> order) plus order queries and the
    payment-confirmation hook.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        notification_service: NotificationService | None = None,
    ):
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.pricing = PricingEngine(db)
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    def checkout(self, user_id: str, email: str | None) -> Dict[str, Any]:
        """
        Convert the user's cart into an unpaid order.

        1. cart must exist (checkout never creates one)
        2. any earlier unpaid orders of this user are dropped
        3. the order snapshots the cart totals
        4. the cart is deleted

        All of it is one transaction under the user's cart lock.
        """
        with self.lock_service.cart_lock(user_id):
            try:
                cart = self.carts.get_cart_by_user(user_id)
                if not cart:
                    raise NotFound("Cart not found")

                #an empty cart still converts, into a zero-total order
                _, cart = self.pricing.recompute(cart)

                purged = self.repo.delete_unpaid_orders(user_id)
                if purged:
                    logger.info(f"Dropped {purged} unpaid order(s) of user {user_id}")

                order = self.repo.create_order(
                    OrderModel(
                        user_id=user_id,
                        num_items=cart.num_items,
                        cart_total=cart.cart_total,
                        tax=cart.tax,
                        shipping=cart.shipping if cart.cart_total > 0 else Decimal("0.00"),
                        order_total=cart.order_total,
                        email=email,
                        is_paid=False,
                    )
                )

                cart_id = cart.id
                self.carts.delete_cart(cart)
                self.repo.commit()

            except Exception as e:
                logger.error(f"Checkout for user {user_id} failed: {e}")
                self.repo.rollback()
                raise

        logger.info(f"Order {order.id} created from cart {cart_id}, total {order.order_total}")

        try:
            self.notification_service.send_order_placed(user_id, order.id, email)
        except Exception as e:
            #the order is committed, a lost notification is not worth failing the request
            logger.warning(f"Could not enqueue notification for order {order.id}: {e}")

        return {
            "order_id": order.id,
            "cart_id": cart_id,
            "redirect_url": f"/checkout?orderId={order.id}&cartId={cart_id}",
        }

    def get_order(self, order_id: int, user_id: str) -> OrderModel:
        order = self.repo.get_user_order(order_id, user_id)
        if not order:
            raise NotFound("Order not found")
        return order

    def fetch_user_orders(self, user_id: str) -> list[OrderModel]:
        return self.repo.list_paid_orders(user_id)

    def fetch_admin_orders(self) -> list[OrderModel]:
        return self.repo.list_paid_orders()

    def confirm_payment(self, order_id: int) -> OrderModel:
        """Called by the payment step once the charge went through."""
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound("Order not found")

        if not order.is_paid:
            order.is_paid = True
            self.repo.commit()
            logger.info(f"Order {order.id} marked as paid")

        return order
