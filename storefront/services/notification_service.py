# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order notifications.
    The actual sending runs in a celery worker.
    """

    @staticmethod
    def send_order_placed(user_id: str, order_id: int, email: str | None):
        send_order_placed_task.delay(user_id, order_id, email)


@celery_app.task(name="storefront.services.notification_service.send_order_placed_task")
def send_order_placed_task(user_id: str, order_id: int, email: str | None):
    """
    Tells the customer their order is waiting for payment.
    Only logged for now, there is no mail transport configured.
    """
    logger.info(f"[NOTIFICATION] User {user_id} <{email}>: order {order_id} awaiting payment")

    return {"user_id": user_id, "order_id": order_id, "email": email, "status": "sent"}
