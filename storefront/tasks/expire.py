# storefront/tasks/expire.py
from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.repos.order_repo import OrderRepo
from storefront.utils.settings import UNPAID_ORDER_TTL_SECONDS
from storefront.utils.logging import get_logger
from datetime import datetime, timedelta, timezone

logger = get_logger(__name__)


@celery_app.task(name="storefront.tasks.expire.purge_unpaid_orders_task")
def purge_unpaid_orders_task(max_age_seconds: int = UNPAID_ORDER_TTL_SECONDS):
    """Drops checkouts that never got paid."""
    logger.info("Purge unpaid orders task started")

    db = SessionLocal()
    try:
        repo = OrderRepo(db)
        cutoff = datetime.now(timezone.utc) - timedelta(seconds=max_age_seconds)
        purged = repo.delete_unpaid_orders_before(cutoff)
        db.commit()
        logger.info(f"Purged {purged} unpaid orders created before {cutoff.isoformat()}")
        return purged
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
