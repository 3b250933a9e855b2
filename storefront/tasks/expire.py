# storefront/tasks/expire.py
from datetime import datetime, timezone

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.repos.offer_repo import OfferRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def expire_offers(db, now: datetime | None = None) -> int:
    """Flip active offers whose validity window has closed to 'expired'."""
    now = now or datetime.now(timezone.utc)
    repo = OfferRepo(db)
    try:
        count = repo.expire_offers(now)
        repo.commit()
    except Exception:
        repo.rollback()
        raise
    logger.info(f"Expired {count} offer(s)")
    return count


@celery_app.task(name="storefront.tasks.expire.expire_offers_task")
def expire_offers_task():
    logger.info("Expire offers task started")

    db = SessionLocal()
    try:
        return expire_offers(db)
    finally:
        db.close()
