"""Tests for Celery tasks: offer expiry and notifications."""

from datetime import datetime, timedelta, timezone

from storefront.services.notification_service import (
    NotificationService,
    send_order_notification_task,
    send_signup_otp_task,
)
from storefront.tasks.expire import expire_offers


class TestExpireOffers:
    def test_only_past_offers_expire(self, db, factory):
        phones = factory.category()
        now = datetime.now(timezone.utc)
        stale = factory.offer(phones, valid_from=now - timedelta(days=10), valid_until=now - timedelta(days=1))
        current = factory.offer(factory.category(name="Laptops"))

        assert expire_offers(db, now) == 1

        db.refresh(stale)
        db.refresh(current)
        assert stale.status == "expired"
        assert current.status == "active"

    def test_nothing_to_expire(self, db, factory):
        factory.offer(factory.category())
        assert expire_offers(db) == 0


class TestNotifications:
    def test_order_notification_runs_eagerly(self):
        result = send_order_notification_task.delay(1, 42, "placed")
        assert result.get() == {"user_id": 1, "order_id": 42, "event": "placed", "status": "sent"}

    def test_otp_not_logged(self, caplog):
        with caplog.at_level("INFO", logger="storefront"):
            result = send_signup_otp_task.delay("asha@example.com", "482913")

        assert result.get()["status"] == "sent"
        assert "482913" not in caplog.text

    def test_service_queues_task(self, caplog):
        with caplog.at_level("INFO", logger="storefront"):
            NotificationService.send_order_notification(7, 9, "cancelled")
        assert "order 9 cancelled" in caplog.text
