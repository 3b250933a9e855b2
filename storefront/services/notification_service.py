# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Queues customer notifications on Celery.
    Delivery (mail/SMS) lives outside this service; the tasks only log.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, event: str = "placed"):
        send_order_notification_task.delay(user_id, order_id, event)

    @staticmethod
    def send_signup_otp(email: str, otp: str):
        send_signup_otp_task.delay(email, otp)


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, event: str = "placed"):
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} {event}")
    return {"user_id": user_id, "order_id": order_id, "event": event, "status": "sent"}


@celery_app.task(name="storefront.services.notification_service.send_signup_otp_task")
def send_signup_otp_task(email: str, otp: str):
    #the code itself never goes to the log
    logger.info(f"[NOTIFICATION] Signup OTP ({len(otp)} digits) issued for {email}")
    return {"email": email, "status": "sent"}
