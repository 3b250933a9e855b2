# storefront/services/payment_gateway.py
import requests
from requests import RequestException

from storefront.errors import GatewayError
from storefront.utils.retry import http_retry
from storefront.utils.settings import (
    RAZORPAY_BASE_URL,
    RAZORPAY_KEY_ID,
    RAZORPAY_SECRET,
    GATEWAY_TIMEOUT_SECONDS,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentGatewayClient:
    """Razorpay orders API. Opaque to the rest of the service: options in, order handle out."""

    def __init__(
        self,
        base_url: str | None = None,
        key_id: str | None = None,
        secret: str | None = None,
        timeout: int = GATEWAY_TIMEOUT_SECONDS,
    ):
        self.base_url = (base_url or RAZORPAY_BASE_URL).rstrip("/")
        self.key_id = key_id if key_id is not None else RAZORPAY_KEY_ID
        self.secret = secret if secret is not None else RAZORPAY_SECRET
        self.timeout = timeout

    @http_retry()
    def _post(self, path: str, payload: dict) -> dict:
        url = f"{self.base_url}{path}"
        logger.info(f"PaymentGatewayClient POST {url}")

        resp = requests.post(
            url,
            json=payload,
            auth=(self.key_id, self.secret),
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def create_order(self, options: dict) -> dict:
        try:
            handle = self._post("/orders", options)
        except (RequestException, ValueError) as e:
            logger.error(f"Gateway order creation failed: {e}")
            raise GatewayError("Failed to create payment gateway order", cause=e) from e

        if not handle or "id" not in handle:
            logger.error(f"Gateway returned no order handle: {handle!r}")
            raise GatewayError("Failed to create payment gateway order")

        return handle


def get_gateway_client() -> PaymentGatewayClient:
    return PaymentGatewayClient()
