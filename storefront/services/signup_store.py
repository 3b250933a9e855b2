# storefront/services/signup_store.py
import redis

from storefront.domain.signup import SignupSession
from storefront.utils.settings import REDIS_URL
from storefront.utils.retry import redis_retry


class SignupSessionStore:
    """Pending signups in Redis under signup:{token}; Redis TTL mirrors expires_at."""

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(url or REDIS_URL, decode_responses=True)

    @staticmethod
    def _key(token: str) -> str:
        return f"signup:{token}"

    @redis_retry()
    def save(self, session: SignupSession, ttl: int) -> None:
        self.redis.set(self._key(session.token), session.model_dump_json(), ex=ttl)

    @redis_retry()
    def get(self, token: str) -> SignupSession | None:
        raw = self.redis.get(self._key(token))
        return SignupSession.model_validate_json(raw) if raw else None

    @redis_retry()
    def delete(self, token: str) -> None:
        self.redis.delete(self._key(token))


def get_signup_store() -> SignupSessionStore:
    return SignupSessionStore()
