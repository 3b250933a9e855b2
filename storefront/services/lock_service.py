import redis
from storefront.utils.settings import REDIS_URL, CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.retry import redis_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#compare-and-delete in one Lua script: nobody can slip in between GET and DEL
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    Per-entity mutual exclusion in Redis.
    - SET NX EX to take a lock, owner token as value
    - Lua compare-and-delete to release only our own lock
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def acquire(self, key: str, owner: str, ttl: int) -> bool:
        logger.info(f"Acquire lock {key} for {owner}")
        #SET checkout:1:lock "<owner>" NX EX 30
        return bool(self.redis.set(name=key, value=owner, nx=True, ex=ttl))

    @redis_retry()
    def release(self, key: str, owner: str) -> bool:
        logger.info(f"Release lock {key} for {owner}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, owner)
        return bool(res)

    def acquire_checkout_lock(self, user_id: int, owner: str, ttl: int = CHECKOUT_LOCK_TTL_SECONDS) -> bool:
        return self.acquire(f"checkout:{user_id}:lock", owner, ttl)

    def release_checkout_lock(self, user_id: int, owner: str) -> bool:
        return self.release(f"checkout:{user_id}:lock", owner)


def get_lock_service() -> LockService:
    return LockService()
