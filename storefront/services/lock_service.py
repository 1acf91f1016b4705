import uuid
from contextlib import contextmanager

import redis

from storefront.domain.errors import Conflict, UpstreamFailure
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CART_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#compare-and-delete in Lua, redis runs the script atomically
#so nobody can slip in between GET and DEL
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    Per-user cart lock.

    Serializes cart mutations and checkout for one user so that
    lookup-or-create cannot produce two carts and two tabs cannot
    interleave a read-modify-write on the same cart.
    """

    def __init__(self, url: str | None = None, ttl: int = CART_LOCK_TTL_SECONDS):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def _key(user_id: str) -> str:
        return f"cart:user:{user_id}:lock"

    @redis_retry()
    def acquire_cart_lock(self, user_id: str, token: str) -> bool:
        key = self._key(user_id)
        logger.info(f"Acquire lock {key}")
        #SET cart:user:abc:lock "<token>" NX EX 30
        return bool(
            self.redis.set(
                name=key,
                value=token,
                nx=True,
                ex=self.ttl,
            )
        )

    @redis_retry()
    def release_cart_lock(self, user_id: str, token: str) -> bool:
        key = self._key(user_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def cart_lock(self, user_id: str):
        token = uuid.uuid4().hex
        try:
            acquired = self.acquire_cart_lock(user_id, token)
        except redis.RedisError as e:
            logger.error(f"Lock backend unavailable: {e}")
            raise UpstreamFailure("Lock service unavailable") from e

        if not acquired:
            raise Conflict("Another cart operation is in progress")
        try:
            yield
        finally:
            try:
                self.release_cart_lock(user_id, token)
            except redis.RedisError as e:
                #the TTL frees it anyway
                logger.warning(f"Failed to release cart lock for user {user_id}: {e}")
