# storefront/utils/retry.py
import logging

import redis
import requests
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from storefront.utils.logging import get_logger

logger = get_logger("storefront.retry")


def _backoff(exc_type, base: float, cap: float, attempts: int = 3):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=base, min=base, max=cap),
        retry=retry_if_exception_type(exc_type),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )


#idempotent reads only, uploads and deletes are never retried
def http_retry():
    return _backoff(requests.RequestException, base=0.3, cap=3)


def redis_retry():
    return _backoff(redis.RedisError, base=0.2, cap=2)
