import json
import logging
from datetime import datetime
from typing import Optional

import redis

from app.core.config import settings

logger = logging.getLogger(__name__)

redis_client = redis.Redis(
    host=settings.REDIS_HOST,
    port=int(settings.REDIS_PORT),
    db=0,
    decode_responses=True
)


class SecretMetaCache:
    """Redis cache for the public metadata of a secret.

    Only what the recipient's landing page needs is stored here, never the
    content. A Redis outage degrades to a cache miss.
    """

    def __init__(self, client: redis.Redis):
        self.client = client

    @staticmethod
    def _key(secret_id: str) -> str:
        return f"secret:{secret_id}"

    def set(self, secret_id: str, meta: dict, expires_at: Optional[datetime], now: datetime):
        if expires_at is not None:
            ttl_seconds = max(int((expires_at - now).total_seconds()), settings.MIN_CACHE_TIME_SECONDS)
        else:
            ttl_seconds = settings.DEFAULT_SECRET_TTL_SECONDS
        try:
            self.client.setex(self._key(secret_id), ttl_seconds, json.dumps(meta))
        except redis.RedisError as e:
            logger.warning("could not cache metadata for secret %s: %s", secret_id, e)

    def get(self, secret_id: str) -> Optional[dict]:
        try:
            data = self.client.get(self._key(secret_id))
        except redis.RedisError as e:
            logger.warning("could not read cached metadata for secret %s: %s", secret_id, e)
            return None
        if data:
            return json.loads(data)
        return None

    def delete(self, secret_id: str):
        try:
            self.client.delete(self._key(secret_id))
        except redis.RedisError as e:
            logger.warning("could not drop cached metadata for secret %s: %s", secret_id, e)


def get_meta_cache() -> Optional[SecretMetaCache]:
    if not settings.CACHE_ENABLED:
        return None
    return SecretMetaCache(redis_client)
