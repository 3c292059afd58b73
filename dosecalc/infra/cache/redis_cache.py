# dosecalc/infra/cache/redis_cache.py
import os
import json
from typing import Any, Optional
import redis.asyncio as aioredis

from dosecalc.domain.ports import CachePort

DEFAULT_TTL = int(os.getenv("LANG_PREF_TTL_SECONDS", str(365 * 24 * 3600)))  # 1 year


class RedisCache(CachePort):
    """
    Small JSON-over-Redis store.

        get_json/set_json  -> JSON-encoded values with TTL
        delete, ping       -> housekeeping / readiness
        from_env()         -> construct from REDIS_URL

    Any client with the redis.asyncio surface (get/set/delete/ping) can be
    injected, which is how the tests run without a server.
    """
    def __init__(self, client: Optional[aioredis.Redis] = None):
        self.r = client or aioredis.from_url(
            os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            encoding="utf-8",
            decode_responses=True,
        )

    @classmethod
    def from_env(cls):
        url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
        return cls(aioredis.from_url(url, encoding="utf-8", decode_responses=True))

    async def get_json(self, key: str) -> Optional[Any]:
        raw = await self.r.get(key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            # tolerate stray plaintext values
            return raw

    async def set_json(self, key: str, value: Any, ttl: Optional[int] = None):
        await self.r.set(key, json.dumps(value, ensure_ascii=False, default=str), ex=ttl or DEFAULT_TTL)

    async def delete(self, *keys: str) -> int:
        return await self.r.delete(*keys)

    async def ping(self) -> bool:
        return bool(await self.r.ping())
