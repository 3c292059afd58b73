import pytest
from redis.exceptions import ConnectionError as RedisConnectionError


class FakeRedis:
    """In-memory stand-in for the redis.asyncio client surface we use."""

    def __init__(self):
        self.data = {}
        self.ttl = {}
        self.down = False

    def _check(self):
        if self.down:
            raise RedisConnectionError("redis down")

    async def get(self, key):
        self._check()
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self._check()
        self.data[key] = value
        self.ttl[key] = ex

    async def delete(self, *keys):
        self._check()
        return sum(1 for k in keys if self.data.pop(k, None) is not None)

    async def ping(self):
        self._check()
        return True


@pytest.fixture
def fake_redis():
    return FakeRedis()
