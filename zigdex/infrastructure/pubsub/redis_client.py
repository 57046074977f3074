from __future__ import annotations

from functools import lru_cache

import redis


@lru_cache(maxsize=2)
def get_redis_client(url: str) -> redis.Redis:
    return redis.Redis.from_url(url, decode_responses=True)
