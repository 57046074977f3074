from __future__ import annotations

import json
import logging
from typing import Any

import redis

from zigdex.application.ports.summary_publisher_port import SummaryPublisherPort

logger = logging.getLogger(__name__)


class RedisSummaryPublisher(SummaryPublisherPort):
    def __init__(self, client: redis.Redis):
        self._client = client

    def publish(self, *, channel: str, payload: dict[str, Any]) -> None:
        message = json.dumps(payload, default=str, separators=(",", ":"))
        try:
            self._client.publish(channel, message)
        except redis.RedisError as exc:
            logger.warning("redis_publisher: publish failed channel=%s error=%s", channel, exc)
