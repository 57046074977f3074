from __future__ import annotations

import logging
import threading
from collections.abc import Callable

import redis

logger = logging.getLogger(__name__)

POLL_TIMEOUT_SECONDS = 1.0
RECONNECT_DELAY_SECONDS = 2.0


class TokenDirtyListener:
    """Background subscriber that hands every dirty-token message to ``handler``."""

    def __init__(
        self,
        *,
        client: redis.Redis,
        channel: str,
        handler: Callable[[str], object],
    ):
        self._client = client
        self._channel = channel
        self._handler = handler
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="token-dirty-listener", daemon=True)
        self._thread.start()
        logger.info("token_dirty_listener: started channel=%s", self._channel)

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("token_dirty_listener: stopped channel=%s", self._channel)

    def _run(self) -> None:
        while not self._stop.is_set():
            pubsub = self._client.pubsub(ignore_subscribe_messages=True)
            try:
                pubsub.subscribe(self._channel)
                self._poll(pubsub)
            except redis.RedisError as exc:
                logger.warning("token_dirty_listener: connection lost channel=%s error=%s", self._channel, exc)
                self._stop.wait(RECONNECT_DELAY_SECONDS)
            finally:
                pubsub.close()

    def _poll(self, pubsub) -> None:
        while not self._stop.is_set():
            message = pubsub.get_message(timeout=POLL_TIMEOUT_SECONDS)
            if message is None or message.get("type") != "message":
                continue
            try:
                self._handler(message["data"])
            except Exception:
                logger.exception("token_dirty_listener: handler failed channel=%s", self._channel)
