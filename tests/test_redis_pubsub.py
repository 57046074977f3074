from __future__ import annotations

import json
import threading
import time

import redis

from zigdex.infrastructure.pubsub.redis_publisher import RedisSummaryPublisher
from zigdex.infrastructure.pubsub.token_dirty_listener import TokenDirtyListener


class FakePubSub:
    def __init__(self, messages: list[dict]):
        self.messages = list(messages)
        self.subscribed: list[str] = []
        self.closed = False

    def subscribe(self, channel: str) -> None:
        self.subscribed.append(channel)

    def get_message(self, timeout: float):
        if self.messages:
            return self.messages.pop(0)
        time.sleep(0.01)
        return None

    def close(self) -> None:
        self.closed = True


class FakeRedis:
    def __init__(self, messages: list[dict] | None = None, fail_publish: bool = False):
        self.published: list[tuple[str, str]] = []
        self.fail_publish = fail_publish
        self.pubsubs: list[FakePubSub] = []
        self._messages = messages or []

    def publish(self, channel: str, message: str) -> int:
        if self.fail_publish:
            raise redis.ConnectionError("down")
        self.published.append((channel, message))
        return 1

    def pubsub(self, ignore_subscribe_messages: bool = False) -> FakePubSub:
        pubsub = FakePubSub(self._messages)
        self._messages = []
        self.pubsubs.append(pubsub)
        return pubsub


def test_publisher_writes_compact_json():
    client = FakeRedis()

    RedisSummaryPublisher(client).publish(channel="rt:token:summary", payload={"type": "token_summary", "token_id": 7})

    channel, message = client.published[0]
    assert channel == "rt:token:summary"
    assert message == '{"type":"token_summary","token_id":7}'
    assert json.loads(message)["token_id"] == 7


def test_publisher_logs_instead_of_raising(caplog):
    client = FakeRedis(fail_publish=True)

    RedisSummaryPublisher(client).publish(channel="rt:token:summary", payload={"token_id": 7})

    assert "publish failed" in caplog.text


def test_listener_forwards_messages_and_survives_handler_errors():
    client = FakeRedis(
        messages=[
            {"type": "subscribe", "data": 1},
            {"type": "message", "data": "boom"},
            {"type": "message", "data": '{"token_id": 5}'},
        ]
    )
    received: list[str] = []
    done = threading.Event()

    def handler(data: str) -> None:
        if data == "boom":
            raise RuntimeError("bad payload")
        received.append(data)
        done.set()

    listener = TokenDirtyListener(client=client, channel="rt:token:dirty", handler=handler)
    listener.start()
    try:
        assert done.wait(timeout=5)
    finally:
        listener.stop()

    assert received == ['{"token_id": 5}']
    assert client.pubsubs[0].subscribed == ["rt:token:dirty"]
    assert client.pubsubs[0].closed is True
    assert listener.running is False
