from __future__ import annotations

from typing import Any, Protocol


class SummaryPublisherPort(Protocol):
    def publish(self, *, channel: str, payload: dict[str, Any]) -> None:
        ...
