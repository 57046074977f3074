from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.dto.token_summary import GetTokenSummaryInput, TokenSummaryOutput
from zigdex.application.ports.summary_publisher_port import SummaryPublisherPort
from zigdex.application.use_cases.get_token_summary import GetTokenSummaryUseCase
from zigdex.application.use_cases.summary_common import utcnow
from zigdex.domain.services.rate_limiter import MinIntervalGate

logger = logging.getLogger(__name__)

SUMMARY_MESSAGE_TYPE = "token_summary"


def parse_dirty_message(raw: str | bytes) -> str | None:
    """Token identifier from a ``{"token_id": ...}`` dirty notification, or ``None`` when malformed.

    Any scalar id, denom or symbol is passed on as text; the summary lookup resolves it.
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(payload, dict):
        return None
    token_id = payload.get("token_id")
    if token_id is None or isinstance(token_id, (bool, dict, list)):
        return None
    identifier = str(token_id).strip()
    return identifier or None


class PublishTokenSummaryUseCase:
    """Rebuilds and publishes a token summary when the token is marked dirty."""

    def __init__(
        self,
        *,
        summary_use_case: GetTokenSummaryUseCase,
        publisher: SummaryPublisherPort,
        gate: MinIntervalGate,
        serializer: Callable[[TokenSummaryOutput], dict[str, Any]],
        channel: str,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._summary_use_case = summary_use_case
        self._publisher = publisher
        self._gate = gate
        self._serializer = serializer
        self._channel = channel
        self._clock = clock

    def handle_message(self, raw: str | bytes) -> bool:
        token_id = parse_dirty_message(raw)
        if token_id is None:
            logger.warning("token_summary_publisher: malformed dirty message payload=%r", raw)
            return False
        return self.execute(token_id)

    def execute(self, token_id: str) -> bool:
        if not self._gate.try_acquire(token_id):
            logger.debug("token_summary_publisher: throttled token_id=%s", token_id)
            return False

        summary = self._summary_use_case.execute(GetTokenSummaryInput(identifier=token_id))
        if isinstance(summary, NotFoundOutput):
            logger.warning("token_summary_publisher: token not found token_id=%s", token_id)
            return False

        self._publisher.publish(
            channel=self._channel,
            payload={
                "type": SUMMARY_MESSAGE_TYPE,
                "ts": self._clock().isoformat(timespec="milliseconds").replace("+00:00", "Z"),
                "token_id": token_id,
                "data": self._serializer(summary),
            },
        )
        logger.info("token_summary_publisher: published token_id=%s channel=%s", token_id, self._channel)
        return True
