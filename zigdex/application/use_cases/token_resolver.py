from __future__ import annotations

import logging

from zigdex.application.ports.pool_port import PoolPort
from zigdex.application.ports.token_port import TokenPort
from zigdex.domain.entities.token import Token
from zigdex.domain.services.token_identity import is_native_currency, pick_token

logger = logging.getLogger(__name__)

SIDES = ("base", "quote")


class TokenResolver:
    def __init__(self, *, token_port: TokenPort, pool_port: PoolPort):
        self._token_port = token_port
        self._pool_port = pool_port

    def resolve(self, identifier: str | None) -> Token | None:
        if identifier is None or not identifier.strip():
            return None
        candidates = self._token_port.find_token_candidates(identifier=identifier.strip())
        return pick_token(candidates, identifier)

    def dominant_side(self, token: Token, requested: str | None) -> str:
        """Requested side wins; ``auto`` prefers base-vs-native pools, then any quote-side pool."""
        if is_native_currency(token):
            return "base"
        want = (requested or "base").lower()
        if want in SIDES:
            return want
        if self._pool_port.has_native_quoted_pool(token_id=token.token_id):
            return "base"
        if self._pool_port.has_quote_side_pool(token_id=token.token_id):
            logger.debug("token_resolver: dominant quote token_id=%s", token.token_id)
            return "quote"
        return "base"
