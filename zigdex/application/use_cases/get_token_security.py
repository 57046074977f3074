from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.dto.security import GetTokenSecurityOutput, SecurityChecks, SecurityDev
from zigdex.application.ports.token_port import TokenPort
from zigdex.application.use_cases.summary_common import token_exponent, utcnow
from zigdex.application.use_cases.token_resolver import TokenResolver
from zigdex.domain.services.security_score import score_security
from zigdex.domain.services.units import finite_or_none, scale


def _supply(raw: str | None, exponent: int) -> float | None:
    if raw is None:
        return None
    try:
        return scale(finite_or_none(float(raw)), exponent)
    except ValueError:
        return None


class GetTokenSecurityUseCase:
    def __init__(
        self,
        *,
        resolver: TokenResolver,
        token_port: TokenPort,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._resolver = resolver
        self._token_port = token_port
        self._clock = clock

    def execute(self, identifier: str) -> GetTokenSecurityOutput | NotFoundOutput:
        token = self._resolver.resolve(identifier)
        if token is None:
            return NotFoundOutput(error="token not found")

        security = self._token_port.get_security(token_id=token.token_id)
        profile = self._token_port.get_profile(token_id=token.token_id)
        exponent = token_exponent(token, profile)
        result = score_security(security, now=self._clock())

        top10 = round((security.top10_pct_of_max if security else None) or 0.0, 4)
        creator = round((security.creator_pct_of_max if security else None) or 0.0, 4)
        holders = (security.holders_count if security else None) or 0
        max_supply = _supply(security.max_supply_base, exponent) if security else None
        total_supply = _supply(security.total_supply_base, exponent) if security else None
        creator_balance = security.creator_balance_base if security else None

        return GetTokenSecurityOutput(
            score=result.score,
            penalties=result.penalties,
            bonuses=result.bonuses,
            checks=SecurityChecks(
                is_mintable=bool(security and security.is_mintable),
                can_change_minting_cap=bool(security and security.can_change_minting_cap),
                max_supply=max_supply,
                total_supply=total_supply,
                top10_pct_of_max=top10,
                creator_pct_of_max=creator,
                holders_count=holders,
            ),
            dev=SecurityDev(
                token_total_supply=total_supply,
                creator_address=security.creator_address if security else None,
                creator_balance=scale(creator_balance, exponent),
                creator_pct_of_max=creator,
                top_holders_pct_of_max=top10,
                holders_count=holders,
                first_seen_at=security.first_seen_at if security else None,
            ),
            last_updated=security.checked_at if security else None,
        )
