from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from zigdex.domain.services.security_score import ScoreAdjustment


@dataclass(frozen=True)
class SecurityChecks:
    is_mintable: bool
    can_change_minting_cap: bool
    max_supply: float | None
    total_supply: float | None
    top10_pct_of_max: float
    creator_pct_of_max: float
    holders_count: int


@dataclass(frozen=True)
class SecurityDev:
    token_total_supply: float | None
    creator_address: str | None
    creator_balance: float | None
    creator_pct_of_max: float
    top_holders_pct_of_max: float
    holders_count: int
    first_seen_at: datetime | None


@dataclass(frozen=True)
class GetTokenSecurityOutput:
    score: int
    penalties: list[ScoreAdjustment]
    bonuses: list[ScoreAdjustment]
    checks: SecurityChecks
    dev: SecurityDev
    last_updated: datetime | None
    source: str = "token_security"
    success: bool = True
