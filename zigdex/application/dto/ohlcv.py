from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from zigdex.domain.entities.market import OhlcvBar, OhlcvMeta


@dataclass(frozen=True)
class GetOhlcvInput:
    identifier: str
    tf: str = "1m"
    mode: str = "price"
    unit: str = "native"
    price_source: str = "best"
    pool_ref: str | None = None
    fill: str = "none"
    start: datetime | None = None
    end: datetime | None = None
    span: str | None = None
    window: int | None = None
    dominant: str = "base"
    view: str = "base"


@dataclass(frozen=True)
class OhlcvOutput:
    bars: list[OhlcvBar]
    meta: OhlcvMeta
    success: bool = True
