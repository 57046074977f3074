from __future__ import annotations

from zigdex.domain.entities.market import ClosePair
from zigdex.domain.services.units import pct_change

CHANGE_BUCKETS = {"30m": 30, "1h": 60, "4h": 240, "24h": 1440}


def change_pct(pair: ClosePair | None, *, invert: bool = False) -> float | None:
    if pair is None or not pair.last_close or not pair.prev_close:
        return None
    last, prev = pair.last_close, pair.prev_close
    if invert:
        last, prev = 1.0 / last, 1.0 / prev
    return pct_change(last, prev)
