from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import datetime, timedelta

from zigdex.domain.entities.market import Bar, OhlcvBar
from zigdex.domain.services.units import invert_or_zero

DEFAULT_STEP_SEC = 60
MAX_WINDOW_BARS = 5000

TIMEFRAME_SECONDS = {
    "1m": 60,
    "5m": 300,
    "15m": 900,
    "30m": 1800,
    "1h": 3600,
    "2h": 7200,
    "4h": 14400,
    "8h": 28800,
    "12h": 43200,
    "1d": 86400,
    "3d": 259200,
    "5d": 432000,
    "1w": 604800,
    "1M": 2592000,
    "3M": 7776000,
}

_UNIT_SECONDS = {"m": 60, "h": 3600, "d": 86400, "w": 604800, "M": 2592000}
_TIMEFRAME_PATTERN = re.compile(r"^(\d+)([mhdwM])$")

FILL_POLICIES = ("prev", "zero", "none")


def timeframe_to_seconds(tf: str | None) -> int:
    if not tf:
        return DEFAULT_STEP_SEC
    if tf in TIMEFRAME_SECONDS:
        return TIMEFRAME_SECONDS[tf]
    match = _TIMEFRAME_PATTERN.match(tf)
    if not match:
        return DEFAULT_STEP_SEC
    seconds = int(match.group(1)) * _UNIT_SECONDS[match.group(2)]
    return seconds if seconds > 0 else DEFAULT_STEP_SEC


def align_down(epoch_sec: int | float, step_sec: int) -> int:
    return int(math.floor(epoch_sec / step_sec)) * step_sec


def resolve_window(
    *,
    tf: str,
    step_sec: int,
    now: datetime,
    from_ts: datetime | None = None,
    to_ts: datetime | None = None,
    span: str | None = None,
    window: int | None = None,
) -> tuple[datetime, datetime]:
    """Request range: explicit bounds, else a span, else a bar count ending at ``to``."""
    end = to_ts or now
    if from_ts is not None:
        return from_ts, end
    if span:
        return end - timedelta(seconds=timeframe_to_seconds(span)), end
    if window:
        bars = max(1, min(int(window), MAX_WINDOW_BARS))
    else:
        bars = 1440 if tf == "1m" else 300
    return end - timedelta(seconds=bars * step_sec), end


def aggregate_bars(bars: Iterable[Bar], *, step_sec: int) -> dict[int, OhlcvBar]:
    grouped: dict[int, list[Bar]] = {}
    for bar in bars:
        bucket = align_down(bar.bucket_start.timestamp(), step_sec)
        grouped.setdefault(bucket, []).append(bar)

    out: dict[int, OhlcvBar] = {}
    for bucket, members in grouped.items():
        members.sort(key=lambda b: b.bucket_start)
        out[bucket] = OhlcvBar(
            ts_sec=bucket,
            open=members[0].open,
            high=max(b.high for b in members),
            low=min(b.low for b in members),
            close=members[-1].close,
            volume=sum(b.volume for b in members),
            trades=sum(b.trade_count for b in members),
        )
    return out


def fill_series(
    buckets: Mapping[int, OhlcvBar],
    *,
    start_sec: int,
    end_sec: int,
    step_sec: int,
    fill: str,
    prev_close_seed: float | None,
) -> list[OhlcvBar]:
    """Walk ``[start_sec, end_sec]`` inclusive, gluing each open to the previous close.

    A ``zero`` fill resets the carried close to 0, so the next real bar opens at 0.
    """
    prev_close = prev_close_seed if prev_close_seed is not None and math.isfinite(prev_close_seed) else None
    out: list[OhlcvBar] = []
    for ts in range(start_sec, end_sec + 1, step_sec):
        bar = buckets.get(ts)
        if bar is not None:
            open_ = prev_close if prev_close is not None else bar.open
            out.append(
                OhlcvBar(
                    ts_sec=ts,
                    open=open_,
                    high=max(bar.high, open_),
                    low=min(bar.low, open_),
                    close=bar.close,
                    volume=bar.volume,
                    trades=bar.trades,
                )
            )
            prev_close = bar.close
        elif fill == "zero":
            out.append(OhlcvBar(ts_sec=ts, open=0.0, high=0.0, low=0.0, close=0.0, volume=0.0, trades=0))
            prev_close = 0.0
        elif fill == "prev" and prev_close is not None:
            out.append(
                OhlcvBar(
                    ts_sec=ts,
                    open=prev_close,
                    high=prev_close,
                    low=prev_close,
                    close=prev_close,
                    volume=0.0,
                    trades=0,
                )
            )
    return out


def invert_bar(bar: OhlcvBar) -> OhlcvBar:
    return replace(
        bar,
        open=invert_or_zero(bar.open),
        high=invert_or_zero(bar.low),
        low=invert_or_zero(bar.high),
        close=invert_or_zero(bar.close),
    )


def scale_prices(bar: OhlcvBar, factor: float) -> OhlcvBar:
    return replace(
        bar,
        open=bar.open * factor,
        high=bar.high * factor,
        low=bar.low * factor,
        close=bar.close * factor,
    )


def apply_market_cap(bar: OhlcvBar, circulating_supply: float | None) -> OhlcvBar:
    if circulating_supply is None:
        return bar
    return scale_prices(bar, circulating_supply)


def build_series(
    bars: Iterable[Bar],
    *,
    start_sec: int,
    end_sec: int,
    step_sec: int,
    fill: str,
    prev_close_seed: float | None,
    invert: bool = False,
    circulating_supply: float | None = None,
    mode: str = "price",
) -> list[OhlcvBar]:
    """Aggregate, fill, then invert and cap-scale in that order.

    USD series come from bars already denominated in USD, so no rate is applied here.
    """
    series = fill_series(
        aggregate_bars(bars, step_sec=step_sec),
        start_sec=start_sec,
        end_sec=end_sec,
        step_sec=step_sec,
        fill=fill,
        prev_close_seed=prev_close_seed,
    )
    if invert:
        series = [invert_bar(bar) for bar in series]
    if mode == "mcap":
        series = [apply_market_cap(bar, circulating_supply) for bar in series]
    return series
