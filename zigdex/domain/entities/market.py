from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Bar:
    """One stored 1-minute candle, quote per base."""

    bucket_start: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float
    trade_count: int


@dataclass(frozen=True)
class OhlcvBar:
    ts_sec: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    trades: int


@dataclass(frozen=True)
class OhlcvMeta:
    tf: str
    mode: str
    unit: str
    fill: str
    price_source: str
    step_sec: int
    aligned_from_sec: int
    aligned_to_sec_exclusive: int
    prev_close_seed: float | None
    pool_id: int | None = None
    dominant: str | None = None
    pair_view: str | None = None


@dataclass(frozen=True)
class MatrixBucket:
    bucket: str
    vol_buy: float
    vol_sell: float
    tx_buy: int
    tx_sell: int
    unique_traders: int
    tvl: float

    @property
    def volume(self) -> float:
        return self.vol_buy + self.vol_sell

    @property
    def tx(self) -> int:
        return self.tx_buy + self.tx_sell


EMPTY_BUCKET_VALUES = {
    "vol_buy": 0.0,
    "vol_sell": 0.0,
    "tx_buy": 0,
    "tx_sell": 0,
    "unique_traders": 0,
    "tvl": 0.0,
}


def empty_matrix_bucket(bucket: str) -> MatrixBucket:
    return MatrixBucket(bucket=bucket, **EMPTY_BUCKET_VALUES)


@dataclass(frozen=True)
class ClosePair:
    """Latest 1-minute close and the close at or before a lookback point."""

    last_close: float | None
    prev_close: float | None
