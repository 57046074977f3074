from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from zigdex.domain.entities.market import Bar, MatrixBucket
from zigdex.infrastructure.db.mappers.common import float_or_zero, required, to_int


def map_row_to_bar(row: Mapping[str, Any]) -> Bar:
    return Bar(
        bucket_start=required(row, "bucket_start"),
        open=float_or_zero(required(row, "open")),
        high=float_or_zero(required(row, "high")),
        low=float_or_zero(required(row, "low")),
        close=float_or_zero(required(row, "close")),
        volume=float_or_zero(required(row, "volume")),
        trade_count=to_int(required(row, "trade_count")) or 0,
    )


def map_row_to_matrix_bucket(row: Mapping[str, Any]) -> MatrixBucket:
    return MatrixBucket(
        bucket=str(required(row, "bucket")),
        vol_buy=float_or_zero(required(row, "vol_buy")),
        vol_sell=float_or_zero(required(row, "vol_sell")),
        tx_buy=to_int(required(row, "tx_buy")) or 0,
        tx_sell=to_int(required(row, "tx_sell")) or 0,
        unique_traders=to_int(required(row, "unique_traders")) or 0,
        tvl=float_or_zero(required(row, "tvl")),
    )
