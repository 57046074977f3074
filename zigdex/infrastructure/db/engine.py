from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine


@lru_cache(maxsize=4)
def get_engine(
    dsn: str,
    pool_size: int = 12,
    pool_timeout_seconds: float = 10.0,
    statement_timeout_ms: int = 0,
) -> Engine:
    connect_args = {}
    if statement_timeout_ms > 0:
        connect_args["options"] = f"-c statement_timeout={int(statement_timeout_ms)}"
    return create_engine(
        dsn,
        future=True,
        pool_pre_ping=True,
        pool_size=pool_size,
        pool_timeout=pool_timeout_seconds,
        connect_args=connect_args,
    )
