from __future__ import annotations

import os
from dataclasses import dataclass
from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _csv(name: str, default: str) -> tuple[str, ...]:
    value = _env(name, default) or ""
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    db_pool_size: int
    db_pool_timeout_seconds: float
    db_statement_timeout_ms: int
    redis_url: str
    rt_token_dirty_channel: str
    rt_token_summary_channel: str
    rt_token_summary_min_ms: int
    token_fanout_concurrency: int
    stable_token_refs: tuple[str, ...]
    default_trade_usd: float
    log_level: str


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        db_pool_size=int(_env("DB_POOL_SIZE", "12")),
        db_pool_timeout_seconds=float(_env("DB_POOL_TIMEOUT_SECONDS", "10")),
        db_statement_timeout_ms=int(_env("DB_STATEMENT_TIMEOUT_MS", "0")),
        redis_url=_env("REDIS_URL", ""),
        rt_token_dirty_channel=_env("RT_TOKEN_DIRTY_CHANNEL", "rt:token:dirty"),
        rt_token_summary_channel=_env("RT_TOKEN_SUMMARY_CHANNEL", "rt:token:summary"),
        rt_token_summary_min_ms=int(_env("RT_TOKEN_SUMMARY_MIN_MS", "1000")),
        token_fanout_concurrency=max(1, int(_env("TOKEN_FANOUT_CONCURRENCY", "4"))),
        stable_token_refs=_csv("STABLE_TOKEN_REFS", "USDC,usdc,uusdc"),
        default_trade_usd=float(_env("DEFAULT_TRADE_USD", "100")),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
