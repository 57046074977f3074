from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from zigdex.api.schemas.tokens import TokenSummaryResponse
from zigdex.application.dto.token_summary import TokenSummaryOutput
from zigdex.application.use_cases.get_best_pool import GetBestPoolUseCase
from zigdex.application.use_cases.get_token_holders import GetTokenHoldersUseCase
from zigdex.application.use_cases.get_token_ohlcv import GetTokenOhlcvUseCase
from zigdex.application.use_cases.get_token_security import GetTokenSecurityUseCase
from zigdex.application.use_cases.get_token_summary import GetTokenSummaryUseCase, StableReference
from zigdex.application.use_cases.get_zig_overview import GetZigOverviewUseCase
from zigdex.application.use_cases.list_token_pools import ListTokenPoolsUseCase
from zigdex.application.use_cases.list_tokens import (
    ListMoversUseCase,
    ListSwapTokensUseCase,
    ListTokensUseCase,
    TokenChangeCalculator,
)
from zigdex.application.use_cases.list_trades import ListTradesUseCase
from zigdex.application.use_cases.pool_selection import PoolSelector
from zigdex.application.use_cases.publish_token_summary import PublishTokenSummaryUseCase
from zigdex.application.use_cases.route_swap import RouteSwapUseCase
from zigdex.application.use_cases.token_resolver import TokenResolver
from zigdex.domain.services.rate_limiter import MinIntervalGate
from zigdex.infrastructure.db.engine import get_engine
from zigdex.infrastructure.db.repositories.market_data_repository import SqlMarketDataRepository
from zigdex.infrastructure.db.repositories.pool_repository import SqlPoolRepository
from zigdex.infrastructure.db.repositories.token_repository import SqlTokenRepository
from zigdex.infrastructure.db.repositories.trade_repository import SqlTradeRepository
from zigdex.infrastructure.pubsub.redis_client import get_redis_client
from zigdex.infrastructure.pubsub.redis_publisher import RedisSummaryPublisher
from zigdex.shared.config import get_settings


def get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(
        settings.postgres_dsn,
        settings.db_pool_size,
        settings.db_pool_timeout_seconds,
        settings.db_statement_timeout_ms,
    )


def _get_token_repository() -> SqlTokenRepository:
    return SqlTokenRepository(get_db_engine())


def _get_pool_repository() -> SqlPoolRepository:
    return SqlPoolRepository(get_db_engine())


def _get_market_data_repository() -> SqlMarketDataRepository:
    return SqlMarketDataRepository(get_db_engine())


def _get_trade_repository() -> SqlTradeRepository:
    return SqlTradeRepository(get_db_engine())


def _get_resolver() -> TokenResolver:
    return TokenResolver(token_port=_get_token_repository(), pool_port=_get_pool_repository())


def _get_selector() -> PoolSelector:
    return PoolSelector(
        pool_port=_get_pool_repository(),
        default_trade_usd=get_settings().default_trade_usd,
    )


def _get_stable_reference() -> StableReference:
    return StableReference(
        resolver=_get_resolver(),
        token_port=_get_token_repository(),
        pool_port=_get_pool_repository(),
        market_data_port=_get_market_data_repository(),
        stable_token_refs=get_settings().stable_token_refs,
    )


def _get_change_calculator() -> TokenChangeCalculator:
    return TokenChangeCalculator(
        selector=_get_selector(),
        pool_port=_get_pool_repository(),
        market_data_port=_get_market_data_repository(),
    )


def get_token_summary_use_case() -> GetTokenSummaryUseCase:
    return GetTokenSummaryUseCase(
        resolver=_get_resolver(),
        selector=_get_selector(),
        stable_reference=_get_stable_reference(),
        token_port=_get_token_repository(),
        pool_port=_get_pool_repository(),
        market_data_port=_get_market_data_repository(),
        trade_port=_get_trade_repository(),
    )


def get_best_pool_use_case() -> GetBestPoolUseCase:
    return GetBestPoolUseCase(
        resolver=_get_resolver(),
        selector=_get_selector(),
        market_data_port=_get_market_data_repository(),
    )


def get_token_ohlcv_use_case() -> GetTokenOhlcvUseCase:
    return GetTokenOhlcvUseCase(
        resolver=_get_resolver(),
        selector=_get_selector(),
        stable_reference=_get_stable_reference(),
        token_port=_get_token_repository(),
        pool_port=_get_pool_repository(),
        market_data_port=_get_market_data_repository(),
    )


def get_list_tokens_use_case() -> ListTokensUseCase:
    return ListTokensUseCase(
        token_port=_get_token_repository(),
        selector=_get_selector(),
        change_calculator=_get_change_calculator(),
        market_data_port=_get_market_data_repository(),
        max_workers=get_settings().token_fanout_concurrency,
    )


def get_list_movers_use_case() -> ListMoversUseCase:
    return ListMoversUseCase(
        token_port=_get_token_repository(),
        change_calculator=_get_change_calculator(),
        market_data_port=_get_market_data_repository(),
        max_workers=get_settings().token_fanout_concurrency,
    )


def get_list_swap_tokens_use_case() -> ListSwapTokensUseCase:
    return ListSwapTokensUseCase(
        token_port=_get_token_repository(),
        market_data_port=_get_market_data_repository(),
    )


def get_zig_overview_use_case() -> GetZigOverviewUseCase:
    return GetZigOverviewUseCase(
        resolver=_get_resolver(),
        token_port=_get_token_repository(),
        pool_port=_get_pool_repository(),
        market_data_port=_get_market_data_repository(),
    )


def get_list_token_pools_use_case() -> ListTokenPoolsUseCase:
    return ListTokenPoolsUseCase(
        resolver=_get_resolver(),
        token_port=_get_token_repository(),
        pool_port=_get_pool_repository(),
        market_data_port=_get_market_data_repository(),
    )


def get_token_holders_use_case() -> GetTokenHoldersUseCase:
    return GetTokenHoldersUseCase(resolver=_get_resolver(), token_port=_get_token_repository())


def get_token_security_use_case() -> GetTokenSecurityUseCase:
    return GetTokenSecurityUseCase(resolver=_get_resolver(), token_port=_get_token_repository())


def get_list_trades_use_case() -> ListTradesUseCase:
    return ListTradesUseCase(
        resolver=_get_resolver(),
        pool_port=_get_pool_repository(),
        trade_port=_get_trade_repository(),
        market_data_port=_get_market_data_repository(),
    )


def get_route_swap_use_case() -> RouteSwapUseCase:
    return RouteSwapUseCase(
        resolver=_get_resolver(),
        selector=_get_selector(),
        market_data_port=_get_market_data_repository(),
    )


def serialize_token_summary(summary: TokenSummaryOutput) -> dict:
    return TokenSummaryResponse.model_validate(summary).model_dump(mode="json", by_alias=True)


@lru_cache(maxsize=1)
def _get_summary_gate() -> MinIntervalGate:
    return MinIntervalGate(min_interval_seconds=get_settings().rt_token_summary_min_ms / 1000)


def get_publish_token_summary_use_case() -> PublishTokenSummaryUseCase:
    settings = get_settings()
    return PublishTokenSummaryUseCase(
        summary_use_case=get_token_summary_use_case(),
        publisher=RedisSummaryPublisher(get_redis_client(settings.redis_url)),
        gate=_get_summary_gate(),
        serializer=serialize_token_summary,
        channel=settings.rt_token_summary_channel,
    )
