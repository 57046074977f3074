from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query

from zigdex.api.deps import (
    get_best_pool_use_case,
    get_list_movers_use_case,
    get_list_swap_tokens_use_case,
    get_list_token_pools_use_case,
    get_list_tokens_use_case,
    get_token_holders_use_case,
    get_token_ohlcv_use_case,
    get_token_security_use_case,
    get_token_summary_use_case,
)
from zigdex.api.params import as_utc, not_found_response
from zigdex.api.schemas.tokens import (
    BestPoolEnvelopeResponse,
    BestPoolResponse,
    HoldersResponse,
    MoversResponse,
    OhlcvResponse,
    SwapListResponse,
    TokenListResponse,
    TokenPoolsResponse,
    TokenSecurityResponse,
    TokenSummaryResponse,
)
from zigdex.application.dto.best_pool import GetBestPoolInput
from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.dto.holders import GetHoldersInput
from zigdex.application.dto.ohlcv import GetOhlcvInput
from zigdex.application.dto.token_list import ListMoversInput, ListSwapTokensInput, ListTokensInput
from zigdex.application.dto.token_pools import ListTokenPoolsInput
from zigdex.application.dto.token_summary import GetTokenSummaryInput
from zigdex.application.use_cases.get_best_pool import GetBestPoolUseCase
from zigdex.application.use_cases.get_token_holders import GetTokenHoldersUseCase
from zigdex.application.use_cases.get_token_ohlcv import GetTokenOhlcvUseCase
from zigdex.application.use_cases.get_token_security import GetTokenSecurityUseCase
from zigdex.application.use_cases.get_token_summary import GetTokenSummaryUseCase
from zigdex.application.use_cases.list_token_pools import ListTokenPoolsUseCase
from zigdex.application.use_cases.list_tokens import ListMoversUseCase, ListSwapTokensUseCase, ListTokensUseCase
from zigdex.domain.exceptions import InvalidQueryError

router = APIRouter(prefix="/tokens")


@router.get("", response_model=TokenListResponse)
def list_tokens(
    search: str | None = None,
    sort: str = "mcap",
    direction: str = Query("desc", alias="dir"),
    bucket: str = "24h",
    include_change: bool = Query(False, alias="includeChange"),
    include_best: bool = Query(False, alias="includeBest"),
    min_best_tvl: float = Query(0.0, alias="minBestTvl", ge=0),
    amount_in: float | None = Query(None, alias="amt", ge=0),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    use_case: ListTokensUseCase = Depends(get_list_tokens_use_case),
):
    try:
        result = use_case.execute(
            ListTokensInput(
                search=search,
                sort=sort,
                direction=direction,
                bucket=bucket,
                include_change=include_change,
                include_best=include_best,
                min_best_tvl=min_best_tvl,
                amount_in=amount_in,
                limit=limit,
                offset=offset,
            )
        )
    except InvalidQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return TokenListResponse.model_validate(result)


def _movers(board: str, price_source: str, bucket: str, limit: int, offset: int, use_case: ListMoversUseCase):
    try:
        result = use_case.execute(
            ListMoversInput(
                board=board,
                price_source=price_source,
                bucket=bucket,
                limit=limit,
                offset=offset,
            )
        )
    except InvalidQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return MoversResponse.model_validate(result)


@router.get("/gainers", response_model=MoversResponse)
def gainers(
    price_source: str = Query("best", alias="priceSource"),
    bucket: str = "24h",
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    use_case: ListMoversUseCase = Depends(get_list_movers_use_case),
):
    return _movers("gainers", price_source, bucket, limit, offset, use_case)


@router.get("/losers", response_model=MoversResponse)
def losers(
    price_source: str = Query("best", alias="priceSource"),
    bucket: str = "24h",
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    use_case: ListMoversUseCase = Depends(get_list_movers_use_case),
):
    return _movers("losers", price_source, bucket, limit, offset, use_case)


@router.get("/swap-list", response_model=SwapListResponse)
def swap_list(
    bucket: str = "24h",
    limit: int = Query(200, ge=1, le=500),
    offset: int = Query(0, ge=0),
    use_case: ListSwapTokensUseCase = Depends(get_list_swap_tokens_use_case),
):
    try:
        result = use_case.execute(ListSwapTokensInput(bucket=bucket, limit=limit, offset=offset))
    except InvalidQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return SwapListResponse.model_validate(result)


@router.get("/{identifier}", response_model=TokenSummaryResponse)
def token_summary(
    identifier: str,
    price_source: str = Query("best", alias="priceSource"),
    pool_ref: str | None = Query(None, alias="poolId"),
    dominant: str = "base",
    view: str = "base",
    use_case: GetTokenSummaryUseCase = Depends(get_token_summary_use_case),
):
    result = use_case.execute(
        GetTokenSummaryInput(
            identifier=identifier,
            price_source=price_source,
            pool_ref=pool_ref,
            dominant=dominant,
            view=view,
        )
    )
    if isinstance(result, NotFoundOutput):
        return not_found_response(result)
    return TokenSummaryResponse.model_validate(result)


@router.get("/{identifier}/pools", response_model=TokenPoolsResponse)
def token_pools(
    identifier: str,
    bucket: str = "24h",
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    include_caps: bool = Query(False, alias="includeCaps"),
    dominant: str = "base",
    use_case: ListTokenPoolsUseCase = Depends(get_list_token_pools_use_case),
):
    try:
        result = use_case.execute(
            ListTokenPoolsInput(
                identifier=identifier,
                bucket=bucket,
                limit=limit,
                offset=offset,
                include_caps=include_caps,
                dominant=dominant,
            )
        )
    except InvalidQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if isinstance(result, NotFoundOutput):
        return not_found_response(result)
    return TokenPoolsResponse.model_validate(result)


@router.get("/{identifier}/holders", response_model=HoldersResponse)
def token_holders(
    identifier: str,
    limit: int = Query(200, ge=1, le=500),
    offset: int = Query(0, ge=0),
    use_case: GetTokenHoldersUseCase = Depends(get_token_holders_use_case),
):
    result = use_case.execute(GetHoldersInput(identifier=identifier, limit=limit, offset=offset))
    if isinstance(result, NotFoundOutput):
        return not_found_response(result)
    return HoldersResponse.model_validate(result)


@router.get("/{identifier}/security", response_model=TokenSecurityResponse)
def token_security(
    identifier: str,
    use_case: GetTokenSecurityUseCase = Depends(get_token_security_use_case),
):
    result = use_case.execute(identifier)
    if isinstance(result, NotFoundOutput):
        return not_found_response(result)
    return TokenSecurityResponse.from_output(result)


@router.get("/{identifier}/ohlcv", response_model=OhlcvResponse)
def token_ohlcv(
    identifier: str,
    tf: str = "1m",
    mode: str = "price",
    unit: str = "native",
    price_source: str = Query("best", alias="priceSource"),
    dominant: str = "base",
    view: str = "base",
    pool_id: str | None = Query(None, alias="poolId"),
    pair: str | None = None,
    fill: str = "none",
    start: datetime | None = Query(None, alias="from"),
    end: datetime | None = Query(None, alias="to"),
    span: str | None = None,
    window: int | None = Query(None, ge=1, le=5000),
    use_case: GetTokenOhlcvUseCase = Depends(get_token_ohlcv_use_case),
):
    try:
        result = use_case.execute(
            GetOhlcvInput(
                identifier=identifier,
                tf=tf,
                mode=mode,
                unit=unit,
                price_source=price_source,
                pool_ref=pool_id or pair,
                fill=fill,
                start=as_utc(start),
                end=as_utc(end),
                span=span,
                window=window,
                dominant=dominant,
                view=view,
            )
        )
    except InvalidQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if isinstance(result, NotFoundOutput):
        return not_found_response(result)
    return OhlcvResponse.model_validate(result)


@router.get("/{identifier}/best-pool", response_model=BestPoolEnvelopeResponse)
def best_pool(
    identifier: str,
    amount_in: float | None = Query(None, alias="amt", ge=0),
    min_tvl_zig: float = Query(0.0, alias="minBestTvl", ge=0),
    use_case: GetBestPoolUseCase = Depends(get_best_pool_use_case),
):
    result = use_case.execute(
        GetBestPoolInput(identifier=identifier, amount_in=amount_in, min_tvl_zig=min_tvl_zig)
    )
    if isinstance(result, NotFoundOutput):
        return not_found_response(result)
    data = BestPoolResponse.model_validate(result) if result is not None else None
    return BestPoolEnvelopeResponse(data=data)
