from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from zigdex.api.deps import get_zig_overview_use_case
from zigdex.api.params import not_found_response
from zigdex.api.schemas.zig import ZigOverviewResponse
from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.dto.zig_overview import GetZigOverviewInput
from zigdex.application.use_cases.get_zig_overview import GetZigOverviewUseCase

router = APIRouter(prefix="/zig")


@router.get("/overview", response_model=ZigOverviewResponse)
def zig_overview(
    limit: int = Query(10, ge=1, le=50),
    use_case: GetZigOverviewUseCase = Depends(get_zig_overview_use_case),
):
    result = use_case.execute(GetZigOverviewInput(limit=limit))
    if isinstance(result, NotFoundOutput):
        return not_found_response(result)
    return ZigOverviewResponse.model_validate(result)
