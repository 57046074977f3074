from __future__ import annotations

from datetime import datetime, timezone

from fastapi.responses import JSONResponse

from zigdex.api.schemas.common import NotFoundResponse
from zigdex.application.dto.common import NotFoundOutput


def as_utc(value: datetime | None) -> datetime | None:
    """Query datetimes without an offset are read as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def not_found_response(result: NotFoundOutput) -> JSONResponse:
    return JSONResponse(status_code=404, content=NotFoundResponse(error=result.error).model_dump())
