"""
api/responses.py -- Envelope builders shared by routes and exception handlers.

Every response body has the shape
    {"success": bool, "data"?: ..., "error"?: str, "pagination"?: {...}}
Keys that do not apply are left out rather than sent as null.
"""

from typing import Any, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.models import Pagination


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_dump(v) for v in value]
    return value


def ok(data: Any, status_code: int = 200, pagination: Optional[Pagination] = None) -> JSONResponse:
    content: dict = {"success": True, "data": _dump(data)}
    if pagination is not None:
        content["pagination"] = _dump(pagination)
    return JSONResponse(status_code=status_code, content=content)


def fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})
