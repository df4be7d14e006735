# app/core/responses.py

"""
모든 API 응답이 따르는 공통 응답 포맷(envelope)을 정의하는 모듈입니다.

성공/실패 여부와 관계없이 응답 본문은 항상 아래 형태의 단일 JSON 객체입니다.

    {"success": bool, "message": str, "data": ..., "error": str, "meta": {...}}

`data`, `error`, `meta`는 값이 없으면 생략됩니다.
"""

import math
from datetime import datetime, UTC
from typing import Any, Dict, Generic, Optional, TypeVar

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

DataT = TypeVar("DataT")


class Pagination(BaseModel):
    total: int
    offset: int
    page: int
    limit: int
    pages: int


class PaginationMeta(BaseModel):
    pagination: Pagination


class APIResponse(BaseModel, Generic[DataT]):
    """표준 API 응답 스키마 (OpenAPI 문서화에도 사용됩니다)."""
    success: bool
    message: str = ""
    data: Optional[DataT] = None
    error: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None


class ErrorResponse(APIResponse[Any]):
    """에러 응답은 요청 추적용 필드를 추가로 가집니다."""
    request_id: Optional[str] = None
    timestamp: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


def utc_timestamp() -> str:
    return datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def build_pagination(total: int, offset: int, limit: int) -> Pagination:
    """
    페이지 메타데이터를 계산합니다.
    pages = ceil(total / limit), page는 1부터 시작합니다.
    """
    return Pagination(
        total=total,
        offset=offset,
        page=offset // limit + 1,
        limit=limit,
        pages=math.ceil(total / limit),
    )


def _render(body: APIResponse, status_code: int, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body, exclude_none=True),
        headers=headers,
    )


def success_response(message: str, data: Any = None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return _render(APIResponse[Any](success=True, message=message, data=data), status_code)


def paginated_response(message: str, data: Any, *, total: int, offset: int, limit: int) -> JSONResponse:
    meta = PaginationMeta(pagination=build_pagination(total, offset, limit))
    return _render(
        APIResponse[Any](success=True, message=message, data=data, meta=meta.model_dump()),
        status.HTTP_200_OK,
    )


def error_response(
    status_code: int,
    error: str,
    message: str = "",
    *,
    data: Any = None,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body = ErrorResponse(
        success=False,
        message=message,
        error=error,
        data=data,
        details=details,
        request_id=request_id,
        timestamp=utc_timestamp(),
    )
    return _render(body, status_code, headers)


def validation_error_response(fields: Dict[str, str], *, request_id: Optional[str] = None) -> JSONResponse:
    """필드별 검증 오류 목록을 data에 담아 400으로 응답합니다."""
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Validation failed",
        "The provided data is invalid. Please check your input.",
        data=fields,
        request_id=request_id,
    )
