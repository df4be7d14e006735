# app/core/middleware.py

"""
애플리케이션 전역의 HTTP 공통 관심사를 정의하는 모듈입니다.

- 요청 ID 부여 및 전파 (X-Request-ID / X-Correlation-ID)
- 요청 로깅 ("[time] status - latency method path")
- 요청 처리 타임아웃 (408)
- 예기치 못한 예외 복구 (500, 개발 모드에서만 스택 트레이스 포함)
- 도메인 예외 / 요청 검증 오류 / 404 / 405 를 공통 응답 포맷으로 변환하는 예외 처리기
- CORS
"""

import logging
import time
import traceback
import uuid
from datetime import datetime, UTC
from typing import Optional

import anyio
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.core.config import Settings
from app.core.exceptions import AppException, StorageError, ValidationError
from app.core.responses import error_response, validation_error_response
from app.core.validation import format_error_fields

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("app.access")

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_ID_HEADER = "X-Correlation-ID"

INTERNAL_ERROR_MESSAGE = "Something went wrong. Please try again later."


def get_request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def _error_context(request: Request) -> dict:
    return {
        "request_id": get_request_id(request),
        "method": request.method,
        "path": request.url.path,
        "client": request.client.host if request.client else None,
    }


# =============================================================================
# 1. 미들웨어
# =============================================================================
class RequestIDMiddleware(BaseHTTPMiddleware):
    """요청 헤더의 요청 ID를 사용하거나 새로 생성하여 request.state와 응답 헤더에 기록합니다."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = (
            request.headers.get(REQUEST_ID_HEADER)
            or request.headers.get(CORRELATION_ID_HEADER)
            or uuid.uuid4().hex
        )
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - started) * 1000
        access_logger.info(
            "[%s] %s - %.2fms %s %s",
            datetime.now(UTC).strftime("%H:%M:%S"),
            response.status_code,
            latency_ms,
            request.method,
            request.url.path,
        )
        return response


class RecoveryMiddleware(BaseHTTPMiddleware):
    """
    처리되지 않은 예외를 잡아 500 응답으로 변환합니다.
    스택 트레이스는 개발 모드(APP_ENV=development, DEBUG_MODE=True)에서만 응답에 포함됩니다.
    """

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Panic recovered: %s", _error_context(request))
            details = None
            if self.settings.is_development and self.settings.DEBUG_MODE:
                details = {
                    "error": str(exc),
                    "stack_trace": traceback.format_exception(exc),
                }
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal Server Error",
                INTERNAL_ERROR_MESSAGE,
                details=details,
                request_id=get_request_id(request),
            )


class TimeoutMiddleware:
    """
    요청 처리가 제한 시간을 넘기면 내부 처리를 취소하고 408을 반환합니다.
    취소가 엔드포인트까지 전달되도록 순수 ASGI 미들웨어로 구현합니다.
    """

    def __init__(self, app: ASGIApp, timeout_seconds: float):
        self.app = app
        self.timeout_seconds = timeout_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        with anyio.move_on_after(self.timeout_seconds) as cancel_scope:
            await self.app(scope, receive, send_wrapper)

        if cancel_scope.cancelled_caught and not response_started:
            request = Request(scope)
            logger.warning("Request timeout: %s", _error_context(request))
            response = error_response(
                status.HTTP_408_REQUEST_TIMEOUT,
                "Request Timeout",
                "The request took too long to process.",
                request_id=get_request_id(request),
            )
            await response(scope, receive, send)


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """
    미들웨어를 등록합니다. Starlette는 나중에 등록된 미들웨어가 바깥쪽에서 실행됩니다.
    실행 순서 (바깥 → 안): CORS → 요청 ID → 요청 로깅 → 예외 복구 → 타임아웃
    """
    app.add_middleware(TimeoutMiddleware, timeout_seconds=settings.REQUEST_TIMEOUT_SECONDS)
    app.add_middleware(RecoveryMiddleware, settings=settings)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=settings.cors_methods_list,
        allow_headers=settings.cors_headers_list,
        allow_credentials=True,
    )


# =============================================================================
# 2. 예외 처리기
# =============================================================================
async def app_exception_handler(request: Request, exc: AppException) -> Response:
    if isinstance(exc, ValidationError):
        logger.warning("Validation failed: %s fields=%s", _error_context(request), exc.fields)
        return validation_error_response(exc.fields, request_id=get_request_id(request))

    if isinstance(exc, StorageError):
        # 저장소 오류의 세부 내용은 로그에만 남기고 클라이언트에는 노출하지 않습니다.
        logger.error("Storage error: %s cause=%r", _error_context(request), exc.__cause__)
        message = INTERNAL_ERROR_MESSAGE
    else:
        logger.info("Request error (%s): %s %s", exc.status_code, _error_context(request), exc.message)
        message = exc.message

    return error_response(exc.status_code, exc.error, message, request_id=get_request_id(request))


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
    fields = format_error_fields(exc.errors())
    logger.warning("Validation failed: %s fields=%s", _error_context(request), fields)
    return validation_error_response(fields, request_id=get_request_id(request))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        logger.info("Route not found: %s", _error_context(request))
        error, message = "Not Found", "The requested route was not found"
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        logger.warning("Method not allowed: %s", _error_context(request))
        error, message = "Method Not Allowed", "The HTTP method is not allowed for this endpoint"
    else:
        error, message = str(exc.detail), str(exc.detail)
    return error_response(
        exc.status_code,
        error,
        message,
        request_id=get_request_id(request),
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
