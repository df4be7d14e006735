# app/main.py

"""
FastAPI 애플리케이션의 진입점입니다.

- 설정/로깅 초기화
- 수명 주기 (테이블 자동 생성, 커넥션 풀 종료)
- 미들웨어 및 예외 처리기 등록
- 도메인 라우터 및 헬스 체크 엔드포인트 등록
"""

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, UTC

from fastapi import FastAPI, Depends, status
from fastapi.responses import JSONResponse
from sqlmodel.ext.asyncio.session import AsyncSession

from app import API_PREFIX
from app.core.config import Settings, settings
from app.core.database import create_db_and_tables, engine, get_session, ping
from app.core.logging import configure_logging
from app.core.middleware import register_exception_handlers, setup_middleware
from app.core.responses import success_response
from app.domains.usr.routers import router as usr_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 시작 시 테이블을 생성하고(AUTO_MIGRATE), 종료 시 커넥션 풀을 정리합니다.
    """
    app_settings: Settings = app.state.settings
    logger.info("Starting %s (%s)", app_settings.APP_NAME, app_settings.APP_ENV)
    if app_settings.AUTO_MIGRATE:
        await create_db_and_tables()

    yield

    logger.info("Shutting down %s", app_settings.APP_NAME)
    await engine.dispose()
    logger.info("Database connection pool closed")


def create_app(app_settings: Settings = settings) -> FastAPI:
    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Layered CRUD backend boilerplate: router / service / repository over a single User resource.",
        version=app_settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    setup_middleware(app, app_settings)
    register_exception_handlers(app)

    # -- 도메인 라우터 포함 --
    app.include_router(usr_router, prefix=API_PREFIX, tags=["Users"])

    @app.get(f"{API_PREFIX}/health", summary="API Welcome")
    async def api_health():
        return success_response("Welcome to FastAPI API", {"status": "success", "version": app_settings.APP_VERSION})

    # -- 헬스 체크 엔드포인트 --
    # 데이터베이스 연결 상태를 확인합니다. (공통 응답 포맷이 아닌 단순 상태 응답)
    @app.get("/health", summary="Health Check")
    async def health_check(session: AsyncSession = Depends(get_session)):
        try:
            await ping(session)
        except Exception as e:
            logger.error("Database health check failed: %s", e)
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unhealthy", "error": "Database connection failed"},
            )
        return {
            "status": "healthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "version": app_settings.APP_VERSION,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.APP_PORT, reload=settings.is_development)
