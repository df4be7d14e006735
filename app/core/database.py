# app/core/database.py

"""
애플리케이션의 데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- SQLModel의 비동기 엔진을 설정합니다.
- 비동기 세션 생성을 위한 유틸리티 함수를 제공합니다.
- 애플리케이션 시작 시 데이터베이스 테이블을 생성하는 함수를 포함합니다 (AUTO_MIGRATE).
- 헬스 체크용 연결 확인 함수를 제공합니다.
"""

import logging
from typing import Any, AsyncGenerator, Dict
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlalchemy import text

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession  # AsyncSession은 비동기용

# 애플리케이션 설정을 임포트합니다.
from app.core.config import settings

# 모든 SQLModel 클래스가 SQLModel.metadata에 등록되도록 모델을 임포트합니다.
from app.domains.usr import models  # noqa: F401

logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    드라이버별 엔진 옵션을 반환합니다.
    SQLite는 커넥션 풀 크기 옵션을 지원하지 않으므로 서버형 DB에만 풀 설정을 적용합니다.
    """
    options: Dict[str, Any] = {"echo": settings.DEBUG_MODE, "pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_recycle=3600,  # 1시간마다 연결 재활용
            pool_size=10,       # 최소 10개의 연결 유지
            max_overflow=90,    # 최대 90개의 추가 연결 허용 (총 100개)
        )
    return options


_database_url = settings.DATABASE_URL.get_secret_value()

# SQLModel 엔진을 생성합니다.
engine: AsyncEngine = create_async_engine(_database_url, **engine_options(_database_url))

# 비동기 세션을 생성하는 '세션 공장'을 정의합니다.
AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

metadata = SQLModel.metadata


# =============================================================================
# 데이터베이스 초기화 및 테이블 생성 함수
# =============================================================================
async def create_db_and_tables(bind: AsyncEngine = engine) -> None:
    """
    모든 모델의 테이블을 생성합니다. 기존 테이블을 삭제하지는 않습니다.
    """
    logger.info("Running database migrations...")
    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database migrations completed successfully")


async def ping(session: AsyncSession) -> None:
    """
    데이터베이스에 `SELECT 1`을 실행하여 연결 상태를 확인합니다.
    실패 시 드라이버 예외를 그대로 전파합니다.
    """
    result = await session.execute(text("SELECT 1"))
    if result.scalar_one_or_none() != 1:
        raise RuntimeError("Database health check failed: No result from test query")


# =============================================================================
# 비동기 데이터베이스 세션 의존성 주입
# =============================================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    요청마다 새로운 세션을 생성하고, 요청 처리 후 세션을 자동으로 닫습니다.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    스크립트 등 요청 밖의 비동기 컨텍스트에서 사용할 독립적인 세션을 제공합니다.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
