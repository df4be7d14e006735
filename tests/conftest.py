# tests/conftest.py

import os
from typing import AsyncGenerator, Awaitable, Callable

# 앱을 임포트하기 전에 테스트용 환경 변수를 설정합니다.
# (모듈 임포트 시점에 Settings와 전역 엔진이 생성되므로 순서가 중요합니다)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("AUTO_MIGRATE", "false")
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LOG_LEVEL", "warning")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import Depends  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from passlib.context import CryptContext  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

# app.main을 임포트하여 FastAPI 앱 인스턴스에 접근합니다.
from app.main import app as main_app  # noqa: E402
from app.core import dependencies as deps  # noqa: E402
from app.core.database import get_session  # noqa: E402
from app.core.validation import SchemaValidator  # noqa: E402
from app.domains.usr import models as usr_models  # noqa: E402
from app.domains.usr.crud import CRUDUser, UserRepository  # noqa: E402
from app.domains.usr.services import UserService  # noqa: E402


# --- 테스트용 데이터베이스 설정 ---
# 테스트마다 독립적인 인메모리 SQLite DB를 사용합니다.
# StaticPool을 사용해야 하나의 연결(= 하나의 인메모리 DB)이 세션 간에 공유됩니다.
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# 운영 설정(cost 12)보다 낮은 cost의 bcrypt로 테스트 속도를 높입니다.
fast_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=4)


def fast_hash(password: str) -> str:
    return fast_pwd_context.hash(password)


def fast_verify(plain_password: str, hashed_password: str) -> bool:
    try:
        return fast_pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


# --- 데이터베이스 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    테스트 함수마다 새 인메모리 DB를 만들고 모든 테이블을 생성합니다.
    테스트 종료 시 엔진을 폐기하면 DB도 함께 사라집니다.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """테스트용 비동기 데이터베이스 세션을 제공합니다."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture(scope="function")
def user_service(db_session: AsyncSession) -> UserService:
    """실제 리포지토리(CRUDUser)와 빠른 해셔를 사용하는 서비스 인스턴스를 반환합니다."""
    return UserService(
        CRUDUser(db_session),
        SchemaValidator(),
        hash_password=fast_hash,
        check_password=fast_verify,
    )


# --- 사용자 픽스처 ---
# 역할: users 테이블에 서비스 계층을 거치지 않고 테스트용 사용자 레코드를 직접 생성합니다.
# 목적:
#   조회/수정/삭제/로그인 API를 테스트할 때 사전 데이터를 준비하기 위해.
#   API 호출 후 DB에 저장된 레코드와 응답 값을 직접 비교하기 위해.
@pytest_asyncio.fixture(scope="function")
def user_factory(db_session: AsyncSession) -> Callable[..., Awaitable[usr_models.User]]:
    """
    사용자명과 비밀번호를 지정하여 테스트 사용자를 생성하는 팩토리 함수를 반환합니다.
    **kwargs는 User 모델 생성자에 그대로 전달됩니다.
    """
    async def _create_user(
        username: str,
        password: str = "password123",
        is_active: bool = True,
        **kwargs,
    ) -> usr_models.User:
        user = usr_models.User(
            username=username,
            password=fast_hash(password),
            is_active=is_active,
            **kwargs,  # first_name, last_name, deleted_at 등
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _create_user


@pytest_asyncio.fixture(scope="function")
async def test_user(user_factory: Callable) -> usr_models.User:
    """일반 사용자를 생성합니다."""
    return await user_factory("testuser", "testpass123", first_name="Test", last_name="User")


# --- 비동기 테스트 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient 인스턴스를 생성하고, 테스트용 비동기 DB 세션과 빠른 해셔를 주입합니다.
    """
    def override_get_session():
        yield db_session

    def override_get_user_service(
        repository: UserRepository = Depends(deps.get_user_repository),
    ) -> UserService:
        return UserService(
            repository,
            SchemaValidator(),
            hash_password=fast_hash,
            check_password=fast_verify,
        )

    original_overrides = main_app.dependency_overrides.copy()
    try:
        main_app.dependency_overrides[get_session] = override_get_session
        main_app.dependency_overrides[deps.get_user_service] = override_get_user_service

        async with AsyncClient(transport=ASGITransport(app=main_app), base_url="http://test") as async_client:
            yield async_client

    finally:
        # 클라이언트 픽스처가 끝나면 오버라이드를 반드시 복원해야 합니다.
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)
