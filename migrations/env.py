# migrations/env.py

import os
import sys
import asyncio
from logging.config import fileConfig

from alembic import context

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel

# --- 1. 프로젝트 루트 경로 설정 ---
# env.py가 어디에서 실행되든 'app' 모듈을 찾을 수 있게 합니다.
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# --- 2. 애플리케이션의 설정 및 모델 임포트 ---
# Alembic이 데이터베이스와 모델을 비교할 수 있으려면 모든 SQLModel 클래스가 metadata에 등록되어야 합니다.
from app.core.config import settings        # noqa: E402
import app.domains.usr.models               # noqa: F401, E402

# --- 3. Alembic 기본 설정 ---
config = context.config

# .ini 파일에 설정된 로깅 설정을 적용합니다. (애플리케이션 로거는 비활성화하지 않습니다)
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = SQLModel.metadata

# alembic.ini 또는 호출자가 sqlalchemy.url을 지정하지 않았다면, settings에서 값을 가져옵니다.
if config.get_main_option("sqlalchemy.url") is None:
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL.get_secret_value())


def include_object(object, name, type_, reflected, compare_to):
    if type_ == "table" and name == "alembic_version":
        return False
    return True


def do_run_migrations(connection) -> None:
    """
    실제 마이그레이션을 실행하는 동기 로직입니다.
    """
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        include_object=include_object,
        render_as_batch=connection.dialect.name == "sqlite",  # SQLite는 ALTER 대신 배치 모드 사용
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    """오프라인 모드는 지원하지 않습니다."""
    raise NotImplementedError("Offline mode is not supported in this configuration.")


async def run_migrations_online() -> None:
    """'온라인' 모드에서 마이그레이션을 실행합니다.

    AsyncEngine으로 연결한 뒤 run_sync로 동기 마이그레이션 로직을 실행합니다.
    """
    engine: AsyncEngine = create_async_engine(
        config.get_main_option("sqlalchemy.url"),
        echo=settings.DEBUG_MODE,
        poolclass=pool.NullPool,  # 마이그레이션 시에는 풀을 사용하지 않아 즉시 연결/해제
    )

    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
