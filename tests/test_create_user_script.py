# tests/test_create_user_script.py

"""
사용자 생성 CLI 스크립트(scripts/create_user.py)에 대한 테스트 모듈입니다.
스크립트가 사용하는 세션 컨텍스트를 임시 파일 SQLite DB로 교체하여 실행합니다.
"""

from contextlib import asynccontextmanager

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from typer.testing import CliRunner

from scripts import create_user as create_user_script

runner = CliRunner()


@pytest.fixture
def script_database(tmp_path, monkeypatch):
    """스크립트의 세션 컨텍스트가 임시 DB 파일을 사용하도록 교체합니다."""
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"

    @asynccontextmanager
    async def session_context():
        engine = create_async_engine(database_url)
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        SessionLocal = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
        try:
            async with SessionLocal() as session:
                try:
                    yield session
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
        finally:
            await engine.dispose()

    async def no_migration():
        return None

    monkeypatch.setattr(create_user_script, "get_async_session_context", session_context)
    monkeypatch.setattr(create_user_script, "create_db_and_tables", no_migration)
    return database_url


def test_create_user_command(script_database):
    result = runner.invoke(
        create_user_script.cli,
        ["--username", "admin", "--password", "password123", "--first-name", "Admin"],
    )

    assert result.exit_code == 0, result.output
    assert "'admin'" in result.output


def test_create_user_command_duplicate(script_database):
    args = ["--username", "admin", "--password", "password123"]
    assert runner.invoke(create_user_script.cli, args).exit_code == 0

    result = runner.invoke(create_user_script.cli, args)

    assert result.exit_code == 1
    assert "username already exists" in result.output


def test_create_user_command_rejects_short_password(script_database):
    result = runner.invoke(create_user_script.cli, ["--username", "admin", "--password", "short"])

    assert result.exit_code == 1
    assert "password" in result.output
