# tests/test_migrations.py

"""
Alembic 마이그레이션이 모델 정의와 일치하는 스키마를 만드는지 확인하는 테스트 모듈입니다.
"""

import os

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import IntegrityError

from app.core.config import BASE_DIR


@pytest.fixture
def alembic_config(tmp_path):
    db_path = tmp_path / "migrate.db"
    config = Config(os.path.join(BASE_DIR, "alembic.ini"))
    config.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{db_path}")
    return config, f"sqlite:///{db_path}"


def test_upgrade_creates_users_table(alembic_config):
    config, sync_url = alembic_config

    command.upgrade(config, "head")

    engine = create_engine(sync_url)
    try:
        inspector = inspect(engine)
        columns = {column["name"] for column in inspector.get_columns("users")}
        assert columns == {
            "id", "username", "first_name", "last_name", "is_active",
            "password", "created_at", "updated_at", "deleted_at",
        }
        index_names = {index["name"] for index in inspector.get_indexes("users")}
        assert {"uq_users_username_active", "ix_users_deleted_at"} <= index_names

        # 부분 유니크 인덱스: 활성 레코드끼리만 username이 중복될 수 없습니다.
        insert = text(
            "INSERT INTO users (username, first_name, last_name, is_active, password, deleted_at) "
            "VALUES (:username, '', '', 1, 'hash', :deleted_at)"
        )
        with engine.begin() as conn:
            conn.execute(insert, {"username": "alice", "deleted_at": "2025-01-01 00:00:00"})
            conn.execute(insert, {"username": "alice", "deleted_at": None})
        with pytest.raises(IntegrityError):
            with engine.begin() as conn:
                conn.execute(insert, {"username": "alice", "deleted_at": None})
    finally:
        engine.dispose()


def test_downgrade_drops_users_table(alembic_config):
    config, sync_url = alembic_config

    command.upgrade(config, "head")
    command.downgrade(config, "base")

    engine = create_engine(sync_url)
    try:
        assert "users" not in inspect(engine).get_table_names()
    finally:
        engine.dispose()
