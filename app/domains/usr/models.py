# app/domains/usr/models.py

"""
'usr' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

User 테이블의 구조와 컬럼을 Python 객체로 매핑하며,
SQLModel의 Field를 사용하여 데이터베이스 제약 조건을 정의합니다.
"""

from typing import Optional
from datetime import datetime, UTC
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import Index, text
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


def _utcnow() -> datetime:
    return datetime.now(UTC)


# =============================================================================
# users 테이블 모델
# =============================================================================
class UserBase(SQLModel):
    """
    users 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    username: str = Field(max_length=100, nullable=False, description="로그인 사용자명")
    first_name: str = Field(default="", max_length=100, description="이름")
    last_name: str = Field(default="", max_length=100, description="성")
    is_active: bool = Field(default=True, description="계정 활성 여부")


class User(UserBase, table=True):
    """
    users 테이블에 매핑되는 SQLModel ORM 클래스입니다.

    - password 컬럼에는 항상 bcrypt 해시만 저장됩니다. (평문 저장 금지)
    - deleted_at이 NULL이 아닌 레코드는 소프트 삭제된 레코드입니다.
    - username 유일성은 삭제되지 않은 레코드 사이에서만 보장됩니다. (부분 유니크 인덱스)
    """
    __tablename__ = "users"
    __table_args__ = (
        Index(
            "uq_users_username_active",
            "username",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True, description="사용자 고유 ID")
    password: str = Field(max_length=255, nullable=False, description="해싱된 비밀번호")

    created_at: Optional[datetime] = Field(
        default_factory=_utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=_utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False),
        description="레코드 마지막 업데이트 일시"
    )
    deleted_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=True, index=True),
        description="소프트 삭제 일시 (NULL이면 활성 레코드)"
    )
