# app/domains/usr/schemas.py

"""
'usr' 도메인 (사용자 관리)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.

조회용 스키마(UserRead)는 password 필드를 선언하지 않으므로,
ORM 객체를 그대로 넘겨도 비밀번호 해시가 응답에 포함되지 않습니다.
"""

from typing import Optional
from datetime import datetime
from pydantic import field_validator
from sqlmodel import SQLModel, Field

# bcrypt는 비밀번호의 앞 72바이트만 사용하므로, 더 긴 비밀번호는 거부합니다.
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 72


def check_password_bytes(value):
    if value is not None and len(value.encode("utf-8")) > PASSWORD_MAX_LENGTH:
        raise ValueError(f"password must be at most {PASSWORD_MAX_LENGTH} bytes when UTF-8 encoded")
    return value


# =============================================================================
# 사용자 (User) 스키마
# =============================================================================
class UserCreate(SQLModel):
    """사용자 생성을 위한 스키마"""
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    first_name: str = Field("", max_length=100)
    last_name: str = Field("", max_length=100)
    is_active: bool = True

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("password")
    @classmethod
    def password_byte_length(cls, value):
        return check_password_bytes(value)


class UserUpdate(SQLModel):
    """
    사용자 정보 수정을 위한 스키마.
    password가 생략되었거나 빈 문자열이면 기존 비밀번호 해시를 유지합니다.
    """
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = Field(None, min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("password", mode="before")
    @classmethod
    def empty_password_means_unchanged(cls, value):
        if value == "":
            return None
        return value

    @field_validator("password")
    @classmethod
    def password_byte_length(cls, value):
        return check_password_bytes(value)


class UserRead(SQLModel):
    """
    사용자 정보 조회를 위한 스키마.
    비밀번호 해시값 등 민감한 정보는 제외됩니다.
    """
    id: int
    username: str
    first_name: str
    last_name: str
    is_active: bool
    created_at: datetime = Field(..., description="레코드 생성 일시")
    updated_at: datetime = Field(..., description="레코드 마지막 업데이트 일시")


# =============================================================================
# 인증 (Authentication) 스키마
# =============================================================================
class LoginRequest(SQLModel):
    """아이디/비밀번호 검증 요청. 토큰은 발급하지 않습니다."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
