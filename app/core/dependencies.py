# app/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

요청마다 세션 → 리포지토리 → 서비스 순으로 객체를 생성하여 주입합니다.
전역 싱글턴 없이, 검증기와 리포지토리는 서비스 인스턴스마다 명시적으로 전달됩니다.
"""

from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import get_session
from app.core.validation import SchemaValidator
from app.domains.usr.crud import CRUDUser, UserRepository
from app.domains.usr.services import UserService


def get_user_repository(db: AsyncSession = Depends(get_session)) -> UserRepository:
    return CRUDUser(db)


def get_user_service(repository: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(repository, SchemaValidator())
