# app/domains/usr/crud.py

"""
'usr' 도메인의 영속성(리포지토리) 계층을 담당하는 모듈입니다.

- UserRepository: 서비스가 의존하는 리포지토리 인터페이스 (Protocol)
- CRUDUser: SQLModel 비동기 세션을 사용하는 유일한 구현체

리포지토리에는 비즈니스 규칙이 없습니다. 중복 검사, 비밀번호 해싱 등은 서비스 계층의 책임입니다.
"""

from typing import Any, Dict, List, Optional, Protocol, Tuple

from sqlmodel.ext.asyncio.session import AsyncSession

# 공통 CRUDBase 및 usr 도메인의 구성요소 임포트
from app.core.crud_base import CRUDBase
from . import models as usr_models


class UserRepository(Protocol):
    """사용자 레코드에 대한 저장소 연산 인터페이스"""

    async def create(self, *, obj_in: Dict[str, Any]) -> usr_models.User: ...

    async def get(self, id: int) -> Optional[usr_models.User]: ...

    async def get_by_username(self, *, username: str) -> Optional[usr_models.User]: ...

    async def update(self, *, db_obj: usr_models.User, obj_in: Dict[str, Any]) -> usr_models.User: ...

    async def soft_delete(self, *, id: int) -> Optional[usr_models.User]: ...

    async def list(self, *, offset: int, limit: int) -> Tuple[List[usr_models.User], int]: ...


# =============================================================================
# users 테이블 CRUD
# =============================================================================
class CRUDUser(CRUDBase[usr_models.User]):
    def __init__(self, db: AsyncSession):
        super().__init__(model=usr_models.User, db=db)

    async def get_by_username(self, *, username: str) -> Optional[usr_models.User]:
        """사용자명으로 (삭제되지 않은) 사용자를 조회합니다."""
        return await self.get_by_attribute(attribute="username", value=username)

    async def list(self, *, offset: int, limit: int) -> Tuple[List[usr_models.User], int]:
        """
        삭제되지 않은 사용자 한 페이지와 전체 건수를 함께 반환합니다.
        전체 건수는 페이지 크기와 무관합니다.
        """
        total = await self.count()
        users = await self.get_multi(skip=offset, limit=limit)
        return users, total
