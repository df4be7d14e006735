# app/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 리포지토리 클래스 모듈입니다.

- 모든 메서드는 비동기(async) 환경에서 동작합니다.
- 세션은 생성자에서 주입받아 인스턴스(요청) 단위로 사용합니다.
- `deleted_at` 컬럼을 가진 모델은 소프트 삭제 대상이며, 모든 조회에서 삭제된 레코드를 명시적으로 제외합니다.
- 비즈니스 규칙은 포함하지 않습니다. 저장소 예외(SQLAlchemyError)는 롤백 후 그대로 전파합니다.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
from datetime import datetime, UTC

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

ModelType = TypeVar("ModelType", bound=SQLModel)


class CRUDBase(Generic[ModelType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    """
    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    @property
    def soft_deletable(self) -> bool:
        return hasattr(self.model, "deleted_at")

    def _select(self):
        query = select(self.model)
        if self.soft_deletable:
            query = query.where(self.model.deleted_at.is_(None))
        return query

    def _filters(self, filters: Dict[str, Any]) -> list:
        return [getattr(self.model, field) == value for field, value in filters.items() if hasattr(self.model, field)]

    async def _commit(self, db_obj: ModelType) -> ModelType:
        try:
            await self.db.commit()
            await self.db.refresh(db_obj)
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return db_obj

    async def get(self, id: Any) -> Optional[ModelType]:
        """
        ID를 기준으로 삭제되지 않은 단일 레코드를 조회합니다.
        """
        result = await self.db.execute(self._select().where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_by_attribute(self, *, attribute: str, value: Any) -> Optional[ModelType]:
        statement = self._select().where(getattr(self.model, attribute) == value)
        result = await self.db.execute(statement)
        return result.scalars().first()

    async def get_multi(self, *, skip: int = 0, limit: int = 100, **filters: Any) -> List[ModelType]:
        """
        여러 레코드를 id 오름차순으로 조회합니다. 필터링을 위한 키워드 인자를 지원합니다.
        """
        query = self._select()
        conditions = self._filters(filters)
        if conditions:
            query = query.where(*conditions)
        query = query.order_by(self.model.id).offset(skip).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(self, **filters: Any) -> int:
        """삭제되지 않은 레코드 수를 반환합니다."""
        query = select(func.count()).select_from(self.model)
        if self.soft_deletable:
            query = query.where(self.model.deleted_at.is_(None))
        conditions = self._filters(filters)
        if conditions:
            query = query.where(*conditions)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def create(self, *, obj_in: Union[BaseModel, Dict[str, Any]]) -> ModelType:
        """
        새로운 레코드를 생성합니다.
        """
        db_obj = self.model.model_validate(obj_in)
        self.db.add(db_obj)
        return await self._commit(db_obj)

    async def update(self, *, db_obj: ModelType, obj_in: Union[BaseModel, Dict[str, Any]]) -> ModelType:
        """
        기존 레코드를 업데이트합니다. 명시적으로 전달된 필드만 반영합니다.
        """
        if isinstance(obj_in, BaseModel):
            update_data = obj_in.model_dump(exclude_unset=True)
        else:
            update_data = obj_in
        for key, value in update_data.items():
            setattr(db_obj, key, value)
        if hasattr(db_obj, "updated_at"):
            db_obj.updated_at = datetime.now(UTC)

        self.db.add(db_obj)
        return await self._commit(db_obj)

    async def soft_delete(self, *, id: Any) -> Optional[ModelType]:
        """
        ID를 기준으로 레코드를 삭제 표시합니다. (행은 유지됩니다)
        이미 삭제되었거나 존재하지 않으면 None을 반환합니다.
        """
        db_obj = await self.get(id)
        if db_obj is None:
            return None
        db_obj.deleted_at = datetime.now(UTC)
        self.db.add(db_obj)
        return await self._commit(db_obj)
