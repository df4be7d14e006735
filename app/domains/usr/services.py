# app/domains/usr/services.py

"""
'usr' 도메인의 비즈니스 로직(서비스 계층)을 담당하는 모듈입니다.

리포지토리에 저장을 위임하기 전후로 아래 규칙을 강제합니다.
- 입력값 구조 검증 (필수값, 길이 제한)
- username 유일성 검사
- 비밀번호 해싱 / 검증 (비밀번호 표현을 변경할 수 있는 유일한 계층)
- 비활성 계정의 인증 차단

서비스는 요청마다 생성되며, 주입받은 리포지토리와 검증기 외에 상태를 갖지 않습니다.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import (
    AccountDeactivated,
    ConflictError,
    InvalidCredentials,
    NotFoundError,
    StorageError,
)
from app.core.security import get_password_hash, verify_password
from app.core.validation import SchemaValidator
from . import models as usr_models
from . import schemas as usr_schemas
from .crud import UserRepository

logger = logging.getLogger(__name__)

USERNAME_EXISTS = "username already exists"
USER_NOT_FOUND = "user not found"


class UserService:
    def __init__(
        self,
        repository: UserRepository,
        validator: Optional[SchemaValidator] = None,
        *,
        hash_password: Callable[[str], str] = get_password_hash,
        check_password: Callable[[str, str], bool] = verify_password,
    ):
        self.repository = repository
        self.validator = validator or SchemaValidator()
        self._hash_password = hash_password
        self._check_password = check_password

    async def _hash(self, password: str) -> str:
        # bcrypt는 CPU 바운드 작업이므로 이벤트 루프를 막지 않도록 스레드풀에서 실행합니다.
        return await run_in_threadpool(self._hash_password, password)

    async def _verify(self, password: str, hashed: str) -> bool:
        return await run_in_threadpool(self._check_password, password, hashed)

    async def create(self, user_in: Union[usr_schemas.UserCreate, Dict[str, Any]]) -> usr_models.User:
        """
        새로운 사용자를 생성합니다.

        1. 구조 검증 (실패 시 ValidationError)
        2. username 중복 검사 (중복 시 ConflictError)
        3. 평문 비밀번호를 bcrypt 해시로 교체한 뒤 저장

        중복 검사와 저장은 원자적이지 않으므로, 동시 요청에서는 DB의 부분 유니크 인덱스가
        최종 판정을 내립니다. 이때 발생한 IntegrityError도 ConflictError로 변환합니다.
        """
        user_in = self.validator.validate(usr_schemas.UserCreate, user_in)

        existing = await self._call_storage(self.repository.get_by_username(username=user_in.username))
        if existing is not None:
            raise ConflictError(USERNAME_EXISTS)

        user_data = user_in.model_dump()
        user_data["password"] = await self._hash(user_in.password)

        try:
            user = await self.repository.create(obj_in=user_data)
        except IntegrityError as e:
            logger.info("Concurrent insert rejected by unique index for username=%s", user_in.username)
            raise ConflictError(USERNAME_EXISTS) from e
        except SQLAlchemyError as e:
            logger.error("Failed to create user username=%s: %s", user_in.username, e)
            raise StorageError() from e

        logger.info("User created id=%s username=%s", user.id, user.username)
        return user

    async def get_by_id(self, user_id: int) -> usr_models.User:
        user = await self._call_storage(self.repository.get(user_id))
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        return user

    async def get_by_username(self, username: str) -> usr_models.User:
        user = await self._call_storage(self.repository.get_by_username(username=username))
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        return user

    async def update(self, user_id: int, user_in: Union[usr_schemas.UserUpdate, Dict[str, Any]]) -> usr_models.User:
        """
        기존 사용자를 업데이트합니다.

        비밀번호 처리 규칙:
        - 생략되었거나 빈 문자열이면 기존 해시를 유지합니다.
        - 저장된 해시와 바이트 단위로 동일한 값이 그대로 되돌아온 경우에도 기존 해시를 유지합니다.
        - 그 외의 값은 새 평문 비밀번호로 간주하고 다시 해싱합니다.
        """
        user_in = self.validator.validate(usr_schemas.UserUpdate, user_in)
        db_user = await self.get_by_id(user_id)

        update_data = user_in.model_dump(exclude_unset=True, exclude_none=True)

        new_username = update_data.get("username")
        if new_username is not None and new_username != db_user.username:
            owner = await self._call_storage(self.repository.get_by_username(username=new_username))
            if owner is not None and owner.id != db_user.id:
                raise ConflictError(USERNAME_EXISTS)

        new_password = update_data.pop("password", None)
        if new_password is not None and new_password != db_user.password:
            update_data["password"] = await self._hash(new_password)

        try:
            user = await self.repository.update(db_obj=db_user, obj_in=update_data)
        except IntegrityError as e:
            raise ConflictError(USERNAME_EXISTS) from e
        except SQLAlchemyError as e:
            logger.error("Failed to update user id=%s: %s", user_id, e)
            raise StorageError() from e

        logger.info("User updated id=%s fields=%s", user.id, sorted(update_data))
        return user

    async def delete(self, user_id: int) -> None:
        """사용자를 소프트 삭제합니다. 이후 모든 조회에서 제외됩니다."""
        deleted = await self._call_storage(self.repository.soft_delete(id=user_id))
        if deleted is None:
            raise NotFoundError(USER_NOT_FOUND)
        logger.info("User soft-deleted id=%s", user_id)

    async def list(self, offset: int, limit: int) -> Tuple[List[usr_models.User], int]:
        """
        삭제되지 않은 사용자 목록 한 페이지와 전체 건수를 반환합니다.
        offset/limit 범위 보정은 호출자(라우터)의 책임입니다.
        """
        return await self._call_storage(self.repository.list(offset=offset, limit=limit))

    async def authenticate(self, username: str, password: str) -> usr_models.User:
        """
        사용자명과 비밀번호를 검증합니다.

        존재하지 않는 사용자와 비밀번호 불일치는 동일한 InvalidCredentials로 처리하여
        사용자명 열거(enumeration)를 방지합니다. 반환되는 레코드에는 비밀번호 해시가 포함되므로
        외부로 노출하기 전에 반드시 UserRead 등으로 변환해야 합니다.
        """
        user = await self._call_storage(self.repository.get_by_username(username=username))
        if user is None:
            raise InvalidCredentials()
        if not user.is_active:
            raise AccountDeactivated()
        if not await self._verify(password, user.password):
            raise InvalidCredentials()
        return user

    async def _call_storage(self, awaitable):
        try:
            return await awaitable
        except SQLAlchemyError as e:
            logger.error("Storage operation failed: %s", e)
            raise StorageError() from e
