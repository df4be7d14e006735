# app/domains/usr/routers.py

"""
'usr' 도메인 (사용자 관리)과 관련된 API 엔드포인트(컨트롤러)를 정의하는 모듈입니다.

라우터는 HTTP 요청을 서비스 호출로 변환하고, 결과를 공통 응답 포맷으로 렌더링합니다.
서비스가 발생시킨 도메인 예외는 middleware.py의 전역 예외 처리기가 응답으로 변환합니다.
"""

from typing import Any, List

from fastapi import APIRouter, Depends, Query, status

from app.core import dependencies as deps
from app.core.exceptions import BadRequestError
from app.core.responses import APIResponse, paginated_response, success_response

# usr 도메인의 서비스, 스키마
from . import schemas as usr_schemas
from .services import UserService

# 목록 조회 페이지 크기 제한
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# users.id (INTEGER) 및 offset 상한
MAX_INT32 = 2**31 - 1

router = APIRouter(
    responses={404: {"description": "Not found"}},
)


def parse_user_id(user_id: str) -> int:
    """경로의 사용자 ID를 정수로 변환합니다. ASCII 숫자가 아니거나 INTEGER 범위를 넘으면 400을 반환합니다."""
    if not (user_id.isascii() and user_id.isdigit()) or int(user_id) > MAX_INT32:
        raise BadRequestError("Invalid user ID")
    return int(user_id)


def clamp_pagination(offset: int, limit: int) -> tuple[int, int]:
    """offset은 0 이상, limit은 1~100 범위로 보정합니다."""
    if limit > MAX_PAGE_SIZE:
        limit = MAX_PAGE_SIZE
    elif limit < 1:
        limit = DEFAULT_PAGE_SIZE
    if offset < 0:
        offset = 0
    return offset, limit


def _read(user) -> usr_schemas.UserRead:
    # ORM 객체를 조회 스키마로 변환하여 비밀번호 해시를 제거합니다.
    return usr_schemas.UserRead.model_validate(user)


# =============================================================================
# 1. 사용자 (User) 관리 엔드포인트
# =============================================================================
@router.post("/users", response_model=APIResponse[usr_schemas.UserRead], status_code=status.HTTP_201_CREATED, summary="새 사용자 생성")
async def create_user(
    user_in: usr_schemas.UserCreate,
    service: UserService = Depends(deps.get_user_service),
):
    user = await service.create(user_in)
    return success_response("User created successfully", _read(user), status.HTTP_201_CREATED)


@router.get("/users", response_model=APIResponse[List[usr_schemas.UserRead]], summary="사용자 목록 조회")
async def list_users(
    offset: int = Query(0, le=MAX_INT32),
    limit: int = Query(DEFAULT_PAGE_SIZE),
    service: UserService = Depends(deps.get_user_service),
):
    """
    삭제되지 않은 사용자 목록을 조회합니다.
    - limit은 최대 100으로 제한되며, offset이 음수이면 0으로 보정됩니다.
    - meta.pagination에 전체 건수와 페이지 정보가 포함됩니다.
    """
    offset, limit = clamp_pagination(offset, limit)
    users, total = await service.list(offset, limit)
    return paginated_response(
        "Users retrieved successfully",
        [_read(user) for user in users],
        total=total,
        offset=offset,
        limit=limit,
    )


@router.get("/users/{user_id}", response_model=APIResponse[usr_schemas.UserRead], summary="특정 사용자 조회")
async def read_user(
    user_id: int = Depends(parse_user_id),
    service: UserService = Depends(deps.get_user_service),
):
    user = await service.get_by_id(user_id)
    return success_response("User retrieved successfully", _read(user))


@router.put("/users/{user_id}", response_model=APIResponse[usr_schemas.UserRead], summary="사용자 업데이트")
async def update_user(
    user_in: usr_schemas.UserUpdate,
    user_id: int = Depends(parse_user_id),
    service: UserService = Depends(deps.get_user_service),
):
    """
    ID로 사용자 정보를 업데이트합니다.
    password를 생략하거나 빈 문자열로 보내면 기존 비밀번호가 유지됩니다.
    """
    user = await service.update(user_id, user_in)
    return success_response("User updated successfully", _read(user))


@router.delete("/users/{user_id}", response_model=APIResponse[Any], summary="사용자 삭제")
async def delete_user(
    user_id: int = Depends(parse_user_id),
    service: UserService = Depends(deps.get_user_service),
):
    """ID로 사용자를 소프트 삭제합니다."""
    await service.delete(user_id)
    return success_response("User deleted successfully")


# =============================================================================
# 2. 인증 (Authentication) 엔드포인트
# =============================================================================
@router.post("/auth/login", response_model=APIResponse[usr_schemas.UserRead], summary="아이디/비밀번호 검증")
async def login(
    credentials: usr_schemas.LoginRequest,
    service: UserService = Depends(deps.get_user_service),
):
    """
    사용자명과 비밀번호를 검증하고 사용자 정보를 반환합니다. (토큰은 발급하지 않습니다)
    """
    user = await service.authenticate(credentials.username, credentials.password)
    return success_response("Authentication successful", _read(user))
