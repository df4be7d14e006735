# app/core/exceptions.py

"""
애플리케이션 전역에서 사용하는 도메인 오류 분류 체계를 정의하는 모듈입니다.

서비스 계층은 HTTPException 대신 아래 예외를 발생시키며,
HTTP 상태 코드 및 응답 포맷으로의 변환은 middleware.py의 예외 처리기가 담당합니다.
"""

from typing import Dict, Optional


class AppException(Exception):
    """
    모든 도메인 예외의 기본 클래스입니다.

    - message: 클라이언트에게 노출되는 메시지
    - status_code: 매핑될 HTTP 상태 코드
    - error: 응답 envelope의 `error` 필드 값
    """
    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str, *, status_code: Optional[int] = None, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error is not None:
            self.error = error


class ValidationError(AppException):
    """입력값이 구조적 제약(필수값, 길이 등)을 위반한 경우. 위반 필드 목록을 포함합니다."""
    status_code = 400
    error = "Validation failed"

    def __init__(self, fields: Dict[str, str], message: str = "The provided data is invalid. Please check your input."):
        super().__init__(message)
        self.fields = fields


class BadRequestError(AppException):
    """요청 형식 자체가 잘못된 경우 (예: 숫자가 아닌 경로 파라미터)."""
    status_code = 400
    error = "Bad Request"


class ConflictError(AppException):
    """유일성 제약 위반 (예: 이미 존재하는 username)."""
    status_code = 409
    error = "Conflict"


class NotFoundError(AppException):
    status_code = 404
    error = "Not Found"


class InvalidCredentials(AppException):
    """
    인증 실패. 존재하지 않는 사용자와 비밀번호 불일치를 구분하지 않습니다.
    """
    status_code = 401
    error = "Unauthorized"

    def __init__(self, message: str = "invalid credentials"):
        super().__init__(message)


class AccountDeactivated(AppException):
    status_code = 403
    error = "Forbidden"

    def __init__(self, message: str = "user account is deactivated"):
        super().__init__(message)


class StorageError(AppException):
    """
    영속성 계층에서 발생한 불투명한 오류입니다.
    원인 예외는 __cause__로 보존되며, 클라이언트 응답에서는 세부 내용이 제거됩니다.
    """
    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str = "storage operation failed"):
        super().__init__(message)
