# app/core/security.py

"""
애플리케이션의 보안 관련 유틸리티 함수를 정의하는 모듈입니다.

- 비밀번호 해싱 및 검증 (bcrypt, passlib CryptContext).

토큰 발급/세션 관리는 이 프로젝트의 범위가 아니므로 포함하지 않습니다.
"""

import logging

from passlib.context import CryptContext  # 비밀번호 해싱을 위한 라이브러리

logger = logging.getLogger(__name__)

# --- 비밀번호 해싱 설정 ---
# bcrypt 해싱 알고리즘을 사용합니다. (cost factor는 passlib 기본값 12)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    일반 텍스트 비밀번호와 해싱된 비밀번호를 비교하여 일치하는지 확인합니다.
    해시 형식이 올바르지 않은 경우에도 예외 대신 False를 반환합니다.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be identified")
        return False


def get_password_hash(password: str) -> str:
    """
    주어진 비밀번호를 해싱합니다. 호출할 때마다 새로운 salt가 사용됩니다.
    """
    return pwd_context.hash(password)
