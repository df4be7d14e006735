# app/domains/usr/__init__.py

"""
FastAPI 애플리케이션의 'usr' 도메인 패키지입니다.

'usr' 도메인은 users 테이블 하나를 대상으로 사용자 생성/조회/수정/소프트 삭제와
사용자명/비밀번호 검증을 담당합니다.

주요 서브모듈:
- `models.py`: users 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 유효성 검사를 위한 Pydantic 모델 (비밀번호는 응답 스키마에 포함되지 않음).
- `crud.py`: 리포지토리 인터페이스(Protocol)와 비동기 SQLModel 구현체.
- `services.py`: 검증, username 유일성, 비밀번호 해싱, 인증 규칙을 강제하는 서비스 계층.
- `routers.py`: /api/users, /api/auth/login 엔드포인트 정의.
"""

__all__ = []
