# app/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

- `config.py`: 설정 및 환경 변수 관리 (Pydantic Settings).
- `logging.py`: 로깅 기본 설정.
- `database.py`: 데이터베이스 엔진, 세션, 헬스 체크 (SQLModel 및 AsyncSQLAlchemy).
- `crud_base.py`: 공통 비동기 CRUD 리포지토리 기반 클래스.
- `security.py`: 비밀번호 해싱 및 검증.
- `validation.py`: 서비스 계층에서 사용하는 구조 검증기.
- `exceptions.py`: 도메인 오류 분류 체계.
- `responses.py`: 모든 API 응답이 따르는 공통 응답 포맷(envelope).
- `middleware.py`: 요청 ID, 요청 로깅, 타임아웃, 예외 처리기.
- `dependencies.py`: FastAPI 의존성 주입 (세션 → 리포지토리 → 서비스).
"""

__title__ = "Boilerplate Core"
__all__ = []
