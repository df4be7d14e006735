# tests/__init__.py

"""
FastAPI 애플리케이션의 테스트 스위트 패키지입니다.

- `conftest.py`: 테스트마다 새로 만드는 인메모리 SQLite DB, 세션, 사용자 팩토리, 테스트 클라이언트 픽스처.
- `test_main.py`, `test_middleware.py`, `test_core.py`: 헬스 체크, 미들웨어, core 유틸리티 테스트.
- `test_migrations.py`, `test_create_user_script.py`: Alembic 마이그레이션과 CLI 스크립트 테스트.
- `domains/`: 비즈니스 도메인별 테스트.
"""

__all__ = []
