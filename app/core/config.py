# app/core/config.py

from typing import Any, List, Optional
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일을 명시적으로 지정
        env_file_encoding='utf-8',
        extra='ignore',                      # .env 파일에 정의되었지만 모델에 없는 변수는 무시
        case_sensitive=True                  # 환경 변수 이름 대소문자 구분
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "fastapi-boilerplate"
    APP_VERSION: str = "1.0.0"
    # 애플리케이션 환경 (예: "development", "production", "testing")
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    APP_PORT: int = Field(8080, description="HTTP port used by the uvicorn runner")
    # 디버그 모드 활성화 여부 (development 환경에서만 에러 응답에 스택 트레이스 포함)
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for detailed logging and error messages")

    # --- 데이터베이스 설정 ---
    # DATABASE_URL이 없으면 DB_* 값으로 조합합니다.
    DATABASE_URL: Optional[SecretStr] = Field(None, description="Async SQLAlchemy database URL")
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: SecretStr = SecretStr("password")
    DB_NAME: str = "fastapi_boilerplate"
    AUTO_MIGRATE: bool = Field(True, description="Create missing tables on startup")

    # --- CORS 설정 (쉼표로 구분된 문자열) ---
    CORS_ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:8080"
    CORS_ALLOWED_METHODS: str = "GET,POST,PUT,DELETE,OPTIONS"
    CORS_ALLOWED_HEADERS: str = "Content-Type"

    # --- 로깅 / 요청 처리 설정 ---
    LOG_LEVEL: str = Field("debug", description="Root log level (debug, info, warning, error)")
    REQUEST_TIMEOUT_SECONDS: float = Field(30.0, gt=0, description="Per-request processing timeout")

    # Post-initialization (Pydantic v2 BaseSettings)
    def model_post_init(self, __context: Any) -> None:  # noqa: ANN001
        if self.DATABASE_URL is None:
            self.DATABASE_URL = SecretStr(
                f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD.get_secret_value()}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )

    @property
    def cors_origins_list(self) -> List[str]:
        return _split_csv(self.CORS_ALLOWED_ORIGINS)

    @property
    def cors_methods_list(self) -> List[str]:
        return _split_csv(self.CORS_ALLOWED_METHODS)

    @property
    def cors_headers_list(self) -> List[str]:
        return _split_csv(self.CORS_ALLOWED_HEADERS)

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"


settings = Settings()
