# app/core/logging.py

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "info") -> None:
    """애플리케이션 전역 로깅 기본값을 설정합니다. (LOG_LEVEL 환경 변수 기준)"""
    log_level = getattr(logging, level.upper(), None)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    # 핸들러가 이미 구성된 경우(uvicorn 등) basicConfig는 무시되므로 레벨은 직접 지정합니다.
    logging.getLogger().setLevel(log_level)
