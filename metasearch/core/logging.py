"""로깅 설정"""
import logging
import sys
import os
from metasearch.core.config import settings


# Production 환경에서는 DEBUG 로그 비활성화
IS_PRODUCTION = os.getenv("ENVIRONMENT", "development") == "production"


def setup_logging() -> logging.Logger:
    """로거 초기화 및 설정"""

    logger = logging.getLogger("metasearch")

    # Production에서는 최소 INFO 레벨
    log_level = settings.log_level.upper()
    if IS_PRODUCTION and log_level == "DEBUG":
        log_level = "INFO"

    logger.setLevel(getattr(logging, log_level, logging.INFO))

    # 콘솔 핸들러
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, log_level, logging.INFO))

    if IS_PRODUCTION:
        # Production: 최소 정보만
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
    else:
        # Development: 상세 정보
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    console_handler.setFormatter(formatter)

    if not logger.handlers:
        logger.addHandler(console_handler)

    return logger


logger = setup_logging()


def sanitize_for_log(value: str, max_length: int = 80) -> str:
    """검색어 등 사용자 입력을 로그용으로 축약

    사용자 검색어는 식별 정보가 될 수 있으므로 Production에서는 길이만 남깁니다.

    Args:
        value: 로깅할 문자열
        max_length: 최대 길이

    Returns:
        축약된 문자열
    """
    if not value:
        return "[empty]"

    if IS_PRODUCTION:
        return f"[{len(value)} chars]"

    result = value.replace("\n", " ").replace("\r", " ")
    if len(result) > max_length:
        result = result[:max_length] + "..."
    return result
