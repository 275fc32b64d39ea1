"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic_settings import BaseSettings
from pydantic import field_validator, model_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 캐시
    # memory | redis | hybrid | disabled
    cache_backend: str = "memory"
    cache_ttl: int = 600  # 10분
    memory_cache_capacity: int = 1024

    # Redis (cache_backend가 redis/hybrid일 때만 사용)
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout_s: float = 1.0
    redis_key_prefix: str = "metasearch"

    # 업스트림 엔진
    enabled_engines: list[str] = ["duckduckgo", "brave", "mojeek", "wikipedia"]
    engine_timeout_s: float = 3.0
    # 엔진별 가중치 (없으면 1.0)
    engine_weights: dict[str, float] = {}
    default_language: str = "en"

    # 결과 필터 (정규식, URL 전체에 search)
    result_blocklist: list[str] = []
    result_allowlist: list[str] = []

    # HTTP
    http_impersonate: str = "chrome110"
    http_max_clients: int = 20

    # 로깅
    log_level: str = "INFO"

    @field_validator("cache_backend")
    @classmethod
    def validate_cache_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("memory", "redis", "hybrid", "disabled"):
            raise ValueError("cache_backend must be one of memory, redis, hybrid, disabled")
        return v

    @field_validator("cache_ttl", "memory_cache_capacity")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache_ttl and memory_cache_capacity must be positive")
        return v

    @field_validator("engine_timeout_s", "redis_socket_timeout_s")
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("engine_weights")
    @classmethod
    def validate_engine_weights(cls, v: dict[str, float]) -> dict[str, float]:
        for name, weight in v.items():
            if weight <= 0:
                raise ValueError(f"engine weight for '{name}' must be positive")
        return v

    @model_validator(mode="after")
    def validate_redis_url(self) -> "Settings":
        if self.cache_backend in ("redis", "hybrid") and not self.redis_url:
            raise ValueError("redis_url must not be empty for redis/hybrid cache")
        return self

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
