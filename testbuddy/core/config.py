"""
환경 설정 모듈
PostgreSQL, Redis, LLM API, Judge 백엔드 등의 설정을 관리합니다.
"""
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """애플리케이션 환경 설정"""

    # 앱 기본 설정
    APP_NAME: str = "TestBuddy Coding Worker"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # FastAPI 설정
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_KEY: Optional[str] = None  # None이면 API 키 검증 생략

    # PostgreSQL 설정 (제출 기록 영구 저장)
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "testbuddy"

    @property
    def POSTGRES_URL(self) -> str:
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Redis 설정 (세션 상태 스냅샷)
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: Optional[str] = None
    REDIS_DB: int = 0
    SESSION_TTL_SECONDS: int = 3600  # 1시간

    @property
    def REDIS_URL(self) -> str:
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    # LLM API 설정
    GEMINI_API_KEY: Optional[str] = None

    # 기본 LLM 설정 (역할별 모델은 비어 있으면 DEFAULT_LLM_MODEL 사용)
    DEFAULT_LLM_MODEL: str = "gemini-2.5-flash"
    JUDGE_LLM_MODEL: Optional[str] = "gemini-2.5-pro"
    ADVISORY_LLM_MODEL: Optional[str] = None
    LLM_TEMPERATURE: float = 0.2
    LLM_MAX_TOKENS: int = 4096

    # Judge 설정 (코드 실행 평가)
    JUDGE_BACKEND: str = "llm"  # "llm" | "judge0"
    EVALUATION_TIMEOUT_SECONDS: float = 120.0
    JUDGE0_API_URL: str = "http://localhost:2358"
    JUDGE0_API_KEY: Optional[str] = None
    JUDGE0_USE_RAPIDAPI: bool = False
    JUDGE0_RAPIDAPI_HOST: str = "judge0-ce.p.rapidapi.com"
    JUDGE0_CPU_TIME_LIMIT: int = 5  # 초
    JUDGE0_MEMORY_LIMIT_MB: int = 128

    # Middleware 설정
    MIDDLEWARE_RATE_LIMIT_MAX_CALLS: int = 15
    MIDDLEWARE_RATE_LIMIT_PERIOD: float = 60.0
    MIDDLEWARE_RETRY_MAX_RETRIES: int = 2
    MIDDLEWARE_RETRY_INITIAL_DELAY: float = 1.0
    MIDDLEWARE_RETRY_MAX_DELAY: float = 30.0
    MIDDLEWARE_RETRY_BACKOFF_STRATEGY: str = "exponential"
    MIDDLEWARE_LOGGING_ENABLED: bool = True

    # 저장소 선택
    PERSIST_ATTEMPTS_TO_DB: bool = True
    USE_REDIS_SESSION_STORE: bool = True

    # 지식 베이스 길이 제한 (뒤쪽 텍스트 유지)
    KNOWLEDGE_BASE_MAX_CHARS: int = 15000
    TOPIC_CHECK_MAX_CHARS: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """싱글톤 설정 객체 반환"""
    return Settings()


settings = get_settings()
