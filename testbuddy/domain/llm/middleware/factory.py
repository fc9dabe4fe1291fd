"""
Middleware Factory
Chain 래핑을 위한 공통 함수
"""

import logging
from functools import lru_cache

from langchain_core.runnables import Runnable

from testbuddy.core.config import settings
from testbuddy.domain.llm.middleware.logging import LoggingMiddleware
from testbuddy.domain.llm.middleware.rate_limiting import RateLimitingMiddleware
from testbuddy.domain.llm.middleware.retry import RetryMiddleware


@lru_cache()
def get_rate_limiter() -> RateLimitingMiddleware:
    """프로세스 전체에서 공유하는 Rate Limiter (모든 Gemini 호출 합산)"""
    return RateLimitingMiddleware(
        max_calls=settings.MIDDLEWARE_RATE_LIMIT_MAX_CALLS,
        period=settings.MIDDLEWARE_RATE_LIMIT_PERIOD,
    )


def create_retry_middleware() -> RetryMiddleware:
    return RetryMiddleware(
        max_retries=settings.MIDDLEWARE_RETRY_MAX_RETRIES,
        initial_delay=settings.MIDDLEWARE_RETRY_INITIAL_DELAY,
        max_delay=settings.MIDDLEWARE_RETRY_MAX_DELAY,
        backoff_strategy=settings.MIDDLEWARE_RETRY_BACKOFF_STRATEGY,
    )


def create_logging_middleware() -> LoggingMiddleware:
    return LoggingMiddleware(
        log_level=logging.INFO if settings.MIDDLEWARE_LOGGING_ENABLED else logging.DEBUG,
    )


def wrap_chain_with_middleware(
    chain: Runnable, name: str = "Chain", with_retry: bool = True
) -> Runnable:
    """
    Chain에 Middleware 적용

    적용 순서: Rate Limiting -> Retry (선택) -> Logging -> Chain

    Args:
        chain: 래핑할 Chain
        name: Chain 이름 (로깅용)
        with_retry: 재시도 적용 여부 (채점 오라클은 False)
    """
    wrapped = create_logging_middleware().wrap(chain, name=name)
    if with_retry:
        wrapped = create_retry_middleware().wrap(wrapped)
    return get_rate_limiter().wrap(wrapped)
