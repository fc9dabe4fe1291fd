"""
LangChain Middleware 모듈

Rate Limiting, Retry, Logging Middleware를 제공합니다.
"""

from testbuddy.domain.llm.middleware.factory import (
    get_rate_limiter, wrap_chain_with_middleware)
from testbuddy.domain.llm.middleware.logging import LoggingMiddleware
from testbuddy.domain.llm.middleware.rate_limiting import \
    RateLimitingMiddleware
from testbuddy.domain.llm.middleware.retry import RetryMiddleware

__all__ = [
    "RateLimitingMiddleware",
    "RetryMiddleware",
    "LoggingMiddleware",
    "get_rate_limiter",
    "wrap_chain_with_middleware",
]
