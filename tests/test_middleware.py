"""
Middleware 테스트
Rate Limiting, Retry, Logging Middleware의 동작을 검증합니다.
"""
import asyncio
import logging
import time
from unittest.mock import AsyncMock

import pytest
from langchain_core.runnables import RunnableLambda
from langchain_core.runnables.utils import Input

from testbuddy.domain.llm.middleware import (
    LoggingMiddleware,
    RateLimitingMiddleware,
    RetryMiddleware,
    get_rate_limiter,
    wrap_chain_with_middleware,
)


class TestRateLimitingMiddleware:
    """Rate Limiting Middleware 테스트"""

    @pytest.mark.asyncio
    async def test_rate_limiting_waits_for_slot(self):
        mock_chain = AsyncMock()
        mock_chain.ainvoke = AsyncMock(return_value="result")

        # 0.5초에 2회 제한
        rate_limiter = RateLimitingMiddleware(max_calls=2, period=0.5)
        wrapped_chain = rate_limiter.wrap(mock_chain)

        start_time = time.monotonic()
        await wrapped_chain.ainvoke({"input": "test1"})
        await wrapped_chain.ainvoke({"input": "test2"})
        assert time.monotonic() - start_time < 0.3

        # 세 번째 호출은 첫 호출이 만료될 때까지 대기
        result = await wrapped_chain.ainvoke({"input": "test3"})
        elapsed = time.monotonic() - start_time

        assert result == "result"
        assert elapsed >= 0.4
        assert mock_chain.ainvoke.call_count == 3

    @pytest.mark.asyncio
    async def test_rate_limiting_key_based(self):
        mock_chain = AsyncMock()
        mock_chain.ainvoke = AsyncMock(return_value="result")

        def key_func(inputs: Input) -> str:
            return str(inputs.get("session_id", "default"))

        rate_limiter = RateLimitingMiddleware(max_calls=1, period=5.0, key_func=key_func)
        wrapped_chain = rate_limiter.wrap(mock_chain)

        # 다른 키는 각각 독립적으로 제한 (대기 없음)
        start_time = time.monotonic()
        await wrapped_chain.ainvoke({"session_id": "a"})
        await wrapped_chain.ainvoke({"session_id": "b"})

        assert time.monotonic() - start_time < 0.5
        assert mock_chain.ainvoke.call_count == 2


class TestRetryMiddleware:
    """Retry Middleware 테스트"""

    @pytest.mark.asyncio
    async def test_retry_success_on_second_attempt(self):
        mock_chain = AsyncMock()
        mock_chain.ainvoke = AsyncMock(side_effect=[Exception("Rate limit exceeded"), "result"])

        retry_middleware = RetryMiddleware(max_retries=3, initial_delay=0.01, backoff_strategy="fixed")
        result = await retry_middleware.wrap(mock_chain).ainvoke({"input": "test"})

        assert result == "result"
        assert mock_chain.ainvoke.call_count == 2

    @pytest.mark.asyncio
    async def test_retry_exhausted(self):
        mock_chain = AsyncMock()
        mock_chain.ainvoke = AsyncMock(side_effect=Exception("429 quota exceeded"))

        retry_middleware = RetryMiddleware(max_retries=2, initial_delay=0.01, backoff_strategy="fixed")

        with pytest.raises(Exception, match="quota exceeded"):
            await retry_middleware.wrap(mock_chain).ainvoke({"input": "test"})

        # 최대 재시도 횟수 + 1 (초기 시도)
        assert mock_chain.ainvoke.call_count == 3

    @pytest.mark.asyncio
    async def test_non_transient_error_not_retried(self):
        mock_chain = AsyncMock()
        mock_chain.ainvoke = AsyncMock(side_effect=ValueError("invalid argument"))

        retry_middleware = RetryMiddleware(max_retries=2, initial_delay=0.01)

        with pytest.raises(ValueError):
            await retry_middleware.wrap(mock_chain).ainvoke({"input": "test"})
        assert mock_chain.ainvoke.call_count == 1

    @pytest.mark.asyncio
    async def test_retry_exponential_backoff(self):
        mock_chain = AsyncMock()
        mock_chain.ainvoke = AsyncMock(side_effect=asyncio.TimeoutError())

        retry_middleware = RetryMiddleware(max_retries=2, initial_delay=0.05, backoff_strategy="exponential")

        start_time = time.monotonic()
        with pytest.raises(asyncio.TimeoutError):
            await retry_middleware.wrap(mock_chain).ainvoke({"input": "test"})
        elapsed = time.monotonic() - start_time

        # 0.05초 + 0.1초 대기
        assert elapsed >= 0.14
        assert mock_chain.ainvoke.call_count == 3

    def test_delay_capped(self):
        retry_middleware = RetryMiddleware(initial_delay=1.0, max_delay=3.0)
        assert retry_middleware._calculate_delay(0) == 1.0
        assert retry_middleware._calculate_delay(5) == 3.0


class TestLoggingMiddleware:
    """Logging Middleware 테스트"""

    @pytest.mark.asyncio
    async def test_logging_middleware_basic(self, caplog):
        caplog.set_level(logging.INFO)
        mock_chain = AsyncMock()
        mock_chain.ainvoke = AsyncMock(return_value="result")

        wrapped_chain = LoggingMiddleware(log_level=logging.INFO).wrap(mock_chain, name="HintChain")
        result = await wrapped_chain.ainvoke({"input": "test"})

        assert result == "result"
        assert any("[HintChain]" in record.message for record in caplog.records)

    @pytest.mark.asyncio
    async def test_logging_middleware_error(self, caplog):
        caplog.set_level(logging.ERROR)
        mock_chain = AsyncMock()
        mock_chain.ainvoke = AsyncMock(side_effect=Exception("Test error"))

        wrapped_chain = LoggingMiddleware().wrap(mock_chain, name="HintChain")
        with pytest.raises(Exception, match="Test error"):
            await wrapped_chain.ainvoke({"input": "test"})

        error_logs = [r for r in caplog.records if r.levelno >= logging.ERROR]
        assert any("[HintChain]" in r.message for r in error_logs)

    def test_truncate(self):
        middleware = LoggingMiddleware(truncate_length=5)
        assert middleware._truncate("abcdefgh") == "abcde..."


class TestMiddlewareFactory:
    """공통 래핑 함수 테스트"""

    @pytest.mark.asyncio
    async def test_wrap_with_actual_chain(self):
        async def add_one(inputs: Input):
            return inputs.get("value", 0) + 1

        wrapped_chain = wrap_chain_with_middleware(RunnableLambda(add_one), name="AddOneChain")
        assert await wrapped_chain.ainvoke({"value": 5}) == 6

    @pytest.mark.asyncio
    async def test_without_retry_fails_once(self):
        mock_chain = AsyncMock()
        mock_chain.ainvoke = AsyncMock(side_effect=Exception("503 unavailable"))

        wrapped_chain = wrap_chain_with_middleware(mock_chain, name="JudgeChain", with_retry=False)
        with pytest.raises(Exception, match="unavailable"):
            await wrapped_chain.ainvoke({"input": "test"})
        assert mock_chain.ainvoke.call_count == 1

    def test_rate_limiter_is_shared(self):
        assert get_rate_limiter() is get_rate_limiter()
