"""
Rate Limiting Middleware

Gemini 호출 전에 호출 횟수를 확인하여 무료 티어 한도를 넘지 않도록 대기합니다.
"""

import asyncio
import logging
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Optional

from langchain_core.runnables import Runnable, RunnableConfig
from langchain_core.runnables.utils import Input, Output

logger = logging.getLogger(__name__)


class RateLimitingMiddleware:
    """
    슬라이딩 윈도우 방식 Rate Limiting

    사용 예시:
        ```python
        rate_limiter = RateLimitingMiddleware(max_calls=15, period=60.0)
        judge_chain = rate_limiter.wrap(judge_chain)
        ```
    """

    def __init__(
        self,
        max_calls: int = 15,
        period: float = 60.0,
        key_func: Optional[Callable[[Input], str]] = None,
    ):
        """
        Args:
            max_calls: 기간 내 최대 호출 횟수
            period: 기간 (초)
            key_func: 입력으로 제한 키를 만드는 함수 (None이면 전역 제한)
        """
        self.max_calls = max_calls
        self.period = period
        self.key_func = key_func
        self._calls: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()

    def _get_key(self, inputs: Input) -> str:
        if self.key_func:
            return str(self.key_func(inputs))
        return "global"

    async def _acquire(self, key: str) -> None:
        """호출 슬롯 확보 (슬롯이 없으면 가장 오래된 호출이 만료될 때까지 대기)"""
        while True:
            async with self._lock:
                now = time.monotonic()
                calls = self._calls[key]
                while calls and calls[0] <= now - self.period:
                    calls.popleft()

                if len(calls) < self.max_calls:
                    calls.append(now)
                    return

                wait_time = self.period - (now - calls[0])

            logger.warning(
                f"[Rate Limiting] 한도 초과 - key: {key}, 대기 시간: {wait_time:.2f}초 "
                f"({self.max_calls}/{self.period:g}초)"
            )
            await asyncio.sleep(wait_time)

    def wrap(self, chain: Runnable) -> Runnable:
        """Chain을 Rate Limiting으로 래핑"""
        middleware = self

        class RateLimitedRunnable(Runnable):
            async def ainvoke(
                self, inputs: Input, config: Optional[RunnableConfig] = None, **kwargs
            ) -> Output:
                await middleware._acquire(middleware._get_key(inputs))
                return await chain.ainvoke(inputs, config)

            def invoke(
                self, inputs: Input, config: Optional[RunnableConfig] = None, **kwargs
            ) -> Output:
                raise NotImplementedError("RateLimitingMiddleware는 비동기 호출만 지원합니다.")

        return RateLimitedRunnable()

    def __call__(self, chain: Runnable) -> Runnable:
        return self.wrap(chain)
