"""
Retry Middleware

Rate limit, quota, timeout 계열 에러에 대해 백오프 후 재시도합니다.
채점 오라클 호출에는 적용하지 않습니다 (재시도 정책 없음).
"""

import asyncio
import logging
from typing import Callable, Optional, Tuple, Type

from langchain_core.runnables import Runnable, RunnableConfig
from langchain_core.runnables.utils import Input, Output

logger = logging.getLogger(__name__)

TRANSIENT_ERROR_KEYWORDS = ("rate", "quota", "timeout", "429", "503", "unavailable")


class RetryMiddleware:
    """
    Retry Middleware

    사용 예시:
        ```python
        retry_middleware = RetryMiddleware(max_retries=2, backoff_strategy="exponential")
        hint_chain = retry_middleware.wrap(hint_chain)
        ```
    """

    def __init__(
        self,
        max_retries: int = 2,
        retry_exceptions: Optional[Tuple[Type[Exception], ...]] = None,
        backoff_strategy: str = "exponential",
        initial_delay: float = 1.0,
        max_delay: float = 30.0,
        retry_condition: Optional[Callable[[Exception], bool]] = None,
    ):
        """
        Args:
            max_retries: 최대 재시도 횟수 (초기 시도 제외)
            retry_exceptions: 무조건 재시도할 예외 타입
            backoff_strategy: "exponential", "linear", "fixed"
            initial_delay: 초기 대기 시간 (초)
            max_delay: 최대 대기 시간 (초)
            retry_condition: 재시도 여부를 직접 판단하는 함수
        """
        self.max_retries = max_retries
        self.retry_exceptions = retry_exceptions or (asyncio.TimeoutError, ConnectionError)
        self.backoff_strategy = backoff_strategy
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.retry_condition = retry_condition

    def _should_retry(self, exception: Exception, attempt: int) -> bool:
        if attempt >= self.max_retries:
            return False

        if self.retry_condition:
            return self.retry_condition(exception)

        if isinstance(exception, self.retry_exceptions):
            return True

        error_msg = str(exception).lower()
        return any(keyword in error_msg for keyword in TRANSIENT_ERROR_KEYWORDS)

    def _calculate_delay(self, attempt: int) -> float:
        if self.backoff_strategy == "exponential":
            delay = self.initial_delay * (2**attempt)
        elif self.backoff_strategy == "linear":
            delay = self.initial_delay * (attempt + 1)
        else:
            delay = self.initial_delay
        return min(delay, self.max_delay)

    async def _run(self, chain: Runnable, inputs: Input, config: Optional[RunnableConfig]) -> Output:
        attempt = 0
        while True:
            try:
                result = await chain.ainvoke(inputs, config)
                if attempt > 0:
                    logger.info(f"[Retry] 재시도 성공 - 시도 횟수: {attempt + 1}")
                return result
            except Exception as e:
                if not self._should_retry(e, attempt):
                    logger.error(
                        f"[Retry] 재시도 중단 - 시도 횟수: {attempt + 1}, 에러: {str(e)[:200]}"
                    )
                    raise

                delay = self._calculate_delay(attempt)
                logger.warning(
                    f"[Retry] 재시도 대기 - 시도 횟수: {attempt + 1}/{self.max_retries + 1}, "
                    f"대기 시간: {delay:.2f}초, 에러: {str(e)[:100]}"
                )
                await asyncio.sleep(delay)
                attempt += 1

    def wrap(self, chain: Runnable) -> Runnable:
        """Chain을 Retry로 래핑"""
        middleware = self

        class RetryRunnable(Runnable):
            async def ainvoke(
                self, inputs: Input, config: Optional[RunnableConfig] = None, **kwargs
            ) -> Output:
                return await middleware._run(chain, inputs, config)

            def invoke(
                self, inputs: Input, config: Optional[RunnableConfig] = None, **kwargs
            ) -> Output:
                raise NotImplementedError("RetryMiddleware는 비동기 호출만 지원합니다.")

        return RetryRunnable()

    def __call__(self, chain: Runnable) -> Runnable:
        return self.wrap(chain)
