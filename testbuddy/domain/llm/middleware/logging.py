"""
Logging Middleware

Chain 실행 전후로 입력/출력 요약과 실행 시간을 기록합니다.
"""

import logging
import time
from typing import Any, Optional

from langchain_core.runnables import Runnable, RunnableConfig
from langchain_core.runnables.utils import Input, Output

logger = logging.getLogger(__name__)


class LoggingMiddleware:
    """
    Logging Middleware

    사용 예시:
        ```python
        logging_middleware = LoggingMiddleware(log_level=logging.INFO)
        judge_chain = logging_middleware.wrap(judge_chain, name="JudgeChain")
        ```
    """

    def __init__(
        self,
        log_level: int = logging.INFO,
        log_input: bool = True,
        log_output: bool = True,
        log_timing: bool = True,
        truncate_length: int = 120,
    ):
        self.log_level = log_level
        self.log_input = log_input
        self.log_output = log_output
        self.log_timing = log_timing
        self.truncate_length = truncate_length

    def _truncate(self, value: Any) -> str:
        text = str(value)
        if len(text) > self.truncate_length:
            return text[: self.truncate_length] + "..."
        return text

    async def _run(
        self, chain: Runnable, name: str, inputs: Input, config: Optional[RunnableConfig]
    ) -> Output:
        start_time = time.perf_counter()
        if self.log_input:
            logger.log(self.log_level, f"[{name}] 입력 - {self._truncate(inputs)}")

        try:
            result = await chain.ainvoke(inputs, config)
        except Exception as e:
            elapsed = time.perf_counter() - start_time
            logger.error(
                f"[{name}] 에러 발생 - 실행 시간: {elapsed:.3f}초, 에러: {str(e)}",
                exc_info=True,
            )
            raise

        elapsed = time.perf_counter() - start_time
        if self.log_output:
            logger.log(self.log_level, f"[{name}] 출력 - {self._truncate(result)}")
        if self.log_timing:
            logger.log(self.log_level, f"[{name}] 실행 시간 - {elapsed:.3f}초")
        return result

    def wrap(self, chain: Runnable, name: str = "Chain") -> Runnable:
        """Chain을 Logging으로 래핑"""
        middleware = self

        class LoggedRunnable(Runnable):
            async def ainvoke(
                self, inputs: Input, config: Optional[RunnableConfig] = None, **kwargs
            ) -> Output:
                return await middleware._run(chain, name, inputs, config)

            def invoke(
                self, inputs: Input, config: Optional[RunnableConfig] = None, **kwargs
            ) -> Output:
                raise NotImplementedError("LoggingMiddleware는 비동기 호출만 지원합니다.")

        return LoggedRunnable()

    def __call__(self, chain: Runnable, name: str = "Chain") -> Runnable:
        return self.wrap(chain, name)
