"""
Judge 클라이언트 팩토리
설정(JUDGE_BACKEND)에 따라 LLM 또는 Judge0 어댑터 생성
"""
import logging
from typing import Optional

from testbuddy.core.config import settings
from testbuddy.domain.judge.base import JudgeClient

logger = logging.getLogger(__name__)


def create_judge_client(backend: Optional[str] = None) -> JudgeClient:
    """
    Args:
        backend: "llm" 또는 "judge0" (기본값: settings.JUDGE_BACKEND)

    Raises:
        ValueError: 알 수 없는 백엔드
    """
    backend = (backend or settings.JUDGE_BACKEND).lower()

    if backend == "llm":
        from testbuddy.domain.judge.adapters.llm import LLMJudgeClient
        client: JudgeClient = LLMJudgeClient()
    elif backend == "judge0":
        from testbuddy.domain.judge.adapters.judge0 import Judge0JudgeClient
        client = Judge0JudgeClient()
    else:
        raise ValueError(f"알 수 없는 Judge 백엔드: {backend}")

    logger.info(f"[Judge] 클라이언트 생성 - backend: {backend}")
    return client
