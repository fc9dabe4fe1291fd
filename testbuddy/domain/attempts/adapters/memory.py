"""
메모리 기반 제출 기록 어댑터 (개발/테스트용)
"""

import asyncio
from typing import Any, Dict, List, Optional

from testbuddy.domain.attempts.adapters.base import Attempt, AttemptRecorder, summarize_attempts


class MemoryAttemptRecorder(AttemptRecorder):
    """메모리 기반 제출 기록 (개발/테스트용)"""

    def __init__(self):
        self.attempts: List[Attempt] = []
        self.lock = asyncio.Lock()

    async def record(self, attempt: Attempt) -> None:
        async with self.lock:
            self.attempts.append(attempt)

    async def list_attempts(
        self, user_id: str, problem_id: Optional[str] = None
    ) -> List[Attempt]:
        matched = [
            a for a in self.attempts
            if a.user_id == user_id and (problem_id is None or a.problem_id == problem_id)
        ]
        # 같은 시각이면 나중에 추가된 기록이 먼저
        return [a for _, a in sorted(
            enumerate(matched), key=lambda item: (item[1].attempted_at, item[0]), reverse=True
        )]

    async def get_performance_summary(self, user_id: str) -> Dict[str, Any]:
        return summarize_attempts([a for a in self.attempts if a.user_id == user_id])
