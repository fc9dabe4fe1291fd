"""
PostgreSQL 기반 제출 기록 어댑터
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from testbuddy.domain.attempts.adapters.base import Attempt, AttemptRecorder, AttemptStatus
from testbuddy.infrastructure.persistence.models.attempts import CodingAttempt
from testbuddy.infrastructure.persistence.session import get_db_context
from testbuddy.infrastructure.repositories.attempt_repository import AttemptRepository

logger = logging.getLogger(__name__)


def _to_attempt(row: CodingAttempt) -> Attempt:
    return Attempt(
        user_id=row.user_id,
        problem_id=row.problem_id,
        title=row.title,
        difficulty=row.difficulty.value,
        language=row.language.value,
        code_submitted=row.code_submitted,
        status=AttemptStatus(row.status.value),
        score=float(row.score),
        attempted_at=row.attempted_at,
    )


class DatabaseAttemptRecorder(AttemptRecorder):
    """coding_attempts 테이블에 기록"""

    def __init__(self, db_context: Optional[Callable] = None):
        """
        Args:
            db_context: AsyncSession을 여는 async context manager 팩토리 (기본값: get_db_context)
        """
        self.db_context = db_context or get_db_context

    async def record(self, attempt: Attempt) -> None:
        async with self.db_context() as db:
            row = await AttemptRepository(db).add_attempt(
                user_id=attempt.user_id,
                problem_id=attempt.problem_id,
                title=attempt.title,
                difficulty=attempt.difficulty,
                language=attempt.language,
                code_submitted=attempt.code_submitted,
                status=attempt.status.value,
                score=attempt.score,
                attempted_at=attempt.attempted_at,
            )
            logger.info(
                f"[AttemptRecorder] DB 저장 완료 - id: {row.id}, user_id: {attempt.user_id}, "
                f"problem_id: {attempt.problem_id}, status: {attempt.status.value}, score: {attempt.score}"
            )

    async def list_attempts(
        self, user_id: str, problem_id: Optional[str] = None
    ) -> List[Attempt]:
        async with self.db_context() as db:
            rows = await AttemptRepository(db).list_attempts(user_id, problem_id=problem_id)
            return [_to_attempt(row) for row in rows]

    async def get_performance_summary(self, user_id: str) -> Dict[str, Any]:
        async with self.db_context() as db:
            return await AttemptRepository(db).get_performance_summary(user_id)
