"""
코딩 제출 기록 Repository
PostgreSQL coding_attempts 테이블 접근

[목적]
- Submit 1회당 제출 기록 1건 추가 (append-only, 수정/삭제 없음)
- 사용자별 제출 이력 조회 및 성과 요약

[주의]
- 멱등성 키가 없으므로 전송 계층 재시도 시 중복 기록이 생길 수 있음
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from testbuddy.infrastructure.persistence.models.attempts import CodingAttempt
from testbuddy.infrastructure.persistence.models.enums import (
    AttemptStatusEnum,
    DifficultyEnum,
    LanguageEnum,
)


class AttemptRepository:
    """코딩 제출 기록 데이터 접근 계층"""

    def __init__(self, db: AsyncSession):
        """
        Args:
            db: SQLAlchemy 비동기 세션 (커밋은 호출자 책임)
        """
        self.db = db

    async def add_attempt(
        self,
        user_id: str,
        problem_id: str,
        title: str,
        difficulty: str,
        language: str,
        code_submitted: str,
        status: str,
        score: float,
        attempted_at=None,
    ) -> CodingAttempt:
        """
        제출 기록 추가

        Returns:
            생성된 CodingAttempt (id 포함)
        """
        attempt = CodingAttempt(
            user_id=user_id,
            problem_id=problem_id,
            title=title,
            difficulty=DifficultyEnum(difficulty),
            language=LanguageEnum(language),
            code_submitted=code_submitted,
            status=AttemptStatusEnum(status),
            score=Decimal(str(score)),
        )
        if attempted_at is not None:
            attempt.attempted_at = attempted_at

        self.db.add(attempt)
        await self.db.flush()  # ID 생성을 위해 flush
        return attempt

    async def list_attempts(
        self,
        user_id: str,
        problem_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[CodingAttempt]:
        """사용자 제출 이력 (최신순)"""
        query = select(CodingAttempt).where(CodingAttempt.user_id == user_id)
        if problem_id is not None:
            query = query.where(CodingAttempt.problem_id == problem_id)
        query = query.order_by(CodingAttempt.attempted_at.desc(), CodingAttempt.id.desc())
        if limit:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_performance_summary(self, user_id: str) -> Dict[str, Any]:
        """
        사용자 코딩 성과 요약

        Returns:
            {
                "attempts": int,          # 전체 제출 수
                "problems_solved": int,   # Passed 기록이 있는 서로 다른 문제 수
                "average_score": float,   # 전체 제출 평균 점수 (소수 2자리)
            }
        """
        totals = await self.db.execute(
            select(func.count(CodingAttempt.id), func.avg(CodingAttempt.score)).where(
                CodingAttempt.user_id == user_id
            )
        )
        attempts, average = totals.one()

        solved = await self.db.execute(
            select(func.count(distinct(CodingAttempt.problem_id))).where(
                CodingAttempt.user_id == user_id,
                CodingAttempt.status == AttemptStatusEnum.PASSED,
            )
        )

        return {
            "attempts": int(attempts or 0),
            "problems_solved": int(solved.scalar() or 0),
            "average_score": round(float(average), 2) if average is not None else 0.0,
        }
