"""
제출 기록 어댑터 인터페이스 정의
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class AttemptStatus(str, enum.Enum):
    PASSED = "Passed"
    FAILED = "Failed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Attempt:
    """Submit 1회의 최종 결과 (append-only)"""

    user_id: str
    problem_id: str
    title: str
    difficulty: str
    language: str
    code_submitted: str
    status: AttemptStatus
    score: float
    attempted_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "problem_id": self.problem_id,
            "title": self.title,
            "difficulty": self.difficulty,
            "language": self.language,
            "code_submitted": self.code_submitted,
            "status": self.status.value,
            "score": self.score,
            "attempted_at": self.attempted_at.isoformat(),
        }


def summarize_attempts(attempts: List[Attempt]) -> Dict[str, Any]:
    """제출 기록 목록으로 성과 요약 계산 (코딩 제출만 집계, 퀴즈 항목 없음)"""
    if not attempts:
        return {"attempts": 0, "problems_solved": 0, "average_score": 0.0}

    solved = {a.problem_id for a in attempts if a.status == AttemptStatus.PASSED}
    average = sum(a.score for a in attempts) / len(attempts)
    return {
        "attempts": len(attempts),
        "problems_solved": len(solved),
        "average_score": round(average, 2),
    }


class AttemptRecorder(ABC):
    """제출 기록 어댑터 인터페이스"""

    @abstractmethod
    async def record(self, attempt: Attempt) -> None:
        """
        제출 기록 1건 추가

        멱등성 키가 없으므로 재시도 시 중복 기록이 생길 수 있습니다.

        Args:
            attempt: 기록할 제출 결과
        """
        pass

    @abstractmethod
    async def list_attempts(
        self, user_id: str, problem_id: Optional[str] = None
    ) -> List[Attempt]:
        """
        사용자 제출 이력 조회 (최신순)

        Args:
            user_id: 사용자 ID
            problem_id: 특정 문제로 제한 (선택)
        """
        pass

    @abstractmethod
    async def get_performance_summary(self, user_id: str) -> Dict[str, Any]:
        """
        Returns:
            {"attempts": int, "problems_solved": int, "average_score": float}
        """
        pass
