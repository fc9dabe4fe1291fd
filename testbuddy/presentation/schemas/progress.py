"""
제출 기록/성과 스키마
"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from testbuddy.domain.attempts.adapters.base import Attempt


class AttemptView(BaseModel):
    problem_id: str
    title: str
    difficulty: str
    language: str
    status: str
    score: float
    code_submitted: str
    attempted_at: datetime

    @classmethod
    def from_attempt(cls, attempt: Attempt) -> "AttemptView":
        return cls(
            problem_id=attempt.problem_id,
            title=attempt.title,
            difficulty=attempt.difficulty,
            language=attempt.language,
            status=attempt.status.value,
            score=attempt.score,
            code_submitted=attempt.code_submitted,
            attempted_at=attempt.attempted_at,
        )


class AttemptListResponse(BaseModel):
    user_id: str
    attempts: List[AttemptView] = Field(default_factory=list)


class ProgressResponse(BaseModel):
    user_id: str
    attempts: int = Field(0, description="전체 제출 수")
    problems_solved: int = Field(0, description="통과한 서로 다른 문제 수")
    average_score: float = Field(0.0, description="평균 점수")
