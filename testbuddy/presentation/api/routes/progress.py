"""
제출 기록/성과 API 라우터
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from testbuddy.core.security import verify_api_key
from testbuddy.domain.attempts.adapters.base import AttemptRecorder
from testbuddy.presentation.api.dependencies import get_attempt_recorder
from testbuddy.presentation.schemas.progress import (
    AttemptListResponse,
    AttemptView,
    ProgressResponse,
)

router = APIRouter(prefix="/users", tags=["Progress"], dependencies=[Depends(verify_api_key)])


@router.get("/{user_id}/attempts", response_model=AttemptListResponse, summary="제출 이력 조회")
async def list_attempts(
    user_id: str,
    problem_id: Optional[str] = Query(None, description="특정 문제로 제한"),
    recorder: AttemptRecorder = Depends(get_attempt_recorder),
) -> AttemptListResponse:
    attempts = await recorder.list_attempts(user_id, problem_id=problem_id)
    return AttemptListResponse(
        user_id=user_id, attempts=[AttemptView.from_attempt(a) for a in attempts]
    )


@router.get("/{user_id}/progress", response_model=ProgressResponse, summary="코딩 성과 요약")
async def get_progress(
    user_id: str,
    recorder: AttemptRecorder = Depends(get_attempt_recorder),
) -> ProgressResponse:
    summary = await recorder.get_performance_summary(user_id)
    return ProgressResponse(user_id=user_id, **summary)
