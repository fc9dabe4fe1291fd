"""
문제 생성 API 라우터
"""
import logging

from fastapi import APIRouter, Depends, status

from testbuddy.core.security import verify_api_key
from testbuddy.domain.advisory.service import AdvisoryService, ProblemGenerationError
from testbuddy.domain.problem.models import CodingProblem
from testbuddy.presentation.api.dependencies import get_advisory_service
from testbuddy.presentation.api.errors import http_error
from testbuddy.presentation.schemas.common import ErrorResponse
from testbuddy.presentation.schemas.problem import (
    GenerateProblemRequest,
    TopicCheckRequest,
    TopicCheckResponse,
)

router = APIRouter(prefix="/problems", tags=["Problem"], dependencies=[Depends(verify_api_key)])
logger = logging.getLogger(__name__)


@router.post(
    "/generate",
    response_model=CodingProblem,
    response_model_by_alias=True,
    responses={502: {"model": ErrorResponse, "description": "AI 문제 생성 실패"}},
    summary="지식 베이스로 코딩 문제 생성",
)
async def generate_problem(
    request: GenerateProblemRequest,
    advisory: AdvisoryService = Depends(get_advisory_service),
) -> CodingProblem:
    try:
        return await advisory.generate_problem(request.sourceText, request.difficulty)
    except ProblemGenerationError as e:
        logger.error(f"[GenerateProblem] 문제 생성 실패: {str(e)}")
        raise http_error(status.HTTP_502_BAD_GATEWAY, "PROBLEM_GENERATION_FAILED", str(e))


@router.post(
    "/topic-check",
    response_model=TopicCheckResponse,
    summary="프로그래밍 주제 여부 판별",
    description="코딩 챌린지를 노출할지 결정하기 위해 사용합니다. 판별 실패 시 false.",
)
async def check_topic(
    request: TopicCheckRequest,
    advisory: AdvisoryService = Depends(get_advisory_service),
) -> TopicCheckResponse:
    result = await advisory.is_programming_topic(request.sourceText)
    return TopicCheckResponse(is_programming_topic=result)
