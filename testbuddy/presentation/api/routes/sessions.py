"""
코딩 세션 API 라우터
"""
import logging

from fastapi import APIRouter, Depends, status

from testbuddy.application.services.session_service import SessionNotFoundError, SessionService
from testbuddy.core.security import verify_api_key
from testbuddy.domain.orchestrator.errors import (
    EvaluationInProgressError,
    HintUnavailableError,
    NoProblemLoadedError,
)
from testbuddy.domain.orchestrator.service import CodingSession
from testbuddy.presentation.api.dependencies import get_session_service
from testbuddy.presentation.api.errors import http_error
from testbuddy.presentation.schemas.common import ErrorResponse
from testbuddy.presentation.schemas.session import (
    ChangeLanguageRequest,
    CreateSessionRequest,
    HintResponse,
    LoadProblemRequest,
    SessionView,
    SolutionResponse,
    UpdateCodeRequest,
)

router = APIRouter(
    prefix="/sessions",
    tags=["Session"],
    dependencies=[Depends(verify_api_key)],
    responses={404: {"model": ErrorResponse, "description": "세션을 찾을 수 없음"}},
)
logger = logging.getLogger(__name__)

_CONFLICT = {409: {"model": ErrorResponse, "description": "평가 진행 중 또는 요청 불가 상태"}}


async def _load(service: SessionService, session_id: str) -> CodingSession:
    try:
        return await service.get_session(session_id)
    except SessionNotFoundError:
        raise http_error(
            status.HTTP_404_NOT_FOUND,
            "SESSION_NOT_FOUND",
            "세션을 찾을 수 없습니다.",
            {"session_id": session_id},
        )


def _conflict(session_id: str, e: Exception):
    if isinstance(e, EvaluationInProgressError):
        code = "EVALUATION_IN_PROGRESS"
    elif isinstance(e, NoProblemLoadedError):
        code = "NO_PROBLEM_LOADED"
    else:
        code = "HINT_UNAVAILABLE"
    return http_error(status.HTTP_409_CONFLICT, code, str(e), {"session_id": session_id})


@router.post(
    "",
    response_model=SessionView,
    status_code=status.HTTP_201_CREATED,
    summary="코딩 세션 생성",
)
async def create_session(
    request: CreateSessionRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionView:
    session = await service.create_session(
        user_id=request.userId, problem=request.problem, language=request.language
    )
    return SessionView.from_state(session.state)


@router.get("/{session_id}", response_model=SessionView, summary="세션 상태 조회")
async def get_session(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> SessionView:
    session = await _load(service, session_id)
    return SessionView.from_state(session.state)


@router.put(
    "/{session_id}/problem",
    response_model=SessionView,
    summary="문제 변경",
    description="새 문제를 로드합니다. 스타터 코드로 교체되고 이전 결과는 모두 폐기됩니다.",
)
async def load_problem(
    session_id: str,
    request: LoadProblemRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionView:
    session = await _load(service, session_id)
    state = await session.load_problem(request.problem, request.language)
    return SessionView.from_state(state)


@router.put("/{session_id}/code", response_model=SessionView, summary="코드 편집")
async def update_code(
    session_id: str,
    request: UpdateCodeRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionView:
    session = await _load(service, session_id)
    state = await session.update_code(request.code)
    return SessionView.from_state(state)


@router.put(
    "/{session_id}/language",
    response_model=SessionView,
    summary="언어 변경",
    description="해당 언어의 스타터 코드로 교체되고 이전 결과는 모두 폐기됩니다.",
)
async def change_language(
    session_id: str,
    request: ChangeLanguageRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionView:
    session = await _load(service, session_id)
    state = await session.change_language(request.language)
    return SessionView.from_state(state)


@router.post(
    "/{session_id}/run",
    response_model=SessionView,
    responses=_CONFLICT,
    summary="공개 예제로 실행",
)
async def run_code(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> SessionView:
    session = await _load(service, session_id)
    try:
        state = await session.run()
    except (EvaluationInProgressError, NoProblemLoadedError) as e:
        raise _conflict(session_id, e)
    return SessionView.from_state(state)


@router.post(
    "/{session_id}/submit",
    response_model=SessionView,
    responses=_CONFLICT,
    summary="숨겨진 테스트 케이스로 제출",
    description="""
    제출 결과를 집계하고 제출 기록을 1건 남깁니다.

    **참고:**
    - Wrong Answer인 경우 실패 설명은 백그라운드에서 생성됩니다 (explanation_loading).
    - 이후 세션 조회로 failure_explanation을 확인할 수 있습니다.
    """,
)
async def submit_code(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> SessionView:
    session = await _load(service, session_id)
    try:
        await session.submit()
    except (EvaluationInProgressError, NoProblemLoadedError) as e:
        raise _conflict(session_id, e)
    return SessionView.from_state(session.state)


@router.post(
    "/{session_id}/hint",
    response_model=HintResponse,
    responses=_CONFLICT,
    summary="힌트 요청",
)
async def get_hint(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> HintResponse:
    session = await _load(service, session_id)
    try:
        hint = await session.get_hint()
    except (HintUnavailableError, NoProblemLoadedError) as e:
        raise _conflict(session_id, e)
    return HintResponse(session_id=session_id, hint=hint)


@router.post(
    "/{session_id}/solution",
    response_model=SolutionResponse,
    responses=_CONFLICT,
    summary="정답 코드 공개",
)
async def reveal_solution(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> SolutionResponse:
    session = await _load(service, session_id)
    try:
        solution = await session.reveal_solution()
    except NoProblemLoadedError as e:
        raise _conflict(session_id, e)
    return SolutionResponse(
        session_id=session_id, language=session.state.language, solution=solution
    )
