"""
코딩 세션 서비스
진행 중인 CodingSession 레지스트리 + Redis 스냅샷

[목적]
- HTTP 요청 사이에 세션 객체(진행 중인 평가, 백그라운드 작업 포함)를 프로세스 메모리에 유지
- 상태가 바뀔 때마다 Redis에 스냅샷 저장 (프로세스 재시작 후 복원용)

[복원 규칙]
- 레지스트리에 없는 세션은 스냅샷에서 복원
- 스냅샷이 Running/Submitting 상태였다면 진행 중인 평가는 사라졌으므로 Idle로 복원
- 스냅샷 저장/조회 실패는 로그만 남기고 사용자 동작은 실패시키지 않음

[메모리 정리]
- 마지막 접근 후 idle_ttl_seconds(기본 SESSION_TTL_SECONDS)가 지난 세션은 레지스트리에서 제거
- 평가, 힌트, 실패 설명이 진행 중인 세션은 제거하지 않음
- 제거된 세션도 스냅샷이 남아 있으면 다음 조회 때 복원
"""
import asyncio
import logging
import time
from typing import Callable, Dict, Optional

from pydantic import ValidationError

from testbuddy.core.config import settings
from testbuddy.domain.advisory.service import AdvisoryService
from testbuddy.domain.attempts.adapters.base import AttemptRecorder
from testbuddy.domain.judge.base import JudgeClient
from testbuddy.domain.judge.models import SubmissionStatus
from testbuddy.domain.orchestrator.service import CodingSession
from testbuddy.domain.orchestrator.state import IN_FLIGHT_PHASES, SessionPhase, SessionState
from testbuddy.domain.problem.models import CodingProblem, Language
from testbuddy.infrastructure.repositories.session_state_repository import SessionStateRepository

logger = logging.getLogger(__name__)


class SessionNotFoundError(Exception):
    """레지스트리와 스냅샷 어디에도 없는 세션"""

    pass


def restore_state(snapshot: dict) -> SessionState:
    """스냅샷을 SessionState로 복원 (진행 중 상태는 Idle로)"""
    state = SessionState.model_validate(snapshot)
    if state.phase in IN_FLIGHT_PHASES:
        overall = state.overall_status
        state = state.model_copy(
            update={
                "phase": SessionPhase.IDLE,
                "overall_status": None if overall == SubmissionStatus.RUNNING else overall,
            }
        )
    return state.model_copy(update={"hint_loading": False, "explanation_loading": False})


class SessionService:
    """코딩 세션 관리 서비스"""

    def __init__(
        self,
        judge: JudgeClient,
        advisory: AdvisoryService,
        recorder: AttemptRecorder,
        state_repo: Optional[SessionStateRepository] = None,
        idle_ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            judge: 채점 오라클
            advisory: 힌트/설명/문제 생성 서비스
            recorder: 제출 기록 어댑터
            state_repo: 스냅샷 저장소 (None이면 스냅샷 비활성화)
            idle_ttl_seconds: 레지스트리 유지 시간 (None이면 SESSION_TTL_SECONDS)
            clock: 마지막 접근 시각 측정 함수
        """
        self.judge = judge
        self.advisory = advisory
        self.recorder = recorder
        self.state_repo = state_repo
        self.idle_ttl_seconds = (
            idle_ttl_seconds if idle_ttl_seconds is not None else settings.SESSION_TTL_SECONDS
        )
        self._clock = clock
        self._sessions: Dict[str, CodingSession] = {}
        self._last_access: Dict[str, float] = {}
        self._lock = asyncio.Lock()

    @property
    def active_session_count(self) -> int:
        return len(self._sessions)

    def _register(self, session: CodingSession):
        self._sessions[session.session_id] = session
        self._last_access[session.session_id] = self._clock()

    def evict_idle_sessions(self) -> int:
        """
        오래 접근하지 않은 유휴 세션을 레지스트리에서 제거

        Returns:
            제거된 세션 수
        """
        deadline = self._clock() - self.idle_ttl_seconds
        expired = [
            session_id
            for session_id, last_access in self._last_access.items()
            if last_access < deadline and not self._sessions[session_id].is_busy
        ]
        for session_id in expired:
            self._sessions.pop(session_id, None)
            self._last_access.pop(session_id, None)

        if expired:
            logger.info(
                f"[SessionService] 유휴 세션 정리 - evicted: {len(expired)}, remaining: {len(self._sessions)}"
            )
        return len(expired)

    def _build_session(self, state: SessionState) -> CodingSession:
        return CodingSession(
            state,
            judge=self.judge,
            advisory=self.advisory,
            recorder=self.recorder,
            on_change=self._snapshot,
        )

    async def _snapshot(self, state: SessionState):
        if self.state_repo is None:
            return
        try:
            await self.state_repo.save_state(
                state.session_id, state.model_dump(mode="json", by_alias=True)
            )
        except Exception as e:
            logger.warning(
                f"[SessionService] 스냅샷 저장 실패 - session_id: {state.session_id}, error: {str(e)}"
            )

    async def create_session(
        self,
        user_id: str,
        problem: Optional[CodingProblem] = None,
        language: Optional[Language] = None,
    ) -> CodingSession:
        """새 세션 생성 (문제가 있으면 스타터 코드 로드)"""
        session = CodingSession.create(
            user_id=user_id,
            judge=self.judge,
            advisory=self.advisory,
            recorder=self.recorder,
            problem=problem,
            language=language,
            on_change=self._snapshot,
        )
        self.evict_idle_sessions()
        self._register(session)
        await self._snapshot(session.state)

        logger.info(
            f"[SessionService] 세션 생성 - session_id: {session.session_id}, user_id: {user_id}, "
            f"problem: {problem.id if problem else None}"
        )
        return session

    async def get_session(self, session_id: str) -> CodingSession:
        """
        세션 조회 (없으면 스냅샷에서 복원)

        Raises:
            SessionNotFoundError: 세션 없음
        """
        session = self._sessions.get(session_id)
        if session is not None:
            self._last_access[session_id] = self._clock()
            self.evict_idle_sessions()
            return session

        self.evict_idle_sessions()
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._last_access[session_id] = self._clock()
                return session

            snapshot = await self._load_snapshot(session_id)
            if snapshot is None:
                raise SessionNotFoundError(f"세션을 찾을 수 없습니다: {session_id}")

            try:
                state = restore_state(snapshot)
            except ValidationError as e:
                logger.error(
                    f"[SessionService] 스냅샷 형식 오류 - session_id: {session_id}, error: {str(e)}"
                )
                raise SessionNotFoundError(f"세션을 복원할 수 없습니다: {session_id}") from e

            session = self._build_session(state)
            self._register(session)
            logger.info(
                f"[SessionService] 스냅샷에서 세션 복원 - session_id: {session_id}, phase: {state.phase.value}"
            )
            return session

    async def _load_snapshot(self, session_id: str) -> Optional[dict]:
        if self.state_repo is None:
            return None
        try:
            return await self.state_repo.get_state(session_id)
        except Exception as e:
            logger.warning(
                f"[SessionService] 스냅샷 조회 실패 - session_id: {session_id}, error: {str(e)}"
            )
            return None

    async def shutdown(self):
        """백그라운드 작업 대기 후 Judge 리소스 정리"""
        for session in list(self._sessions.values()):
            await session.wait_for_background_tasks()
        await self.judge.close()
        logger.info(f"[SessionService] 종료 - sessions: {len(self._sessions)}")
