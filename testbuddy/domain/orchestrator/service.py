"""
코딩 세션 오케스트레이터

세션 하나의 Run/Submit 흐름을 관리합니다.
- 세션당 동시에 하나의 평가만 허용 (진행 중이면 EvaluationInProgressError, 언어 변경 후에도 유지)
- generation 카운터로 늦게 도착한 결과(평가, 힌트, 설명)를 폐기
- Submit 1회당 제출 기록 정확히 1건
- Wrong Answer일 때만 실패 설명을 백그라운드로 요청
"""

import asyncio
import inspect
import logging
import uuid
from typing import Awaitable, Callable, Optional, Set, Union

from testbuddy.domain.advisory.models import FailedCase
from testbuddy.domain.advisory.service import EXPLANATION_FALLBACK, AdvisoryService
from testbuddy.domain.attempts.adapters.base import Attempt, AttemptRecorder, AttemptStatus
from testbuddy.domain.judge.base import JudgeClient
from testbuddy.domain.judge.models import SubmissionStatus
from testbuddy.domain.orchestrator import state as transitions
from testbuddy.domain.orchestrator.errors import (
    EvaluationInProgressError,
    HintUnavailableError,
    NoProblemLoadedError,
)
from testbuddy.domain.orchestrator.state import SessionState, SubmissionOutcome
from testbuddy.domain.problem.models import CodingProblem, Language

logger = logging.getLogger(__name__)

HINT_ERROR_MESSAGE = "Sorry, an error occurred while generating a hint."

StateListener = Callable[[SessionState], Union[None, Awaitable[None]]]


class CodingSession:
    """코딩 챌린지 세션 (상태 1개 소유)"""

    def __init__(
        self,
        state: SessionState,
        judge: JudgeClient,
        advisory: AdvisoryService,
        recorder: AttemptRecorder,
        on_change: Optional[StateListener] = None,
    ):
        """
        Args:
            state: 초기 상태
            judge: 채점 오라클
            advisory: 힌트/설명 서비스
            recorder: 제출 기록 어댑터
            on_change: 상태가 바뀔 때마다 호출 (스냅샷 저장 등)
        """
        self._state = state
        self.judge = judge
        self.advisory = advisory
        self.recorder = recorder
        self.on_change = on_change
        self._background_tasks: Set[asyncio.Task] = set()
        # 오라클 호출이 끝날 때까지 True (리셋 전이로 phase가 Idle이 되어도 유지)
        self._evaluation_pending = False

    @classmethod
    def create(
        cls,
        user_id: str,
        judge: JudgeClient,
        advisory: AdvisoryService,
        recorder: AttemptRecorder,
        problem: Optional[CodingProblem] = None,
        language: Optional[Language] = None,
        session_id: Optional[str] = None,
        on_change: Optional[StateListener] = None,
    ) -> "CodingSession":
        state = SessionState(session_id=session_id or uuid.uuid4().hex, user_id=user_id)
        if language is not None:
            state = state.model_copy(update={"language": Language(language)})
        if problem is not None:
            state = transitions.load_problem(state, problem, language)
        return cls(state, judge, advisory, recorder, on_change=on_change)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session_id(self) -> str:
        return self._state.session_id

    @property
    def evaluation_pending(self) -> bool:
        return self._evaluation_pending

    @property
    def is_busy(self) -> bool:
        """진행 중인 평가, 힌트 요청, 백그라운드 작업 중 하나라도 있으면 True"""
        return (
            self._evaluation_pending
            or self._state.hint_loading
            or any(not task.done() for task in self._background_tasks)
        )

    async def _set_state(self, new_state: SessionState) -> SessionState:
        self._state = new_state
        if self.on_change is not None:
            result = self.on_change(new_state)
            if inspect.isawaitable(result):
                await result
        return new_state

    def _require_problem(self) -> CodingProblem:
        if self._state.problem is None:
            raise NoProblemLoadedError(f"세션에 로드된 문제가 없습니다: {self.session_id}")
        return self._state.problem

    def _ensure_not_executing(self, action: str):
        if self._evaluation_pending or self._state.is_executing:
            logger.warning(
                f"[CodingSession] 평가 진행 중 {action} 거부 - session_id: {self.session_id}, "
                f"phase: {self._state.phase.value}, pending: {self._evaluation_pending}"
            )
            raise EvaluationInProgressError(
                f"이미 평가가 진행 중입니다 (phase: {self._state.phase.value})"
            )

    def _is_stale(self, generation: int) -> bool:
        return self._state.generation != generation

    # ===== 리셋 전이 =====

    async def load_problem(
        self, problem: CodingProblem, language: Optional[Language] = None
    ) -> SessionState:
        logger.info(
            f"[CodingSession] 문제 로드 - session_id: {self.session_id}, problem: {problem.id}"
        )
        return await self._set_state(transitions.load_problem(self._state, problem, language))

    async def change_language(self, language: Language) -> SessionState:
        logger.info(
            f"[CodingSession] 언어 변경 - session_id: {self.session_id}, language: {Language(language).value}"
        )
        return await self._set_state(transitions.change_language(self._state, language))

    async def update_code(self, code: str) -> SessionState:
        return await self._set_state(transitions.update_code(self._state, code))

    # ===== Run =====

    async def run(self) -> SessionState:
        """
        공개 예제로 실행 (기록 없음)

        Raises:
            NoProblemLoadedError: 문제 없음
            EvaluationInProgressError: 다른 평가 진행 중
        """
        problem = self._require_problem()
        self._ensure_not_executing("Run")

        # 가드 통과 직후 await 없이 상태 전환
        self._evaluation_pending = True
        started = transitions.begin_run(self._state)
        self._state = started
        generation = started.generation
        request = transitions.build_run_request(started)
        try:
            await self._set_state(started)

            logger.info(
                f"[CodingSession] Run 시작 - session_id: {self.session_id}, problem: {problem.id}, "
                f"examples: {len(request.cases)}"
            )
            batch = await self.judge.evaluate(request, problem)
        finally:
            self._evaluation_pending = False

        if self._is_stale(generation):
            logger.info(f"[CodingSession] 오래된 Run 결과 폐기 - session_id: {self.session_id}")
            return self._state

        if batch.oracle_failed:
            logger.warning(
                f"[CodingSession] Run 오라클 실패 - session_id: {self.session_id}, error: {batch.oracle_error}"
            )
        return await self._set_state(transitions.apply_run_results(self._state, batch))

    # ===== Submit =====

    async def submit(self) -> SubmissionOutcome:
        """
        숨겨진 테스트 케이스로 제출

        오라클 실패 시에도 합성 결과로 집계되며 제출 기록은 항상 1건 남습니다.

        Raises:
            NoProblemLoadedError: 문제 없음
            EvaluationInProgressError: 다른 평가 진행 중
        """
        problem = self._require_problem()
        self._ensure_not_executing("Submit")

        self._evaluation_pending = True
        started = transitions.begin_submit(self._state)
        self._state = started
        generation = started.generation
        language = started.language
        code = started.code
        request = transitions.build_submit_request(started)
        try:
            await self._set_state(started)

            logger.info(
                f"[CodingSession] Submit 시작 - session_id: {self.session_id}, problem: {problem.id}, "
                f"test_cases: {len(request.cases)}"
            )
            batch = await self.judge.evaluate(request, problem)
            outcome = transitions.aggregate_submission(problem, batch)

            logger.info(
                f"[CodingSession] Submit 완료 - session_id: {self.session_id}, "
                f"status: {outcome.overall_status.value}, score: {outcome.score}, "
                f"passed: {outcome.passed_count}/{outcome.total}"
            )

            await self._record_attempt(problem, language, code, outcome)
        finally:
            self._evaluation_pending = False

        if self._is_stale(generation):
            logger.info(f"[CodingSession] 오래된 Submit 결과 폐기 - session_id: {self.session_id}")
            return outcome

        await self._set_state(transitions.apply_submission(self._state, outcome))

        if outcome.overall_status == SubmissionStatus.WRONG_ANSWER:
            failed_case = self._state.hint_target
            self._spawn(self._explain_failure(problem, code, failed_case, generation))

        return outcome

    async def _record_attempt(
        self, problem: CodingProblem, language: Language, code: str, outcome: SubmissionOutcome
    ):
        attempt = Attempt(
            user_id=self._state.user_id,
            problem_id=problem.id,
            title=problem.title,
            difficulty=problem.difficulty.value,
            language=language.value,
            code_submitted=code,
            status=AttemptStatus.PASSED if outcome.accepted else AttemptStatus.FAILED,
            score=outcome.score,
        )
        try:
            await self.recorder.record(attempt)
        except Exception as e:
            # 기록 실패는 제출 결과에 영향 없음
            logger.error(
                f"[AttemptRecorder] 제출 기록 실패 - session_id: {self.session_id}, "
                f"problem: {problem.id}, error: {str(e)}",
                exc_info=True,
            )

    def _spawn(self, coro):
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def _explain_failure(
        self, problem: CodingProblem, code: str, failed_case: FailedCase, generation: int
    ):
        logger.info(
            f"[CodingSession] 실패 설명 요청 - session_id: {self.session_id}, case: {failed_case.index}"
        )
        try:
            explanation = await self.advisory.explain_failure(problem, code, failed_case)
        except Exception as e:
            logger.error(f"[CodingSession] 실패 설명 에러: {str(e)}", exc_info=True)
            explanation = EXPLANATION_FALLBACK

        if self._is_stale(generation):
            logger.info(f"[CodingSession] 오래된 실패 설명 폐기 - session_id: {self.session_id}")
            return
        await self._set_state(transitions.apply_explanation(self._state, explanation))

    async def wait_for_background_tasks(self):
        """진행 중인 백그라운드 작업(실패 설명) 완료 대기"""
        if self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    # ===== Hint / Solution =====

    async def get_hint(self) -> str:
        """
        제출 시점에 캡처한 첫 실패 케이스 기준 힌트 (현재 코드 사용)

        Raises:
            NoProblemLoadedError: 문제 없음
            HintUnavailableError: 실패 케이스가 있는 제출 결과 없음
        """
        problem = self._require_problem()
        if self._state.hint_loading:
            # 이미 요청 중이면 무시
            return self._state.hint or ""

        target = self._state.hint_target
        if target is None:
            raise HintUnavailableError("힌트는 실패한 제출 이후에만 요청할 수 있습니다.")

        loading = transitions.begin_hint(self._state)
        self._state = loading
        generation = loading.generation
        code = loading.code
        await self._set_state(loading)

        try:
            hint = await self.advisory.generate_hint(problem, code, target)
        except Exception as e:
            logger.error(f"[CodingSession] 힌트 에러: {str(e)}", exc_info=True)
            hint = HINT_ERROR_MESSAGE

        if self._is_stale(generation):
            logger.info(f"[CodingSession] 오래된 힌트 폐기 - session_id: {self.session_id}")
            return hint

        await self._set_state(transitions.apply_hint(self._state, hint))
        return hint

    async def reveal_solution(self) -> str:
        """현재 언어의 정답 코드 공개"""
        problem = self._require_problem()
        await self._set_state(transitions.reveal_solution(self._state))
        logger.info(
            f"[CodingSession] 정답 공개 - session_id: {self.session_id}, problem: {problem.id}"
        )
        return problem.solution_for(self._state.language)
