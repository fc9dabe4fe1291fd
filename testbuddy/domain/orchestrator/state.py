"""
코딩 세션 상태 및 전이 함수

SessionState는 세션 하나의 파생 상태 전체를 담습니다.
전이 함수는 I/O 없이 새 상태를 반환하며 (model_copy),
I/O는 CodingSession(service.py)이 담당합니다.

상태 전이:
- Idle -> Running(예제) -> Idle
- Idle -> Submitting(숨겨진 케이스) -> Accepted | Failed
- 문제/언어 변경 시 항상 Idle로 리셋
"""
import enum
from typing import List, Optional

from pydantic import BaseModel, Field

from testbuddy.domain.advisory.models import FailedCase
from testbuddy.domain.diagnostics import Diagnostic, extract_diagnostic
from testbuddy.domain.judge.models import (
    EvaluationBatch,
    EvaluationCase,
    EvaluationRequest,
    EvaluationResult,
    SubmissionStatus,
)
from testbuddy.domain.problem.inputs import extract_input_value
from testbuddy.domain.problem.models import CodingProblem, Language

NO_OUTPUT = "No output"


class SessionPhase(str, enum.Enum):
    IDLE = "Idle"
    RUNNING = "Running"
    SUBMITTING = "Submitting"
    ACCEPTED = "Accepted"
    FAILED = "Failed"


IN_FLIGHT_PHASES = frozenset({SessionPhase.RUNNING, SessionPhase.SUBMITTING})


class RunCaseResult(BaseModel):
    """Run 결과 - 공개 예제 1건"""
    input: str
    expected_output: str
    user_output: str
    status: SubmissionStatus
    passed: bool
    error: str = ""


class SubmissionCaseResult(BaseModel):
    """Submit 결과 - 숨겨진 케이스 1건"""
    index: int
    input: str
    expected_output: str
    status: SubmissionStatus
    passed: bool
    stdout: str = ""
    stderr: str = ""
    compile_output: str = ""
    time: str = "0"
    memory: float = 0


class SubmissionOutcome(BaseModel):
    """Submit 집계 결과"""
    results: List[SubmissionCaseResult] = Field(default_factory=list)
    overall_status: SubmissionStatus
    score: float
    passed_count: int
    total: int
    first_failure_index: Optional[int] = None
    oracle_error: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.overall_status == SubmissionStatus.ACCEPTED

    @property
    def first_failure(self) -> Optional[SubmissionCaseResult]:
        if self.first_failure_index is None:
            return None
        return self.results[self.first_failure_index]


class SessionState(BaseModel):
    """코딩 세션 하나의 전체 상태"""
    session_id: str
    user_id: str
    problem: Optional[CodingProblem] = None
    language: Language = Language.JAVASCRIPT
    code: str = ""
    phase: SessionPhase = SessionPhase.IDLE
    generation: int = 0

    run_results: Optional[List[RunCaseResult]] = None
    submission: Optional[SubmissionOutcome] = None
    overall_status: Optional[SubmissionStatus] = None
    diagnostic: Optional[Diagnostic] = None
    error_message: Optional[str] = None

    hint: Optional[str] = None
    hint_loading: bool = False
    hint_target: Optional[FailedCase] = None
    failure_explanation: Optional[str] = None
    explanation_loading: bool = False
    show_solution: bool = False

    @property
    def is_executing(self) -> bool:
        return self.phase in IN_FLIGHT_PHASES


# ===== 리셋 전이 =====

def _cleared(state: SessionState, **updates) -> SessionState:
    """파생 상태 전체 초기화 + generation 증가"""
    base = {
        "phase": SessionPhase.IDLE,
        "generation": state.generation + 1,
        "run_results": None,
        "submission": None,
        "overall_status": None,
        "diagnostic": None,
        "error_message": None,
        "hint": None,
        "hint_loading": False,
        "hint_target": None,
        "failure_explanation": None,
        "explanation_loading": False,
        "show_solution": False,
    }
    base.update(updates)
    return state.model_copy(update=base)


def load_problem(
    state: SessionState, problem: CodingProblem, language: Optional[Language] = None
) -> SessionState:
    """새 문제 로드: 스타터 코드로 교체하고 파생 상태 폐기"""
    language = Language(language) if language is not None else state.language
    return _cleared(
        state, problem=problem, language=language, code=problem.starter_for(language)
    )


def change_language(state: SessionState, language: Language) -> SessionState:
    """언어 변경: 해당 언어 스타터 코드로 교체하고 파생 상태 폐기"""
    language = Language(language)
    code = state.problem.starter_for(language) if state.problem else ""
    return _cleared(state, language=language, code=code)


def update_code(state: SessionState, code: str) -> SessionState:
    """코드 편집 (힌트 대상은 유지)"""
    return state.model_copy(update={"code": code})


# ===== Run =====

def build_run_request(state: SessionState) -> EvaluationRequest:
    """공개 예제로 평가 요청 생성 (입력 변수명 제거)"""
    return EvaluationRequest(
        language=state.language,
        source_code=state.code,
        cases=[
            EvaluationCase(stdin=extract_input_value(example.input), expected_output=example.output)
            for example in state.problem.examples
        ],
    )


def begin_run(state: SessionState) -> SessionState:
    return state.model_copy(
        update={
            "phase": SessionPhase.RUNNING,
            "generation": state.generation + 1,
            "run_results": None,
            "submission": None,
            "overall_status": None,
            "diagnostic": None,
            "error_message": None,
            "hint": None,
            "hint_loading": False,
            "hint_target": None,
            "failure_explanation": None,
            "explanation_loading": False,
        }
    )


def _diagnostic_for_run(results: List[EvaluationResult]) -> Optional[Diagnostic]:
    for result in results:
        if result.status in (SubmissionStatus.COMPILATION_ERROR, SubmissionStatus.RUNTIME_ERROR):
            return extract_diagnostic(result.error_text)
    return None


def apply_run_results(state: SessionState, batch: EvaluationBatch) -> SessionState:
    """
    Run 결과 반영

    오라클 실패는 테스트 실패가 아니라 에러 배너로만 표시합니다.
    """
    if batch.oracle_failed:
        banner = batch.results[0].compile_output if batch.results else batch.oracle_error
        return state.model_copy(
            update={"phase": SessionPhase.IDLE, "run_results": None, "error_message": banner}
        )

    run_results = [
        RunCaseResult(
            input=example.input,
            expected_output=example.output,
            user_output=result.compile_output or result.stderr or result.stdout or NO_OUTPUT,
            status=result.status,
            passed=result.accepted,
            error=result.stderr or result.compile_output,
        )
        for example, result in zip(state.problem.examples, batch.results)
    ]
    return state.model_copy(
        update={
            "phase": SessionPhase.IDLE,
            "run_results": run_results,
            "diagnostic": _diagnostic_for_run(batch.results),
        }
    )


# ===== Submit =====

def build_submit_request(state: SessionState) -> EvaluationRequest:
    """숨겨진 테스트 케이스로 평가 요청 생성 (입력 변수명 제거)"""
    return EvaluationRequest(
        language=state.language,
        source_code=state.code,
        cases=[
            EvaluationCase(stdin=extract_input_value(case.input), expected_output=case.output)
            for case in state.problem.test_cases
        ],
    )


def begin_submit(state: SessionState) -> SessionState:
    """Submitting 진입 - overall_status는 즉시 Running으로 노출"""
    updated = begin_run(state)
    return updated.model_copy(
        update={"phase": SessionPhase.SUBMITTING, "overall_status": SubmissionStatus.RUNNING}
    )


def compute_score(passed: int, total: int) -> float:
    """통과 비율 (0~100, 소수 2자리). 케이스가 없으면 100.0"""
    if total == 0:
        return 100.0
    return round(passed / total * 100, 2)


def aggregate_submission(problem: CodingProblem, batch: EvaluationBatch) -> SubmissionOutcome:
    """
    케이스별 결과 집계

    - overall_status: 모두 Accepted면 Accepted, 아니면 위치상 첫 실패 케이스의 상태
    - score: 전체 케이스 기준 통과율
    """
    results = [
        SubmissionCaseResult(
            index=index,
            input=case.input,
            expected_output=case.output,
            status=result.status,
            passed=result.accepted,
            stdout=result.stdout,
            stderr=result.stderr,
            compile_output=result.compile_output,
            time=result.time,
            memory=result.memory,
        )
        for index, (case, result) in enumerate(zip(problem.test_cases, batch.results))
    ]

    first_failure_index = next((r.index for r in results if not r.passed), None)
    passed_count = sum(1 for r in results if r.passed)
    overall_status = (
        SubmissionStatus.ACCEPTED
        if first_failure_index is None
        else results[first_failure_index].status
    )

    return SubmissionOutcome(
        results=results,
        overall_status=overall_status,
        score=compute_score(passed_count, len(results)),
        passed_count=passed_count,
        total=len(results),
        first_failure_index=first_failure_index,
        oracle_error=batch.oracle_error,
    )


def failed_case_from(outcome: SubmissionOutcome) -> Optional[FailedCase]:
    """힌트/설명 대상 (첫 실패 케이스, 원본 입력 그대로)"""
    failure = outcome.first_failure
    if failure is None:
        return None
    return FailedCase(
        index=failure.index,
        input=failure.input,
        expected=failure.expected_output,
        actual=failure.stdout or "",
    )


def apply_submission(state: SessionState, outcome: SubmissionOutcome) -> SessionState:
    failure = outcome.first_failure
    diagnostic = None
    if failure is not None:
        diagnostic = extract_diagnostic(failure.compile_output or failure.stderr)

    needs_explanation = outcome.overall_status == SubmissionStatus.WRONG_ANSWER
    return state.model_copy(
        update={
            "phase": SessionPhase.ACCEPTED if outcome.accepted else SessionPhase.FAILED,
            "submission": outcome,
            "overall_status": outcome.overall_status,
            "diagnostic": diagnostic,
            "hint_target": failed_case_from(outcome),
            "explanation_loading": needs_explanation,
        }
    )


# ===== Advisory =====

def begin_hint(state: SessionState) -> SessionState:
    return state.model_copy(update={"hint_loading": True, "hint": ""})


def apply_hint(state: SessionState, hint: str) -> SessionState:
    return state.model_copy(update={"hint_loading": False, "hint": hint})


def apply_explanation(state: SessionState, explanation: str) -> SessionState:
    return state.model_copy(
        update={"explanation_loading": False, "failure_explanation": explanation}
    )


def reveal_solution(state: SessionState) -> SessionState:
    return state.model_copy(update={"show_solution": True})
