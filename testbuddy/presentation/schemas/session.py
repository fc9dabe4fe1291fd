"""
코딩 세션 관련 스키마
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from testbuddy.domain.diagnostics import Diagnostic
from testbuddy.domain.judge.models import SubmissionStatus
from testbuddy.domain.orchestrator.state import (
    RunCaseResult,
    SessionPhase,
    SessionState,
    SubmissionOutcome,
)
from testbuddy.domain.problem.models import CodingProblem, Difficulty, Example, Language


class CreateSessionRequest(BaseModel):
    """세션 생성 요청"""
    model_config = ConfigDict(populate_by_name=True)

    userId: str = Field(..., description="사용자 ID", alias="userId")
    problem: Optional[CodingProblem] = Field(None, description="풀 문제 (없으면 빈 세션)")
    language: Optional[Language] = Field(None, description="시작 언어 (기본값: javascript)")


class UpdateCodeRequest(BaseModel):
    code: str = Field(..., description="편집한 코드")


class ChangeLanguageRequest(BaseModel):
    language: Language = Field(..., description="변경할 언어")


class LoadProblemRequest(BaseModel):
    problem: CodingProblem = Field(..., description="새로 풀 문제")
    language: Optional[Language] = Field(None, description="언어 (기본값: 현재 언어)")


class ProblemView(BaseModel):
    """사용자에게 노출하는 문제 정보 (숨겨진 케이스/정답 제외)"""
    id: str
    title: str
    difficulty: Difficulty
    description: str
    constraints: List[str] = Field(default_factory=list)
    examples: List[Example] = Field(default_factory=list)
    test_case_count: int = Field(0, description="숨겨진 테스트 케이스 수")

    @classmethod
    def from_problem(cls, problem: CodingProblem) -> "ProblemView":
        return cls(
            id=problem.id,
            title=problem.title,
            difficulty=problem.difficulty,
            description=problem.description,
            constraints=problem.constraints,
            examples=problem.examples,
            test_case_count=len(problem.test_cases),
        )


class SessionView(BaseModel):
    """세션 상태 응답"""
    session_id: str
    user_id: str
    problem: Optional[ProblemView] = None
    language: Language
    code: str
    phase: SessionPhase
    is_executing: bool
    run_results: Optional[List[RunCaseResult]] = None
    submission: Optional[SubmissionOutcome] = None
    overall_status: Optional[SubmissionStatus] = None
    diagnostic: Optional[Diagnostic] = None
    error_message: Optional[str] = None
    hint: Optional[str] = None
    hint_loading: bool = False
    hint_available: bool = False
    failure_explanation: Optional[str] = None
    explanation_loading: bool = False
    show_solution: bool = False
    solution: Optional[str] = Field(None, description="show_solution일 때만 포함")

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionView":
        solution = None
        if state.show_solution and state.problem is not None:
            solution = state.problem.solution_for(state.language)
        return cls(
            session_id=state.session_id,
            user_id=state.user_id,
            problem=ProblemView.from_problem(state.problem) if state.problem else None,
            language=state.language,
            code=state.code,
            phase=state.phase,
            is_executing=state.is_executing,
            run_results=state.run_results,
            submission=state.submission,
            overall_status=state.overall_status,
            diagnostic=state.diagnostic,
            error_message=state.error_message,
            hint=state.hint,
            hint_loading=state.hint_loading,
            hint_available=state.hint_target is not None,
            failure_explanation=state.failure_explanation,
            explanation_loading=state.explanation_loading,
            show_solution=state.show_solution,
            solution=solution,
        )


class HintResponse(BaseModel):
    session_id: str
    hint: str


class SolutionResponse(BaseModel):
    session_id: str
    language: Language
    solution: str
