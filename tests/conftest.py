"""
Pytest 설정 및 Fixtures
"""
import asyncio
import os
from typing import Callable, List, Optional, Sequence, Union

import pytest

# settings 싱글톤이 만들어지기 전에 테스트 환경 변수 설정
os.environ.setdefault("GEMINI_API_KEY", "test-api-key")
os.environ["PERSIST_ATTEMPTS_TO_DB"] = "false"
os.environ["USE_REDIS_SESSION_STORE"] = "false"
os.environ["EVALUATION_TIMEOUT_SECONDS"] = "5"
os.environ.pop("API_KEY", None)

from testbuddy.domain.advisory.models import FailedCase  # noqa: E402
from testbuddy.domain.advisory.service import AdvisoryService  # noqa: E402
from testbuddy.domain.attempts.adapters.memory import MemoryAttemptRecorder  # noqa: E402
from testbuddy.domain.judge.base import JudgeClient  # noqa: E402
from testbuddy.domain.judge.models import (  # noqa: E402
    EvaluationRequest,
    EvaluationResult,
    SubmissionStatus,
)
from testbuddy.domain.llm.middleware import get_rate_limiter  # noqa: E402
from testbuddy.domain.orchestrator.service import CodingSession  # noqa: E402
from testbuddy.domain.problem.models import CodingProblem  # noqa: E402


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """테스트마다 공유 Rate Limiter 초기화"""
    get_rate_limiter.cache_clear()
    yield
    get_rate_limiter.cache_clear()


def make_result(
    status: SubmissionStatus = SubmissionStatus.ACCEPTED,
    stdout: str = "",
    stderr: str = "",
    compile_output: str = "",
) -> EvaluationResult:
    return EvaluationResult(
        status=status,
        stdout=stdout,
        stderr=stderr,
        compile_output=compile_output,
        time="0.01",
        memory=1024,
    )


def accept_all(request: EvaluationRequest) -> List[EvaluationResult]:
    """모든 케이스를 기대 출력 그대로 통과"""
    return [make_result(stdout=case.expected_output or "") for case in request.cases]


Outcomes = Union[Sequence[EvaluationResult], Callable[[EvaluationRequest], Sequence[EvaluationResult]]]


class ScriptedJudge(JudgeClient):
    """정해진 결과를 돌려주는 Judge (기본 evaluate 계약은 그대로 사용)"""

    def __init__(
        self,
        outcomes: Optional[Outcomes] = None,
        error: Optional[Exception] = None,
        gate: Optional[asyncio.Event] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(timeout=timeout)
        self.outcomes = outcomes if outcomes is not None else accept_all
        self.error = error
        self.gate = gate
        self.requests: List[EvaluationRequest] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _evaluate(self, request, problem):
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
        finally:
            self.in_flight -= 1
        if self.error is not None:
            raise self.error
        if callable(self.outcomes):
            return self.outcomes(request)
        return list(self.outcomes)


class RecordingAdvisory(AdvisoryService):
    """LLM 없이 호출만 기록하는 Advisory"""

    def __init__(
        self,
        hint: str = "Check how the last element is handled.",
        explanation: str = "The loop stops one element early.",
        gate: Optional[asyncio.Event] = None,
    ):
        super().__init__(llm=object())
        self.hint_text = hint
        self.explanation_text = explanation
        self.gate = gate
        self.hint_calls: List[tuple] = []
        self.explain_calls: List[tuple] = []

    async def generate_hint(self, problem, code: str, failed_case: FailedCase) -> str:
        self.hint_calls.append((code, failed_case))
        if self.gate is not None:
            await self.gate.wait()
        return self.hint_text

    async def explain_failure(self, problem, code: str, failed_case: FailedCase) -> str:
        self.explain_calls.append((code, failed_case))
        if self.gate is not None:
            await self.gate.wait()
        return self.explanation_text


def build_problem(**overrides) -> CodingProblem:
    data = {
        "id": "square-number",
        "title": "Square a Number",
        "difficulty": "Easy",
        "description": "Read an integer n and print n * n.",
        "constraints": ["-1000 <= n <= 1000"],
        "examples": [
            {"input": "n = 3", "output": "9", "explanation": "3 * 3 = 9"},
            {"input": "n = 5", "output": "25"},
        ],
        "testCases": [
            {"input": "n = 2", "output": "4"},
            {"input": "n = 3", "output": "9"},
            {"input": "n = 4", "output": "16"},
        ],
        "starterCode": {
            "javascript": "// javascript starter",
            "python": "# python starter",
            "java": "// java starter",
            "c": "// c starter",
        },
        "solution": {
            "javascript": "console.log(n * n);",
            "python": "print(n * n)",
            "java": "System.out.println(n * n);",
            "c": "printf(\"%d\", n * n);",
        },
    }
    data.update(overrides)
    return CodingProblem.model_validate(data)


@pytest.fixture
def problem() -> CodingProblem:
    return build_problem()


@pytest.fixture
def recorder() -> MemoryAttemptRecorder:
    return MemoryAttemptRecorder()


@pytest.fixture
def advisory() -> RecordingAdvisory:
    return RecordingAdvisory()


@pytest.fixture
def make_session(problem, recorder, advisory):
    """CodingSession 생성 헬퍼"""

    def _make(judge: Optional[JudgeClient] = None, **kwargs) -> CodingSession:
        return CodingSession.create(
            user_id=kwargs.pop("user_id", "user-1"),
            judge=judge or ScriptedJudge(),
            advisory=kwargs.pop("advisory", advisory),
            recorder=kwargs.pop("recorder", recorder),
            problem=kwargs.pop("problem", problem),
            **kwargs,
        )

    return _make
