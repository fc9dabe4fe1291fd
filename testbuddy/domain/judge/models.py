"""
Judge 요청/결과 모델
결과는 요청 케이스와 위치(순서)로 매칭되므로 순서가 항상 보존되어야 합니다.
"""
import enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from testbuddy.domain.problem.models import Language


class SubmissionStatus(str, enum.Enum):
    """채점 상태 (PENDING, RUNNING은 화면 표시 전용)"""
    ACCEPTED = "Accepted"
    WRONG_ANSWER = "Wrong Answer"
    RUNTIME_ERROR = "Runtime Error"
    TIME_LIMIT_EXCEEDED = "Time Limit Exceeded"
    COMPILATION_ERROR = "Compilation Error"
    PENDING = "Pending"
    RUNNING = "Running"


# 케이스별 판정으로 허용되는 상태
JUDGE_VERDICTS = frozenset({
    SubmissionStatus.ACCEPTED,
    SubmissionStatus.WRONG_ANSWER,
    SubmissionStatus.RUNTIME_ERROR,
    SubmissionStatus.TIME_LIMIT_EXCEEDED,
    SubmissionStatus.COMPILATION_ERROR,
})


class EvaluationCase(BaseModel):
    """실행할 입력/기대 출력 한 쌍"""
    stdin: str
    expected_output: Optional[str] = None


class EvaluationRequest(BaseModel):
    """Judge 평가 요청"""
    language: Language
    source_code: str
    cases: List[EvaluationCase] = Field(default_factory=list)


class EvaluationResult(BaseModel):
    """케이스 하나의 실행 결과"""
    status: SubmissionStatus
    stdout: str = ""
    stderr: str = ""
    compile_output: str = ""
    time: str = "0"
    memory: float = 0
    expected_output: Optional[str] = None

    @field_validator("status")
    @classmethod
    def _status_must_be_verdict(cls, value: SubmissionStatus) -> SubmissionStatus:
        if value not in JUDGE_VERDICTS:
            raise ValueError(f"케이스 판정으로 사용할 수 없는 상태입니다: {value.value}")
        return value

    @field_validator("stdout", "stderr", "compile_output", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Optional[str]) -> str:
        return value or ""

    @field_validator("time", mode="before")
    @classmethod
    def _time_to_str(cls, value: Union[str, float, int, None]) -> str:
        return "0" if value is None else str(value)

    @property
    def accepted(self) -> bool:
        return self.status == SubmissionStatus.ACCEPTED

    @property
    def error_text(self) -> str:
        """인라인 진단에 사용할 에러 텍스트 (compile_output 우선)"""
        return self.compile_output or self.stderr or ""


class EvaluationBatch(BaseModel):
    """
    평가 결과 묶음

    oracle_error가 있으면 results는 실패를 나타내는 합성 결과입니다.
    """
    results: List[EvaluationResult] = Field(default_factory=list)
    oracle_error: Optional[str] = None

    @property
    def oracle_failed(self) -> bool:
        return self.oracle_error is not None
