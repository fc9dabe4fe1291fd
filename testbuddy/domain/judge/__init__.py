from testbuddy.domain.judge.base import (
    ORACLE_FAILURE_MESSAGE,
    JudgeClient,
    OracleFailure,
    parse_oracle_payload,
    synthesize_failure_results,
)
from testbuddy.domain.judge.factory import create_judge_client
from testbuddy.domain.judge.models import (
    JUDGE_VERDICTS,
    EvaluationBatch,
    EvaluationCase,
    EvaluationRequest,
    EvaluationResult,
    SubmissionStatus,
)

__all__ = [
    "ORACLE_FAILURE_MESSAGE",
    "JUDGE_VERDICTS",
    "EvaluationBatch",
    "EvaluationCase",
    "EvaluationRequest",
    "EvaluationResult",
    "JudgeClient",
    "OracleFailure",
    "SubmissionStatus",
    "create_judge_client",
    "parse_oracle_payload",
    "synthesize_failure_results",
]
