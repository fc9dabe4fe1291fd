from testbuddy.domain.orchestrator.errors import (
    EvaluationInProgressError,
    HintUnavailableError,
    NoProblemLoadedError,
    SessionError,
)
from testbuddy.domain.orchestrator.service import HINT_ERROR_MESSAGE, CodingSession
from testbuddy.domain.orchestrator.state import (
    RunCaseResult,
    SessionPhase,
    SessionState,
    SubmissionCaseResult,
    SubmissionOutcome,
    aggregate_submission,
    compute_score,
)

__all__ = [
    "CodingSession",
    "EvaluationInProgressError",
    "HINT_ERROR_MESSAGE",
    "HintUnavailableError",
    "NoProblemLoadedError",
    "RunCaseResult",
    "SessionError",
    "SessionPhase",
    "SessionState",
    "SubmissionCaseResult",
    "SubmissionOutcome",
    "aggregate_submission",
    "compute_score",
]
