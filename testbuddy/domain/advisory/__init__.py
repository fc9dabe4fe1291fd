from testbuddy.domain.advisory.models import FailedCase, GeneratedProblem
from testbuddy.domain.advisory.service import (
    EXPLANATION_FALLBACK,
    HINT_FALLBACK,
    AdvisoryService,
    ProblemGenerationError,
    truncate_text,
)

__all__ = [
    "AdvisoryService",
    "EXPLANATION_FALLBACK",
    "FailedCase",
    "GeneratedProblem",
    "HINT_FALLBACK",
    "ProblemGenerationError",
    "truncate_text",
]
