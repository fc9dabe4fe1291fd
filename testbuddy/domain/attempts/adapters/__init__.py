from testbuddy.domain.attempts.adapters.base import (
    Attempt,
    AttemptRecorder,
    AttemptStatus,
    summarize_attempts,
)
from testbuddy.domain.attempts.adapters.database import DatabaseAttemptRecorder
from testbuddy.domain.attempts.adapters.memory import MemoryAttemptRecorder

__all__ = [
    "Attempt",
    "AttemptRecorder",
    "AttemptStatus",
    "DatabaseAttemptRecorder",
    "MemoryAttemptRecorder",
    "summarize_attempts",
]
