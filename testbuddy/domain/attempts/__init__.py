"""
제출 기록 모듈
Submit 1회당 정확히 1건의 Attempt 기록
"""
from testbuddy.domain.attempts.adapters import (
    Attempt,
    AttemptRecorder,
    AttemptStatus,
    DatabaseAttemptRecorder,
    MemoryAttemptRecorder,
    summarize_attempts,
)
from testbuddy.domain.attempts.factory import create_attempt_recorder

__all__ = [
    "Attempt",
    "AttemptRecorder",
    "AttemptStatus",
    "DatabaseAttemptRecorder",
    "MemoryAttemptRecorder",
    "create_attempt_recorder",
    "summarize_attempts",
]
