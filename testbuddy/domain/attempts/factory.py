"""
제출 기록 어댑터 팩토리
환경에 따라 적절한 어댑터 생성
"""

from testbuddy.core.config import settings
from testbuddy.domain.attempts.adapters.base import AttemptRecorder
from testbuddy.domain.attempts.adapters.database import DatabaseAttemptRecorder
from testbuddy.domain.attempts.adapters.memory import MemoryAttemptRecorder


def create_attempt_recorder() -> AttemptRecorder:
    """
    설정:
    - PERSIST_ATTEMPTS_TO_DB=True: PostgreSQL 어댑터 (프로덕션)
    - PERSIST_ATTEMPTS_TO_DB=False: 메모리 어댑터 (개발/테스트)
    """
    if settings.PERSIST_ATTEMPTS_TO_DB:
        return DatabaseAttemptRecorder()
    else:
        return MemoryAttemptRecorder()
