from testbuddy.infrastructure.repositories.attempt_repository import AttemptRepository
from testbuddy.infrastructure.repositories.session_state_repository import SessionStateRepository

__all__ = ["AttemptRepository", "SessionStateRepository"]
