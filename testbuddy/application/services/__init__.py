from testbuddy.application.services.session_service import (
    SessionNotFoundError,
    SessionService,
    restore_state,
)

__all__ = ["SessionNotFoundError", "SessionService", "restore_state"]
