from testbuddy.infrastructure.persistence.models.attempts import CodingAttempt
from testbuddy.infrastructure.persistence.models.enums import (
    AttemptStatusEnum,
    DifficultyEnum,
    LanguageEnum,
)

__all__ = ["CodingAttempt", "AttemptStatusEnum", "DifficultyEnum", "LanguageEnum"]
