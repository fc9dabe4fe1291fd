"""
DB Enum 정의
"""
import enum


class AttemptStatusEnum(str, enum.Enum):
    """제출 결과 (모든 숨겨진 케이스 통과 시 PASSED)"""
    PASSED = "Passed"
    FAILED = "Failed"


class DifficultyEnum(str, enum.Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class LanguageEnum(str, enum.Enum):
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    JAVA = "java"
    C = "c"
