"""
코딩 문제 모듈
"""
from testbuddy.domain.problem.inputs import extract_input_value
from testbuddy.domain.problem.models import (
    SUPPORTED_LANGUAGES,
    CodingProblem,
    Difficulty,
    Example,
    Language,
    TestCase,
)

__all__ = [
    "CodingProblem",
    "Difficulty",
    "Example",
    "Language",
    "TestCase",
    "SUPPORTED_LANGUAGES",
    "extract_input_value",
]
