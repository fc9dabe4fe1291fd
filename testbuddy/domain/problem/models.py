"""
코딩 문제 모델
문제 생성기가 만들어 전달하는 문제 정의 (조회 이후 불변)
"""
import enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Difficulty(str, enum.Enum):
    """문제 난이도"""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Language(str, enum.Enum):
    """지원 언어"""
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    JAVA = "java"
    C = "c"


SUPPORTED_LANGUAGES = tuple(Language)


class Example(BaseModel):
    """공개 예제 (사용자에게 표시)"""
    model_config = ConfigDict(frozen=True)

    input: str
    output: str
    explanation: Optional[str] = None


class TestCase(BaseModel):
    """숨겨진 테스트 케이스 (제출 채점 전용)"""
    __test__ = False  # pytest 수집 대상 제외
    model_config = ConfigDict(frozen=True)

    input: str
    output: str


class CodingProblem(BaseModel):
    """
    코딩 문제 정의

    와이어 포맷은 camelCase (testCases, starterCode)이며
    파이썬 코드에서는 snake_case 필드명으로도 생성할 수 있습니다.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    difficulty: Difficulty
    description: str
    constraints: List[str] = Field(default_factory=list)
    examples: List[Example] = Field(default_factory=list)
    test_cases: List[TestCase] = Field(default_factory=list, alias="testCases")
    starter_code: Dict[Language, str] = Field(..., alias="starterCode")
    solution: Dict[Language, str]

    @field_validator("starter_code", "solution")
    @classmethod
    def _require_every_language(cls, value: Dict[Language, str]) -> Dict[Language, str]:
        missing = [lang.value for lang in SUPPORTED_LANGUAGES if lang not in value]
        if missing:
            raise ValueError(f"모든 지원 언어에 대한 코드가 필요합니다. 누락: {', '.join(missing)}")
        return value

    def starter_for(self, language: Language) -> str:
        return self.starter_code[Language(language)]

    def solution_for(self, language: Language) -> str:
        return self.solution[Language(language)]
