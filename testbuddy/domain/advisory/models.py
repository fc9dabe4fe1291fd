"""
Advisory 입력/출력 모델
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from testbuddy.domain.problem.models import CodingProblem, Difficulty, Example, Language, TestCase


class FailedCase(BaseModel):
    """힌트/설명 대상이 되는 실패 케이스 (제출 시점에 캡처)"""
    index: int = Field(..., ge=0, description="숨겨진 테스트 케이스 내 위치")
    input: str
    expected: str
    actual: str = ""


class LanguageCode(BaseModel):
    """언어별 코드 묶음 (LLM 구조화 출력용)"""
    javascript: str
    python: str
    java: str
    c: str

    def to_mapping(self) -> dict:
        return {language: getattr(self, language.value) for language in Language}


class GeneratedExample(BaseModel):
    input: str
    output: str
    explanation: Optional[str] = None


class GeneratedTestCase(BaseModel):
    input: str
    output: str


class GeneratedProblem(BaseModel):
    """문제 생성 LLM 구조화 출력 스키마"""
    id: str = Field(..., description="짧은 슬러그 형태의 문제 ID")
    title: str
    difficulty: Difficulty
    description: str
    constraints: List[str]
    examples: List[GeneratedExample]
    testCases: List[GeneratedTestCase]
    starterCode: LanguageCode
    solution: LanguageCode

    def to_problem(self) -> CodingProblem:
        return CodingProblem(
            id=self.id,
            title=self.title,
            difficulty=self.difficulty,
            description=self.description,
            constraints=self.constraints,
            examples=[Example(**example.model_dump()) for example in self.examples],
            test_cases=[TestCase(**case.model_dump()) for case in self.testCases],
            starter_code=self.starterCode.to_mapping(),
            solution=self.solution.to_mapping(),
        )


class ProgrammingTopicCheck(BaseModel):
    """주제 판별 LLM 구조화 출력 스키마"""
    isProgrammingTopic: bool
