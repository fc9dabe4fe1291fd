"""
문제 생성 관련 스키마
"""
from pydantic import BaseModel, ConfigDict, Field

from testbuddy.domain.problem.models import Difficulty


class GenerateProblemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sourceText: str = Field(..., min_length=1, description="지식 베이스 텍스트", alias="sourceText")
    difficulty: Difficulty = Field(Difficulty.EASY, description="난이도")


class TopicCheckRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sourceText: str = Field(..., description="지식 베이스 텍스트", alias="sourceText")


class TopicCheckResponse(BaseModel):
    is_programming_topic: bool
