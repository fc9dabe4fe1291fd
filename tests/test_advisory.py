"""
Advisory 서비스 테스트 (힌트, 실패 설명, 문제 생성, 주제 판별)
"""
from typing import Any, List

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.runnables import RunnableLambda

from testbuddy.core.config import settings
from testbuddy.domain.advisory import (
    EXPLANATION_FALLBACK,
    HINT_FALLBACK,
    AdvisoryService,
    FailedCase,
    ProblemGenerationError,
    truncate_text,
)
from testbuddy.domain.advisory.models import ProgrammingTopicCheck
from testbuddy.domain.problem import CodingProblem, Language

FAILED_CASE = FailedCase(index=2, input="n = 4", expected="16", actual="15")


class AdvisoryFakeLLM(FakeListChatModel):
    """프롬프트를 기록하고 구조화 출력도 흉내내는 Fake 모델"""

    structured: Any = None
    prompts: List[str] = []

    def _call(self, messages, stop=None, run_manager=None, **kwargs):
        self.prompts.append(messages[-1].content)
        return super()._call(messages, stop=stop, run_manager=run_manager, **kwargs)

    def with_structured_output(self, schema, **kwargs):
        def _respond(messages):
            self.prompts.append(messages[-1].content)
            if isinstance(self.structured, Exception):
                raise self.structured
            return self.structured

        return RunnableLambda(_respond)


def failing_llm(message: str):
    def _raise(messages):
        raise ValueError(message)

    return RunnableLambda(_raise)


def generated_problem_payload(**overrides):
    payload = {
        "id": "two-sum",
        "title": "Two Sum",
        "difficulty": "Medium",
        "description": "Return indices of the two numbers adding up to target.",
        "constraints": ["2 <= nums.length <= 10^4"],
        "examples": [{"input": "nums = [2,7,11,15]\ntarget = 9", "output": "[0,1]"}],
        "testCases": [
            {"input": "nums = [3,2,4]\ntarget = 6", "output": "[1,2]"},
            {"input": "nums = [3,3]\ntarget = 6", "output": "[0,1]"},
        ],
        "starterCode": {"javascript": "// js", "python": "# py", "java": "// java", "c": "// c"},
        "solution": {"javascript": "js()", "python": "py()", "java": "java()", "c": "c()"},
    }
    payload.update(overrides)
    return payload


class TestTruncateText:
    def test_short_text_unchanged(self):
        assert truncate_text("abc", 5) == "abc"

    def test_keeps_tail(self):
        assert truncate_text("0123456789", 4) == "6789"


class TestHint:
    @pytest.mark.asyncio
    async def test_hint_prompt_contains_failure(self, problem):
        llm = AdvisoryFakeLLM(responses=["  Check the n = 4 branch.  "])
        service = AdvisoryService(llm=llm)

        hint = await service.generate_hint(problem, "print(15)", FAILED_CASE)

        assert hint == "Check the n = 4 branch."
        prompt = llm.prompts[0]
        assert problem.description in prompt
        assert "print(15)" in prompt
        assert "Input n = 4, Expected 16, Actual 15" in prompt
        assert "Do not give the full solution." in prompt

    @pytest.mark.asyncio
    async def test_hint_failure_returns_fallback(self, problem):
        service = AdvisoryService(llm=failing_llm("invalid argument"))
        assert await service.generate_hint(problem, "x", FAILED_CASE) == HINT_FALLBACK


class TestExplanation:
    @pytest.mark.asyncio
    async def test_explanation_uses_title(self, problem):
        llm = AdvisoryFakeLLM(responses=["The special case for 4 is wrong."])
        service = AdvisoryService(llm=llm)

        explanation = await service.explain_failure(problem, "print(15)", FAILED_CASE)

        assert explanation == "The special case for 4 is wrong."
        assert f"Problem: {problem.title}" in llm.prompts[0]

    @pytest.mark.asyncio
    async def test_explanation_failure_returns_fallback(self, problem):
        service = AdvisoryService(llm=failing_llm("invalid argument"))
        assert await service.explain_failure(problem, "x", FAILED_CASE) == EXPLANATION_FALLBACK


class TestProblemGeneration:
    @pytest.mark.asyncio
    async def test_generates_valid_problem(self):
        llm = AdvisoryFakeLLM(responses=[], structured=generated_problem_payload())
        service = AdvisoryService(llm=llm)

        problem = await service.generate_problem("Hash maps give O(1) lookups.", "Medium")

        assert isinstance(problem, CodingProblem)
        assert problem.id == "two-sum"
        assert len(problem.test_cases) == 2
        assert problem.starter_for(Language.JAVA) == "// java"
        assert "'Medium' difficulty" in llm.prompts[0]
        assert "Hash maps give O(1) lookups." in llm.prompts[0]

    @pytest.mark.asyncio
    async def test_long_knowledge_base_keeps_tail(self):
        llm = AdvisoryFakeLLM(responses=[], structured=generated_problem_payload())
        service = AdvisoryService(llm=llm)
        source = "HEAD" + "x" * settings.KNOWLEDGE_BASE_MAX_CHARS + "TAIL"

        await service.generate_problem(source, "Easy")

        assert "TAIL" in llm.prompts[0]
        assert "HEAD" not in llm.prompts[0]

    @pytest.mark.asyncio
    async def test_missing_solution_language_rejected(self):
        payload = generated_problem_payload(solution={"python": "py()"})
        service = AdvisoryService(llm=AdvisoryFakeLLM(responses=[], structured=payload))

        with pytest.raises(ProblemGenerationError):
            await service.generate_problem("text", "Easy")

    @pytest.mark.asyncio
    async def test_unexpected_payload_rejected(self):
        service = AdvisoryService(llm=AdvisoryFakeLLM(responses=[], structured="not a problem"))

        with pytest.raises(ProblemGenerationError):
            await service.generate_problem("text", "Hard")

    @pytest.mark.asyncio
    async def test_llm_failure_raises(self):
        llm = AdvisoryFakeLLM(responses=[], structured=ValueError("invalid argument"))
        service = AdvisoryService(llm=llm)

        with pytest.raises(ProblemGenerationError):
            await service.generate_problem("text", "Easy")


class TestTopicCheck:
    @pytest.mark.asyncio
    async def test_structured_true(self):
        llm = AdvisoryFakeLLM(responses=[], structured=ProgrammingTopicCheck(isProgrammingTopic=True))
        assert await AdvisoryService(llm=llm).is_programming_topic("Binary search trees")

    @pytest.mark.asyncio
    async def test_dict_false(self):
        llm = AdvisoryFakeLLM(responses=[], structured={"isProgrammingTopic": False})
        assert not await AdvisoryService(llm=llm).is_programming_topic("Baroque painting")

    @pytest.mark.asyncio
    async def test_failure_is_false(self):
        llm = AdvisoryFakeLLM(responses=[], structured=ValueError("invalid argument"))
        assert not await AdvisoryService(llm=llm).is_programming_topic("anything")

    @pytest.mark.asyncio
    async def test_text_truncated_to_tail(self):
        llm = AdvisoryFakeLLM(responses=[], structured={"isProgrammingTopic": True})
        source = "HEAD" + "y" * settings.TOPIC_CHECK_MAX_CHARS

        await AdvisoryService(llm=llm).is_programming_topic(source)

        assert "HEAD" not in llm.prompts[0]
