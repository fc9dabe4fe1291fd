"""
Advisory 서비스
힌트, 실패 설명, 문제 생성, 주제 판별 (Gemini + YAML 프롬프트)

힌트/설명/주제 판별은 best-effort: 실패해도 예외 대신 고정 문구(또는 False)를 반환합니다.
문제 생성만 실패를 ProblemGenerationError로 전달합니다.
"""

import logging
from typing import Any, Dict, Optional

from langchain_core.messages import HumanMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_core.runnables import Runnable, RunnableLambda
from pydantic import ValidationError

from testbuddy.core.config import settings
from testbuddy.domain.advisory.models import FailedCase, GeneratedProblem, ProgrammingTopicCheck
from testbuddy.domain.llm.factory import get_llm
from testbuddy.domain.llm.middleware import wrap_chain_with_middleware
from testbuddy.domain.llm.prompts import render_prompt
from testbuddy.domain.problem.models import CodingProblem, Difficulty

logger = logging.getLogger(__name__)

HINT_FALLBACK = "Focus on the logic near the failing test case input."
EXPLANATION_FALLBACK = "An error occurred during analysis."


class ProblemGenerationError(Exception):
    """문제 생성 실패 (LLM 호출 실패 또는 스키마 위반)"""

    pass


def truncate_text(text: str, max_length: int) -> str:
    """최대 길이를 넘으면 뒤쪽 max_length 글자만 유지"""
    if len(text) <= max_length:
        return text
    return text[-max_length:]


def _to_messages(prompt_name: str):
    def _prepare(inputs: Dict[str, Any]) -> list:
        return [HumanMessage(content=render_prompt(prompt_name, **inputs))]

    return RunnableLambda(_prepare)


def _failed_case_variables(failed_case: FailedCase) -> Dict[str, str]:
    return {
        "input": failed_case.input,
        "expected": failed_case.expected,
        "actual": failed_case.actual,
    }


class AdvisoryService:
    """코딩 챌린지 보조 LLM 호출 모음"""

    def __init__(self, llm: Optional[Any] = None):
        """
        Args:
            llm: 채팅 모델 (기본값: get_llm("advisory"), 첫 호출 시 생성)
        """
        self._llm = llm
        self._chains: Dict[str, Runnable] = {}

    def _get_llm(self):
        if self._llm is None:
            self._llm = get_llm("advisory")
        return self._llm

    def _get_chain(self, name: str) -> Runnable:
        if name not in self._chains:
            self._chains[name] = self._build_chain(name)
        return self._chains[name]

    def _build_chain(self, name: str) -> Runnable:
        llm = self._get_llm()
        if name == "code_hint":
            chain = _to_messages("code_hint") | llm | StrOutputParser()
            return wrap_chain_with_middleware(chain, name="HintChain")
        if name == "failure_explanation":
            chain = _to_messages("failure_explanation") | llm | StrOutputParser()
            return wrap_chain_with_middleware(chain, name="ExplanationChain")
        if name == "coding_problem":
            chain = _to_messages("coding_problem") | llm.with_structured_output(GeneratedProblem)
            return wrap_chain_with_middleware(chain, name="ProblemChain")
        if name == "programming_topic":
            chain = _to_messages("programming_topic") | llm.with_structured_output(
                ProgrammingTopicCheck
            )
            return wrap_chain_with_middleware(chain, name="TopicChain")
        raise ValueError(f"알 수 없는 체인: {name}")

    async def generate_hint(self, problem: CodingProblem, code: str, failed_case: FailedCase) -> str:
        """실패 케이스 기준 1~3문장 힌트"""
        try:
            hint = await self._get_chain("code_hint").ainvoke(
                {
                    "description": problem.description,
                    "code": code,
                    **_failed_case_variables(failed_case),
                }
            )
            return (hint or "").strip()
        except Exception as e:
            logger.error(
                f"[Advisory] 힌트 생성 실패 - problem: {problem.id}, case: {failed_case.index}, error: {str(e)}",
                exc_info=True,
            )
            return HINT_FALLBACK

    async def explain_failure(self, problem: CodingProblem, code: str, failed_case: FailedCase) -> str:
        """Wrong Answer 원인 설명"""
        try:
            explanation = await self._get_chain("failure_explanation").ainvoke(
                {
                    "title": problem.title,
                    "code": code,
                    **_failed_case_variables(failed_case),
                }
            )
            return (explanation or "").strip()
        except Exception as e:
            logger.error(
                f"[Advisory] 실패 설명 생성 실패 - problem: {problem.id}, case: {failed_case.index}, error: {str(e)}",
                exc_info=True,
            )
            return EXPLANATION_FALLBACK

    async def generate_problem(self, source_text: str, difficulty: Difficulty) -> CodingProblem:
        """
        지식 베이스로 코딩 문제 생성

        Raises:
            ProblemGenerationError: LLM 실패 또는 생성 결과가 문제 스키마를 위반한 경우
        """
        difficulty = Difficulty(difficulty)
        knowledge_base = truncate_text(source_text, settings.KNOWLEDGE_BASE_MAX_CHARS)
        logger.info(
            f"[Advisory] 문제 생성 시작 - difficulty: {difficulty.value}, length: {len(knowledge_base)}"
        )

        try:
            payload = await self._get_chain("coding_problem").ainvoke(
                {"difficulty": difficulty.value, "knowledge_base": knowledge_base}
            )
        except Exception as e:
            logger.error(f"[Advisory] 문제 생성 LLM 호출 실패: {str(e)}", exc_info=True)
            raise ProblemGenerationError(f"AI problem generation failed: {str(e)}") from e

        try:
            if isinstance(payload, dict):
                payload = GeneratedProblem.model_validate(payload)
            if not isinstance(payload, GeneratedProblem):
                raise ProblemGenerationError(
                    f"AI problem generation failed: unexpected payload {type(payload).__name__}"
                )
            problem = payload.to_problem()
        except ValidationError as e:
            logger.error(f"[Advisory] 생성된 문제 스키마 위반: {str(e)}")
            raise ProblemGenerationError(f"AI problem generation failed: {str(e)}") from e

        logger.info(
            f"[Advisory] 문제 생성 완료 - id: {problem.id}, examples: {len(problem.examples)}, "
            f"test_cases: {len(problem.test_cases)}"
        )
        return problem

    async def is_programming_topic(self, source_text: str) -> bool:
        """지식 베이스가 프로그래밍 주제인지 판별 (실패 시 False)"""
        text = truncate_text(source_text, settings.TOPIC_CHECK_MAX_CHARS)
        try:
            result = await self._get_chain("programming_topic").ainvoke({"text": text})
        except Exception as e:
            logger.warning(f"[Advisory] 주제 판별 실패 - False 처리: {str(e)}")
            return False

        if isinstance(result, dict):
            return bool(result.get("isProgrammingTopic", False))
        return bool(getattr(result, "isProgrammingTopic", False))
