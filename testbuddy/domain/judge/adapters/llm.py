"""
LLM 기반 Judge 어댑터

실제 실행 환경 없이 Gemini가 테스트 케이스별 실행 결과를 판정합니다.
응답은 구조화 출력 스키마로 받고, 경계에서 한 번 더 검증합니다.
"""

import json
import logging
from typing import Any, Dict, List, Literal, Optional, Sequence

from langchain_core.messages import HumanMessage
from langchain_core.runnables import Runnable, RunnableLambda
from pydantic import BaseModel, Field

from testbuddy.core.config import settings
from testbuddy.domain.judge.base import JudgeClient, parse_oracle_payload
from testbuddy.domain.judge.models import EvaluationRequest, EvaluationResult
from testbuddy.domain.llm.factory import get_llm
from testbuddy.domain.llm.middleware import wrap_chain_with_middleware
from testbuddy.domain.llm.prompts import render_prompt
from testbuddy.domain.problem.models import CodingProblem

logger = logging.getLogger(__name__)


class OracleCaseResult(BaseModel):
    """LLM 구조화 출력 - 케이스별 결과"""
    status: Literal[
        "Accepted", "Wrong Answer", "Runtime Error", "Time Limit Exceeded", "Compilation Error"
    ]
    stdout: str = Field(..., description="프로그램 표준 출력")
    stderr: str = Field(..., description="런타임 에러 출력")
    compile_output: str = Field(..., description="컴파일 에러 출력")
    time: str = Field(..., description="실행 시간 (예: 0.05s)")
    memory: float = Field(..., description="메모리 사용량 (KB)")


class OracleResponse(BaseModel):
    """LLM 구조화 출력 - 전체 응답"""
    results: List[OracleCaseResult]


def prepare_judge_messages(inputs: Dict[str, Any]) -> list:
    """평가 요청을 LLM 메시지로 변환"""
    request: EvaluationRequest = inputs["request"]
    problem: CodingProblem = inputs["problem"]

    test_cases_json = json.dumps(
        [
            {"stdin": case.stdin, "expectedOutput": case.expected_output}
            for case in request.cases
        ],
        ensure_ascii=False,
    )
    prompt = render_prompt(
        "judge_evaluate",
        language=request.language.value,
        title=problem.title,
        description=problem.description,
        source_code=request.source_code,
        test_cases_json=test_cases_json,
        case_count=len(request.cases),
    )
    return [HumanMessage(content=prompt)]


class LLMJudgeClient(JudgeClient):
    """Gemini 채점 오라클"""

    def __init__(self, llm: Optional[Any] = None, timeout: Optional[float] = None):
        """
        Args:
            llm: 채팅 모델 (기본값: get_llm("judge"))
            timeout: 오라클 호출 제한 시간 (기본값: settings.EVALUATION_TIMEOUT_SECONDS)
        """
        super().__init__(
            timeout=timeout if timeout is not None else settings.EVALUATION_TIMEOUT_SECONDS
        )
        self._llm = llm
        self._chain: Optional[Runnable] = None

    def _get_chain(self) -> Runnable:
        if self._chain is None:
            llm = self._llm or get_llm("judge")
            structured_llm = llm.with_structured_output(OracleResponse)
            chain = RunnableLambda(prepare_judge_messages) | structured_llm
            # 오라클 호출은 재시도하지 않음
            self._chain = wrap_chain_with_middleware(chain, name="JudgeChain", with_retry=False)
        return self._chain

    async def _evaluate(
        self, request: EvaluationRequest, problem: CodingProblem
    ) -> Sequence[EvaluationResult]:
        logger.info(
            f"[LLMJudge] 평가 요청 - problem: {problem.id}, language: {request.language.value}, "
            f"cases: {len(request.cases)}"
        )
        payload = await self._get_chain().ainvoke({"request": request, "problem": problem})
        return parse_oracle_payload(payload, len(request.cases))
