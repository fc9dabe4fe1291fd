"""
Judge 클라이언트 인터페이스 정의

외부 채점 오라클(LLM 또는 Judge0)을 감싸는 공통 계약:
- 요청 케이스 수와 결과 수가 항상 같아야 함 (위치 기반 매칭)
- 오라클 실패/타임아웃/스키마 위반 시 빈 리스트 대신 케이스별 합성 Compilation Error 결과 반환
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, ValidationError

from testbuddy.domain.judge.models import (
    EvaluationBatch,
    EvaluationRequest,
    EvaluationResult,
    SubmissionStatus,
)
from testbuddy.domain.problem.models import CodingProblem

logger = logging.getLogger(__name__)

ORACLE_FAILURE_MESSAGE = "Evaluation failed due to AI error."


class OracleFailure(Exception):
    """오라클 호출 자체가 실패했거나 응답이 계약을 위반한 경우"""

    pass


def synthesize_failure_results(
    request: EvaluationRequest, message: str = ORACLE_FAILURE_MESSAGE
) -> List[EvaluationResult]:
    """요청 케이스마다 Compilation Error 합성 결과 생성"""
    return [
        EvaluationResult(
            status=SubmissionStatus.COMPILATION_ERROR,
            stdout="",
            stderr="",
            compile_output=message,
            time="0",
            memory=0,
            expected_output=case.expected_output,
        )
        for case in request.cases
    ]


def parse_oracle_payload(payload: Any, expected_count: int) -> List[EvaluationResult]:
    """
    오라클 응답을 스키마로 검증하여 EvaluationResult 리스트로 변환

    Args:
        payload: {"results": [...]} 딕셔너리, 결과 리스트, JSON 문자열 또는 pydantic 모델
        expected_count: 요청 케이스 수

    Returns:
        검증된 결과 리스트

    Raises:
        OracleFailure: 형식 오류, 필드 누락, 결과 수 불일치
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()

    if isinstance(payload, str):
        try:
            payload = json.loads(payload.strip())
        except json.JSONDecodeError as e:
            raise OracleFailure(f"오라클 응답 JSON 파싱 실패: {str(e)}") from e

    if isinstance(payload, dict):
        payload = payload.get("results")

    if not isinstance(payload, list):
        raise OracleFailure(f"오라클 응답에 results 배열이 없습니다: {type(payload).__name__}")

    if len(payload) != expected_count:
        raise OracleFailure(
            f"결과 수 불일치 - 요청: {expected_count}, 응답: {len(payload)}"
        )

    results: List[EvaluationResult] = []
    for index, item in enumerate(payload):
        if isinstance(item, BaseModel):
            item = item.model_dump()
        try:
            results.append(EvaluationResult.model_validate(item))
        except ValidationError as e:
            raise OracleFailure(f"케이스 {index} 결과 스키마 위반: {str(e)}") from e

    return results


class JudgeClient(ABC):
    """Judge 클라이언트 인터페이스"""

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: 오라클 호출 제한 시간 (초, None이면 무제한)
        """
        self.timeout = timeout

    @abstractmethod
    async def _evaluate(
        self, request: EvaluationRequest, problem: CodingProblem
    ) -> Sequence[EvaluationResult]:
        """
        오라클 호출 (어댑터 구현)

        Raises:
            OracleFailure: 오라클 실패
        """
        pass

    async def evaluate(
        self, request: EvaluationRequest, problem: CodingProblem
    ) -> EvaluationBatch:
        """
        코드 평가 (단일 호출, 재시도 없음)

        Args:
            request: 언어, 소스 코드, 순서가 있는 케이스 목록
            problem: 문제 정보 (오라클 컨텍스트)

        Returns:
            케이스 수와 같은 길이의 결과 묶음 (실패 시 합성 결과 + oracle_error)
        """
        if not request.cases:
            return EvaluationBatch(results=[])

        try:
            if self.timeout:
                results = await asyncio.wait_for(
                    self._evaluate(request, problem), timeout=self.timeout
                )
            else:
                results = await self._evaluate(request, problem)

            results = list(results)
            if len(results) != len(request.cases):
                raise OracleFailure(
                    f"결과 수 불일치 - 요청: {len(request.cases)}, 응답: {len(results)}"
                )

        except asyncio.TimeoutError:
            message = f"Evaluation timed out after {self.timeout:g}s."
            logger.error(
                f"[Judge] 오라클 타임아웃 - problem: {problem.id}, timeout: {self.timeout}초"
            )
            return EvaluationBatch(
                results=synthesize_failure_results(request, message),
                oracle_error=message,
            )
        except OracleFailure as e:
            logger.error(f"[Judge] 오라클 실패 - problem: {problem.id}, error: {str(e)}")
            return EvaluationBatch(
                results=synthesize_failure_results(request),
                oracle_error=str(e),
            )
        except Exception as e:
            logger.error(
                f"[Judge] 오라클 호출 중 예외 - problem: {problem.id}, error: {str(e)}",
                exc_info=True,
            )
            return EvaluationBatch(
                results=synthesize_failure_results(request),
                oracle_error=str(e) or type(e).__name__,
            )

        # 기대 출력은 요청 순서대로 결과에 부착
        attached = [
            result.model_copy(update={"expected_output": case.expected_output})
            for result, case in zip(results, request.cases)
        ]
        return EvaluationBatch(results=attached)

    async def close(self) -> None:
        """리소스 정리 (필요한 어댑터만 구현)"""
        return None
