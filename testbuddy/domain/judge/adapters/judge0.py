"""
Judge0 기반 Judge 어댑터

케이스마다 Judge0에 제출하고 결과를 순서대로 모읍니다.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from testbuddy.core.config import settings
from testbuddy.domain.judge.base import JudgeClient, OracleFailure
from testbuddy.domain.judge.models import EvaluationRequest, EvaluationResult, SubmissionStatus
from testbuddy.domain.problem.models import CodingProblem
from testbuddy.infrastructure.judge0.client import Judge0Client

logger = logging.getLogger(__name__)


# Judge0 status.id -> 판정
# 3: Accepted, 4: Wrong Answer, 5: TLE, 6: Compilation Error, 7~12: Runtime Error 계열
JUDGE0_STATUS_MAP = {
    3: SubmissionStatus.ACCEPTED,
    4: SubmissionStatus.WRONG_ANSWER,
    5: SubmissionStatus.TIME_LIMIT_EXCEEDED,
    6: SubmissionStatus.COMPILATION_ERROR,
    7: SubmissionStatus.RUNTIME_ERROR,
    8: SubmissionStatus.RUNTIME_ERROR,
    9: SubmissionStatus.RUNTIME_ERROR,
    10: SubmissionStatus.RUNTIME_ERROR,
    11: SubmissionStatus.RUNTIME_ERROR,
    12: SubmissionStatus.RUNTIME_ERROR,
}


def map_judge0_result(result: Dict[str, Any]) -> EvaluationResult:
    """
    Judge0 응답을 EvaluationResult로 변환

    Raises:
        OracleFailure: 미완료(1, 2) 또는 Judge0 내부 오류(13, 14)
    """
    status = result.get("status") or {}
    status_id = status.get("id")
    verdict = JUDGE0_STATUS_MAP.get(status_id)
    if verdict is None:
        raise OracleFailure(
            f"Judge0 판정 불가 상태 - id: {status_id}, description: {status.get('description')}"
        )

    return EvaluationResult(
        status=verdict,
        stdout=result.get("stdout"),
        stderr=result.get("stderr") or result.get("message"),
        compile_output=result.get("compile_output"),
        time=result.get("time"),
        memory=result.get("memory") or 0,
    )


class Judge0JudgeClient(JudgeClient):
    """Judge0 샌드박스 실행 오라클"""

    def __init__(
        self,
        client: Optional[Judge0Client] = None,
        timeout: Optional[float] = None,
        cpu_time_limit: Optional[int] = None,
        memory_limit_mb: Optional[int] = None,
    ):
        super().__init__(
            timeout=timeout if timeout is not None else settings.EVALUATION_TIMEOUT_SECONDS
        )
        self.client = client or Judge0Client()
        self.cpu_time_limit = cpu_time_limit or settings.JUDGE0_CPU_TIME_LIMIT
        self.memory_limit_mb = memory_limit_mb or settings.JUDGE0_MEMORY_LIMIT_MB

    async def _evaluate(
        self, request: EvaluationRequest, problem: CodingProblem
    ) -> Sequence[EvaluationResult]:
        language = request.language.value
        results: List[EvaluationResult] = []

        for index, case in enumerate(request.cases):
            try:
                raw = await self.client.execute_code(
                    code=request.source_code,
                    language=language,
                    stdin=case.stdin,
                    expected_output=case.expected_output,
                    cpu_time_limit=self.cpu_time_limit,
                    memory_limit=self.memory_limit_mb,
                    max_wait=self.timeout or 30,
                )
            except (httpx.HTTPError, ValueError) as e:
                raise OracleFailure(f"Judge0 호출 실패 - case: {index}, error: {str(e)}") from e

            result = map_judge0_result(raw)
            logger.debug(
                f"[Judge0Judge] 케이스 완료 - problem: {problem.id}, case: {index}, status: {result.status.value}"
            )
            results.append(result)

        return results

    async def close(self) -> None:
        await self.client.close()
