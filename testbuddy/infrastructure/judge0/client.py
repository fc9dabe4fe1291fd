"""
Judge0 API 클라이언트
코드 제출 및 결과 조회
"""
import asyncio
import logging
import time
from typing import Any, Dict, Optional

import httpx

from testbuddy.core.config import settings


logger = logging.getLogger(__name__)

# Judge0 상태 ID
STATUS_IN_QUEUE = 1
STATUS_PROCESSING = 2
STATUS_ACCEPTED = 3


class Judge0Client:
    """Judge0 API 클라이언트"""

    # 언어 ID 매핑 (지원 언어만)
    LANGUAGE_IDS = {
        "javascript": 63,
        "python": 71,
        "java": 62,
        "c": 50,
    }

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        use_rapidapi: Optional[bool] = None,
        rapidapi_host: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            api_url: Judge0 API URL (기본값: settings.JUDGE0_API_URL)
            api_key: Judge0 API Key (기본값: settings.JUDGE0_API_KEY)
            use_rapidapi: RapidAPI 사용 여부 (기본값: settings.JUDGE0_USE_RAPIDAPI)
            rapidapi_host: RapidAPI Host (기본값: settings.JUDGE0_RAPIDAPI_HOST)
            http_client: 주입할 httpx 클라이언트 (테스트용)
        """
        self.api_url = (api_url or settings.JUDGE0_API_URL).rstrip("/")
        self.api_key = api_key or settings.JUDGE0_API_KEY
        self.use_rapidapi = use_rapidapi if use_rapidapi is not None else settings.JUDGE0_USE_RAPIDAPI
        self.rapidapi_host = rapidapi_host or settings.JUDGE0_RAPIDAPI_HOST
        self.client = http_client or httpx.AsyncClient(timeout=30.0)

    def get_language_id(self, language: str) -> int:
        """
        언어 이름을 Judge0 언어 ID로 변환

        Raises:
            ValueError: 지원하지 않는 언어
        """
        try:
            return self.LANGUAGE_IDS[language.lower()]
        except KeyError:
            raise ValueError(f"Judge0에서 지원하지 않는 언어입니다: {language}")

    def _get_headers(self) -> Dict[str, str]:
        """요청 헤더 생성"""
        headers = {"Content-Type": "application/json"}

        if self.use_rapidapi:
            if self.api_key:
                headers["x-rapidapi-key"] = self.api_key
            headers["x-rapidapi-host"] = self.rapidapi_host
        elif self.api_key:
            headers["X-Auth-Token"] = self.api_key

        return headers

    async def submit_code(
        self,
        code: str,
        language: str,
        stdin: str = "",
        expected_output: Optional[str] = None,
        cpu_time_limit: int = 5,
        memory_limit: int = 128,  # MB
    ) -> str:
        """
        코드 제출

        Returns:
            submission token
        """
        payload = {
            "source_code": code,
            "language_id": self.get_language_id(language),
            "stdin": stdin,
            "cpu_time_limit": cpu_time_limit,
            "memory_limit": memory_limit * 1024,  # MB -> KB
        }
        if expected_output is not None:
            payload["expected_output"] = expected_output

        try:
            response = await self.client.post(
                f"{self.api_url}/submissions",
                json=payload,
                params={"base64_encoded": "false", "wait": "false"},
                headers=self._get_headers(),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"[Judge0] HTTP 에러 - status: {e.response.status_code}, response: {e.response.text}"
            )
            raise

        token = response.json().get("token")
        if not token:
            raise ValueError(f"Judge0 API 응답에 token이 없습니다: {response.text}")

        logger.info(f"[Judge0] 코드 제출 완료 - token: {token}, language: {language}")
        return token

    async def get_result(self, token: str) -> Dict[str, Any]:
        """실행 결과 조회"""
        try:
            response = await self.client.get(
                f"{self.api_url}/submissions/{token}",
                params={"base64_encoded": "false"},
                headers=self._get_headers(),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"[Judge0] 결과 조회 HTTP 에러 - token: {token}, status: {e.response.status_code}"
            )
            raise
        return response.json()

    async def wait_for_result(
        self,
        token: str,
        max_wait: float = 30,
        poll_interval: float = 0.5,
    ) -> Dict[str, Any]:
        """
        결과가 나올 때까지 폴링

        Returns:
            실행 결과 딕셔너리 (max_wait 초과 시 마지막 조회 결과, 상태가 1/2일 수 있음)
        """
        start_time = time.monotonic()

        while True:
            result = await self.get_result(token)
            status_id = (result.get("status") or {}).get("id")

            # 1: In Queue, 2: Processing, 3 이상: 완료
            if status_id is not None and status_id >= STATUS_ACCEPTED:
                return result

            elapsed = time.monotonic() - start_time
            if elapsed >= max_wait:
                logger.warning(f"[Judge0] 결과 대기 타임아웃 - token: {token}, elapsed: {elapsed:.1f}초")
                return result

            await asyncio.sleep(poll_interval)

    async def execute_code(
        self,
        code: str,
        language: str,
        stdin: str = "",
        expected_output: Optional[str] = None,
        cpu_time_limit: int = 5,
        memory_limit: int = 128,
        max_wait: float = 30,
    ) -> Dict[str, Any]:
        """코드 실행 (제출 + 결과 대기)"""
        token = await self.submit_code(
            code=code,
            language=language,
            stdin=stdin,
            expected_output=expected_output,
            cpu_time_limit=cpu_time_limit,
            memory_limit=memory_limit,
        )
        return await self.wait_for_result(token, max_wait=max_wait)

    async def close(self):
        """클라이언트 종료"""
        await self.client.aclose()
