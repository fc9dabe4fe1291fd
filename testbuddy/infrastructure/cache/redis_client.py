"""
Redis 클라이언트 관리
코딩 세션 상태 스냅샷 저장에 사용
"""
import json
from typing import Optional

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from testbuddy.core.config import settings


class RedisClient:
    """Redis 비동기 클라이언트 래퍼"""

    def __init__(self, client: Optional[redis.Redis] = None):
        """
        Args:
            client: 이미 생성된 Redis 클라이언트 (테스트 주입용, 없으면 connect()에서 생성)
        """
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[redis.Redis] = client

    async def connect(self):
        """Redis 연결 초기화"""
        self._pool = ConnectionPool.from_url(
            settings.REDIS_URL,
            max_connections=20,
            decode_responses=True,
        )
        self._client = redis.Redis(connection_pool=self._pool)
        # 연결 테스트
        await self._client.ping()

    async def close(self):
        """Redis 연결 종료"""
        if self._client:
            await self._client.aclose()
        if self._pool:
            await self._pool.disconnect()
        self._client = None
        self._pool = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            raise RuntimeError("Redis client not initialized. Call connect() first.")
        return self._client

    # ===== 기본 Key-Value 연산 =====

    async def get(self, key: str) -> Optional[str]:
        """키 값 조회"""
        return await self.client.get(key)

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> bool:
        """키 값 설정"""
        if ttl_seconds:
            return await self.client.setex(key, ttl_seconds, value)
        return await self.client.set(key, value)

    async def delete(self, key: str) -> int:
        """키 삭제"""
        return await self.client.delete(key)

    async def exists(self, key: str) -> bool:
        """키 존재 여부 확인"""
        return await self.client.exists(key) > 0

    # ===== JSON 데이터 연산 =====

    async def get_json(self, key: str) -> Optional[dict]:
        """JSON 데이터 조회"""
        data = await self.get(key)
        if data:
            return json.loads(data)
        return None

    async def set_json(self, key: str, value: dict, ttl_seconds: Optional[int] = None) -> bool:
        """JSON 데이터 저장"""
        return await self.set(key, json.dumps(value, ensure_ascii=False), ttl_seconds)


# 싱글톤 인스턴스
redis_client = RedisClient()


async def get_redis() -> RedisClient:
    """FastAPI 의존성 주입용"""
    return redis_client
