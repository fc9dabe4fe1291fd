"""
코딩 세션 상태 Repository
Redis에 세션 상태 스냅샷 저장/조회
"""
from datetime import datetime, timezone
from typing import Optional

from testbuddy.core.config import settings
from testbuddy.infrastructure.cache.redis_client import RedisClient

SESSION_KEY_PREFIX = "testbuddy:session"


class SessionStateRepository:
    """세션 상태 스냅샷 데이터 접근 계층"""

    def __init__(self, redis: RedisClient):
        self.redis = redis

    def _session_key(self, session_id: str) -> str:
        return f"{SESSION_KEY_PREFIX}:{session_id}"

    async def save_state(
        self,
        session_id: str,
        state: dict,
        ttl_seconds: Optional[int] = None,
    ) -> bool:
        """상태 스냅샷 저장 (TTL 갱신)"""
        state_with_meta = {
            **state,
            "_meta": {
                "updated_at": datetime.now(timezone.utc).isoformat(),
                "session_id": session_id,
            },
        }
        return await self.redis.set_json(
            self._session_key(session_id),
            state_with_meta,
            ttl_seconds or settings.SESSION_TTL_SECONDS,
        )

    async def get_state(self, session_id: str) -> Optional[dict]:
        """상태 스냅샷 조회 (_meta 제외)"""
        state = await self.redis.get_json(self._session_key(session_id))
        if state is None:
            return None
        state.pop("_meta", None)
        return state

    async def delete_state(self, session_id: str) -> bool:
        result = await self.redis.delete(self._session_key(session_id))
        return result > 0
