"""
FastAPI 의존성
SessionService 싱글톤 생성 및 주입
"""
import logging
from typing import Optional

from fastapi import Depends

from testbuddy.application.services.session_service import SessionService
from testbuddy.core.config import settings
from testbuddy.domain.advisory.service import AdvisoryService
from testbuddy.domain.attempts.adapters.base import AttemptRecorder
from testbuddy.domain.attempts.factory import create_attempt_recorder
from testbuddy.domain.judge.factory import create_judge_client
from testbuddy.infrastructure.cache.redis_client import redis_client
from testbuddy.infrastructure.repositories.session_state_repository import SessionStateRepository

logger = logging.getLogger(__name__)

_session_service: Optional[SessionService] = None


def build_session_service() -> SessionService:
    """설정에 따라 SessionService 구성"""
    state_repo = SessionStateRepository(redis_client) if settings.USE_REDIS_SESSION_STORE else None
    return SessionService(
        judge=create_judge_client(),
        advisory=AdvisoryService(),
        recorder=create_attempt_recorder(),
        state_repo=state_repo,
    )


def get_session_service() -> SessionService:
    """SessionService 의존성 주입 (최초 요청 시 생성)"""
    global _session_service
    if _session_service is None:
        _session_service = build_session_service()
    return _session_service


def set_session_service(service: Optional[SessionService]):
    """lifespan/테스트에서 서비스 교체"""
    global _session_service
    _session_service = service


def get_advisory_service(
    service: SessionService = Depends(get_session_service),
) -> AdvisoryService:
    return service.advisory


def get_attempt_recorder(
    service: SessionService = Depends(get_session_service),
) -> AttemptRecorder:
    return service.recorder
