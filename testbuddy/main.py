"""
FastAPI 메인 애플리케이션
TestBuddy Coding Worker
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from testbuddy.core.config import settings
from testbuddy.infrastructure.cache.redis_client import redis_client
from testbuddy.infrastructure.persistence.session import close_db, init_db
from testbuddy.presentation.api.dependencies import get_session_service, set_session_service
from testbuddy.presentation.api.routes import (
    health_router,
    problems_router,
    progress_router,
    sessions_router,
)

# 로깅 설정
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션 라이프사이클 관리
    - startup: Redis, PostgreSQL 연결
    - shutdown: 백그라운드 작업 대기, 연결 종료
    """
    logger.info("Starting TestBuddy Coding Worker...")

    # Redis 연결 (세션 스냅샷)
    if settings.USE_REDIS_SESSION_STORE:
        try:
            await redis_client.connect()
            logger.info("Redis 연결 성공")
        except Exception as e:
            logger.error(f"Redis 연결 실패: {str(e)}")
            raise

    # PostgreSQL 연결 (제출 기록)
    if settings.PERSIST_ATTEMPTS_TO_DB:
        try:
            await init_db()
            logger.info("PostgreSQL 연결 성공")
        except Exception as e:
            logger.warning(f"PostgreSQL 연결 실패 (제출 기록 저장 불가): {str(e)}")

    service = get_session_service()
    logger.info(f"서버 시작 완료: http://{settings.API_HOST}:{settings.API_PORT}")

    yield

    # Shutdown
    logger.info("Shutting down...")

    await service.shutdown()
    set_session_service(None)

    if redis_client.is_connected:
        await redis_client.close()
    await close_db()

    logger.info("서버 종료 완료")


# FastAPI 앱 생성
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
## TestBuddy Coding Worker

코딩 챌린지 실행/제출/진단 워커

### 기능
- ▶️ 공개 예제로 코드 실행 (Run)
- 📝 숨겨진 테스트 케이스로 제출 및 채점 (Submit)
- 🩺 컴파일/런타임 에러 인라인 진단
- 💡 실패 케이스 기반 힌트 및 실패 원인 설명
- 📊 제출 기록 및 성과 요약
""",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 프로덕션에서는 특정 도메인만 허용
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 라우터 등록
app.include_router(health_router)
app.include_router(sessions_router, prefix="/api")
app.include_router(problems_router, prefix="/api")
app.include_router(progress_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "testbuddy.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
