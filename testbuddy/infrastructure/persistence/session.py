"""
SQLAlchemy 비동기 엔진 및 세션
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from testbuddy.core.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """ORM 모델 베이스"""

    pass


engine = create_async_engine(
    settings.POSTGRES_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI Depends용 DB 세션 (요청 단위 커밋/롤백)"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    라우터 밖에서 사용하는 DB 세션 컨텍스트

    ```python
    async with get_db_context() as db:
        ...
    ```
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db():
    """테이블 생성 (없는 경우에만)"""
    # 모델 등록
    from testbuddy.infrastructure.persistence.models import attempts  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("[DB] 테이블 초기화 완료")


async def close_db():
    """엔진 연결 풀 정리"""
    await engine.dispose()
    logger.info("[DB] 연결 종료")
