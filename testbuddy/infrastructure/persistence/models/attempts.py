"""
코딩 제출 기록 테이블 모델
coding_attempts (append-only)
"""
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, Enum, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from testbuddy.infrastructure.persistence.models.enums import (
    AttemptStatusEnum,
    DifficultyEnum,
    LanguageEnum,
)
from testbuddy.infrastructure.persistence.session import Base


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CodingAttempt(Base):
    """코딩 제출 기록 테이블"""
    __tablename__ = "coding_attempts"
    __table_args__ = (
        Index("ix_coding_attempts_user_problem", "user_id", "problem_id"),
    )

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    problem_id: Mapped[str] = mapped_column(String(128), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    difficulty: Mapped[DifficultyEnum] = mapped_column(
        Enum(DifficultyEnum, values_callable=_enum_values, native_enum=False, length=16),
        nullable=False,
    )
    language: Mapped[LanguageEnum] = mapped_column(
        Enum(LanguageEnum, values_callable=_enum_values, native_enum=False, length=16),
        nullable=False,
    )
    code_submitted: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[AttemptStatusEnum] = mapped_column(
        Enum(AttemptStatusEnum, values_callable=_enum_values, native_enum=False, length=16),
        nullable=False,
    )
    score: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    attempted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
