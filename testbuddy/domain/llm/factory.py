"""
LLM 인스턴스 생성
역할(judge, advisory)별 모델 설정을 적용한 Gemini 채팅 모델 반환
"""
import logging

from langchain_google_genai import ChatGoogleGenerativeAI

from testbuddy.core.config import settings

logger = logging.getLogger(__name__)

LLM_ROLES = ("judge", "advisory")


def _model_for(role: str) -> str:
    if role == "judge":
        return settings.JUDGE_LLM_MODEL or settings.DEFAULT_LLM_MODEL
    if role == "advisory":
        return settings.ADVISORY_LLM_MODEL or settings.DEFAULT_LLM_MODEL
    raise ValueError(f"알 수 없는 LLM 역할입니다: {role} (허용: {', '.join(LLM_ROLES)})")


def get_llm(role: str = "advisory") -> ChatGoogleGenerativeAI:
    """
    LLM 인스턴스 생성 (AI Studio API Key 방식)

    Args:
        role: "judge" (코드 채점) 또는 "advisory" (힌트, 설명, 문제 생성)
    """
    model = _model_for(role)
    logger.debug(f"[LLM] 모델 생성 - role: {role}, model: {model}")
    return ChatGoogleGenerativeAI(
        model=model,
        google_api_key=settings.GEMINI_API_KEY,
        temperature=settings.LLM_TEMPERATURE,
        max_output_tokens=settings.LLM_MAX_TOKENS,
    )
