"""
LLM 공통 모듈 (모델 생성, Middleware, 프롬프트)
"""
from testbuddy.domain.llm.factory import get_llm

__all__ = ["get_llm"]
