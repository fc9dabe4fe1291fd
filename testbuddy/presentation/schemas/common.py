"""
공통 스키마
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """에러 응답 (HTTPException detail 형식)"""
    error: bool = Field(True, description="에러 여부")
    error_code: str = Field(..., description="에러 코드")
    error_message: str = Field(..., description="에러 메시지")
    details: Optional[Dict[str, Any]] = Field(None, description="추가 정보")


class HealthResponse(BaseModel):
    status: str = Field("ok", description="서버 상태")
    app: str = Field(..., description="앱 이름")
    version: str = Field(..., description="앱 버전")
