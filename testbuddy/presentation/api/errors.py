"""
API 에러 응답 헬퍼
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException


def http_error(
    status_code: int,
    error_code: str,
    error_message: str,
    details: Optional[Dict[str, Any]] = None,
) -> HTTPException:
    """ErrorResponse 형식의 HTTPException 생성"""
    detail: Dict[str, Any] = {
        "error": True,
        "error_code": error_code,
        "error_message": error_message,
    }
    if details:
        detail["details"] = details
    return HTTPException(status_code=status_code, detail=detail)
