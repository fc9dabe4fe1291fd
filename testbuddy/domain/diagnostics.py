"""
인라인 진단 추출기

컴파일/런타임 에러 문자열에서 (줄 번호, 메시지)를 뽑아냅니다.
지원 형태 (같은 위치에서는 이 순서로 우선):
- path:12        (예: script.py:12: SyntaxError)
- line 12        (대소문자 무시)
- [Line 12]
"""

import re
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_LINE_NUMBER = 1

_LOCATION_PATTERN = re.compile(
    r"(?:[a-zA-Z0-9/._-]+):(\d+)|line (\d+)|\[Line (\d+)\]",
    re.IGNORECASE,
)


class Diagnostic(BaseModel):
    """에디터 인라인 마커"""
    line_number: int = Field(..., ge=1, description="1부터 시작하는 줄 번호")
    message: str


def extract_diagnostic(raw_error_text: Optional[str]) -> Optional[Diagnostic]:
    """
    에러 텍스트에서 진단 정보 추출

    Args:
        raw_error_text: compile_output 또는 stderr

    Returns:
        빈 입력이면 None, 위치를 찾지 못하면 1번 줄
    """
    if not raw_error_text or not raw_error_text.strip():
        return None

    message = raw_error_text.strip()
    match = _LOCATION_PATTERN.search(raw_error_text)

    line_number = DEFAULT_LINE_NUMBER
    if match:
        digits = next(group for group in match.groups() if group is not None)
        line_number = max(int(digits), DEFAULT_LINE_NUMBER)

    return Diagnostic(line_number=line_number, message=message)
