"""
테스트 케이스 입력 전처리
"nums = [1,2,3]" 형태의 입력에서 변수명을 제거하고 값만 남깁니다.
"""


def extract_input_value(raw_input: str) -> str:
    """
    각 줄의 첫 번째 '=' 뒤 값만 남김 ('='이 없는 줄은 trim만 적용)

    Examples:
        >>> extract_input_value("nums = [1,2,3]\\ntarget = 5")
        '[1,2,3]\\n5'
        >>> extract_input_value("[1,2,3]")
        '[1,2,3]'
    """
    lines = []
    for line in raw_input.split("\n"):
        _, sep, value = line.partition("=")
        lines.append(value.strip() if sep else line.strip())
    return "\n".join(lines)
