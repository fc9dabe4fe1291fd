"""
코딩 세션 예외
"""


class SessionError(Exception):
    """코딩 세션 동작 오류 베이스"""

    pass


class NoProblemLoadedError(SessionError):
    """문제가 로드되지 않은 세션에서 Run/Submit/Hint 요청"""

    pass


class EvaluationInProgressError(SessionError):
    """평가(Run/Submit)가 진행 중인 세션에 새 평가 요청"""

    pass


class HintUnavailableError(SessionError):
    """실패 케이스가 있는 제출 결과가 없어 힌트를 만들 수 없음"""

    pass
