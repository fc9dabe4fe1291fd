from testbuddy.domain.judge.adapters.judge0 import Judge0JudgeClient, map_judge0_result
from testbuddy.domain.judge.adapters.llm import LLMJudgeClient, OracleResponse

__all__ = [
    "Judge0JudgeClient",
    "LLMJudgeClient",
    "OracleResponse",
    "map_judge0_result",
]
