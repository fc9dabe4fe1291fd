from testbuddy.infrastructure.judge0.client import Judge0Client

__all__ = ["Judge0Client"]
