"""
TestBuddy 코딩 챌린지 워커
"""

__version__ = "0.1.0"
