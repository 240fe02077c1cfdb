"""数据模型定义"""

from .config import LLMConfig, ReviewConfig
from .review_result import Issue, ReviewVerdict, Severity, TokenUsage

__all__ = [
    "LLMConfig",
    "ReviewConfig",
    "Issue",
    "ReviewVerdict",
    "Severity",
    "TokenUsage",
]
