"""AI Pre-Commit - 基于 LangChain 的 Git 提交前代码评审工具"""

__version__ = "0.1.0"

from .chains import ChatCompletionsModel, create_review_chain
from .cli import main
from .config import load_config
from .models import Issue, LLMConfig, ReviewConfig, ReviewVerdict, Severity, TokenUsage
from .verdict import CheckOutcome, CheckStatus, is_approved, run_check

__all__ = [
    "main",
    "load_config",
    "create_review_chain",
    "run_check",
    "is_approved",
    "ChatCompletionsModel",
    "CheckOutcome",
    "CheckStatus",
    "LLMConfig",
    "ReviewConfig",
    "Issue",
    "ReviewVerdict",
    "Severity",
    "TokenUsage",
]
