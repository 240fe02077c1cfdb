"""评审链"""

from .chat_model import ChatCompletionsModel, build_completions_url
from .review_chain import create_review_chain, setup_debug_logging

__all__ = [
    "ChatCompletionsModel",
    "build_completions_url",
    "create_review_chain",
    "setup_debug_logging",
]
