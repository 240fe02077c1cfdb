"""提示词构建"""

from .perspectives import Perspective, active_perspectives
from .templates import build_instruction_payload, create_review_prompt, render_instructions

__all__ = [
    "Perspective",
    "active_perspectives",
    "build_instruction_payload",
    "create_review_prompt",
    "render_instructions",
]
