"""LangChain 提示词模板"""

import json
from typing import Any

from langchain_core.prompts import ChatPromptTemplate

from ..models.config import ReviewConfig
from .perspectives import PERSPECTIVE_RULES, active_perspectives

SYSTEM_INSTRUCTION = (
    "你是一位专业的代码审查专家，正在分析 git diff -U0 格式的代码变更。"
    "你的主要关注点应是新增和修改的代码部分，忽略已删除的部分。"
    "请严格按照以下维度进行审查，不要引入无关的视角："
)

# 用户消息中的 diff 说明
DIFF_PROMPT = "这是需要审查的 git diff:\n\n{diff}"


def build_instruction_payload(config: ReviewConfig) -> dict[str, Any]:
    """根据配置构建发送给模型的结构化指令

    Args:
        config: 评审配置

    Returns:
        指令字典，包含角色说明、启用视角的规则和输出格式要求
    """
    perspectives = active_perspectives(config)
    rules = {p.value: PERSPECTIVE_RULES[p].as_dict() for p in perspectives}

    return {
        "system": SYSTEM_INSTRUCTION,
        "instruction": "从这些视角进行分析",
        "rules": rules,
        "response": {
            "requirement": "输出要求：\n请返回包含以下字段的 JSON：",
            "fields": {
                "result": "如果有高严重性 (high severity) 问题，返回 NO (rejected)；否则返回 YES (approved)",
                "meme_comment": "用一句简短、幽默且犀利的话对代码进行整体评价",
                "list": "发现的问题列表，包含以下详情：",
            },
            "itemFields": {
                "severity": "high/medium/low",
                "perspective": "/".join(p.value for p in perspectives),
                "description": f"用{config.language}描述问题",
                "suggestion": f"用{config.language}给出修复建议",
                "location": "文件路径和行号，格式为：'path:line_number' (例如 src/utils.js:15)",
            },
        },
    }


def render_instructions(payload: dict[str, Any]) -> str:
    """将指令字典序列化为系统消息文本"""
    return json.dumps(payload, ensure_ascii=False, indent=2)


def create_review_prompt() -> ChatPromptTemplate:
    """获取评审 prompt 模板

    系统消息和 diff 都以变量传入，内容中的花括号不会被当作模板变量。
    """
    return ChatPromptTemplate.from_messages(
        [("system", "{instructions}"), ("human", DIFF_PROMPT)]
    )
