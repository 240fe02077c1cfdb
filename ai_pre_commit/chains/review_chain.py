"""LangChain 评审链"""

import logging
from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage
from langchain_core.runnables import Runnable, RunnableLambda

from ..models.config import ReviewConfig
from ..models.review_result import ReviewVerdict, TokenUsage
from ..parsers.review_parser import review_parser
from ..prompts.templates import (
    build_instruction_payload,
    create_review_prompt,
    render_instructions,
)
from .chat_model import ChatCompletionsModel

# 配置日志
logger = logging.getLogger(__name__)


def setup_debug_logging(verbose: bool = False, log_file: str | None = None):
    """设置调试日志

    Args:
        verbose: 是否输出到控制台
        log_file: 日志文件路径（可选）
    """
    handlers = []

    if verbose:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter("\n[DEBUG] %(message)s"))
        handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
        handlers.append(file_handler)

    if handlers:
        # 包级 logger，覆盖 chains/git_helper/config 等所有子模块
        package_logger = logging.getLogger("ai_pre_commit")
        package_logger.setLevel(logging.DEBUG)
        for handler in handlers:
            package_logger.addHandler(handler)


def build_verdict(message: AIMessage) -> ReviewVerdict:
    """解析模型回复并附加 token 使用情况"""
    content = message.content if isinstance(message.content, str) else str(message.content)

    logger.debug("=" * 80)
    logger.debug("【LLM 原始响应】")
    logger.debug("=" * 80)
    logger.debug(content)

    verdict = review_parser.parse(content)
    usage = TokenUsage.from_response(message.response_metadata.get("token_usage"))
    if usage is not None:
        verdict = verdict.model_copy(update={"usage": usage})
    return verdict


def create_review_chain(
    config: ReviewConfig,
    llm: BaseChatModel | None = None,
) -> Runnable:
    """创建评审链

    使用 LCEL 构建：
    1. 根据配置生成系统指令
    2. 组装 system + user 两条消息
    3. 调用 LLM
    4. 提取并解析 JSON 结论

    Args:
        config: 配置对象
        llm: 聊天模型，为 None 时根据配置创建 ChatCompletionsModel

    Returns:
        评审链，输入 {"diff": str}，输出 ReviewVerdict
    """
    if llm is None:
        llm = ChatCompletionsModel.from_config(config.llm)

    instructions = render_instructions(build_instruction_payload(config))
    prompt = create_review_prompt()

    def prepare_input(inputs: dict[str, Any]) -> dict[str, Any]:
        """准备输入"""
        logger.debug("=" * 80)
        logger.debug("【系统指令】")
        logger.debug("=" * 80)
        logger.debug(instructions)
        logger.debug("=" * 80)
        logger.debug("【发送的 DIFF】")
        logger.debug("=" * 80)
        logger.debug(f"长度: {len(inputs['diff'])} 字符")
        logger.debug(f"Model: {config.llm.model}")
        logger.debug(f"Base URL: {config.llm.base_url}")

        return {"instructions": instructions, "diff": inputs["diff"]}

    review_chain = (
        RunnableLambda(prepare_input)
        | prompt
        | llm
        | RunnableLambda(build_verdict)
    )

    return review_chain
