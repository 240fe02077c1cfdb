"""评审流程与结论判定"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from langchain_core.language_models.chat_models import BaseChatModel

from .chains.review_chain import create_review_chain
from .diff_processor import DiffPayload, truncate_diff
from .git_helper import get_staged_diff, is_merge_in_progress
from .models.config import ReviewConfig
from .models.review_result import ReviewVerdict

logger = logging.getLogger(__name__)

ACCEPT_TOKEN = "YES"


class CheckStatus(str, Enum):
    """一次检查的结果"""

    MERGE_SKIPPED = "merge_skipped"  # 合并中，跳过
    NO_CHANGES = "no_changes"  # 没有需要评审的变更
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class CheckOutcome:
    status: CheckStatus
    verdict: Optional[ReviewVerdict] = None
    payload: Optional[DiffPayload] = None

    @property
    def exit_code(self) -> int:
        return 1 if self.status == CheckStatus.REJECTED else 0


def is_approved(verdict: ReviewVerdict) -> bool:
    """判断是否通过

    result 字段不区分大小写地包含 YES 即通过，其余情况（包括空字符串）一律拒绝。
    """
    return ACCEPT_TOKEN in (verdict.result or "").upper()


def run_check(
    config: ReviewConfig,
    llm: BaseChatModel | None = None,
    cwd: Path | None = None,
) -> CheckOutcome:
    """执行一次完整的提交前检查

    合并中或没有匹配的暂存变更时直接返回，不调用模型。

    Raises:
        GitCommandError: git 命令失败
        ProviderRequestError / ProviderResponseError: 调用模型失败
        OutputParserException: 模型输出无法解析
    """
    if is_merge_in_progress(cwd=cwd):
        logger.debug("检测到 MERGE_HEAD，跳过检查")
        return CheckOutcome(status=CheckStatus.MERGE_SKIPPED)

    diff = get_staged_diff(config, cwd=cwd)
    if not diff.strip():
        return CheckOutcome(status=CheckStatus.NO_CHANGES)

    logger.debug("=" * 80)
    logger.debug("【原始 DIFF 内容】")
    logger.debug("=" * 80)
    logger.debug(f"原始 diff 长度: {len(diff)} 字符")
    logger.debug(diff)

    payload = truncate_diff(diff, config.max_diff_size)
    if payload.truncated:
        logger.debug(
            f"diff 超出上限 {config.max_diff_size}，原始 {payload.original_length} 字节，已截断"
        )

    chain = create_review_chain(config, llm=llm)
    verdict: ReviewVerdict = chain.invoke({"diff": payload.text})

    status = CheckStatus.APPROVED if is_approved(verdict) else CheckStatus.REJECTED
    return CheckOutcome(status=status, verdict=verdict, payload=payload)
