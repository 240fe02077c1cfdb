"""评审结果数据模型"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """问题严重级别"""

    HIGH = "high"  # 严重问题，模型会据此返回 NO
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def lookup(cls, value: str) -> Optional["Severity"]:
        """宽松解析模型给出的级别，未知值返回 None"""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class TokenUsage(BaseModel):
    """Token 使用情况（仅用于展示）"""

    prompt_tokens: int = Field(default=0, description="输入 token 数")
    completion_tokens: int = Field(default=0, description="输出 token 数")
    total_tokens: int = Field(default=0, description="总 token 数")

    @classmethod
    def from_response(cls, usage: Any) -> Optional["TokenUsage"]:
        """从提供商响应的 usage 字段构建，缺失或格式不符时返回 None"""
        if not isinstance(usage, dict):
            return None
        try:
            return cls.model_validate(usage)
        except ValueError:
            return None


class Issue(BaseModel):
    """单个代码问题"""

    model_config = ConfigDict(extra="ignore")

    severity: str = Field(description="严重级别: high/medium/low，允许未知值")
    perspective: str = Field(description="审查视角")
    description: str = Field(description="问题描述")
    suggestion: str = Field(default="", description="修复建议")
    location: str = Field(default="", description="位置，格式 path:line")

    @property
    def severity_level(self) -> Optional[Severity]:
        return Severity.lookup(self.severity)


class ReviewVerdict(BaseModel):
    """模型返回的评审结论"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    result: str = Field(description="评审结论，包含 YES（通过）或 NO（拒绝）")
    comment: Optional[str] = Field(
        None, alias="meme_comment", description="对本次变更的简短点评"
    )
    issues: list[Issue] = Field(alias="list", description="问题列表，保持模型输出顺序")
    usage: Optional[TokenUsage] = Field(None, description="Token 使用情况")
