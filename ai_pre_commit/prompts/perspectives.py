"""审查视角定义"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models.config import ReviewConfig


class Perspective(str, Enum):
    """审查视角"""

    GENERAL = "general"
    SECURITY = "security"
    PERFORMANCE = "performance"
    STYLE = "style"
    DATABASE = "database"


@dataclass(frozen=True)
class PerspectiveRule:
    """单个视角的检查规则，只用于引导模型"""

    name: str
    checks: tuple[str, ...]
    severity_guidance: str

    def as_dict(self) -> dict:
        return {
            "name": self.name,
            "checks": list(self.checks),
            "severity_guidance": self.severity_guidance,
        }


PERSPECTIVE_RULES: dict[Perspective, PerspectiveRule] = {
    Perspective.GENERAL: PerspectiveRule(
        name="通用检查:",
        checks=("代码中的潜在 Bug", "代码的可读性", "改进建议"),
        severity_guidance="严重问题使用 high，中等问题使用 medium，轻微建议使用 low",
    ),
    Perspective.SECURITY: PerspectiveRule(
        name="安全性:",
        checks=(
            "XSS 漏洞",
            "CSRF 保护",
            "CORS 配置",
            "第三方脚本安全",
            "多线程下的潜在问题",
        ),
        severity_guidance="严重漏洞使用 high，潜在风险使用 medium",
    ),
    Perspective.PERFORMANCE: PerspectiveRule(
        name="性能:",
        checks=("算法变更的影响", "内存使用模式", "I/O 操作变更", "并发修改"),
        severity_guidance="严重瓶颈（如死循环、栈溢出等）使用 high，优化机会使用 medium",
    ),
    Perspective.STYLE: PerspectiveRule(
        name="代码风格:",
        checks=("命名一致性", "代码组织变更", "文档更新", "风格指南遵循情况"),
        severity_guidance="风格建议使用 low",
    ),
    Perspective.DATABASE: PerspectiveRule(
        name="数据库:",
        checks=(
            "SQL 注入漏洞",
            "SQL 语句正确性",
            "查询性能优化",
            "事务使用正确性",
            "数据库连接管理",
            "数据一致性",
        ),
        severity_guidance=(
            "严重漏洞（如 SQL 注入、数据库连接泄露）使用 high，"
            "性能问题使用 medium，规范问题使用 low"
        ),
    ),
}

# (配置开关, 视角)，顺序固定；开关为 None 表示始终启用
PERSPECTIVE_TABLE: tuple[tuple[Optional[str], Perspective], ...] = (
    (None, Perspective.GENERAL),
    ("check_security", Perspective.SECURITY),
    ("check_performance", Perspective.PERFORMANCE),
    ("check_style", Perspective.STYLE),
    ("check_database", Perspective.DATABASE),
)


def active_perspectives(config: ReviewConfig) -> list[Perspective]:
    """按固定顺序返回启用的视角"""
    return [
        perspective
        for flag, perspective in PERSPECTIVE_TABLE
        if flag is None or getattr(config, flag)
    ]
