"""Git pre-commit hook 安装与卸载"""

import stat
import sys
from enum import Enum
from pathlib import Path

HOOK_MARKER = "# AI Pre-Commit Hook"

PRE_COMMIT_HOOK_TEMPLATE = """#!/bin/sh
{marker}
# 提交前由 AI 评审暂存的变更，评审不通过时阻止提交

export AI_PRE_COMMIT_CONFIG_DIR="{config_dir}"
exec "{python}" -m ai_pre_commit check
"""


class HookInstallResult(str, Enum):
    CREATED = "created"
    OVERWRITTEN = "overwritten"
    ALREADY_INSTALLED = "already_installed"
    FOREIGN_HOOK_EXISTS = "foreign_hook_exists"


def render_hook_script(config_dir: Path, python: str | None = None) -> str:
    """生成 hook 脚本内容（路径统一使用正斜杠，避免 Windows 下 shell 转义问题）"""
    return PRE_COMMIT_HOOK_TEMPLATE.format(
        marker=HOOK_MARKER,
        config_dir=config_dir.resolve().as_posix(),
        python=Path(python or sys.executable).as_posix(),
    )


def validate_hook_path_safety(hook_path: Path, hooks_dir: Path) -> tuple[bool, str]:
    """验证 hook 文件路径的安全性

    Args:
        hook_path: hook 文件路径
        hooks_dir: hooks 目录路径

    Returns:
        (是否安全, 错误消息)
    """
    if hook_path.is_symlink():
        return False, f"安全错误: hook 文件是符号链接，指向 {hook_path.readlink()}。请手动处理。"

    resolved_hook = hook_path.resolve()
    resolved_hooks_dir = hooks_dir.resolve()

    # 防止路径遍历
    if resolved_hooks_dir not in resolved_hook.parents:
        return False, f"安全错误: hook 路径 {resolved_hook} 不在 hooks 目录 {resolved_hooks_dir} 下"

    if hook_path.exists() and not stat.S_ISREG(hook_path.stat().st_mode):
        return False, "安全错误: hook 路径不是普通文件（可能是设备、管道等）"

    return True, ""


def safe_write_hook_file(hook_path: Path, content: str) -> None:
    """先写临时文件再原子性重命名，并设置可执行权限"""
    temp_path = hook_path.with_suffix(".tmp")
    try:
        temp_path.write_text(content, encoding="utf-8")
        temp_path.chmod(0o755)
        temp_path.replace(hook_path)
    except OSError:
        if temp_path.exists():
            temp_path.unlink()
        raise


def install_hook(git_dir: Path, config_dir: Path, force: bool = False) -> HookInstallResult:
    """安装 pre-commit hook

    Args:
        git_dir: .git 目录
        config_dir: hook 运行时查找配置文件的目录
        force: 覆盖不是本工具创建的 hook

    Raises:
        ValueError: hook 路径不安全
    """
    hooks_dir = git_dir / "hooks"
    hooks_dir.mkdir(parents=True, exist_ok=True)
    hook_path = hooks_dir / "pre-commit"

    is_safe, error_msg = validate_hook_path_safety(hook_path, hooks_dir)
    if not is_safe:
        raise ValueError(error_msg)

    content = render_hook_script(config_dir)

    if not hook_path.exists():
        safe_write_hook_file(hook_path, content)
        return HookInstallResult.CREATED

    existing = hook_path.read_text(encoding="utf-8", errors="replace")
    if HOOK_MARKER in existing:
        if existing == content:
            return HookInstallResult.ALREADY_INSTALLED
        safe_write_hook_file(hook_path, content)
        return HookInstallResult.OVERWRITTEN

    if not force:
        return HookInstallResult.FOREIGN_HOOK_EXISTS

    safe_write_hook_file(hook_path, content)
    return HookInstallResult.OVERWRITTEN


def uninstall_hook(git_dir: Path) -> bool | None:
    """卸载 pre-commit hook

    Returns:
        True 已移除；False hook 不是本工具创建的，未移除；None 没有 hook
    """
    hook_path = git_dir / "hooks" / "pre-commit"
    if not hook_path.exists():
        return None

    content = hook_path.read_text(encoding="utf-8", errors="replace")
    if HOOK_MARKER not in content:
        return False

    hook_path.unlink()
    return True
