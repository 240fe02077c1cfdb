"""Git 操作封装模块"""

import logging
import subprocess
from pathlib import Path

from .exceptions import GitCommandError
from .models.config import ReviewConfig

logger = logging.getLogger(__name__)


def run_git_command(args: list[str], cwd: Path | None = None) -> str:
    """运行 git 命令

    Args:
        args: git 命令参数
        cwd: 工作目录

    Returns:
        命令标准输出

    Raises:
        GitCommandError: 命令以非零状态退出
    """
    logger.debug(f"执行: git {' '.join(args)}")
    try:
        result = subprocess.run(
            ["git"] + args,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            check=True,
            cwd=cwd or Path.cwd(),
        )
    except subprocess.CalledProcessError as e:
        raise GitCommandError(args, e.returncode, e.stderr or "") from e
    return result.stdout


def is_merge_in_progress(cwd: Path | None = None) -> bool:
    """检查是否处于合并过程中（存在 MERGE_HEAD）"""
    try:
        run_git_command(["rev-parse", "-q", "--verify", "MERGE_HEAD"], cwd=cwd)
    except GitCommandError:
        return False
    return True


def list_staged_files(cwd: Path | None = None) -> list[str]:
    """获取暂存区中新增、复制、修改的文件（不含删除的文件）"""
    # -z 输出原始路径，不对非 ASCII 文件名做引号转义
    output = run_git_command(
        ["diff", "--cached", "--name-only", "--diff-filter=ACM", "-z"], cwd=cwd
    )
    return [path for path in output.split("\0") if path]


def filter_by_extensions(file_list: list[str], extensions: list[str]) -> list[str]:
    """按后缀白名单过滤文件

    后缀按字符串结尾精确匹配，区分大小写，不支持 glob。

    Args:
        file_list: 文件路径列表
        extensions: 后缀列表（如 [".py", ".js"]）

    Returns:
        过滤后的文件列表，保持原顺序
    """
    return [
        file_path
        for file_path in file_list
        if any(file_path.endswith(ext) for ext in extensions)
    ]


def get_staged_diff(config: ReviewConfig, cwd: Path | None = None) -> str:
    """获取暂存区中需要评审的文件的 diff

    只包含后缀在白名单中的文件，使用 -U0（不带上下文）以减小体积。

    Args:
        config: 评审配置
        cwd: 工作目录

    Returns:
        diff 内容；没有匹配的文件时返回空字符串

    Raises:
        GitCommandError: git 命令执行失败
    """
    files = list_staged_files(cwd=cwd)
    if not files:
        logger.debug("暂存区没有新增或修改的文件")
        return ""

    filtered_files = filter_by_extensions(files, config.enabled_extensions)
    logger.debug(f"暂存文件 {len(files)} 个，匹配后缀的 {len(filtered_files)} 个")
    if not filtered_files:
        return ""

    return run_git_command(
        ["-c", "core.quotePath=false", "diff", "--cached", "-U0", "--"] + filtered_files,
        cwd=cwd,
    )


def get_git_dir(cwd: Path | None = None) -> Path:
    """获取 .git 目录路径"""
    git_dir = Path(run_git_command(["rev-parse", "--git-dir"], cwd=cwd).strip())
    if not git_dir.is_absolute():
        git_dir = (cwd or Path.cwd()) / git_dir
    return git_dir
