"""CLI 入口 - pre-commit hook"""

import sys
import traceback
from pathlib import Path
from typing import Optional

import click
from langchain_core.exceptions import OutputParserException

from .chains.review_chain import setup_debug_logging
from .config import DEFAULT_CONFIG_NAME, create_default_config, find_config_file, load_config
from .diff_processor import DiffPayload
from .exceptions import GitCommandError, ReviewError
from .git_helper import get_git_dir
from .hooks import HookInstallResult, install_hook, uninstall_hook
from .models.config import ReviewConfig
from .models.review_result import ReviewVerdict, Severity
from .prompts.perspectives import active_perspectives
from .verdict import CheckOutcome, CheckStatus, run_check

SEVERITY_COLORS = {
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "green",
}


def print_change_summary(payload: DiffPayload):
    """打印变更统计（基于截断前的完整 diff）"""
    click.echo(
        f"{click.style('变更:', fg='blue')} {len(payload.files)} 个文件, "
        f"+{payload.added_lines} -{payload.removed_lines}"
    )
    for file_diff in payload.files:
        tag = " (新文件)" if file_diff.is_new_file else ""
        click.echo(
            f"  {file_diff.file_path}{tag}: +{file_diff.added_lines} -{file_diff.removed_lines}"
        )


def print_review_result(outcome: CheckOutcome):
    """打印评审结果

    按模型输出的顺序展示点评和问题列表，不做分组。
    """
    verdict = outcome.verdict
    if verdict is None:
        return

    click.echo()
    click.echo(click.style("分析结果:", bold=True, underline=True))

    if outcome.payload is not None and outcome.payload.files:
        print_change_summary(outcome.payload)

    if outcome.payload is not None and outcome.payload.truncated:
        click.echo(
            click.style(
                f"[警告] diff 共 {outcome.payload.original_length} 字节，超出上限已截断，"
                "评审结果仅基于部分内容",
                fg="yellow",
            )
        )

    if verdict.usage is not None:
        click.echo(
            f"{click.style('Token 使用:', fg='magenta')} "
            f"输入: {verdict.usage.prompt_tokens} tokens, "
            f"输出: {verdict.usage.completion_tokens} tokens, "
            f"总计: {verdict.usage.total_tokens} tokens"
        )

    if verdict.comment:
        click.echo()
        click.echo(click.style("AI 点评:", fg="magenta", bold=True))
        click.echo(verdict.comment)

    for issue in verdict.issues:
        color = SEVERITY_COLORS.get(issue.severity_level, "white")
        click.echo()
        click.echo(
            f"[{click.style(issue.severity, fg=color, bold=True)}] "
            f"[{click.style(issue.perspective, fg='cyan')}] {issue.location}"
        )
        click.echo(f"  描述: {issue.description}")
        click.echo(f"  建议: {issue.suggestion}")

    click.echo()


def save_review_log(verdict: ReviewVerdict, log_file: Path):
    """保存评审日志"""
    log_file.write_text(verdict.model_dump_json(indent=2, by_alias=True), encoding="utf-8")


def _load(config: Optional[str]) -> ReviewConfig:
    return load_config(Path(config)) if config else load_config()


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context):
    """AI Pre-Commit - 基于 LangChain 的提交前代码评审工具"""
    if ctx.invoked_subcommand is None:
        ctx.invoke(check)


@cli.command()
@click.option("--config", "-c", type=click.Path(exists=True), help="配置文件路径")
@click.option("--verbose", "-v", is_flag=True, help="输出调试日志")
@click.option("--log-file", type=click.Path(), help="调试日志文件路径")
def check(config: Optional[str] = None, verbose: bool = False, log_file: Optional[str] = None):
    """评审暂存区的变更（默认命令）"""
    setup_debug_logging(verbose=verbose, log_file=log_file)

    try:
        cfg = _load(config)
    except (FileNotFoundError, ReviewError) as e:
        click.echo(click.style(f"[错误] 配置错误: {e}", fg="red", bold=True), err=True)
        click.echo(f"请检查配置文件 {DEFAULT_CONFIG_NAME} 或环境变量。", err=True)
        sys.exit(1)

    click.echo(click.style("[AI 代码评审] 检查已启动...", fg="blue", bold=True))

    try:
        outcome = run_check(cfg)
    except GitCommandError as e:
        click.echo(click.style(f"[错误] Git 错误: {e}", fg="red", bold=True), err=True)
        sys.exit(1)
    except OSError as e:
        # 例如 PATH 中找不到 git 可执行文件
        click.echo(click.style(f"[错误] 无法执行 git: {e}", fg="red", bold=True), err=True)
        sys.exit(1)
    except (ReviewError, OutputParserException) as e:
        click.echo(click.style(f"[错误] AI 检查失败: {e}", fg="red", bold=True), err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(1)

    if outcome.status == CheckStatus.MERGE_SKIPPED:
        click.echo(click.style("[跳过] 检测到合并操作，跳过 AI 检查", fg="yellow"))
    elif outcome.status == CheckStatus.NO_CHANGES:
        click.echo(click.style("[跳过] 在监控的文件中未发现暂存的更改", fg="yellow"))
    else:
        print_review_result(outcome)

        if cfg.output_file and outcome.verdict is not None:
            log_path = Path(cfg.output_file)
            try:
                save_review_log(outcome.verdict, log_path)
            except OSError as e:
                click.echo(
                    click.style(f"[错误] 保存评审日志失败: {e}", fg="red", bold=True), err=True
                )
                sys.exit(1)
            click.echo(f"评审日志已保存到: {log_path}")

        if outcome.status == CheckStatus.APPROVED:
            click.echo(click.style("[通过] 代码已通过评审", fg="green", bold=True))
        else:
            click.echo(
                click.style("[拦截] 代码被拒绝，发现严重问题，请修复后重新提交", fg="red", bold=True)
            )

    sys.exit(outcome.exit_code)


@cli.command()
@click.option("--force", "-f", is_flag=True, help="强制覆盖已存在的 pre-commit hook")
def install(force: bool):
    """创建配置文件并安装 pre-commit hook"""
    click.echo(click.style("开始安装...", fg="blue", bold=True))

    try:
        git_dir = get_git_dir()
    except (GitCommandError, OSError):
        click.echo(
            click.style("[错误] 当前目录不是 Git 仓库，跳过 hook 安装", fg="red"), err=True
        )
        sys.exit(1)

    config_dir = Path.cwd()
    try:
        config_path = create_default_config(config_dir / DEFAULT_CONFIG_NAME)
        click.echo(click.style(f"[成功] 配置文件已创建: {config_path}", fg="green"))
        click.echo("请编辑配置文件，设置你的 API Key 等信息。")
    except FileExistsError:
        click.echo(f"配置文件已存在: {config_dir / DEFAULT_CONFIG_NAME}")

    try:
        result = install_hook(git_dir, config_dir, force=force)
    except (ValueError, OSError) as e:
        click.echo(click.style(f"[错误] 安装 hook 失败: {e}", fg="red"), err=True)
        sys.exit(1)

    hook_path = git_dir / "hooks" / "pre-commit"
    if result == HookInstallResult.FOREIGN_HOOK_EXISTS:
        click.echo(
            click.style(f"[警告] pre-commit hook 已存在且不是本工具创建的: {hook_path}", fg="yellow")
        )
        click.echo("使用 --force 选项覆盖：")
        click.echo(click.style("  ai-pre-commit install --force", fg="cyan"))
        sys.exit(1)
    elif result == HookInstallResult.ALREADY_INSTALLED:
        click.echo(click.style(f"[成功] pre-commit hook 已是最新: {hook_path}", fg="green"))
    else:
        click.echo(click.style(f"[成功] pre-commit hook 已安装: {hook_path}", fg="green", bold=True))


@cli.command()
def uninstall():
    """卸载 pre-commit hook"""
    try:
        git_dir = get_git_dir()
    except (GitCommandError, OSError) as e:
        click.echo(click.style(f"[错误] {e}", fg="red"), err=True)
        sys.exit(1)

    removed = uninstall_hook(git_dir)
    if removed is None:
        click.echo(click.style("未发现 pre-commit hook", fg="blue"))
    elif removed:
        click.echo(click.style("[成功] pre-commit hook 已移除", fg="green"))
    else:
        click.echo(
            click.style("[警告] 发现 pre-commit hook，但不是本工具创建的，跳过移除", fg="yellow")
        )


@cli.command(name="config")
@click.option("--config", "-c", "config_file", type=click.Path(exists=True), help="配置文件路径")
def show_config(config_file: Optional[str]):
    """检查并显示当前配置"""
    try:
        path = Path(config_file) if config_file else find_config_file()
        cfg = _load(config_file)
    except (FileNotFoundError, ReviewError) as e:
        click.echo(click.style(f"[错误] 配置检查失败: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"配置文件: {path or '未找到，使用默认值和环境变量'}")
    click.echo(f"模型: {cfg.llm.model}")
    click.echo(f"Base URL: {cfg.llm.base_url}")
    click.echo(f"API Key: {_mask(cfg.llm.api_key)}")
    click.echo(f"diff 上限: {cfg.max_diff_size}")
    click.echo(f"输出语言: {cfg.language}")
    click.echo(f"审查视角: {', '.join(p.value for p in active_perspectives(cfg))}")
    click.echo(f"文件后缀: {', '.join(cfg.enabled_extensions)}")
    click.echo(click.style("[成功] 配置有效", fg="green"))


def _mask(secret: str) -> str:
    if not secret:
        return "未设置"
    if len(secret) <= 8:
        return "*" * len(secret)
    return f"{secret[:3]}...{secret[-4:]}"


def main():
    """主入口点"""
    cli()


if __name__ == "__main__":
    main()
