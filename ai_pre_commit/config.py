"""配置加载模块"""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Mapping

import toml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models.config import LLMConfig, ReviewConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = ".ai-pre-commit.toml"
CONFIG_DIR_ENV = "AI_PRE_COMMIT_CONFIG_DIR"

# 环境变量 -> (配置段, 字段名)
ENV_OVERRIDES = {
    "AI_CHECK_API_KEY": ("llm", "api_key"),
    "AI_CHECK_MODEL": ("llm", "model"),
    "AI_CHECK_BASE_URL": ("llm", "base_url"),
    "AI_CHECK_TIMEOUT": ("llm", "timeout"),
    "AI_CHECK_MAX_CHUNK_SIZE": ("reviewer", "max_diff_size"),
    "AI_CHECK_LANGUAGE": ("reviewer", "language"),
    "AI_CHECK_SECURITY": ("reviewer", "check_security"),
    "AI_CHECK_PERFORMANCE": ("reviewer", "check_performance"),
    "AI_CHECK_STYLE": ("reviewer", "check_style"),
    "AI_CHECK_SQL": ("reviewer", "check_database"),
    "AI_CHECK_EXTENSIONS": ("reviewer", "enabled_extensions"),
    "AI_CHECK_OUTPUT_FILE": ("reviewer", "output_file"),
}

DEFAULT_CONFIG_CONTENT = """# AI Pre-Commit 配置文件

[llm]
model = "deepseek-chat"
api_key = ""  # 也可以通过环境变量 AI_CHECK_API_KEY 设置
base_url = "https://api.deepseek.com/v1"  # 例如: "http://localhost:11434/v1" for ollama
# timeout = 60

[reviewer]
max_diff_size = 4000  # 超出部分会被截断
language = "chinese"  # 问题描述和修复建议使用的语言
check_security = true
check_performance = true
check_style = false
check_database = true
enabled_extensions = [".html", ".js", ".jsx", ".ts", ".tsx", ".vue", ".java", ".rs", ".py"]
# output_file = ".ai-review-log.json"
"""


def config_candidates(
    start_dir: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> list[Path]:
    """按优先级列出候选配置文件路径

    顺序：
    1. 环境变量 AI_PRE_COMMIT_CONFIG_DIR 指定的目录（hook 脚本会设置）
    2. 当前可执行脚本所在目录
    3. 当前目录及其父目录
    """
    if environ is None:
        environ = os.environ
    if start_dir is None:
        start_dir = Path.cwd()

    candidates: list[Path] = []

    env_dir = environ.get(CONFIG_DIR_ENV)
    if env_dir:
        candidates.append(Path(env_dir) / DEFAULT_CONFIG_NAME)

    if sys.argv and sys.argv[0]:
        exe_dir = Path(sys.argv[0]).resolve().parent
        candidates.append(exe_dir / DEFAULT_CONFIG_NAME)

    current = start_dir
    candidates.append(current / DEFAULT_CONFIG_NAME)
    while current != current.parent:
        current = current.parent
        candidates.append(current / DEFAULT_CONFIG_NAME)

    # 去重但保持顺序
    seen: set[Path] = set()
    unique = []
    for path in candidates:
        if path not in seen:
            seen.add(path)
            unique.append(path)
    return unique


def find_config_file(
    start_dir: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """查找配置文件，返回第一个存在的候选路径"""
    for path in config_candidates(start_dir, environ):
        if path.is_file():
            return path
    return None


def _apply_env_overrides(
    data: dict[str, dict[str, Any]], environ: Mapping[str, str]
) -> None:
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        data.setdefault(section, {})[key] = value


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ReviewConfig:
    """加载配置

    Args:
        config_path: 配置文件路径，如果为 None 则按候选顺序查找；找不到时使用默认值
        environ: 环境变量，默认读取 os.environ

    Returns:
        ReviewConfig: 不可变的配置对象

    Raises:
        FileNotFoundError: 显式指定的配置文件不存在
        ConfigError: 配置格式错误
    """
    if environ is None:
        environ = os.environ

    if config_path is None:
        config_path = find_config_file(environ=environ)
    elif not config_path.exists():
        raise FileNotFoundError(f"配置文件不存在: {config_path}")

    data: dict[str, dict[str, Any]] = {}
    if config_path is not None:
        logger.debug(f"加载配置文件: {config_path}")
        try:
            loaded = toml.load(config_path)
        except toml.TomlDecodeError as e:
            raise ConfigError(f"配置文件格式错误 ({config_path}): {e}") from e
        data["llm"] = dict(loaded.get("llm", {}))
        data["reviewer"] = dict(loaded.get("reviewer", {}))
    else:
        logger.debug("未找到配置文件，使用默认配置和环境变量")

    _apply_env_overrides(data, environ)

    try:
        reviewer_data = dict(data.get("reviewer", {}))
        reviewer_data["llm"] = LLMConfig(**data.get("llm", {}))
        return ReviewConfig(**reviewer_data)
    except ValidationError as e:
        raise ConfigError(f"配置无效: {e}") from e


def create_default_config(path: Path | None = None) -> Path:
    """创建默认配置文件"""
    if path is None:
        path = Path.cwd() / DEFAULT_CONFIG_NAME

    if path.exists():
        raise FileExistsError(f"配置文件已存在: {path}")

    path.write_text(DEFAULT_CONFIG_CONTENT, encoding="utf-8")
    return path
