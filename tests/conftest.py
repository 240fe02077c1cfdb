"""共享测试夹具"""

import shutil
import subprocess
from pathlib import Path

import pytest

from ai_pre_commit.models.config import LLMConfig, ReviewConfig

from .providers import APPROVED_JSON, FakeProvider, completion


@pytest.fixture
def review_config():
    return ReviewConfig(
        llm=LLMConfig(model="test-model", api_key="sk-test", base_url="https://llm.example.com/v1"),
        max_diff_size=4000,
        language="english",
        check_security=True,
        check_performance=False,
        check_style=False,
        check_database=False,
        enabled_extensions=[".py", ".js"],
    )


@pytest.fixture
def approved_provider():
    return FakeProvider(
        body=completion(
            APPROVED_JSON,
            usage={"prompt_tokens": 120, "completion_tokens": 30, "total_tokens": 150},
        )
    )


def _git(repo: Path, *args: str) -> str:
    return subprocess.run(
        ["git", *args], cwd=repo, check=True, capture_output=True, text=True
    ).stdout


@pytest.fixture
def git_repo(tmp_path):
    """临时 git 仓库"""
    if shutil.which("git") is None:
        pytest.skip("git 不可用")
    _git(tmp_path, "init", "-q")
    _git(tmp_path, "config", "user.email", "dev@example.com")
    _git(tmp_path, "config", "user.name", "Dev")
    _git(tmp_path, "config", "commit.gpgsign", "false")
    return tmp_path


@pytest.fixture
def git():
    return _git
