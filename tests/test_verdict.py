"""评审流程与结论判定测试"""

from unittest.mock import patch

import pytest

from ai_pre_commit.diff_processor import TRUNCATION_MARKER
from ai_pre_commit.exceptions import GitCommandError, ProviderResponseError
from ai_pre_commit.models.review_result import ReviewVerdict
from ai_pre_commit.verdict import CheckOutcome, CheckStatus, is_approved, run_check

from .providers import APPROVED_JSON, FakeProvider, completion


def _verdict(result: str) -> ReviewVerdict:
    return ReviewVerdict(result=result, issues=[])


class TestIsApproved:
    @pytest.mark.parametrize("result", ["YES", "yes", "no issues, YES approved", "Yes (approved)"])
    def test_accepts_token_anywhere(self, result):
        assert is_approved(_verdict(result))

    @pytest.mark.parametrize("result", ["NO", "", "rejected", "approved"])
    def test_everything_else_rejects(self, result):
        assert not is_approved(_verdict(result))


class TestCheckOutcome:
    @pytest.mark.parametrize(
        "status, code",
        [
            (CheckStatus.MERGE_SKIPPED, 0),
            (CheckStatus.NO_CHANGES, 0),
            (CheckStatus.APPROVED, 0),
            (CheckStatus.REJECTED, 1),
        ],
    )
    def test_exit_codes(self, status, code):
        assert CheckOutcome(status=status).exit_code == code


@pytest.fixture
def staged():
    """模拟 git：不在合并中，暂存 diff 由测试设置"""
    with patch("ai_pre_commit.verdict.is_merge_in_progress", return_value=False) as merge, patch(
        "ai_pre_commit.verdict.get_staged_diff", return_value=""
    ) as diff:
        yield merge, diff


class TestRunCheck:
    def test_merge_skips_without_touching_git_diff_or_provider(self, review_config, approved_provider, staged):
        merge, diff = staged
        merge.return_value = True
        diff.return_value = "diff --git a/a.py b/a.py\n+x\n"

        outcome = run_check(review_config, llm=approved_provider.model())

        assert outcome.status == CheckStatus.MERGE_SKIPPED
        assert outcome.exit_code == 0
        diff.assert_not_called()
        assert approved_provider.requests == []

    @pytest.mark.parametrize("diff_text", ["", "\n  \n"])
    def test_no_changes_makes_no_network_call(self, review_config, approved_provider, staged, diff_text):
        staged[1].return_value = diff_text

        outcome = run_check(review_config, llm=approved_provider.model())

        assert outcome.status == CheckStatus.NO_CHANGES
        assert outcome.exit_code == 0
        assert approved_provider.requests == []

    def test_approved(self, review_config, approved_provider, staged):
        staged[1].return_value = "diff --git a/a.py b/a.py\n@@ -0,0 +1 @@\n+x = 1\n"

        outcome = run_check(review_config, llm=approved_provider.model())

        assert outcome.status == CheckStatus.APPROVED
        assert outcome.verdict.usage.total_tokens == 150
        assert not outcome.payload.truncated
        assert len(approved_provider.requests) == 1

    def test_malformed_usage_still_approves(self, review_config, staged):
        staged[1].return_value = "diff --git a/a.py b/a.py\n@@ -0,0 +1 @@\n+x = 1\n"
        usage = {"prompt_tokens": "n/a", "completion_tokens": None, "total_tokens": 7}
        provider = FakeProvider(body=completion(APPROVED_JSON, usage=usage))

        outcome = run_check(review_config, llm=provider.model())

        assert outcome.status == CheckStatus.APPROVED
        assert outcome.verdict.usage is None

    def test_rejected(self, review_config, staged):
        staged[1].return_value = "diff --git a/a.py b/a.py\n+eval(x)\n"
        provider = FakeProvider(body=completion('{"result": "NO", "list": []}'))

        outcome = run_check(review_config, llm=provider.model())

        assert outcome.status == CheckStatus.REJECTED
        assert outcome.exit_code == 1

    def test_truncated_diff_sent_to_provider(self, review_config, approved_provider, staged):
        config = review_config.model_copy(update={"max_diff_size": 50})
        staged[1].return_value = "+" + "x" * 200

        outcome = run_check(config, llm=approved_provider.model())

        user_message = approved_provider.sent_json()["messages"][1]["content"]
        expected_diff = ("+" + "x" * 200)[:50] + TRUNCATION_MARKER
        assert user_message.endswith("\n\n" + expected_diff)
        assert outcome.payload.truncated
        assert outcome.payload.original_length == 201

    def test_instruction_payload_is_never_truncated(self, review_config, approved_provider, staged):
        config = review_config.model_copy(update={"max_diff_size": 1})
        staged[1].return_value = "+abc"

        run_check(config, llm=approved_provider.model())

        system_message = approved_provider.sent_json()["messages"][0]["content"]
        assert system_message.startswith("{") and system_message.endswith("}")
        assert "rules" in system_message

    def test_git_failure_propagates(self, review_config, approved_provider, staged):
        staged[1].side_effect = GitCommandError(["diff"], 128, "fatal: not a git repository")

        with pytest.raises(GitCommandError):
            run_check(review_config, llm=approved_provider.model())

        assert approved_provider.requests == []

    def test_provider_failure_is_not_retried(self, review_config, staged):
        staged[1].return_value = "+x"
        provider = FakeProvider(status_code=500, raw="internal error")

        with pytest.raises(ProviderResponseError):
            run_check(review_config, llm=provider.model())

        assert len(provider.requests) == 1


class TestRunCheckWithRealRepository:
    def test_only_matching_files_are_reviewed(self, git_repo, git, review_config, approved_provider):
        (git_repo / "app.py").write_text("print('hello')\n")
        (git_repo / "notes.md").write_text("# notes\n")
        git(git_repo, "add", ".")

        outcome = run_check(review_config, llm=approved_provider.model(), cwd=git_repo)

        assert outcome.status == CheckStatus.APPROVED
        user_message = approved_provider.sent_json()["messages"][1]["content"]
        assert "+print('hello')" in user_message
        assert "notes" not in user_message

    def test_unmatched_files_skip_review(self, git_repo, git, review_config, approved_provider):
        (git_repo / "notes.md").write_text("# notes\n")
        git(git_repo, "add", ".")

        outcome = run_check(review_config, llm=approved_provider.model(), cwd=git_repo)

        assert outcome.status == CheckStatus.NO_CHANGES
        assert approved_provider.requests == []
