"""diff 统计与截断测试"""

from ai_pre_commit.diff_processor import TRUNCATION_MARKER, parse_diff, truncate_diff

SAMPLE_DIFF = """diff --git a/app/main.py b/app/main.py
index 83db48f..bf269f4 100644
--- a/app/main.py
+++ b/app/main.py
@@ -3 +3,2 @@ def main():
-    print("hi")
+    name = input()
+    print(f"hi {name}")
diff --git a/web/app.js b/web/app.js
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/web/app.js
@@ -0,0 +1 @@
+console.log("x")
"""


class TestParseDiff:
    def test_counts_changes_per_file(self):
        files = parse_diff(SAMPLE_DIFF)

        assert [f.file_path for f in files] == ["app/main.py", "web/app.js"]
        assert (files[0].added_lines, files[0].removed_lines, files[0].hunk_count) == (2, 1, 1)
        assert files[1].is_new_file
        assert files[1].added_lines == 1

    def test_empty_diff(self):
        assert parse_diff("") == []


class TestTruncateDiff:
    def test_short_diff_is_untouched(self):
        payload = truncate_diff(SAMPLE_DIFF, 10_000)

        assert payload.text == SAMPLE_DIFF
        assert not payload.truncated
        assert payload.original_length == len(SAMPLE_DIFF.encode("utf-8"))
        assert payload.added_lines == 3

    def test_exact_budget_is_not_truncated(self):
        payload = truncate_diff("a" * 50, 50)
        assert payload.text == "a" * 50
        assert not payload.truncated

    def test_long_diff_is_prefix_plus_marker(self):
        diff = "x" * 120
        payload = truncate_diff(diff, 100)

        assert payload.truncated
        assert payload.original_length == 120
        assert payload.text == "x" * 100 + TRUNCATION_MARKER
        assert len(payload.text) == 100 + len(TRUNCATION_MARKER)

    def test_budget_is_measured_in_bytes(self):
        diff = "变更" * 10  # 每个字符 3 字节
        payload = truncate_diff(diff, 7)

        assert payload.truncated
        assert payload.original_length == 60
        # 第三个字符只有 1 个字节落在上限内，被丢弃
        assert payload.text == "变更" + TRUNCATION_MARKER
