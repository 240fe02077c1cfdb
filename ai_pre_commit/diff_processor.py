"""Diff 统计与截断模块"""

import re
from dataclasses import dataclass, field

TRUNCATION_MARKER = "\n\n[Diff truncated due to size limit...]"


@dataclass
class FileDiff:
    """单个文件的 -U0 diff 统计"""

    file_path: str
    added_lines: int = 0
    removed_lines: int = 0
    hunk_count: int = 0
    is_new_file: bool = False


@dataclass
class DiffPayload:
    """发送给模型的 diff 内容

    original_length 为原始 diff 的字节数，truncated 表示 text 只包含前缀。
    """

    text: str
    original_length: int
    truncated: bool = False
    files: list[FileDiff] = field(default_factory=list)

    @property
    def added_lines(self) -> int:
        return sum(f.added_lines for f in self.files)

    @property
    def removed_lines(self) -> int:
        return sum(f.removed_lines for f in self.files)


_FILE_HEADER_RE = re.compile(r"^diff --git a/(.+?) b/(.+)$")


def parse_diff(diff_text: str) -> list[FileDiff]:
    """解析 diff 文本，统计每个文件的变更

    Args:
        diff_text: git diff 输出

    Returns:
        文件统计列表，保持 diff 中的顺序
    """
    files: list[FileDiff] = []
    current: FileDiff | None = None

    for line in diff_text.split("\n"):
        file_match = _FILE_HEADER_RE.match(line)
        if file_match:
            current = FileDiff(file_path=file_match.group(2))
            files.append(current)
            continue

        if current is None:
            continue

        if line.startswith("new file mode"):
            current.is_new_file = True
        elif line.startswith("@@"):
            current.hunk_count += 1
        elif line.startswith("+++ ") or line.startswith("--- "):
            continue
        elif line.startswith("+"):
            current.added_lines += 1
        elif line.startswith("-"):
            current.removed_lines += 1

    return files


def truncate_diff(diff_text: str, max_size: int) -> DiffPayload:
    """按字节上限截断 diff

    超出上限时只保留前 max_size 个字节（去掉被截断的不完整字符），
    并追加 TRUNCATION_MARKER。

    Args:
        diff_text: 原始 diff
        max_size: 最大字节数

    Returns:
        DiffPayload
    """
    encoded = diff_text.encode("utf-8")
    files = parse_diff(diff_text)

    if len(encoded) <= max_size:
        return DiffPayload(text=diff_text, original_length=len(encoded), files=files)

    prefix = encoded[:max_size].decode("utf-8", errors="ignore")
    return DiffPayload(
        text=prefix + TRUNCATION_MARKER,
        original_length=len(encoded),
        truncated=True,
        files=files,
    )
