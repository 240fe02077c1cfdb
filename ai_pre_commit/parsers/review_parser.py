"""评审结果解析器"""

import json

from langchain_core.exceptions import OutputParserException
from langchain_core.output_parsers import BaseOutputParser
from pydantic import ValidationError

from ..models.review_result import ReviewVerdict


def find_json_span(text: str) -> tuple[int, int] | None:
    """查找第一个 '{' 到最后一个 '}' 的区间

    不做括号配对：如果文本中有多个独立的 JSON 块，返回的是包含它们的最外层区间。

    Returns:
        (start, end) 切片区间；没有 '{' 时返回 None
    """
    start = text.find("{")
    if start == -1:
        return None
    end = text.rfind("}")
    end = end + 1 if end != -1 else len(text)
    return start, end


def extract_json(text: str) -> str:
    """从模型输出中提取 JSON 文本

    兼容 ```json ... ``` 代码块以及前后夹杂说明文字的情况。
    找不到 '{' 时原样返回，由后续解析给出错误。
    """
    text = text.strip()
    span = find_json_span(text)
    if span is None:
        return text
    start, end = span
    return text[start:end]


class ReviewOutputParser(BaseOutputParser[ReviewVerdict]):
    """评审结果解析器"""

    def parse(self, text: str) -> ReviewVerdict:
        """解析 LLM 输出

        Args:
            text: LLM 返回的文本

        Returns:
            ReviewVerdict: 评审结论

        Raises:
            OutputParserException: 无法提取 JSON 或字段不符合要求，错误信息包含完整原文
        """
        json_str = extract_json(text)

        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise OutputParserException(
                f"无法将 AI 输出解析为 JSON: {e}\n内容: {text}",
                llm_output=text,
            ) from e

        try:
            return ReviewVerdict.model_validate(data)
        except ValidationError as e:
            raise OutputParserException(
                f"AI 输出缺少必要字段或格式错误: {e}\n内容: {text}",
                llm_output=text,
            ) from e

    @property
    def _type(self) -> str:
        return "review_verdict"


# 单例实例
review_parser = ReviewOutputParser()
