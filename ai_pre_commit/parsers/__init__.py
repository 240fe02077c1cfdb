"""模型输出解析"""

from .review_parser import ReviewOutputParser, extract_json, find_json_span, review_parser

__all__ = ["ReviewOutputParser", "extract_json", "find_json_span", "review_parser"]
