"""模拟 chat/completions 服务"""

import json

import httpx

from ai_pre_commit.chains.chat_model import ChatCompletionsModel

APPROVED_JSON = '{"result": "YES", "meme_comment": "稳如老狗", "list": []}'


class FakeProvider:
    """记录请求并返回预设响应的 chat/completions 服务"""

    def __init__(self, body=None, status_code=200, raw=None, error=None):
        self.body = body
        self.status_code = status_code
        self.raw = raw
        self.error = error
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        if self.raw is not None:
            return httpx.Response(self.status_code, text=self.raw)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def model(self, base_url: str = "https://llm.example.com/v1", api_key: str = "sk-test"):
        return ChatCompletionsModel(
            model="test-model",
            base_url=base_url,
            api_key=api_key,
            transport=self.transport,
        )

    def sent_json(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


def completion(content: str, usage: dict | None = None) -> dict:
    """构造 chat/completions 响应体"""
    body = {
        "id": "chatcmpl-1",
        "model": "test-model",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }
    if usage is not None:
        body["usage"] = usage
    return body
