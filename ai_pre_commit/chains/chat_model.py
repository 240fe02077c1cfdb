"""OpenAI 兼容 chat/completions 接口的 LangChain 封装"""

import logging
from typing import Any, Optional

import httpx
from langchain_core.callbacks import CallbackManagerForLLMRun
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from pydantic import ConfigDict, Field

from ..exceptions import ProviderRequestError, ProviderResponseError
from ..models.config import LLMConfig
from ..models.review_result import TokenUsage

logger = logging.getLogger(__name__)

COMPLETIONS_PATH = "chat/completions"

_ROLE_MAP = {
    "system": "system",
    "human": "user",
    "ai": "assistant",
}


def build_completions_url(base_url: str) -> str:
    """拼接 completions 地址，base_url 与路径之间恰好一个斜杠"""
    if base_url.endswith("/"):
        return f"{base_url}{COMPLETIONS_PATH}"
    return f"{base_url}/{COMPLETIONS_PATH}"


class ChatCompletionsModel(BaseChatModel):
    """直接调用 chat/completions 接口的聊天模型

    只发送 model 和 messages，不做重试。
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    model: str = Field(description="模型名称")
    base_url: str = Field(description="接口地址")
    api_key: str = Field(default="", description="Bearer 凭证")
    timeout: Optional[float] = Field(None, description="超时时间（秒），None 表示不限制")
    transport: Optional[httpx.BaseTransport] = Field(
        default=None, exclude=True, description="自定义 httpx 传输层"
    )

    @classmethod
    def from_config(cls, config: LLMConfig, **kwargs: Any) -> "ChatCompletionsModel":
        return cls(
            model=config.model,
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=config.timeout,
            **kwargs,
        )

    @property
    def _llm_type(self) -> str:
        return "openai-compatible-chat-completions"

    @property
    def _identifying_params(self) -> dict[str, Any]:
        return {"model": self.model, "base_url": self.base_url}

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _request_body(self, messages: list[BaseMessage]) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": _ROLE_MAP.get(m.type, m.type), "content": m.content}
                for m in messages
            ],
        }

    def _post(self, url: str, body: dict[str, Any]) -> httpx.Response:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                return client.post(url, headers=self._headers(), json=body)
        except httpx.HTTPError as e:
            raise ProviderRequestError(f"发送请求给 AI 提供商失败 ({url}): {e}") from e

    def _generate(
        self,
        messages: list[BaseMessage],
        stop: Optional[list[str]] = None,
        run_manager: Optional[CallbackManagerForLLMRun] = None,
        **kwargs: Any,
    ) -> ChatResult:
        url = build_completions_url(self.base_url)
        logger.debug(f"POST {url} (model={self.model})")

        response = self._post(url, self._request_body(messages))
        if not response.is_success:
            raise ProviderResponseError(
                f"AI API 请求失败 (HTTP {response.status_code}): {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderResponseError(
                f"解析 AI 响应 JSON 失败: {response.text}",
                status_code=response.status_code,
                body=response.text,
            ) from e

        content = self._first_choice_content(data, response.text)
        logger.debug(f"Token 使用: {data.get('usage')}")

        # usage 缺失或字段不是整数时按未提供处理，不影响评审结果
        token_usage = TokenUsage.from_response(data.get("usage"))
        usage_metadata = None
        if token_usage is not None:
            usage_metadata = {
                "input_tokens": token_usage.prompt_tokens,
                "output_tokens": token_usage.completion_tokens,
                "total_tokens": token_usage.total_tokens,
            }
        usage = token_usage.model_dump() if token_usage is not None else None

        message = AIMessage(
            content=content,
            usage_metadata=usage_metadata,
            response_metadata={"token_usage": usage, "model_name": data.get("model", self.model)},
        )

        return ChatResult(
            generations=[ChatGeneration(message=message)],
            llm_output={"token_usage": usage, "model_name": self.model},
        )

    @staticmethod
    def _first_choice_content(data: Any, raw: str) -> str:
        """取第一个 choice 的文本内容"""
        if not isinstance(data, dict) or "choices" not in data:
            raise ProviderResponseError(f"AI 响应中没有 choices 字段: {raw}", body=raw)

        choices = data["choices"]
        if not isinstance(choices, list) or not choices:
            raise ProviderResponseError(f"AI 响应中 choices 为空: {raw}", body=raw)

        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise ProviderResponseError(f"AI 响应的第一个 choice 没有文本内容: {raw}", body=raw)
        return content
