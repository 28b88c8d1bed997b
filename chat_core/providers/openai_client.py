"""OpenAI 兼容 Provider 适配器。

本模块负责：

1. 接收统一的 ChatRequest，并校验模型名与 API 密钥。
2. 将其转换为 chat/completions 的流式 HTTP 请求。
3. 逐行解析 SSE 响应，产出 ChatStreamChunk。
4. 把网络错误与 HTTP 错误状态转换为 domain.exceptions 中对应的异常。
"""

import json
from typing import Any, AsyncIterator, Dict, Tuple, Type

import httpx

from chat_core.domain.exceptions import (
    ApiError,
    AuthenticationError,
    BadRequestError,
    ConflictError,
    ConnectionTimeoutError,
    InternalServerError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    UnprocessableEntityError,
)
from chat_core.domain.models import (
    ChatMessage,
    ChatRequest,
    ChatStreamChoice,
    ChatStreamChunk,
    ChatUsage,
)
from chat_core.providers.registry import OPENAI_CONFIG, ModelConfig, get_model_config


# HTTP 状态码 -> (异常类型, 错误码)
STATUS_ERRORS: Dict[int, Tuple[Type[ApiError], str]] = {
    400: (BadRequestError, "BAD_REQUEST"),
    401: (AuthenticationError, "AUTHENTICATION"),
    403: (PermissionDeniedError, "PERMISSION_DENIED"),
    404: (NotFoundError, "NOT_FOUND"),
    409: (ConflictError, "CONFLICT"),
    422: (UnprocessableEntityError, "UNPROCESSABLE"),
    429: (RateLimitError, "RATE_LIMIT"),
}


def error_for_status(status_code: int, body: str) -> ApiError:
    """根据 HTTP 状态码构造对应的异常。"""

    if status_code in STATUS_ERRORS:
        exc_type, code = STATUS_ERRORS[status_code]
    elif status_code >= 500:
        exc_type, code = InternalServerError, "SERVER_ERROR"
    else:
        exc_type, code = ApiError, "API_ERROR"
    return exc_type(code=code, message=body or f"HTTP {status_code}", http_status=status_code)


class OpenAIClient:
    """OpenAI 兼容的流式客户端实现。

    - name: Provider 名称（供日志/调试使用）。
    - chat_stream: 对外统一调用入口，返回 ChatStreamChunk 的异步迭代器。
    """

    name = "openai"

    def __init__(self, settings):
        # Settings 里包含 base_url、api_key、超时等配置
        self._settings = settings

    async def chat_stream(self, req: ChatRequest) -> AsyncIterator[ChatStreamChunk]:
        """执行一次流式对话调用，逐步 yield ChatStreamChunk。"""

        model_cfg = get_model_config(req.model)
        api_key = getattr(self._settings, "openai_api_key", None)
        if not api_key:
            # 密钥缺失与服务端 401 同样视为认证失败
            raise AuthenticationError(code="AUTHENTICATION", message="OPENAI_API_KEY not set", http_status=401)
        payload = self._build_payload(req, model_cfg)
        base = getattr(self._settings, "openai_base_url", None) or OPENAI_CONFIG.base_url
        try:
            async with httpx.AsyncClient(timeout=self._settings.http_timeout, trust_env=False) as client:
                async with client.stream(
                    "POST",
                    f"{base}/chat/completions",
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {api_key}",
                        "Content-Type": "application/json",
                    },
                ) as resp:
                    if resp.status_code >= 400:
                        await resp.aread()
                        raise error_for_status(resp.status_code, resp.text)
                    async for line in resp.aiter_lines():
                        data_str = line.strip()
                        if not data_str:
                            continue
                        if data_str.startswith("data:"):
                            data_str = data_str[5:].strip()
                        if not data_str or data_str == "[DONE]":
                            continue
                        try:
                            payload_chunk = json.loads(data_str)
                        except json.JSONDecodeError:
                            continue
                        yield self._parse_stream_chunk(payload_chunk, req)
        except httpx.TimeoutException as e:
            raise ConnectionTimeoutError(code="CONNECTION_TIMEOUT", message=str(e) or "timed out")
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接被拒绝等
            raise NetworkError(code="CONNECTION_FAILED", message=str(e) or type(e).__name__)

    def _build_payload(self, req: ChatRequest, model_cfg: ModelConfig) -> dict:
        """将 ChatRequest 转成请求 JSON。"""

        temperature = req.temperature if req.temperature is not None else model_cfg.default_temperature
        return {
            "model": model_cfg.provider_model,
            "messages": [{"role": m.role, "content": m.content} for m in req.messages],
            "temperature": temperature,
            "max_tokens": req.max_tokens or model_cfg.max_tokens,
            "top_p": req.top_p,
            "stream": True,
        }

    def _parse_stream_chunk(self, data: Dict[str, Any], req: ChatRequest) -> ChatStreamChunk:
        """解析流式响应中的单条增量。"""

        choices: list[ChatStreamChoice] = []
        for i, ch in enumerate(data.get("choices") or []):
            delta_payload = ch.get("delta") or {}
            choices.append(
                ChatStreamChoice(
                    index=ch.get("index", i),
                    delta=ChatMessage(
                        role=delta_payload.get("role") or "assistant",
                        content=delta_payload.get("content") or "",
                    ),
                    finish_reason=ch.get("finish_reason"),
                )
            )
        usage_raw = data.get("usage") or {}
        usage = None
        if usage_raw:
            usage = ChatUsage(
                prompt_tokens=usage_raw.get("prompt_tokens", 0),
                completion_tokens=usage_raw.get("completion_tokens", 0),
                total_tokens=usage_raw.get("total_tokens", 0),
            )
        return ChatStreamChunk(
            provider=self.name,
            model=req.model,
            choices=choices,
            usage=usage,
            raw=data,
        )
