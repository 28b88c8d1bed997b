"""Provider 抽象接口。

编排层不直接依赖具体的 HTTP 实现，而是依赖此协议：

- 负责：将 ChatRequest 转成流式 API 请求，并把每条增量事件解析为 ChatStreamChunk。
- 失败时抛出 domain.exceptions 中的 BusinessError 子类。

客户端本身是无状态的，可以在多次调用之间复用。
"""

from typing import AsyncIterator, Protocol

from chat_core.domain.models import ChatRequest, ChatStreamChunk


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。"""

    name: str

    def chat_stream(self, req: ChatRequest) -> AsyncIterator[ChatStreamChunk]:
        """执行一次流式对话调用，逐步产出增量。"""

        ...
