"""统一的对话与流式数据模型。

本模块定义了编排层与 Provider 之间共享的标准数据结构：

- ChatMessage: 一条对话消息（system/user/assistant）。
- ChatRequest: 发给底层 LLM Provider 的完整请求。
- ChatStreamChunk: 从 Provider 流式响应中解析出的单条增量事件。
- StreamFragment / CompletionMarker: 流式解码后交给编排层的文本片段与终止标记。

Provider 适配器（如 OpenAIClient）只依赖这些模型，
并负责在各自的 API JSON 和这些模型之间做转换。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional, List


# LLM 消息角色类型（与 OpenAI 的 role 字段对应）
Role = Literal["system", "user", "assistant"]
ROLES = ("system", "user", "assistant")


@dataclass(frozen=True)
class ChatMessage:
    """一条对话消息，既可用于请求，也可用于响应。

    消息一旦加入会话即不可修改，因此使用 frozen dataclass。
    """

    role: Role
    content: str


@dataclass
class ChatRequest:
    """一次完整的流式聊天请求。

    编排层每一轮续写都会基于当前会话缓冲区构造新的 ChatRequest，
    Provider 适配层负责把本结构转换成 API 的 JSON 请求体。
    """

    provider: str  # 逻辑 Provider 名，如 "openai"
    model: str  # 逻辑模型名，如 "gpt-4o-mini"（再由 registry 校验并映射）
    messages: List[ChatMessage]
    temperature: Optional[float] = None
    top_p: float = 1.0
    max_tokens: Optional[int] = None


@dataclass
class ChatUsage:
    """Provider 返回的 token 统计信息（统一格式）。"""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class ChatStreamChoice:
    """流式返回中的单个候选增量。"""

    index: int
    delta: ChatMessage
    finish_reason: Optional[str] = None


@dataclass
class ChatStreamChunk:
    """流式对话的增量事件。

    每个事件由若干 choice 组成，choice.delta 代表本次增量内容；
    finish_reason 只会出现在流的末尾附近，中间事件为 None。
    """

    provider: str
    model: str
    choices: List[ChatStreamChoice]
    usage: Optional[ChatUsage] = None
    raw: Optional[dict] = field(default=None, repr=False)


class CompletionMarker(str, Enum):
    """流结束时 Provider 给出的终止原因。"""

    STOP = "stop"
    LENGTH = "length"
    FILTERED = "filtered"
    NONE = "none"


@dataclass(frozen=True)
class StreamFragment:
    """流式解码后的文本片段。

    terminal 只在整条流的最后一个片段上有意义，中间片段恒为 NONE。
    """

    text: str
    terminal: CompletionMarker = CompletionMarker.NONE
