"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护允许使用的模型配置 (registry)。
- 提供 OpenAI 兼容的流式实现 (openai_client)。
- 把增量事件解码为文本片段与终止标记 (stream)。
"""

from typing import Optional

from chat_core.config.settings import settings
from chat_core.providers.base import ProviderClient
from chat_core.providers.openai_client import OpenAIClient


def create_provider(cfg: Optional[object] = None) -> ProviderClient:
    """创建 Provider 实例，默认使用全局配置。

    客户端只读取配置、不保存请求状态，可以在多次调用之间共享。
    """

    return OpenAIClient(settings if cfg is None else cfg)
