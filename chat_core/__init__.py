"""Chat Core 顶层包。

该包实现面向流式文本生成服务的多轮对话客户端编排，
包括配置加载、领域模型、Provider 适配、流式解码、
续写循环、错误分类以及对外暴露的调用状态机。
"""

from chat_core.agents.continuation import ContinuationOrchestrator, ContinuationResult
from chat_core.agents.invocation import ChatInvocation, InvocationState

__all__ = ["ChatInvocation", "ContinuationOrchestrator", "ContinuationResult", "InvocationState"]
