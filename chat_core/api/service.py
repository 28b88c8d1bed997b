"""对外 API 服务模块。

提供简化的函数接口供上层应用调用。
"""

import asyncio
from typing import Any, Dict, Iterable, List, Mapping, Optional

from chat_core.agents.continuation import ContinuationOrchestrator
from chat_core.agents.invocation import ChatInvocation
from chat_core.config.settings import settings
from chat_core.domain.exceptions import ValidationError
from chat_core.domain.models import ROLES, ChatMessage
from chat_core.infrastructure.logging.logger import logger
from chat_core.providers import create_provider


_invocation: Optional[ChatInvocation] = None


def get_default_invocation() -> ChatInvocation:
    """获取默认的调用状态机实例（单例）。"""
    global _invocation
    if _invocation is None:
        orchestrator = ContinuationOrchestrator(provider_client=create_provider())
        _invocation = ChatInvocation(orchestrator, locale=settings.error_locale)
    return _invocation


def to_chat_messages(messages: Iterable[Mapping[str, Any]]) -> List[ChatMessage]:
    """把 {"role", "content"} 字典列表转换为 ChatMessage 列表。"""
    result: List[ChatMessage] = []
    for item in messages:
        role = item.get("role")
        if role not in ROLES:
            raise ValidationError(code="INVALID_MESSAGE", message=f"Unsupported role: {role!r}")
        result.append(ChatMessage(role=role, content=str(item.get("content") or "")))
    return result


def run_chat(messages: Iterable[Mapping[str, Any]], model: Optional[str] = None) -> Dict[str, Any]:
    """同步执行一次对话调用。

    Args:
        messages: 会话消息列表，每项包含 role 与 content
        model: 模型名（可选，默认取配置中的 default_model）

    Returns:
        包含 phase、message、error 的字典

    Raises:
        ValidationError: 消息格式不正确
    """
    model_name = model or settings.default_model
    try:
        conversation = to_chat_messages(messages)
        invocation = get_default_invocation()
        state = asyncio.run(invocation.send(conversation, model_name))
        return {
            "phase": state.phase,
            "message": state.message,
            "error": state.error,
        }
    except Exception as e:
        logger.error(f"Chat failed: {e}", extra={"extra": {
            "model": model_name,
            "error": str(e),
        }})
        raise
