"""续写编排器。

驱动“请求 -> 流式消费 -> 判定终止原因 -> 结束或续写”的循环，
并独占本次调用的会话缓冲区：

- stop：追加本轮 assistant 消息并返回完整会话。
- length：追加本轮已生成的部分回答，清空累加器，带着新上下文继续请求。
- filtered：以 ErrorKind.FILTERED 失败，不再追加任何消息。
- none（流结束却没有终止原因）：视为 ErrorKind.UNKNOWN。

与 Provider 通信时出现的任何异常都会在这里被捕获、分类，
以 ContinuationResult 的形式返回，而不会继续向上抛出。
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from chat_core.config.settings import settings
from chat_core.domain.classifier import classify
from chat_core.domain.error_kinds import ErrorKind
from chat_core.domain.exceptions import BusinessError, ValidationError
from chat_core.domain.models import ChatMessage, CompletionMarker
from chat_core.flows.graph import build_graph, recursion_limit_for
from chat_core.flows.state import ContinuationState
from chat_core.infrastructure.logging.logger import logger
from chat_core.providers.base import ProviderClient


@dataclass
class ContinuationResult:
    """一次编排的结果：成功时 messages 为完整会话，失败时 error 为分类结果。"""

    messages: Optional[List[ChatMessage]] = None
    error: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def final_message(self) -> Optional[ChatMessage]:
        if not self.messages:
            return None
        return self.messages[-1]


class ContinuationOrchestrator:
    def __init__(
        self,
        provider_client: ProviderClient,
        max_rounds: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        self._provider_client = provider_client
        self._max_rounds = max_rounds or settings.max_continuation_rounds
        self._temperature = temperature
        self._graph = build_graph(provider_client)

    async def run(self, conversation: Sequence[ChatMessage], model: str) -> ContinuationResult:
        """执行一次完整的续写编排。

        Args:
            conversation: 调用方的会话，只读取、不修改
            model: 注册过的模型名

        Returns:
            ContinuationResult，成功时最后一条消息一定是 assistant
        """
        start_time = time.time()
        log_ctx: Dict[str, Any] = {"trace_id": f"tr-{uuid4().hex}", "model": model}
        self._log(logging.INFO, "Starting invocation", log_ctx, message_count=len(conversation))

        try:
            if not conversation:
                raise ValidationError(code="EMPTY_CONVERSATION", message="conversation is empty")
            state: ContinuationState = {
                "messages": list(conversation),
                "model": model,
                "temperature": self._temperature,
                "text": "",
                "marker": CompletionMarker.NONE,
                "rounds": 0,
                "max_rounds": self._max_rounds,
                "trace_id": log_ctx["trace_id"],
            }
            final = await self._graph.ainvoke(
                state,
                config={"recursion_limit": recursion_limit_for(self._max_rounds)},
            )
        except asyncio.CancelledError as exc:
            # 取消即中止：丢弃已累积的内容，不返回部分结果
            return self._failure(exc, log_ctx)
        except Exception as exc:  # noqa: BLE001 - 所有失败都要分类为 ErrorKind
            return self._failure(exc, log_ctx)

        marker = final.get("marker", CompletionMarker.NONE)
        rounds = final.get("rounds", 0)
        if marker == CompletionMarker.STOP:
            messages = final["messages"]
            self._log(
                logging.INFO,
                "Completed invocation",
                log_ctx,
                rounds=rounds,
                message_count=len(messages),
                elapsed_seconds=round(time.time() - start_time, 2),
            )
            return ContinuationResult(messages=messages)
        if marker == CompletionMarker.FILTERED:
            self._log(logging.WARNING, "Response filtered", log_ctx, rounds=rounds)
            return ContinuationResult(error=ErrorKind.FILTERED)
        if marker == CompletionMarker.LENGTH:
            self._log(logging.WARNING, "Reached max continuation rounds", log_ctx, max_rounds=self._max_rounds)
        else:
            self._log(logging.ERROR, "Stream ended without finish reason", log_ctx, rounds=rounds)
        return ContinuationResult(error=ErrorKind.UNKNOWN)

    def _failure(self, exc: BaseException, log_ctx: Dict[str, Any]) -> ContinuationResult:
        kind = classify(exc)
        code = exc.code if isinstance(exc, BusinessError) else type(exc).__name__
        self._log(logging.ERROR, "Invocation failed", log_ctx, error_kind=kind.value, error_code=code, error=str(exc))
        return ContinuationResult(error=kind)

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
