"""调用状态机。

对外只暴露三个字段：phase / message / error。

    idle -> pending -> succeeded | failed -> pending -> ...

- start(): 进入 pending，清空上一次的 error，异步执行编排器。
- 成功：进入 succeeded，message 为返回会话中最后一条 assistant 消息的内容。
- 失败：进入 failed，error 为 ErrorKind 的提示文案，message 保持不变。

重叠调用时以最后一次 start() 为准，被取代的调用结果会被忽略。
"""

import asyncio
from dataclasses import dataclass, replace
from typing import Literal, Optional, Sequence

from chat_core.agents.continuation import ContinuationOrchestrator, ContinuationResult
from chat_core.config.settings import settings
from chat_core.domain.error_kinds import ErrorKind, error_message
from chat_core.domain.models import ChatMessage
from chat_core.infrastructure.logging.logger import logger


Phase = Literal["idle", "pending", "succeeded", "failed"]


@dataclass(frozen=True)
class InvocationState:
    phase: Phase = "idle"
    message: str = ""
    error: Optional[str] = None


class ChatInvocation:
    """把 ContinuationOrchestrator 包装成 UI 可观察的三态调用。"""

    def __init__(self, orchestrator: ContinuationOrchestrator, locale: Optional[str] = None):
        self._orchestrator = orchestrator
        self._locale = locale or settings.error_locale
        self._state = InvocationState()
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def state(self) -> InvocationState:
        return self._state

    @property
    def is_pending(self) -> bool:
        return self._state.phase == "pending"

    def start(self, conversation: Sequence[ChatMessage], model: str) -> asyncio.Task:
        """开始一次新的调用，必须在运行中的事件循环里调用。"""

        loop = asyncio.get_running_loop()
        buffer = list(conversation)
        self._generation += 1
        generation = self._generation
        self._state = replace(self._state, phase="pending", error=None)
        task = loop.create_task(self._run(buffer, model, generation))
        task.add_done_callback(lambda t: self._on_done(t, generation))
        self._task = task
        return task

    async def send(self, conversation: Sequence[ChatMessage], model: str) -> InvocationState:
        """start() 并等待结果，返回结束后的状态快照。"""

        task = self.start(conversation, model)
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
        return self._state

    def abort(self) -> bool:
        """中止进行中的调用，结果以 UserAbort 失败呈现。"""

        if self._task is None or self._task.done():
            return False
        return self._task.cancel()

    async def _run(self, conversation: Sequence[ChatMessage], model: str, generation: int) -> None:
        result = await self._orchestrator.run(conversation, model)
        self._apply(result, generation)

    def _apply(self, result: ContinuationResult, generation: int) -> None:
        if generation != self._generation:
            logger.info("Ignoring superseded invocation result", extra={"extra": {"generation": generation}})
            return
        if result.ok:
            last = result.final_message
            message = self._state.message
            if last is not None and last.role == "assistant":
                message = last.content or ""
            self._state = InvocationState(phase="succeeded", message=message, error=None)
        else:
            self._fail(result.error or ErrorKind.UNKNOWN)

    def _fail(self, kind: ErrorKind) -> None:
        self._state = InvocationState(
            phase="failed",
            message=self._state.message,
            error=error_message(kind, self._locale),
        )

    def _on_done(self, task: asyncio.Task, generation: int) -> None:
        current = generation == self._generation and self.is_pending
        # 任务在开始执行前就被取消时，_run 不会运行，这里补记中止状态
        if task.cancelled():
            if current:
                self._fail(ErrorKind.USER_ABORT)
            return
        exc = task.exception()
        if exc is None:
            return
        logger.error(
            "Invocation task crashed",
            extra={"extra": {"generation": generation, "error": repr(exc)}},
        )
        if current:
            self._fail(ErrorKind.UNKNOWN)
