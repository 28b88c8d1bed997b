import asyncio

from chat_core.agents.continuation import ContinuationOrchestrator, ContinuationResult
from chat_core.agents.invocation import ChatInvocation, InvocationState
from chat_core.domain.error_kinds import ErrorKind, error_message
from chat_core.domain.models import ChatMessage, ChatStreamChoice, ChatStreamChunk


class FakeOrchestrator:
    """按顺序返回预设结果；gate 不为空时等待放行。"""

    def __init__(self, results, gate=None):
        self._results = list(results)
        self._gate = gate
        self.calls = []

    async def run(self, conversation, model):
        self.calls.append((list(conversation), model))
        result = self._results.pop(0)
        if self._gate is not None:
            await self._gate.wait()
        return result


def _chunk(text, finish_reason=None):
    return ChatStreamChunk(
        provider="fake",
        model="gpt-4o-mini",
        choices=[
            ChatStreamChoice(
                index=0,
                delta=ChatMessage(role="assistant", content=text),
                finish_reason=finish_reason,
            )
        ],
    )


def _conversation():
    return [ChatMessage(role="user", content="hi")]


def _success(*contents):
    return ContinuationResult(
        messages=_conversation() + [ChatMessage(role="assistant", content=c) for c in contents]
    )


def test_initial_state_is_idle():
    inv = ChatInvocation(FakeOrchestrator([]), locale="en")
    assert inv.state == InvocationState(phase="idle", message="", error=None)


def test_success_surfaces_last_assistant_message():
    inv = ChatInvocation(FakeOrchestrator([_success("first part", "second part")]), locale="en")
    state = asyncio.run(inv.send(_conversation(), "gpt-4o-mini"))
    assert state.phase == "succeeded"
    assert state.message == "second part"
    assert state.error is None


def test_failure_keeps_previous_message():
    orchestrator = FakeOrchestrator([_success("hello"), ContinuationResult(error=ErrorKind.RATE_LIMITED)])
    inv = ChatInvocation(orchestrator, locale="en")

    async def scenario():
        await inv.send(_conversation(), "gpt-4o-mini")
        return await inv.send(_conversation(), "gpt-4o-mini")

    state = asyncio.run(scenario())
    assert state.phase == "failed"
    assert state.message == "hello"
    assert state.error == error_message(ErrorKind.RATE_LIMITED, "en")


def test_restart_after_failure_clears_error_while_pending():
    async def scenario():
        gate = asyncio.Event()
        inv = ChatInvocation(
            FakeOrchestrator([ContinuationResult(error=ErrorKind.SERVER_FAULT)]),
            locale="ja",
        )
        first = await inv.send(_conversation(), "gpt-4o")
        assert first.phase == "failed"
        assert first.error == error_message(ErrorKind.SERVER_FAULT, "ja")

        inv._orchestrator = FakeOrchestrator([_success("recovered")], gate=gate)
        task = inv.start(_conversation(), "gpt-4o")
        pending = inv.state
        gate.set()
        await task
        return pending, inv.state

    pending, final = asyncio.run(scenario())
    assert pending.phase == "pending"
    assert pending.error is None
    assert final.phase == "succeeded"
    assert final.message == "recovered"


def test_abort_before_task_runs_is_user_abort():
    inv = ChatInvocation(FakeOrchestrator([_success("never")]), locale="en")

    async def scenario():
        task = inv.start(_conversation(), "gpt-4o-mini")
        assert inv.abort()
        await asyncio.gather(task, return_exceptions=True)
        return inv.state

    state = asyncio.run(scenario())
    assert state.phase == "failed"
    assert state.error == error_message(ErrorKind.USER_ABORT, "en")


def test_abort_without_pending_invocation():
    inv = ChatInvocation(FakeOrchestrator([]), locale="en")
    assert inv.abort() is False


def test_superseded_result_is_ignored():
    class TwoSpeedOrchestrator:
        def __init__(self, slow_gate):
            self._slow_gate = slow_gate

        async def run(self, conversation, model):
            if model == "gpt-4o":
                await self._slow_gate.wait()
                return _success("stale")
            return _success("fresh")

    async def scenario():
        slow_gate = asyncio.Event()
        inv = ChatInvocation(TwoSpeedOrchestrator(slow_gate), locale="en")
        slow = inv.start(_conversation(), "gpt-4o")
        fast = inv.start(_conversation(), "gpt-4o-mini")
        await fast
        slow_gate.set()
        await slow
        return inv.state

    state = asyncio.run(scenario())
    assert state.phase == "succeeded"
    assert state.message == "fresh"


def test_caller_conversation_is_copied():
    orchestrator = FakeOrchestrator([_success("ok")])
    inv = ChatInvocation(orchestrator, locale="en")
    conversation = _conversation()
    asyncio.run(inv.send(conversation, "gpt-4o-mini"))
    assert orchestrator.calls[0][0] == conversation
    assert orchestrator.calls[0][0] is not conversation


def test_invalid_conversation_leaves_state_untouched():
    inv = ChatInvocation(FakeOrchestrator([]), locale="en")

    async def scenario():
        try:
            inv.start(None, "gpt-4o")
        except TypeError:
            return inv.state
        raise AssertionError("start() accepted a non-iterable conversation")

    state = asyncio.run(scenario())
    assert state == InvocationState(phase="idle", message="", error=None)
    assert not inv.is_pending
    assert inv.abort() is False


def test_crashing_orchestrator_fails_as_unknown():
    class CrashingOrchestrator:
        async def run(self, conversation, model):
            raise RuntimeError("not a ContinuationResult")

    inv = ChatInvocation(CrashingOrchestrator(), locale="en")

    async def scenario():
        task = inv.start(_conversation(), "gpt-4o-mini")
        results = await asyncio.gather(task, return_exceptions=True)
        return results[0], inv.state

    outcome, state = asyncio.run(scenario())
    assert isinstance(outcome, RuntimeError)
    assert state.phase == "failed"
    assert state.error == error_message(ErrorKind.UNKNOWN, "en")


def test_abort_during_stream_through_orchestrator():
    class BlockingProvider:
        name = "fake"

        def __init__(self):
            self.started = asyncio.Event()
            self.calls = 0

        async def chat_stream(self, req):
            self.calls += 1
            if self.calls == 1:
                yield _chunk("done", "stop")
                return
            yield _chunk("partial")
            self.started.set()
            await asyncio.Event().wait()

    async def scenario():
        provider = BlockingProvider()
        inv = ChatInvocation(ContinuationOrchestrator(provider_client=provider), locale="en")
        first = await inv.send(_conversation(), "gpt-4o-mini")
        assert first.message == "done"

        task = inv.start(_conversation(), "gpt-4o-mini")
        await provider.started.wait()
        assert inv.abort()
        await task
        return inv.state

    state = asyncio.run(scenario())
    assert state.phase == "failed"
    assert state.error == error_message(ErrorKind.USER_ABORT, "en")
    assert state.message == "done"
