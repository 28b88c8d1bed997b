import pytest

from chat_core.agents.continuation import ContinuationOrchestrator
from chat_core.agents.invocation import ChatInvocation
from chat_core.api import service
from chat_core.domain.exceptions import ValidationError
from chat_core.domain.models import ChatMessage, ChatStreamChoice, ChatStreamChunk


class FakeProvider:
    name = "fake"

    def __init__(self):
        self.models = []

    async def chat_stream(self, req):
        self.models.append(req.model)
        yield ChatStreamChunk(
            provider="fake",
            model=req.model,
            choices=[
                ChatStreamChoice(
                    index=0,
                    delta=ChatMessage(role="assistant", content="こんにちは"),
                    finish_reason="stop",
                )
            ],
        )


def test_run_chat_returns_state_dict(monkeypatch):
    provider = FakeProvider()
    invocation = ChatInvocation(ContinuationOrchestrator(provider_client=provider), locale="ja")
    monkeypatch.setattr(service, "_invocation", invocation)

    result = service.run_chat([{"role": "user", "content": "hi"}], model="gpt-4o")

    assert result == {"phase": "succeeded", "message": "こんにちは", "error": None}
    assert provider.models == ["gpt-4o"]


def test_run_chat_rejects_unknown_role(monkeypatch):
    monkeypatch.setattr(service, "_invocation", None)
    with pytest.raises(ValidationError) as info:
        service.run_chat([{"role": "tool", "content": "x"}])
    assert info.value.code == "INVALID_MESSAGE"


def test_get_default_invocation_is_singleton(monkeypatch):
    monkeypatch.setattr(service, "_invocation", None)
    first = service.get_default_invocation()
    assert service.get_default_invocation() is first
    assert first.state.phase == "idle"
