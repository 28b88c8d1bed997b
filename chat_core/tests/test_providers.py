import pytest

from chat_core.domain.exceptions import ValidationError
from chat_core.providers import create_provider
from chat_core.providers.openai_client import OpenAIClient
from chat_core.providers.registry import get_model_config


def test_create_provider_default(monkeypatch):
    class DummySettings:
        openai_api_key = "k"
        http_timeout = 1.0
        openai_base_url = "https://api.openai.com/v1"

    dummy = DummySettings()
    monkeypatch.setattr("chat_core.providers.settings", dummy)
    provider = create_provider()
    assert isinstance(provider, OpenAIClient)
    assert provider._settings is dummy


def test_registry_models():
    assert get_model_config("gpt-4o").context_window > get_model_config("gpt-4o-mini").context_window
    with pytest.raises(ValidationError):
        get_model_config("unknown")
