import json
import logging

from chat_core.config.settings import ChatSettings
from chat_core.infrastructure.logging.logger import JsonFormatter


def test_config_file_from_environment(tmp_path, monkeypatch):
    config_file = tmp_path / "chat.yaml"
    config_file.write_text("max_continuation_rounds: 7\nerror_locale: EN\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MAX_CONTINUATION_ROUNDS", raising=False)
    monkeypatch.delenv("ERROR_LOCALE", raising=False)
    monkeypatch.setenv("CHAT_CONFIG_FILE", str(config_file))

    cfg = ChatSettings()
    assert cfg.max_continuation_rounds == 7
    assert cfg.error_locale == "en"


def _record(msg, **extra):
    record = logging.LogRecord("chat_core", logging.INFO, __file__, 1, msg, None, None)
    record.extra = extra
    return record


def test_formatter_puts_trace_context_first():
    line = JsonFormatter().format(_record("Invocation failed", error="boom", trace_id="tr-1", model="gpt-4o"))
    payload = json.loads(line)
    assert list(payload)[:7] == ["ts", "level", "name", "msg", "trace_id", "model", "error"]
    assert payload["error"] == "boom"


def test_formatter_redacts_message_and_error():
    long_text = "x" * 200
    payload = json.loads(JsonFormatter(redact=True).format(_record(long_text, error=long_text, trace_id="tr-2")))
    assert len(payload["msg"]) == 64
    assert len(payload["error"]) == 64
    assert payload["trace_id"] == "tr-2"
