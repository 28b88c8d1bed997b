"""JSON 行格式的文件日志。

每条记录是一个 JSON 对象。编排层通过 extra={"extra": {...}} 传入结构化字段，
其中 trace_id / round / model 会提到固定位置，便于按一次调用过滤日志。
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from chat_core.config.settings import settings

# 固定排在 msg 之后的调用上下文字段
CONTEXT_FIELDS = ("trace_id", "round", "model")
# 开启脱敏时会被截断的字段（可能包含模型输出或服务端返回的正文）
REDACTED_FIELDS = ("msg", "error")
REDACT_LIMIT = 64


class JsonFormatter(logging.Formatter):
    def __init__(self, redact: bool = False):
        super().__init__()
        self._redact = redact

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            for key in CONTEXT_FIELDS:
                if key in extra:
                    payload[key] = extra[key]
            for key, value in extra.items():
                payload.setdefault(key, value)
        if self._redact:
            for key in REDACTED_FIELDS:
                if isinstance(payload.get(key), str):
                    payload[key] = payload[key][:REDACT_LIMIT]
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger() -> logging.Logger:
    logger = logging.getLogger("chat_core")
    logger.setLevel(settings.log_level.upper())
    if logger.handlers:
        return logger
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(log_dir / "chat.log", encoding="utf-8")
    fh.setFormatter(JsonFormatter(redact=settings.log_redact_content))
    logger.addHandler(fh)
    return logger


logger = setup_logger()
