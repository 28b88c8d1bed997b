"""Provider 与模型配置。

调用方传入的模型名必须在这里注册，未注册的模型在发出请求前
就会以 ValidationError(code="UNSUPPORTED_MODEL") 拒绝。

- gpt-4o: 大上下文（128K）。
- gpt-4o-mini: 小上下文（16K）。
"""

from dataclasses import dataclass
from typing import Dict

from chat_core.domain.exceptions import ValidationError


@dataclass
class ModelConfig:
    """单个模型的配置。"""

    logical_name: str
    provider_model: str
    context_window: int
    max_tokens: int
    default_temperature: float


@dataclass
class ProviderConfig:
    """Provider 的整体配置。"""

    name: str
    base_url: str
    models: Dict[str, ModelConfig]


OPENAI_CONFIG = ProviderConfig(
    name="openai",
    base_url="https://api.openai.com/v1",
    models={
        "gpt-4o": ModelConfig(
            logical_name="gpt-4o",
            provider_model="gpt-4o",
            context_window=128_000,
            max_tokens=16_384,
            default_temperature=0.7,
        ),
        "gpt-4o-mini": ModelConfig(
            logical_name="gpt-4o-mini",
            provider_model="gpt-4o-mini",
            context_window=16_000,
            max_tokens=4_096,
            default_temperature=0.7,
        ),
    },
)


def get_model_config(name: str) -> ModelConfig:
    """根据模型名获取 ModelConfig，未注册时抛出 ValidationError。"""

    try:
        return OPENAI_CONFIG.models[name]
    except KeyError:
        allowed = ", ".join(sorted(OPENAI_CONFIG.models))
        raise ValidationError(
            code="UNSUPPORTED_MODEL",
            message=f"Unsupported model {name!r}; allowed: {allowed}",
            model=name,
        ) from None
