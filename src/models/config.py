"""
Model selection with strong typing.
Parses the loose model hints the editor sends.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


MAX_MODEL_NAME_LENGTH = 200


class ModelProvider(str, Enum):
    """Supported generation back ends."""

    OPENAI = "openai"
    GEMINI = "gemini"


DEFAULT_MODELS: dict[ModelProvider, str] = {
    ModelProvider.OPENAI: "gpt-4.1-mini",
    ModelProvider.GEMINI: "gemini-2.5-flash",
}


class ModelSelection(BaseModel):
    """Resolved provider and model name."""

    model_config = ConfigDict(frozen=True)

    provider: ModelProvider = Field(default=ModelProvider.OPENAI)
    model: str = Field(default=DEFAULT_MODELS[ModelProvider.OPENAI], max_length=MAX_MODEL_NAME_LENGTH)

    @property
    def gemini_model_path(self) -> str:
        """Gemini expects ``models/<name>``."""
        name = self.model.strip() or DEFAULT_MODELS[ModelProvider.GEMINI]
        return name if name.startswith("models/") else f"models/{name}"


def normalize_model_selection(
    value: Any, defaults: dict[ModelProvider, str] | None = None
) -> ModelSelection:
    """
    Resolve a model hint.

    Accepts ``"gemini:<name>"`` / ``"openai:<name>"``, a bare model name
    (treated as OpenAI), or ``{"provider": ..., "name": ...}``. Anything else
    yields the OpenAI default.
    """
    defaults = defaults or DEFAULT_MODELS
    fallback = ModelSelection(provider=ModelProvider.OPENAI, model=defaults[ModelProvider.OPENAI])
    if not value:
        return fallback

    if isinstance(value, str):
        raw_provider, _, rest = value.partition(":")
        try:
            provider = ModelProvider(raw_provider)
        except ValueError:
            name = raw_provider.strip()
            if not name:
                return fallback
            return ModelSelection(provider=ModelProvider.OPENAI, model=name[:MAX_MODEL_NAME_LENGTH])
        name = rest.strip() or defaults[provider]
        return ModelSelection(provider=provider, model=name[:MAX_MODEL_NAME_LENGTH])

    if isinstance(value, dict):
        provider = ModelProvider.GEMINI if value.get("provider") == "gemini" else ModelProvider.OPENAI
        name = value.get("name")
        name = name.strip() if isinstance(name, str) and name.strip() else defaults[provider]
        return ModelSelection(provider=provider, model=name[:MAX_MODEL_NAME_LENGTH])

    return fallback
