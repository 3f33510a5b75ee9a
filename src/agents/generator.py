"""Component Generator - model call, JSON parsing, normalization."""

import time
from typing import Any

from core import get_logger, extract_json, JSONParseError
from core.errors import GenerationServiceError
from component import ComponentBundle, ComponentPipeline
from models import ModelLoader, ModelProvider, normalize_model_selection
from monitoring import metrics_collector

from .models import MAX_CONTENT_LENGTH, normalize_conversation
from .prompts import SYSTEM_PROMPT, PromptBuilder


logger = get_logger(__name__)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_bundle_json(raw: str) -> dict[str, str]:
    """
    Pull html/js/css out of the model's JSON answer.

    Raises:
        GenerationServiceError: The answer is not a JSON object
    """
    try:
        data = extract_json(raw or "{}")
    except JSONParseError as e:
        logger.error("bundle_json_invalid", error=str(e), preview=(raw or "")[:200])
        raise GenerationServiceError(f"Model returned invalid JSON: {e}") from e
    return {key: _as_text(data.get(key)) for key in ("html", "js", "css")}


class ComponentGenerator:
    """Generates a normalized bundle from an instruction."""

    def __init__(
        self,
        model_loader: ModelLoader,
        pipeline: ComponentPipeline,
        default_models: dict[ModelProvider, str] | None = None,
        max_history_content: int = MAX_CONTENT_LENGTH,
    ) -> None:
        self.model_loader = model_loader
        self.pipeline = pipeline
        self.default_models = default_models
        self.max_history_content = max_history_content

    async def generate(
        self,
        instruction: str,
        base: ComponentBundle | None = None,
        conversation: Any = None,
        model: Any = None,
    ) -> ComponentBundle:
        """
        Create a new bundle, or edit ``base`` when it has content.

        Raises:
            GenerationServiceError: Model unavailable or answer unparseable
            MalformedMarkupError: Generated markup could not be normalized
            MissingClassDeclarationError: Generated class is not a Preview LWC
        """
        history = normalize_conversation(conversation, self.max_history_content)
        selection = normalize_model_selection(model, self.default_models)
        generator = self.model_loader.load(selection)
        user_text = PromptBuilder.build_user_text(instruction, base)

        logger.info(
            "generate_start",
            provider=selection.provider.value,
            model=selection.model,
            edit=base is not None and bool(base.html or base.js or base.css),
            history=len(history),
        )

        start = time.time()
        try:
            raw = await generator.generate(SYSTEM_PROMPT, [m.as_dict() for m in history], user_text)
        except GenerationServiceError:
            metrics_collector.record_llm_call(selection.provider.value, "error", time.time() - start)
            raise
        metrics_collector.record_llm_call(selection.provider.value, "success", time.time() - start)

        files = parse_bundle_json(raw)
        return self.pipeline.process(files["html"], files["js"], files["css"])
