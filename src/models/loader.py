"""Model Loader - OpenAI and Gemini text generation in JSON mode."""

from typing import Protocol

import google.generativeai as genai
from openai import AsyncOpenAI, OpenAIError

from core import get_logger
from core.errors import GenerationServiceError
from .config import ModelProvider, ModelSelection


logger = get_logger(__name__)


class TextGenerator(Protocol):
    """Produces the raw JSON text of a bundle."""

    async def generate(self, system_prompt: str, history: list[dict[str, str]], user_text: str) -> str: ...


class OpenAIGenerator:
    """Chat Completions in JSON object mode."""

    def __init__(self, api_key: str, model: str, temperature: float = 0.2) -> None:
        self.model = model
        self.temperature = temperature
        self.client = AsyncOpenAI(api_key=api_key)

    async def generate(self, system_prompt: str, history: list[dict[str, str]], user_text: str) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            *history,
            {"role": "user", "content": user_text},
        ]
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                response_format={"type": "json_object"},
                messages=messages,
                temperature=self.temperature,
            )
        except OpenAIError as e:
            logger.error("openai_error", model=self.model, error=str(e))
            raise GenerationServiceError(f"OpenAI request failed: {e}") from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise GenerationServiceError("OpenAI response did not include any content.")
        return content


class GeminiGenerator:
    """Gemini generateContent with a JSON response MIME type."""

    def __init__(self, api_key: str, model_path: str, temperature: float = 0.2) -> None:
        self.model_path = model_path
        self.temperature = temperature
        genai.configure(api_key=api_key)

    @staticmethod
    def build_contents(history: list[dict[str, str]], user_text: str) -> list[dict]:
        """Gemini calls the assistant role ``model``; empty turns are skipped."""
        contents = []
        for entry in history:
            text = (entry.get("content") or "").strip()
            if not text:
                continue
            role = "model" if entry.get("role") == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": text}]})
        contents.append({"role": "user", "parts": [{"text": user_text or ""}]})
        return contents

    async def generate(self, system_prompt: str, history: list[dict[str, str]], user_text: str) -> str:
        model = genai.GenerativeModel(
            model_name=self.model_path,
            system_instruction=system_prompt,
            generation_config=genai.GenerationConfig(
                temperature=self.temperature,
                response_mime_type="application/json",
            ),
        )
        try:
            response = await model.generate_content_async(self.build_contents(history, user_text))
        except Exception as e:
            logger.error("gemini_error", model=self.model_path, error=str(e))
            raise GenerationServiceError(f"Gemini request failed: {e}") from e

        for candidate in response.candidates or []:
            parts = getattr(candidate.content, "parts", None) or []
            combined = "".join(getattr(part, "text", "") or "" for part in parts).strip()
            if combined:
                return combined

        raise GenerationServiceError("Gemini response did not include any content.")


class ModelLoader:
    """Builds a generator for a model selection from configured keys."""

    def __init__(self, openai_api_key: str, gemini_api_key: str, temperature: float = 0.2) -> None:
        self.openai_api_key = openai_api_key
        self.gemini_api_key = gemini_api_key
        self.temperature = temperature

    def load(self, selection: ModelSelection) -> TextGenerator:
        """
        Raises:
            GenerationServiceError: The provider's API key is not configured
        """
        if selection.provider == ModelProvider.GEMINI:
            if not self.gemini_api_key:
                raise GenerationServiceError("GEMINI_API_KEY is not configured on the server.")
            return GeminiGenerator(self.gemini_api_key, selection.gemini_model_path, self.temperature)

        if not self.openai_api_key:
            raise GenerationServiceError("OPENAI_API_KEY is not configured on the server.")
        return OpenAIGenerator(self.openai_api_key, selection.model, self.temperature)
