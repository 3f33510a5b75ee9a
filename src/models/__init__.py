"""
Models package - generation back ends.
Model selection parsing and OpenAI / Gemini generators.
"""

from .config import ModelProvider, ModelSelection, DEFAULT_MODELS, normalize_model_selection
from .loader import ModelLoader, TextGenerator, OpenAIGenerator, GeminiGenerator

__all__ = [
    "ModelProvider",
    "ModelSelection",
    "DEFAULT_MODELS",
    "normalize_model_selection",
    "ModelLoader",
    "TextGenerator",
    "OpenAIGenerator",
    "GeminiGenerator",
]
