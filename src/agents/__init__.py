"""Generation agents."""

from .generator import ComponentGenerator, parse_bundle_json
from .models import ConversationMessage, normalize_conversation
from .prompts import PromptBuilder, SYSTEM_PROMPT

__all__ = [
    "ComponentGenerator",
    "parse_bundle_json",
    "ConversationMessage",
    "normalize_conversation",
    "PromptBuilder",
    "SYSTEM_PROMPT",
]
