"""Conversation Data Models."""

from typing import Any

from pydantic import BaseModel, Field


MAX_CONTENT_LENGTH = 8000


class ConversationMessage(BaseModel):
    """One prior turn sent along with a generation request."""

    role: str = Field(..., pattern="^(user|assistant)$")
    content: str = Field(..., min_length=1)

    def as_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


def normalize_conversation(history: Any, max_length: int = MAX_CONTENT_LENGTH) -> list[ConversationMessage]:
    """
    Clean editor-supplied history.

    Anything but ``assistant`` counts as ``user``; text comes from ``content``
    or ``text``, is trimmed and clipped; empty turns and non-dict entries
    are dropped.
    """
    if not isinstance(history, list):
        return []

    messages: list[ConversationMessage] = []
    for entry in history:
        if not isinstance(entry, dict):
            continue
        role = "assistant" if entry.get("role") == "assistant" else "user"
        raw = entry.get("content")
        if raw is None:
            raw = entry.get("text")
        content = str(raw if raw is not None else "").strip()
        if not content:
            continue
        messages.append(ConversationMessage(role=role, content=content[:max_length]))
    return messages
