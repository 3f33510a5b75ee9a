"""Tolerant JSON extraction for model output."""

import json
import re
from typing import Any

import msgspec
from json_repair import repair_json

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def extract_json_boundaries(text: str) -> str | None:
    """
    Cut the outermost JSON object out of text.

    A fenced block wins over the surrounding prose; models sometimes fence
    JSON mode output anyway.

    Returns:
        The candidate object text, or None if no braces were found
    """
    fenced = _FENCE_RE.search(text)
    candidate = fenced.group(1) if fenced else text

    start = candidate.find("{")
    end = candidate.rfind("}")
    if start == -1 or end < start:
        return None
    return candidate[start : end + 1]


def extract_json(text: str, repair: bool = True) -> dict[str, Any]:
    """
    Extract and parse a JSON object from text.

    Tries msgspec, then the standard library, then json_repair.

    Args:
        text: Text containing JSON
        repair: Attempt to repair invalid JSON with json_repair

    Returns:
        Parsed JSON dictionary

    Raises:
        JSONParseError: If parsing fails or the top level is not an object
    """
    json_str = extract_json_boundaries(text.strip())
    if json_str is None:
        raise JSONParseError("No JSON object found in text")

    try:
        result = msgspec.json.decode(json_str.encode("utf-8"))
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e)
    else:
        return _expect_object(result)

    try:
        return _expect_object(json.loads(json_str))
    except json.JSONDecodeError:
        pass

    try:
        repaired = repair_json(json_str)
        result = json.loads(repaired)
    except Exception as repair_error:
        raise JSONParseError(f"JSON repair failed: {repair_error}", repair_error)
    return _expect_object(result)


def _expect_object(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise JSONParseError(f"Expected dict, got {type(value).__name__}")
    return value
