"""Request validation with strong typing."""

import re
from dataclasses import dataclass
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from returns.result import Failure, Result, Success

from .errors import ValidationError


MAX_PROMPT_LENGTH = 10_000

DEFAULT_TARGETS: tuple[str, ...] = (
    "lightning__AppPage",
    "lightning__HomePage",
    "lightning__RecordPage",
)
ALLOWED_TARGETS = frozenset(DEFAULT_TARGETS)

BUNDLE_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
LOWERCASE_BUNDLE_NAME_PATTERN = re.compile(r"^[a-z][A-Za-z0-9_]*$")

R = TypeVar("R", bound=BaseModel)


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None
    value: Any | None = None


class RequestValidator(BaseModel):
    """Base validator: immutable, unknown keys ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class BundleInput(RequestValidator):
    """Three source files as sent by the editor."""

    html: str = ""
    js: str = ""
    css: str = ""


class GenerateRequest(RequestValidator):
    """Validated generation request."""

    prompt: str = Field(default="", max_length=MAX_PROMPT_LENGTH, validate_default=True)
    base: BundleInput | None = None
    conversation: list[Any] = Field(default_factory=list)
    model: str | dict[str, Any] | None = None

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Missing prompt")
        return v


class PreviewUpdateRequest(BundleInput):
    """Direct edit of the stored bundle."""

    html: str = Field(default="", validate_default=True)

    @field_validator("html")
    @classmethod
    def validate_html(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("HTML content is required to update the preview.")
        return v


class DeployRequest(RequestValidator):
    """Validated deploy request."""

    username: str = ""
    password: str = ""
    login_url: str | None = Field(default=None, alias="loginUrl")
    bundle_name: str = Field(default="", alias="bundleName")
    targets: list[Any] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_credentials(self) -> "DeployRequest":
        if not self.username or not self.password:
            raise ValueError("Username and password are required.")
        return self


def parse_request(model: type[R], payload: Any) -> R:
    """
    Validate a raw payload into a request model.

    Raises:
        ValidationError: With the first validation message
    """
    try:
        return model.model_validate(payload if payload is not None else {})
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        message = str(first.get("msg", "Invalid request"))
        # pydantic prefixes messages from ValueError
        message = message.removeprefix("Value error, ")
        raise ValidationError(message) from e


def validate_bundle_name(name: Any, lowercase: bool = True) -> Result[str, ValidationResult]:
    """
    Check a bundle name against the naming constraint.

    Args:
        name: Candidate name (whitespace is trimmed)
        lowercase: Require a lowercase first letter, as LWC folders do

    Returns:
        Success with the trimmed name, or Failure describing the constraint
    """
    trimmed = name.strip() if isinstance(name, str) else ""
    pattern = LOWERCASE_BUNDLE_NAME_PATTERN if lowercase else BUNDLE_NAME_PATTERN
    if trimmed and pattern.match(trimmed):
        return Success(trimmed)

    start = "a lowercase letter" if lowercase else "a letter"
    return Failure(
        ValidationResult(
            "Enter a valid Lightning web component name "
            f"(letters, numbers, underscores; must start with {start}).",
            field="bundleName",
            value=name,
        )
    )


def normalize_targets(targets: Any) -> list[str]:
    """
    Filter target surfaces against the allow-list.

    Caller order is kept and duplicates dropped; unknown values vanish and an
    empty result falls back to every default surface.
    """
    values = targets if isinstance(targets, (list, tuple)) else []
    filtered: list[str] = []
    for value in values:
        candidate = value.strip() if isinstance(value, str) else ""
        if candidate in ALLOWED_TARGETS and candidate not in filtered:
            filtered.append(candidate)
    return filtered or list(DEFAULT_TARGETS)
