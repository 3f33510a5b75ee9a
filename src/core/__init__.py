"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .errors import (
    ForgeError,
    ValidationError,
    InvalidBundleNameError,
    MalformedMarkupError,
    InlineHandlerError,
    DuplicateAttributeError,
    MissingTemplateError,
    MissingClassDeclarationError,
    BundleNotFoundError,
    ArtifactStoreError,
    GenerationServiceError,
    DeploySubmissionError,
    DeployAuthError,
    DeployTimeoutError,
    DeployJobFailure,
)
from .logging_config import configure_logging, get_logger, LogContext
from .json import extract_json, JSONParseError
from .validate import (
    ValidationResult,
    BundleInput,
    GenerateRequest,
    PreviewUpdateRequest,
    DeployRequest,
    parse_request,
    validate_bundle_name,
    normalize_targets,
    DEFAULT_TARGETS,
    ALLOWED_TARGETS,
)


def create_container(settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "ForgeError",
    "ValidationError",
    "InvalidBundleNameError",
    "MalformedMarkupError",
    "InlineHandlerError",
    "DuplicateAttributeError",
    "MissingTemplateError",
    "MissingClassDeclarationError",
    "BundleNotFoundError",
    "ArtifactStoreError",
    "GenerationServiceError",
    "DeploySubmissionError",
    "DeployAuthError",
    "DeployTimeoutError",
    "DeployJobFailure",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "extract_json",
    "JSONParseError",
    # Validation
    "ValidationResult",
    "BundleInput",
    "GenerateRequest",
    "PreviewUpdateRequest",
    "DeployRequest",
    "parse_request",
    "validate_bundle_name",
    "normalize_targets",
    "DEFAULT_TARGETS",
    "ALLOWED_TARGETS",
    # DI
    "create_container",
]
