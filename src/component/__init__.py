"""Component normalization: markup rewriting and class consistency."""

from .models import ComponentBundle, NormalizationNotes, STUB_BUNDLE
from .normalizer import normalize, MERGE_UTILITY
from .enforcer import (
    ensure_handler_stubs,
    ensure_merge_classes,
    ensure_light_template,
    ensure_light_class,
    extract_handler_names,
)
from .validator import validate_bundle
from .pipeline import ComponentPipeline

__all__ = [
    # Models
    "ComponentBundle",
    "NormalizationNotes",
    "STUB_BUNDLE",
    # Normalizer
    "normalize",
    "MERGE_UTILITY",
    # Enforcer
    "ensure_handler_stubs",
    "ensure_merge_classes",
    "ensure_light_template",
    "ensure_light_class",
    "extract_handler_names",
    # Gate
    "validate_bundle",
    "ComponentPipeline",
]
