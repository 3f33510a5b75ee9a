"""
Behavior Consistency Enforcer
Keeps the component class in step with what the template references.
"""

import re
from collections.abc import Iterable

from core import get_logger
from core.errors import MissingClassDeclarationError

from .models import BASE_CLASS, CLASS_NAME
from .normalizer import MERGE_UTILITY


logger = get_logger(__name__)

CLASS_HEADER_RE = re.compile(
    rf"(export\s+default\s+class\s+{CLASS_NAME}\s+extends\s+{BASE_CLASS}\s*{{)"
)
HANDLER_BINDING_RE = re.compile(r"(?<![\w:-])on[a-z]+\s*=\s*\{\s*([A-Za-z_]\w*)\s*\}")

_MERGE_UTILITY_RE = re.compile(rf"\b{MERGE_UTILITY}\s*\(")
_LIGHT_TEMPLATE_RE = re.compile(r"""\blwc:render-mode\s*=\s*["']light["']""")
_TEMPLATE_TAG_RE = re.compile(r"<template(\s[^>]*)?>")
_LIGHT_CLASS_RE = re.compile(r"""static\s+renderMode\s*=\s*['"]light['"]""")

MERGE_CLASSES_HELPER = f"""
  {MERGE_UTILITY}(...parts) {{
    return parts
      .flat(Infinity)
      .map((value) => (typeof value === 'string' ? value.trim() : ''))
      .filter(Boolean)
      .join(' ')
      .replace(/\\s+/g, ' ');
  }}
"""


def _insert_after_header(js: str, text: str) -> str:
    return CLASS_HEADER_RE.sub(lambda m: m.group(1) + text, js, count=1)


def extract_handler_names(html: str) -> list[str]:
    """Identifiers bound by on<event>={name}, in document order, duplicates kept."""
    return HANDLER_BINDING_RE.findall(html)


def ensure_handler_stubs(js: str | None, handler_names: Iterable[str]) -> str:
    """
    Add an empty method for every referenced handler the class lacks.

    Raises:
        MissingClassDeclarationError: The class header is missing
    """
    code = js or ""
    if not CLASS_HEADER_RE.search(code):
        raise MissingClassDeclarationError()

    missing: list[str] = []
    for name in handler_names:
        if name in missing:
            continue
        if not re.search(rf"\b{re.escape(name)}\s*\(", code):
            missing.append(name)

    if not missing:
        return code

    logger.info("handler_stubs_added", handlers=missing)
    stubs = "\n" + "".join(f"{name}(event) {{ /* auto-added */ }}\n" for name in missing) + "\n"
    return _insert_after_header(code, stubs)


def ensure_merge_classes(js: str) -> str:
    """Inject the mergeClasses helper unless it is already there."""
    if _MERGE_UTILITY_RE.search(js):
        return js
    if not CLASS_HEADER_RE.search(js):
        return js
    return _insert_after_header(js, MERGE_CLASSES_HELPER)


def ensure_light_template(html: str | None) -> str:
    """Put lwc:render-mode="light" on the root <template>."""
    markup = html or ""
    if "<template" not in markup or _LIGHT_TEMPLATE_RE.search(markup):
        return markup
    return _TEMPLATE_TAG_RE.sub(
        lambda m: f'<template{m.group(1) or ""} lwc:render-mode="light">', markup, count=1
    )


def ensure_light_class(js: str | None) -> str:
    """Declare static renderMode = 'light' in the component class."""
    code = js or ""
    if _LIGHT_CLASS_RE.search(code) or not CLASS_HEADER_RE.search(code):
        return code
    return _insert_after_header(code, "\n  static renderMode = 'light';\n")
