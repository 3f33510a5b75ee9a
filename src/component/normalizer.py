"""
Markup Normalizer
Rewrites generated template markup into valid LWC syntax.
"""

import re

from core import get_logger
from core.errors import DuplicateAttributeError, InlineHandlerError

from .models import NormalizationNotes


logger = get_logger(__name__)

MERGE_UTILITY = "mergeClasses"

_SCRIPT_RE = re.compile(r"<script\b[^>]*>[\s\S]*?</script>", re.IGNORECASE)

_HANDLER = r"([A-Za-z_]\w*)"
_ATTR_START = r"(?<![\w:-])"

# Only an immediately adjacent static/dynamic pair is merged.
_STATIC_THEN_DYNAMIC_RE = re.compile(
    _ATTR_START + r'class="([^"]+)"\s+class=\{(.+?)\}(\s|>)'
)
_DYNAMIC_THEN_STATIC_RE = re.compile(
    _ATTR_START + r'class=\{(.+?)\}\s+class="([^"]+)"(\s|>)'
)
_CANONICAL = r"on\1={\2}"

# (pattern, dialect) pairs, applied in order
_EVENT_DIALECTS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r'@\s*([a-z]+)\s*=\s*"' + _HANDLER + r'\s*(?:\(\s*\))?\s*"'), "directive"),
    (re.compile(r'\(\s*([a-z]+)\s*\)\s*=\s*"' + _HANDLER + r'\s*(?:\(\s*\))?\s*"'), "parenthesized"),
    (re.compile(_ATTR_START + r'on([a-z]+)\s*=\s*"\s*' + _HANDLER + r'\s*\(\s*\)\s*"'), "inline_call"),
    (re.compile(_ATTR_START + r'on([a-z]+)\s*=\s*"\s*' + _HANDLER + r'\s*"'), "inline"),
    (re.compile(_ATTR_START + r"on([a-z]+)\s*=\s*\{\s*this\." + _HANDLER + r"\s*\}"), "member"),
)

_QUOTED_HANDLER_RE = re.compile(r"""\son[a-z]+\s*=\s*["']""", re.IGNORECASE)

_START_TAG_RE = re.compile(r"<([a-zA-Z][\w:-]*)([^<]*?)>")
_ATTR_NAME_RE = re.compile(r"(\w[\w:-]*)(?=\s*=)")


def strip_scripts(html: str) -> str:
    """Remove every <script> element with its contents."""
    return _SCRIPT_RE.sub("", html)


def merge_class_attributes(html: str, notes: NormalizationNotes) -> str:
    """
    Collapse an adjacent ``class="..."`` / ``class={...}`` pair into one
    ``class={mergeClasses("...", expr)}`` attribute, in either source order.
    """

    def merged(static_part: str, dynamic_part: str) -> str:
        notes.merge_required = True
        cleaned = " ".join(static_part.split())
        escaped = cleaned.replace('"', '\\"')
        return f'class={{{MERGE_UTILITY}("{escaped}", {dynamic_part.strip()})}}'

    html = _STATIC_THEN_DYNAMIC_RE.sub(lambda m: merged(m.group(1), m.group(2)) + m.group(3), html)
    html = _DYNAMIC_THEN_STATIC_RE.sub(lambda m: merged(m.group(2), m.group(1)) + m.group(3), html)
    return html


def convert_event_bindings(html: str) -> str:
    """Rewrite @evt / (evt) / quoted onevt / {this.h} bindings as onevt={h}."""
    for pattern, dialect in _EVENT_DIALECTS:
        html, count = pattern.subn(_CANONICAL, html)
        if count:
            logger.debug("event_bindings_converted", dialect=dialect, count=count)
    return html


def check_inline_handlers(html: str) -> None:
    """Raise if any quoted on<event> attribute is left."""
    if _QUOTED_HANDLER_RE.search(html):
        raise InlineHandlerError()


def check_duplicate_attributes(html: str) -> None:
    """Raise on the first attribute name repeated within a single start tag."""
    for tag in _START_TAG_RE.finditer(html):
        attr_chunk = tag.group(2)
        if not attr_chunk:
            continue
        seen: set[str] = set()
        for attr in _ATTR_NAME_RE.finditer(attr_chunk):
            name = attr.group(1)
            if name in seen:
                raise DuplicateAttributeError(name)
            seen.add(name)


def normalize(raw_markup: str | None) -> tuple[str, NormalizationNotes]:
    """
    Normalize generated markup.

    Steps run in a fixed order; each relies on the previous ones:
    strip scripts, merge class pairs, convert event bindings, reject leftover
    inline handlers, reject duplicate attributes, trim.

    Args:
        raw_markup: Markup as produced by the model (None is treated as empty)

    Returns:
        (normalized markup, notes)

    Raises:
        InlineHandlerError: A quoted handler could not be converted
        DuplicateAttributeError: A tag repeats an attribute name
    """
    notes = NormalizationNotes()
    html = raw_markup or ""

    html = strip_scripts(html)
    html = merge_class_attributes(html, notes)
    html = convert_event_bindings(html)
    check_inline_handlers(html)
    check_duplicate_attributes(html)

    return html.strip(), notes
