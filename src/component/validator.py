"""Structural gate applied before a bundle is persisted."""

import re

from core.errors import MissingClassDeclarationError, MissingTemplateError

from .models import BASE_CLASS, CLASS_NAME, ComponentBundle


TEMPLATE_MARKER = "<template"
CLASS_DECLARATION_RE = re.compile(
    rf"export\s+default\s+class\s+{CLASS_NAME}\s+extends\s+{BASE_CLASS}"
)


def require_template(html: str) -> None:
    if TEMPLATE_MARKER not in html:
        raise MissingTemplateError()


def require_class_declaration(js: str) -> None:
    if not CLASS_DECLARATION_RE.search(js):
        raise MissingClassDeclarationError()


def validate_bundle(bundle: ComponentBundle) -> None:
    """
    Reject a bundle that is not a recognizable LWC.

    Raises:
        MissingTemplateError: No root <template> region
        MissingClassDeclarationError: No exported Preview class
    """
    require_template(bundle.html)
    require_class_declaration(bundle.js)
