"""Normalize-then-enforce sequence for a freshly generated bundle."""

from core import get_logger

from .enforcer import (
    ensure_handler_stubs,
    ensure_light_class,
    ensure_light_template,
    ensure_merge_classes,
    extract_handler_names,
)
from .models import ComponentBundle
from .normalizer import normalize
from .validator import require_template, validate_bundle


logger = get_logger(__name__)


class ComponentPipeline:
    """
    Turns raw model output into a bundle that is safe to persist.

    Order matters: markup normalization completes before the class is touched,
    and the validation gate runs before handler stubs so that a response
    without the component class is reported as such.
    """

    def __init__(self, light_dom: bool = True) -> None:
        self.light_dom = light_dom

    def process(self, html: str | None, js: str | None, css: str | None) -> ComponentBundle:
        """
        Run the full pipeline.

        Raises:
            MalformedMarkupError: Markup could not be normalized or has no template
            MissingClassDeclarationError: Behavior lacks the component class
        """
        markup, notes = normalize(html)
        code = js or ""

        if self.light_dom:
            markup = ensure_light_template(markup)
            code = ensure_light_class(code)

        if notes.merge_required:
            code = ensure_merge_classes(code)

        validate_bundle(ComponentBundle(html=markup, js=code, css=css or ""))

        handler_names = extract_handler_names(markup)
        code = ensure_handler_stubs(code, handler_names)
        if notes.merge_required:
            code = ensure_merge_classes(code)

        logger.debug(
            "pipeline_complete",
            handlers=len(handler_names),
            merge_classes=notes.merge_required,
            light_dom=self.light_dom,
        )
        return ComponentBundle(html=markup, js=code, css=css or "")

    def prepare_edit(self, bundle: ComponentBundle) -> ComponentBundle:
        """
        Apply only the render-mode variant to a hand-edited bundle.

        Direct edits are stored as written apart from light DOM injection.
        """
        require_template(bundle.html)
        if not self.light_dom:
            return bundle
        return ComponentBundle(
            html=ensure_light_template(bundle.html),
            js=ensure_light_class(bundle.js),
            css=bundle.css,
        )
