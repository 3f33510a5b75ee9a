"""
Prompt Builder
System prompt and create/edit request text for component generation.
"""

from component.models import ComponentBundle


SYSTEM_PROMPT = """
You generate **valid LWC component source** as JSON.

Design focus:
- Deliver polished, production-ready UI with thoughtful layouts, balanced spacing, and accessible markup.

Rules (apply for create or edit):
- Return a JSON object: { "html": string, "js": string, "css": string } ONLY (no markdown).
- Prefer **Salesforce Lightning Design System (SLDS)** utility and component classes (e.g., slds-grid, slds-form, slds-input, slds-button, slds-card) over custom CSS.
- Avoid lightning-base-components (plain HTML + SLDS classes only).
- The HTML must be a full <template lwc:render-mode="light">...</template>.
- The JS must be:
    import { LightningElement, api, track } from 'lwc';
    export default class Preview extends LightningElement {
      static renderMode = 'light';
      /* methods referenced in template must exist here */
    }
- Event handlers must use LWC syntax (e.g., onclick={handleClick}); define those class methods.
- **CSS REQUIREMENT**
- **Never return empty CSS.** If no extra styling is needed, return at least:
  :host { display: block; }
- Keep custom CSS minimal and only when SLDS can't express the styling.
- Component class and filenames are fixed: Preview / preview.html/js/css.
- No network calls or remote images.

If 'base' files are provided, EDIT them with **minimal necessary changes**.
Return the **full** files (html/js/css), not a diff.
"""

_RETURN_RULE = 'Return ONLY JSON with keys "html","js","css" (no backticks).'


class PromptBuilder:
    """Builds the user turn for create and edit requests."""

    @staticmethod
    def build_create(instruction: str) -> str:
        return f"Create a new LWC based on this instruction:\n{instruction}\n\n{_RETURN_RULE}"

    @staticmethod
    def build_edit(instruction: str, base: ComponentBundle) -> str:
        """
        Edit prompt carrying the current files.

        Args:
            instruction: What to change
            base: Files to edit (any of them may be empty)
        """
        return (
            "You are editing an existing LWC.\n"
            f"Instruction:\n{instruction}\n\n"
            "Current files to edit:\n"
            f"---HTML---\n{base.html}\n"
            f"---JS---\n{base.js}\n"
            f"---CSS---\n{base.css}\n\n"
            f"{_RETURN_RULE}"
        )

    @classmethod
    def build_user_text(cls, instruction: str, base: ComponentBundle | None) -> str:
        """Edit prompt when any base file has content, create prompt otherwise."""
        if base is not None and (base.html or base.js or base.css):
            return cls.build_edit(instruction, base)
        return cls.build_create(instruction)
