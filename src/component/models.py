"""Component Data Models."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


CLASS_NAME = "Preview"
BASE_CLASS = "LightningElement"


class ComponentBundle(BaseModel):
    """The three source artifacts of one Lightning web component."""

    model_config = ConfigDict(frozen=True)

    html: str = Field(..., description="Template markup")
    js: str = Field(..., description="Component class source")
    css: str = Field(default="", description="Component styles")

    def to_code(self) -> dict[str, str]:
        return {"html": self.html, "js": self.js, "css": self.css}


@dataclass
class NormalizationNotes:
    """Side facts the normalizer reports to the enforcer."""

    merge_required: bool = False


STUB_BUNDLE = ComponentBundle(
    html="""<template>
  <div style="padding:12px; font:500 16px/1.4 system-ui, sans-serif;">
    Waiting for AI component...
  </div>
</template>""",
    js=f"""import {{ {BASE_CLASS} }} from 'lwc';
export default class {CLASS_NAME} extends {BASE_CLASS} {{}}""",
    css=":host{display:block;}",
)
