"""Tests for the component generator."""

import pytest

from core.errors import GenerationServiceError, MissingClassDeclarationError
from agents import ComponentGenerator, PromptBuilder, normalize_conversation, parse_bundle_json
from component import ComponentBundle
from models import ModelProvider


class FakeTextGenerator:
    def __init__(self, answer):
        self.answer = answer
        self.calls = []

    async def generate(self, system_prompt, history, user_text):
        self.calls.append((system_prompt, history, user_text))
        if isinstance(self.answer, Exception):
            raise self.answer
        return self.answer


class FakeLoader:
    def __init__(self, answer):
        self.generator = FakeTextGenerator(answer)
        self.selections = []

    def load(self, selection):
        self.selections.append(selection)
        return self.generator


# ============================================================================
# Conversation
# ============================================================================

@pytest.mark.unit
def test_conversation_cleanup():
    history = normalize_conversation(
        [
            {"role": "assistant", "content": "  done  "},
            {"role": "system", "text": "treated as user"},
            {"role": "user", "content": ""},
            "junk",
            {"role": "user", "content": "x" * 50},
        ],
        max_length=10,
    )
    assert [m.as_dict() for m in history] == [
        {"role": "assistant", "content": "done"},
        {"role": "user", "content": "treated as user"},
        {"role": "user", "content": "x" * 10},
    ]


@pytest.mark.unit
def test_conversation_must_be_a_list():
    assert normalize_conversation({"role": "user"}) == []
    assert normalize_conversation(None) == []


# ============================================================================
# Prompts and Parsing
# ============================================================================

@pytest.mark.unit
def test_create_prompt_when_base_is_empty():
    text = PromptBuilder.build_user_text("a counter", ComponentBundle(html="", js="", css=""))
    assert text.startswith("Create a new LWC based on this instruction:\na counter")


@pytest.mark.unit
def test_edit_prompt_carries_files(sample_bundle):
    text = PromptBuilder.build_user_text("make it blue", sample_bundle)
    assert "You are editing an existing LWC." in text
    assert f"---HTML---\n{sample_bundle.html}\n" in text
    assert f"---CSS---\n{sample_bundle.css}\n" in text


@pytest.mark.unit
def test_parse_bundle_json_tolerates_fences_and_missing_keys():
    files = parse_bundle_json('```json\n{"html": "<template></template>", "css": 3}\n```')
    assert files == {"html": "<template></template>", "js": "", "css": ""}


@pytest.mark.unit
def test_parse_bundle_json_rejects_non_json():
    with pytest.raises(GenerationServiceError, match="invalid JSON"):
        parse_bundle_json("I cannot help with that.")


# ============================================================================
# Generator
# ============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
async def test_generate_normalizes_model_answer(pipeline, model_answer):
    loader = FakeLoader(model_answer)
    generator = ComponentGenerator(loader, pipeline)

    bundle = await generator.generate("a counter", conversation=[{"role": "user", "content": "hi"}])

    assert "onclick={increment}" in bundle.html
    assert "increment(event) { /* auto-added */ }" in bundle.js
    assert bundle.css == "span { margin-left: 4px; }"
    system_prompt, history, user_text = loader.generator.calls[0]
    assert "Preview" in system_prompt
    assert history == [{"role": "user", "content": "hi"}]
    assert "a counter" in user_text


@pytest.mark.unit
@pytest.mark.asyncio
async def test_generate_resolves_model_with_configured_defaults(pipeline, model_answer):
    loader = FakeLoader(model_answer)
    defaults = {ModelProvider.OPENAI: "gpt-x", ModelProvider.GEMINI: "gemini-x"}
    generator = ComponentGenerator(loader, pipeline, default_models=defaults)

    await generator.generate("a counter", model="gemini:")

    assert loader.selections[0].provider == ModelProvider.GEMINI
    assert loader.selections[0].model == "gemini-x"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_generate_edit_uses_base(pipeline, model_answer, sample_bundle):
    loader = FakeLoader(model_answer)
    await ComponentGenerator(loader, pipeline).generate("tweak", base=sample_bundle)
    assert "---JS---" in loader.generator.calls[0][2]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_generate_propagates_service_errors(pipeline):
    loader = FakeLoader(GenerationServiceError("OpenAI request failed: boom"))
    with pytest.raises(GenerationServiceError, match="boom"):
        await ComponentGenerator(loader, pipeline).generate("a counter")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_generate_rejects_answer_without_class(pipeline):
    loader = FakeLoader('{"html": "<template></template>", "js": "console.log(1)", "css": ""}')
    with pytest.raises(MissingClassDeclarationError):
        await ComponentGenerator(loader, pipeline).generate("a counter")
