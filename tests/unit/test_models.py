"""Tests for model selection and loading."""

import pytest

from core.errors import GenerationServiceError
from models import (
    DEFAULT_MODELS,
    GeminiGenerator,
    ModelLoader,
    ModelProvider,
    ModelSelection,
    OpenAIGenerator,
    normalize_model_selection,
)


# ============================================================================
# Selection Parsing
# ============================================================================

@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "", {}, 42, ":"])
def test_unusable_hints_fall_back_to_openai_default(value):
    selection = normalize_model_selection(value)
    assert selection.provider == ModelProvider.OPENAI
    assert selection.model == DEFAULT_MODELS[ModelProvider.OPENAI]


@pytest.mark.unit
def test_prefixed_string():
    selection = normalize_model_selection("gemini:gemini-2.5-pro")
    assert selection == ModelSelection(provider=ModelProvider.GEMINI, model="gemini-2.5-pro")


@pytest.mark.unit
def test_prefix_without_name_uses_provider_default():
    selection = normalize_model_selection("gemini:")
    assert selection.model == DEFAULT_MODELS[ModelProvider.GEMINI]


@pytest.mark.unit
def test_bare_name_is_openai():
    selection = normalize_model_selection("gpt-4o")
    assert selection.provider == ModelProvider.OPENAI
    assert selection.model == "gpt-4o"


@pytest.mark.unit
def test_dict_hint():
    selection = normalize_model_selection({"provider": "gemini", "name": " gemini-2.0-flash "})
    assert selection.provider == ModelProvider.GEMINI
    assert selection.model == "gemini-2.0-flash"


@pytest.mark.unit
def test_custom_defaults():
    defaults = {ModelProvider.OPENAI: "gpt-custom", ModelProvider.GEMINI: "gemini-custom"}
    assert normalize_model_selection(None, defaults).model == "gpt-custom"
    assert normalize_model_selection({"provider": "gemini"}, defaults).model == "gemini-custom"


@pytest.mark.unit
def test_long_names_are_clipped():
    selection = normalize_model_selection("x" * 500)
    assert len(selection.model) == 200


@pytest.mark.unit
def test_gemini_model_path():
    assert ModelSelection(provider=ModelProvider.GEMINI, model="gemini-2.5-flash").gemini_model_path == (
        "models/gemini-2.5-flash"
    )
    assert ModelSelection(provider=ModelProvider.GEMINI, model="models/x").gemini_model_path == "models/x"


# ============================================================================
# Loader
# ============================================================================

@pytest.mark.unit
def test_loader_builds_openai_generator():
    loader = ModelLoader(openai_api_key="sk-test", gemini_api_key="", temperature=0.3)
    generator = loader.load(ModelSelection(provider=ModelProvider.OPENAI, model="gpt-4o"))
    assert isinstance(generator, OpenAIGenerator)
    assert generator.model == "gpt-4o"
    assert generator.temperature == 0.3


@pytest.mark.unit
def test_loader_builds_gemini_generator():
    loader = ModelLoader(openai_api_key="", gemini_api_key="g-test")
    generator = loader.load(ModelSelection(provider=ModelProvider.GEMINI, model="gemini-2.5-flash"))
    assert isinstance(generator, GeminiGenerator)
    assert generator.model_path == "models/gemini-2.5-flash"


@pytest.mark.unit
@pytest.mark.parametrize("provider,env_name", [(ModelProvider.OPENAI, "OPENAI_API_KEY"), (ModelProvider.GEMINI, "GEMINI_API_KEY")])
def test_loader_requires_key(provider, env_name):
    loader = ModelLoader(openai_api_key="", gemini_api_key="")
    with pytest.raises(GenerationServiceError, match=env_name) as exc:
        loader.load(ModelSelection(provider=provider, model="m"))
    assert exc.value.status_code == 502


@pytest.mark.unit
def test_gemini_contents_map_roles_and_skip_empty_turns():
    contents = GeminiGenerator.build_contents(
        [
            {"role": "user", "content": "make a card"},
            {"role": "assistant", "content": "{}"},
            {"role": "user", "content": "   "},
        ],
        "now add a button",
    )
    assert [c["role"] for c in contents] == ["user", "model", "user"]
    assert contents[-1]["parts"] == [{"text": "now add a button"}]
