"""Pytest configuration and fixtures."""

import os

import pytest

from core import Settings
from component import ComponentBundle, ComponentPipeline
from storage import ArtifactStore


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["FORGE_LOG_LEVEL"] = "DEBUG"
    os.environ["OPENAI_API_KEY"] = "test-openai-key"
    os.environ["GEMINI_API_KEY"] = "test-gemini-key"


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings(tmp_path):
    """Test settings writing the preview into a temp directory."""
    return Settings(
        preview_dir=tmp_path / "preview",
        sf_login_url="https://login.example.com",
        sf_api_version="60.0",
        deploy_timeout=1.0,
        deploy_poll_interval=0.01,
    )


@pytest.fixture
def pipeline():
    """Pipeline with light DOM injection."""
    return ComponentPipeline(light_dom=True)


@pytest.fixture
def store(settings):
    """Artifact store in a temp directory."""
    return ArtifactStore(settings.preview_dir)


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def sample_bundle():
    """A small valid component."""
    return ComponentBundle(
        html="<template>\n  <button onclick={handleSave}>Save</button>\n</template>",
        js=(
            "import { LightningElement } from 'lwc';\n"
            "export default class Preview extends LightningElement {\n"
            "  handleSave() {}\n"
            "}"
        ),
        css=".btn { color: red; }",
    )


@pytest.fixture
def model_answer():
    """Raw JSON answer a model would give for a simple counter."""
    return (
        '{"html": "<template><button onclick=\\"increment()\\">+</button>'
        '<span>{count}</span></template>", '
        '"js": "import { LightningElement } from \'lwc\';\\n'
        'export default class Preview extends LightningElement {\\n  count = 0;\\n}", '
        '"css": "span { margin-left: 4px; }"}'
    )


# ============================================================================
# Clock Fixtures
# ============================================================================

class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()
