"""Tests for request handlers."""

import io
import zipfile

import pytest

from core.errors import (
    BundleNotFoundError,
    DeployAuthError,
    DeployJobFailure,
    DeployTimeoutError,
    InvalidBundleNameError,
    MissingTemplateError,
    ValidationError,
)
from agents import ComponentGenerator
from component import STUB_BUNDLE
from deploy import DeployResult
from handlers import DeployHandler, GenerateHandler, PreviewHandler
from handlers.generate import PREVIEW_MODULE


class StaticLoader:
    """Model loader whose generator always answers the same text."""

    def __init__(self, answer):
        self.answer = answer

    def load(self, selection):
        return self

    async def generate(self, system_prompt, history, user_text):
        return self.answer


class FakeMetadataClient:
    """Stands in for MetadataClient; records what the handler did."""

    def __init__(self, login_url, statuses=None, login_error=None):
        self.login_url = login_url
        self.statuses = list(statuses or [])
        self.login_error = login_error
        self.logged_in = None
        self.archives = []
        self.closed = False

    def login(self, username, password):
        if self.login_error:
            raise self.login_error
        self.logged_in = (username, password)

    def deploy(self, archive):
        self.archives.append(archive)
        return "0Af000000000001"

    def check_deploy_status(self, job_id):
        if len(self.statuses) > 1:
            return self.statuses.pop(0)
        return self.statuses[0]

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.closed = True


def done(success=True, **kwargs):
    return DeployResult(
        id="0Af000000000001",
        done=True,
        success=success,
        status="Succeeded" if success else "Failed",
        completed_date="2024-01-01T00:00:00.000Z",
        **kwargs,
    )


def deploy_payload(**overrides):
    payload = {"username": "u@example.com", "password": "pw", "bundleName": "myWidget"}
    payload.update(overrides)
    return payload


# ============================================================================
# GenerateHandler Tests
# ============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
async def test_generate_handler_saves_and_returns_code(store, pipeline, model_answer):
    handler = GenerateHandler(ComponentGenerator(StaticLoader(model_answer), pipeline), store)

    response = await handler.generate({"prompt": "a counter"})

    assert response["ok"] is True
    assert response["module"] == PREVIEW_MODULE == "gen/preview"
    stored = await store.load()
    assert response["code"] == stored.to_code()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_generate_handler_rejects_missing_prompt(store, pipeline, model_answer):
    handler = GenerateHandler(ComponentGenerator(StaticLoader(model_answer), pipeline), store)
    with pytest.raises(ValidationError, match="Missing prompt"):
        await handler.generate({"prompt": ""})
    assert await store.load() is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_generate_handler_keeps_previous_bundle_on_bad_answer(store, pipeline, sample_bundle):
    await store.save(sample_bundle)
    loader = StaticLoader('{"html": "<div>no template</div>", "js": "", "css": ""}')
    handler = GenerateHandler(ComponentGenerator(loader, pipeline), store)

    with pytest.raises(MissingTemplateError):
        await handler.generate({"prompt": "break it", "base": sample_bundle.to_code()})
    assert await store.load() == sample_bundle


# ============================================================================
# PreviewHandler Tests
# ============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_read_without_bundle(store, pipeline):
    with pytest.raises(BundleNotFoundError) as exc:
        await PreviewHandler(store, pipeline).read()
    assert exc.value.status_code == 404


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_update_then_read(store, pipeline, sample_bundle):
    handler = PreviewHandler(store, pipeline)

    updated = await handler.update(sample_bundle.to_code())
    read = await handler.read()

    assert updated == read
    assert 'lwc:render-mode="light"' in read["code"]["html"]
    assert "static renderMode = 'light';" in read["code"]["js"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_update_needs_template(store, pipeline):
    with pytest.raises(MissingTemplateError):
        await PreviewHandler(store, pipeline).update({"html": "<div></div>", "js": "", "css": ""})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_reset(store, pipeline, sample_bundle):
    await store.save(sample_bundle)
    assert await PreviewHandler(store, pipeline).reset() == {"ok": True}
    assert await store.load() == STUB_BUNDLE


# ============================================================================
# DeployHandler Tests
# ============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
async def test_deploy_success(store, settings, sample_bundle):
    await store.save(sample_bundle)
    clients = []

    def factory(login_url):
        clients.append(FakeMetadataClient(login_url, [DeployResult(id="0Af000000000001"), done(
            component_successes={"fullName": "myWidget", "fileName": "lwc/myWidget", "created": "true"}
        )]))
        return clients[-1]

    response = await DeployHandler(store, settings, factory).deploy(
        deploy_payload(targets=["lightning__HomePage", "junk"])
    )

    assert response == {
        "ok": True,
        "component": "myWidget",
        "targets": ["lightning__HomePage"],
        "status": "Succeeded",
        "id": "0Af000000000001",
        "completedDate": "2024-01-01T00:00:00.000Z",
        "successes": [{"fullName": "myWidget", "fileName": "lwc/myWidget", "created": True, "changed": False}],
    }
    client = clients[0]
    assert client.login_url == "https://login.example.com"
    assert client.logged_in == ("u@example.com", "pw")
    assert client.closed is True
    with zipfile.ZipFile(io.BytesIO(client.archives[0])) as archive:
        assert archive.read("lwc/myWidget/myWidget.html").decode() == sample_bundle.html


@pytest.mark.unit
@pytest.mark.asyncio
async def test_deploy_uses_request_login_url(store, settings, sample_bundle):
    await store.save(sample_bundle)
    clients = []

    def factory(login_url):
        clients.append(FakeMetadataClient(login_url, [done()]))
        return clients[-1]

    await DeployHandler(store, settings, factory).deploy(deploy_payload(loginUrl=" https://test.salesforce.com "))
    assert clients[0].login_url == "https://test.salesforce.com"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_deploy_rejects_bad_name_before_anything_else(store, settings, sample_bundle):
    await store.save(sample_bundle)
    calls = []

    with pytest.raises(InvalidBundleNameError):
        await DeployHandler(store, settings, calls.append).deploy(deploy_payload(bundleName="123abc"))
    assert calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_deploy_without_generated_bundle(store, settings):
    with pytest.raises(ValidationError, match="Generate a component before deploying"):
        await DeployHandler(store, settings, lambda url: FakeMetadataClient(url)).deploy(deploy_payload())


@pytest.mark.unit
@pytest.mark.asyncio
async def test_deploy_login_failure(store, settings, sample_bundle):
    await store.save(sample_bundle)
    client = FakeMetadataClient("x", login_error=DeployAuthError("Salesforce login failed: INVALID_LOGIN"))

    with pytest.raises(DeployAuthError):
        await DeployHandler(store, settings, lambda url: client).deploy(deploy_payload())
    assert client.archives == []
    assert client.closed is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_deploy_job_failure(store, settings, sample_bundle):
    await store.save(sample_bundle)
    failed = done(success=False, error_message="Component failures")

    with pytest.raises(DeployJobFailure, match="Component failures"):
        await DeployHandler(store, settings, lambda url: FakeMetadataClient(url, [failed])).deploy(deploy_payload())


@pytest.mark.unit
@pytest.mark.asyncio
async def test_deploy_timeout(store, settings, sample_bundle):
    await store.save(sample_bundle)
    fast = settings.model_copy(update={"deploy_timeout": 0.05, "deploy_poll_interval": 0.01})
    pending = DeployResult(id="0Af000000000001", status="InProgress")

    with pytest.raises(DeployTimeoutError):
        await DeployHandler(store, fast, lambda url: FakeMetadataClient(url, [pending])).deploy(deploy_payload())
