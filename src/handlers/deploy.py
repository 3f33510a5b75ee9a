"""Deploy Handler."""

import asyncio
import time
from collections.abc import Callable
from typing import Any

from returns.result import Failure

from core import get_logger, DeployRequest, Settings, parse_request, validate_bundle_name, normalize_targets
from core.errors import ForgeError, InvalidBundleNameError, ValidationError
from clients import MetadataClient, MetadataDeployService
from deploy import DeploymentOrchestrator, DeployOutcome, pack
from storage import ArtifactStore
from monitoring import metrics_collector, trace_operation_async


logger = get_logger(__name__)

ClientFactory = Callable[[str], MetadataClient]


class DeployHandler:
    """Packages the stored bundle and deploys it to a Salesforce org."""

    def __init__(
        self,
        store: ArtifactStore,
        settings: Settings,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.client_factory = client_factory or self._default_client

    def _default_client(self, login_url: str) -> MetadataClient:
        return MetadataClient(login_url, self.settings.sf_api_version, timeout=self.settings.http_timeout)

    async def deploy(self, payload: Any) -> dict[str, Any]:
        """
        Validate, pack, log in, submit and wait.

        Raises:
            ValidationError: Bad request or nothing generated yet
            DeployAuthError: Login rejected
            DeploySubmissionError: Deploy call failed
            DeployJobFailure: Job finished unsuccessfully
            DeployTimeoutError: Job did not finish in time
        """
        start_time = time.time()
        submitted = False

        try:
            request = parse_request(DeployRequest, payload)

            checked = validate_bundle_name(request.bundle_name, lowercase=self.settings.bundle_name_lowercase)
            if isinstance(checked, Failure):
                raise InvalidBundleNameError(checked.failure().message)
            bundle_name = checked.unwrap()
            targets = normalize_targets(request.targets)

            bundle = await self.store.load()
            if bundle is None:
                raise ValidationError("No generated component available. Generate a component before deploying.")

            archive = pack(
                bundle_name,
                bundle,
                self.settings.sf_api_version,
                targets,
                lowercase_name=self.settings.bundle_name_lowercase,
            )

            login_url = (request.login_url or "").strip() or self.settings.sf_login_url
            logger.info("deploy_request", bundle=bundle_name, targets=targets, login_url=login_url)

            async with trace_operation_async("component_deploy", bundle=bundle_name):
                with self.client_factory(login_url) as client:
                    await asyncio.to_thread(client.login, request.username, request.password)
                    orchestrator = DeploymentOrchestrator(
                        MetadataDeployService(client),
                        timeout=self.settings.deploy_timeout,
                        poll_interval=self.settings.deploy_poll_interval,
                    )
                    submitted = True
                    result, successes = await orchestrator.run(archive)

            duration = time.time() - start_time
            metrics_collector.record_deploy_request("success", duration)
            logger.info("deploy_complete", bundle=bundle_name, job_id=result.id, duration_ms=duration * 1000)

            return DeployOutcome(
                component=bundle_name,
                targets=targets,
                status=result.status,
                id=result.id,
                completed_date=result.completed_date,
                successes=successes,
            ).to_dict()

        except ForgeError as e:
            duration = time.time() - start_time if submitted else None
            metrics_collector.record_deploy_request(e.kind, duration)
            metrics_collector.record_error(e.kind, "deploy_handler")
            logger.warning("deploy_failed", kind=e.kind, error=e.message)
            raise
