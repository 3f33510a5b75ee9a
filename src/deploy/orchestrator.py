"""
Deployment Orchestrator
Submits an archive once and polls the remote job until done or timed out.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Protocol

from core import get_logger
from core.errors import DeployJobFailure, DeploySubmissionError, DeployTimeoutError

from .results import (
    ComponentSuccess,
    DeployResult,
    extract_deploy_failure_message,
    normalize_component_successes,
)


logger = get_logger(__name__)

DEFAULT_TIMEOUT = 5 * 60.0
DEFAULT_POLL_INTERVAL = 5.0


class DeployService(Protocol):
    """Remote job capability: submit an archive, poll a job."""

    async def submit(self, archive: bytes) -> str | DeployResult: ...

    async def poll(self, job_id: str) -> DeployResult: ...


class DeploymentOrchestrator:
    """
    Drives one deploy job: Submitted -> Polling -> Done | TimedOut.

    There is exactly one submission per call and no retries. A timeout only
    stops the local wait; the remote job is left running.
    """

    def __init__(
        self,
        service: DeployService,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.service = service
        self.timeout = timeout
        self.poll_interval = poll_interval
        self._clock = clock
        self._sleep = sleep

    async def deploy(self, archive: bytes) -> DeployResult:
        """Submit and wait; returns the terminal job result, successful or not."""
        started = await self.service.submit(archive)

        if isinstance(started, DeployResult):
            if started.done:
                logger.info("deploy_finished_on_submit", job_id=started.id)
                return started
            job_id = started.id
        else:
            job_id = started

        logger.info("deploy_submitted", job_id=job_id)
        return await self.wait_for_completion(job_id)

    async def wait_for_completion(self, job_id: str) -> DeployResult:
        """
        Poll until the job reports done.

        Raises:
            DeploySubmissionError: No job id to poll
            DeployTimeoutError: The deadline passed first
        """
        if not job_id:
            raise DeploySubmissionError("Missing deployment id.")

        deadline = self._clock() + self.timeout
        polls = 0

        while self._clock() <= deadline:
            result = await self.service.poll(job_id)
            polls += 1
            if result.done:
                logger.info(
                    "deploy_done", job_id=job_id, polls=polls, success=result.success, status=result.status
                )
                return result
            logger.debug("deploy_pending", job_id=job_id, polls=polls, status=result.status)
            await self._sleep(self.poll_interval)

        logger.warning("deploy_timed_out", job_id=job_id, polls=polls, timeout=self.timeout)
        raise DeployTimeoutError()

    async def run(self, archive: bytes) -> tuple[DeployResult, list[ComponentSuccess]]:
        """
        Deploy and normalize the outcome.

        Raises:
            DeployJobFailure: The job finished unsuccessfully
        """
        result = await self.deploy(archive)
        if not result.success:
            message = extract_deploy_failure_message(result)
            logger.warning("deploy_failed", job_id=result.id, status=result.status)
            raise DeployJobFailure(message)
        return result, normalize_component_successes(result.component_successes)
