"""Generate Handler."""

import time
from typing import Any

from core import get_logger, GenerateRequest, parse_request
from core.errors import ForgeError
from agents.generator import ComponentGenerator
from component import ComponentBundle
from storage import ArtifactStore
from monitoring import metrics_collector, trace_operation_async


logger = get_logger(__name__)

PREVIEW_MODULE = "gen/preview"


class GenerateHandler:
    """Handles component generation requests."""

    def __init__(self, generator: ComponentGenerator, store: ArtifactStore) -> None:
        self.generator = generator
        self.store = store

    async def generate(self, payload: Any) -> dict[str, Any]:
        """
        Generate (or edit) the component and persist it.

        Returns the code exactly as stored so the editor shows what was saved.
        """
        start_time = time.time()

        try:
            request = parse_request(GenerateRequest, payload)
            logger.info("generate", prompt=request.prompt[:50])

            base = None
            if request.base is not None:
                base = ComponentBundle(html=request.base.html, js=request.base.js, css=request.base.css)

            async with trace_operation_async("component_generation", prompt=request.prompt[:50]):
                bundle = await self.generator.generate(
                    request.prompt,
                    base=base,
                    conversation=request.conversation,
                    model=request.model,
                )
                await self.store.save(bundle)

            duration = time.time() - start_time
            metrics_collector.record_generate_request("success", duration)
            logger.info("generate_complete", duration_ms=duration * 1000)
            return {"ok": True, "module": PREVIEW_MODULE, "code": bundle.to_code()}

        except ForgeError as e:
            duration = time.time() - start_time
            status = "client_error" if e.status_code < 500 else "error"
            metrics_collector.record_generate_request(status, duration)
            metrics_collector.record_error(e.kind, "generate_handler")
            logger.warning("generate_failed", kind=e.kind, error=e.message)
            raise
