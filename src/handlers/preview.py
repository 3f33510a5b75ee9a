"""Preview Handler."""

from typing import Any

from core import get_logger, PreviewUpdateRequest, parse_request
from core.errors import BundleNotFoundError, ForgeError
from component import ComponentBundle, ComponentPipeline
from storage import ArtifactStore
from monitoring import metrics_collector


logger = get_logger(__name__)


class PreviewHandler:
    """Reads, overwrites and resets the stored preview bundle."""

    def __init__(self, store: ArtifactStore, pipeline: ComponentPipeline) -> None:
        self.store = store
        self.pipeline = pipeline

    async def read(self) -> dict[str, Any]:
        """
        Raises:
            BundleNotFoundError: Nothing has been generated yet
        """
        try:
            bundle = await self.store.load()
            if bundle is None:
                raise BundleNotFoundError(
                    "No generated component available. Generate or update the component before refreshing."
                )
        except ForgeError as e:
            metrics_collector.record_preview_request("read", e.kind)
            raise
        metrics_collector.record_preview_request("read", "success")
        return {"ok": True, "code": bundle.to_code()}

    async def update(self, payload: Any) -> dict[str, Any]:
        """Store hand-edited files after render-mode injection."""
        try:
            request = parse_request(PreviewUpdateRequest, payload)
            bundle = self.pipeline.prepare_edit(
                ComponentBundle(html=request.html, js=request.js, css=request.css)
            )
            await self.store.save(bundle)
        except ForgeError as e:
            metrics_collector.record_preview_request("update", e.kind)
            logger.warning("preview_update_failed", kind=e.kind, error=e.message)
            raise
        metrics_collector.record_preview_request("update", "success")
        return {"ok": True, "code": bundle.to_code()}

    async def reset(self) -> dict[str, Any]:
        try:
            await self.store.reset()
        except ForgeError as e:
            metrics_collector.record_preview_request("reset", e.kind)
            raise
        metrics_collector.record_preview_request("reset", "success")
        logger.info("preview_reset")
        return {"ok": True}
