"""
Artifact Store
Persists the current preview bundle as three files on disk.
"""

import asyncio
from pathlib import Path

from core import get_logger
from core.errors import ArtifactStoreError
from component.models import STUB_BUNDLE, ComponentBundle


logger = get_logger(__name__)

FILE_STEM = "preview"


class ArtifactStore:
    """
    File-backed store for the single working bundle.

    Reads and writes run in worker threads. One lock covers the three files,
    so callers in this process never see a half-written bundle.
    """

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        self._lock = asyncio.Lock()

    def path_for(self, extension: str) -> Path:
        return self.directory / f"{FILE_STEM}.{extension}"

    async def load(self) -> ComponentBundle | None:
        """
        Read the stored bundle.

        Returns:
            The bundle, or None when any of the three files does not exist

        Raises:
            ArtifactStoreError: Any other I/O or decoding failure
        """
        async with self._lock:
            try:
                html, js, css = await asyncio.to_thread(self._read_all)
            except FileNotFoundError:
                return None
            except (OSError, UnicodeDecodeError) as e:
                logger.error("store_read_failed", directory=str(self.directory), error=str(e))
                raise ArtifactStoreError("Could not read generated component from disk.") from e
        return ComponentBundle(html=html, js=js, css=css)

    async def save(self, bundle: ComponentBundle) -> ComponentBundle:
        """
        Write all three files.

        Raises:
            ArtifactStoreError: The directory or a file could not be written
        """
        async with self._lock:
            try:
                await asyncio.to_thread(self._write_all, bundle)
            except OSError as e:
                logger.error("store_write_failed", directory=str(self.directory), error=str(e))
                raise ArtifactStoreError("Could not save generated component to disk.") from e
        logger.info("bundle_saved", directory=str(self.directory), html_bytes=len(bundle.html))
        return bundle

    async def reset(self) -> ComponentBundle:
        """Overwrite the store with the placeholder stub."""
        return await self.save(STUB_BUNDLE)

    def _read_all(self) -> tuple[str, str, str]:
        return (
            self.path_for("html").read_text(encoding="utf-8"),
            self.path_for("js").read_text(encoding="utf-8"),
            self.path_for("css").read_text(encoding="utf-8"),
        )

    def _write_all(self, bundle: ComponentBundle) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.path_for("html").write_text(bundle.html, encoding="utf-8")
        self.path_for("js").write_text(bundle.js, encoding="utf-8")
        self.path_for("css").write_text(bundle.css, encoding="utf-8")
