"""Bundle Packager - builds the Metadata API deploy archive."""

import io
import zipfile
from collections.abc import Sequence

from returns.result import Failure

from core import get_logger
from core.errors import InvalidBundleNameError
from core.validate import validate_bundle_name
from component.models import ComponentBundle

from .manifest import create_bundle_meta_xml, create_package_xml


logger = get_logger(__name__)

COMPONENT_FOLDER = "lwc"


def archive_paths(bundle_name: str) -> dict[str, str]:
    """Archive member path for each artifact, keyed by role."""
    folder = f"{COMPONENT_FOLDER}/{bundle_name}"
    return {
        "package": "package.xml",
        "html": f"{folder}/{bundle_name}.html",
        "js": f"{folder}/{bundle_name}.js",
        "css": f"{folder}/{bundle_name}.css",
        "meta": f"{folder}/{bundle_name}.js-meta.xml",
    }


def pack(
    bundle_name: str,
    bundle: ComponentBundle,
    api_version: str,
    targets: Sequence[str] | None = None,
    lowercase_name: bool = True,
) -> bytes:
    """
    Zip the bundle with freshly generated manifests.

    Args:
        bundle_name: Component folder and file stem
        bundle: Source artifacts
        api_version: Metadata API version written into both manifests
        targets: Requested target surfaces (filtered, defaults when empty)
        lowercase_name: Apply the lowercase-first naming rule

    Returns:
        ZIP archive bytes

    Raises:
        InvalidBundleNameError: The name fails the naming constraint
    """
    checked = validate_bundle_name(bundle_name, lowercase=lowercase_name)
    if isinstance(checked, Failure):
        raise InvalidBundleNameError(checked.failure().message)
    name = checked.unwrap()

    paths = archive_paths(name)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(paths["package"], create_package_xml(name, api_version))
        archive.writestr(paths["html"], bundle.html)
        archive.writestr(paths["js"], bundle.js)
        archive.writestr(paths["css"], bundle.css)
        archive.writestr(paths["meta"], create_bundle_meta_xml(api_version, targets))

    data = buffer.getvalue()
    logger.info("bundle_packed", bundle=name, api_version=api_version, bytes=len(data))
    return data
