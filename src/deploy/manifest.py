"""Metadata API manifests for a single Lightning web component."""

from collections.abc import Sequence
from xml.sax.saxutils import escape

from core.validate import normalize_targets


METADATA_NAMESPACE = "http://soap.sforce.com/2006/04/metadata"
COMPONENT_TYPE = "LightningComponentBundle"


def create_package_xml(bundle_name: str, api_version: str) -> str:
    """package.xml declaring one LightningComponentBundle member."""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<Package xmlns="{METADATA_NAMESPACE}">
  <types>
    <members>{escape(bundle_name)}</members>
    <name>{COMPONENT_TYPE}</name>
  </types>
  <version>{escape(api_version)}</version>
</Package>
"""


def create_bundle_meta_xml(api_version: str, targets: Sequence[str] | None = None) -> str:
    """<name>.js-meta.xml exposing the component on the given target surfaces."""
    target_xml = "\n".join(
        f"    <target>{escape(target)}</target>" for target in normalize_targets(targets)
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<{COMPONENT_TYPE} xmlns="{METADATA_NAMESPACE}">
  <apiVersion>{escape(api_version)}</apiVersion>
  <isExposed>true</isExposed>
  <targets>
{target_xml}
  </targets>
</{COMPONENT_TYPE}>
"""
