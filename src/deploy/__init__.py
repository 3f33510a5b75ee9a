"""Packaging and Metadata API deployment."""

from .manifest import create_package_xml, create_bundle_meta_xml
from .packager import pack, archive_paths, COMPONENT_FOLDER
from .results import (
    DeployResult,
    DeployOutcome,
    ComponentSuccess,
    extract_deploy_failure_message,
    normalize_component_successes,
)
from .orchestrator import DeploymentOrchestrator, DeployService

__all__ = [
    "create_package_xml",
    "create_bundle_meta_xml",
    "pack",
    "archive_paths",
    "COMPONENT_FOLDER",
    "DeployResult",
    "DeployOutcome",
    "ComponentSuccess",
    "extract_deploy_failure_message",
    "normalize_component_successes",
    "DeploymentOrchestrator",
    "DeployService",
]
