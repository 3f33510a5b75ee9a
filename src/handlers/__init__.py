"""HTTP request handlers."""

from .generate import GenerateHandler
from .preview import PreviewHandler
from .deploy import DeployHandler

__all__ = ["GenerateHandler", "PreviewHandler", "DeployHandler"]
