"""
Client modules for external service communication
"""

from .metadata import MetadataClient, MetadataDeployService, Session, SoapFault

__all__ = ["MetadataClient", "MetadataDeployService", "Session", "SoapFault"]
