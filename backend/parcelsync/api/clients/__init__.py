"""
Outbound Service Clients Package

Adapters for the tabular store, the code-resolution service, the public
building and land registries, and failure mail.
"""

from .base import BaseClient
from .airtable import AirtableStore
from .code_resolver import CodeResolverClient
from .building_registry import BuildingRegistryClient, EMPTY_BUILDING_PAYLOAD
from .land_registry import LandRegistryClient, parse_land_response
from .notifier import EmailNotifier

__all__ = [
    "BaseClient",
    "AirtableStore",
    "CodeResolverClient",
    "BuildingRegistryClient",
    "EMPTY_BUILDING_PAYLOAD",
    "LandRegistryClient",
    "parse_land_response",
    "EmailNotifier",
]
