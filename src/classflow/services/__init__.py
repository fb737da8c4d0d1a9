# src/classflow/services/__init__.py
"""Business logic services for the Classflow application."""

from .catalog import CatalogService, ReferenceDataProvider
from .group_engine import GroupEngine
from .identity import IdentityProvider, IdentityService

__all__ = [
    "CatalogService",
    "ReferenceDataProvider",
    "GroupEngine",
    "IdentityProvider",
    "IdentityService",
]
