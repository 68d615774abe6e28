"""
mediadb - client core for a personal media catalog.

Tag-driven incremental search, tag hierarchy browsing and tag editing,
independent of the toolkit that renders them.
"""

from mediadb.core.base_system import BaseSystem
from mediadb.core.locator import ServiceLocator, sl
from mediadb.core.config import (
    ConfigManager,
    AppConfig,
    GeneralSettings,
    ApiSettings,
    SearchSettings,
    MapSettings,
)
from mediadb.core.events import Signal
from mediadb.core.logging import setup_logging
from mediadb.core.errors import MediaDbError, TransportError, ContractViolation, TagHierarchyError

from mediadb.catalog import (
    ROOT_TAG_ID,
    Tag,
    Entity,
    CatalogBackend,
    MediaApiClient,
    TagCatalogService,
    TagTree,
    build_subtree,
    TagEditor,
    TagEditResult,
)
from mediadb.ui.navigation import HistoryService, Location

__version__ = "0.1.0"

__all__ = [
    # Core
    "BaseSystem",
    "ServiceLocator",
    "sl",
    "ConfigManager",
    "AppConfig",
    "GeneralSettings",
    "ApiSettings",
    "SearchSettings",
    "MapSettings",
    "Signal",
    "setup_logging",
    "MediaDbError",
    "TransportError",
    "ContractViolation",
    "TagHierarchyError",

    # Catalog
    "ROOT_TAG_ID",
    "Tag",
    "Entity",
    "CatalogBackend",
    "MediaApiClient",
    "TagCatalogService",
    "TagTree",
    "build_subtree",
    "TagEditor",
    "TagEditResult",

    # Navigation
    "HistoryService",
    "Location",
]
