"""
mediadb Core - Client Infrastructure.

Provides the ambient systems shared by every catalog surface:
- ServiceLocator: System registry and startup ordering
- BaseSystem: Abstract base for all systems
- ConfigManager: Pydantic-validated configuration with persistence
- Signal: Synchronous observer used by non-Qt services
- Error taxonomy: TransportError, ContractViolation, TagHierarchyError

Usage:
    from mediadb.core import sl

    sl.init("config.json")
    sl.register_system(MediaApiClient)
    await sl.start_all()
"""
from .base_system import BaseSystem
from .locator import ServiceLocator, sl
from .config import (
    ConfigManager,
    AppConfig,
    GeneralSettings,
    ApiSettings,
    SearchSettings,
    MapSettings,
)
from .events import Signal
from .errors import MediaDbError, TransportError, ContractViolation, TagHierarchyError
from .logging import setup_logging

__all__ = [
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
    "MediaDbError",
    "TransportError",
    "ContractViolation",
    "TagHierarchyError",
    "setup_logging",
]
