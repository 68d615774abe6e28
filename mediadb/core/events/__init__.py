"""
Event System - synchronous observer used by services that live outside Qt.

Usage:
    from mediadb.core.events import Signal

    changed = Signal("LocationChanged")
    changed.connect(on_location_changed)
    changed.emit(location, previous)
"""
from .observer import Signal

__all__ = ["Signal"]
