"""
History Service - the client's address bar.

Holds the current location and a back stack; surfaces push new locations
and observe changes through ``location_changed(location, previous)``.
"""
from typing import List, Optional, Union

from loguru import logger

from mediadb.core.base_system import BaseSystem
from mediadb.core.events import Signal
from mediadb.ui.navigation.location import Location


class HistoryService(BaseSystem):
    """
    Browser-style navigation history.

    Usage:
        history = locator.get_system(HistoryService)
        history.location_changed.connect(on_location_changed)
        history.push("/media?q=cat+dog")
    """

    depends_on = []  # Independent UI service

    def __init__(self, locator, config, initial: Union[str, Location] = "/"):
        super().__init__(locator, config)
        self._entries: List[Location] = [self._coerce(initial)]
        self.location_changed = Signal("LocationChanged")

    async def initialize(self):
        await super().initialize()
        logger.info(f"HistoryService initialized at {self.location}")

    async def shutdown(self):
        await super().shutdown()
        logger.info("HistoryService shutdown")

    @property
    def location(self) -> Location:
        return self._entries[-1]

    @property
    def can_go_back(self) -> bool:
        return len(self._entries) > 1

    def push(self, target: Union[str, Location]) -> Location:
        """Navigate to ``target``, keeping the current location on the back stack."""
        location = self._coerce(target)
        previous = self.location
        self._entries.append(location)
        logger.info(f"Navigating: {previous} -> {location}")
        self.location_changed.emit(location, previous)
        return location

    def replace(self, target: Union[str, Location]) -> Location:
        """Swap the current location without growing the back stack."""
        location = self._coerce(target)
        previous = self.location
        self._entries[-1] = location
        logger.debug(f"Replacing location: {previous} -> {location}")
        self.location_changed.emit(location, previous)
        return location

    def back(self) -> Optional[Location]:
        """Return to the previous location, or None when there is none."""
        if not self.can_go_back:
            return None
        previous = self._entries.pop()
        logger.debug(f"Back: {previous} -> {self.location}")
        self.location_changed.emit(self.location, previous)
        return self.location

    @staticmethod
    def _coerce(target: Union[str, Location]) -> Location:
        return target if isinstance(target, Location) else Location.parse(target)
