"""
Media List ViewModel - thumbnails matching the current search.
"""
import asyncio
from typing import Optional, Set

from loguru import logger
from PySide6.QtCore import Signal

from mediadb.catalog.backend import CatalogBackend
from mediadb.core.config import SearchSettings
from mediadb.core.errors import TransportError
from mediadb.ui.mvvm.bindable import BindableProperty
from mediadb.ui.mvvm.viewmodel import (
    BaseViewModel,
    STATUS_LOADING,
    STATUS_READY,
    STATUS_UNAVAILABLE,
)
from mediadb.ui.navigation.location import Location
from mediadb.ui.navigation.service import HistoryService


class MediaListViewModel(BaseViewModel):
    """
    Loads entity summaries for the search route's ``q`` parameter.

    Only the most recent request may update ``entities``; responses to
    superseded queries are dropped.
    """

    entitiesChanged = Signal(object)
    queryChanged = Signal(object)

    entities = BindableProperty(default=())
    query = BindableProperty(default=None)

    def __init__(
        self,
        locator,
        backend: CatalogBackend,
        history: HistoryService,
        settings: Optional[SearchSettings] = None,
    ):
        super().__init__(locator)
        self.backend = backend
        self.history = history
        self.settings = settings or SearchSettings()
        self._generation = 0
        self._pending: Set[asyncio.Task] = set()

    async def mount(self) -> None:
        self.history.location_changed.connect(self.on_location_changed)
        await self.load(self._query_for(self.history.location))

    def dispose(self) -> None:
        super().dispose()
        self.history.location_changed.disconnect(self.on_location_changed)
        for task in self._pending:
            task.cancel()
        self._pending.clear()

    def on_location_changed(self, location: Location, previous: Optional[Location] = None) -> None:
        if self.is_disposed or location.pathname not in (self.settings.search_route, "/"):
            return
        query = self._query_for(location)
        if query == self.query and self.status == STATUS_READY:
            return
        task = asyncio.ensure_future(self.load(query))
        self._pending.add(task)
        task.add_done_callback(self._on_load_done)

    async def load(self, query: Optional[str]) -> bool:
        """
        Fetch entities for ``query`` (None lists everything).

        Returns:
            True if the result was applied, False if it failed or went stale
        """
        self._generation += 1
        generation = self._generation
        self.query = query
        self.status = STATUS_LOADING

        try:
            entities = await self.backend.fetch_entities(query)
        except TransportError as e:
            if self._is_current(generation):
                logger.warning(f"Media listing unavailable: {e}")
                self.status = STATUS_UNAVAILABLE
                self.set_error(str(e))
            return False

        if not self._is_current(generation):
            logger.debug(f"Discarding stale media listing for {query!r}")
            return False

        self.entities = tuple(entities)
        self.status = STATUS_READY
        self.clear_error()
        return True

    def _on_load_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Media listing failed: {task.exception()!r}")

    def _is_current(self, generation: int) -> bool:
        return not self.is_disposed and generation == self._generation

    def _query_for(self, location: Location) -> Optional[str]:
        return location.query_param(self.settings.query_param) or None
