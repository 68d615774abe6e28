"""
Search Box ViewModel - the global search input.

Keeps the input and the address bar's ``q`` parameter in step:
- external navigation re-derives the input text, unless the user is editing
- reset routes (root, tag browser, map) clear the input
- Enter without a highlighted suggestion navigates to the search route
"""
from typing import Optional

from loguru import logger

from mediadb.catalog.service import TagCatalogService
from mediadb.core.config import SearchSettings
from mediadb.search.tokenizer import serialize_query
from mediadb.ui.autocomplete import engine
from mediadb.ui.autocomplete.engine import CommitMode, Effect, SubmitQuery
from mediadb.ui.navigation.location import Location
from mediadb.ui.navigation.service import HistoryService
from mediadb.ui.viewmodels.autocomplete import AutocompleteViewModel


class SearchBoxViewModel(AutocompleteViewModel):
    """
    URL-synchronized search combobox.

    Usage:
        box = SearchBoxViewModel(locator, catalog, history, config.data.search)
        await box.mount()
        box.set_text("cat d")
        box.key_press("Enter")
    """

    def __init__(
        self,
        locator,
        catalog: TagCatalogService,
        history: HistoryService,
        settings: Optional[SearchSettings] = None,
    ):
        super().__init__(locator, catalog, CommitMode.QUERY)
        self.history = history
        self.settings = settings or SearchSettings()

    async def mount(self) -> None:
        self.history.location_changed.connect(self.on_location_changed)
        self.sync_from_location(self.history.location)
        await self.load_options()

    def dispose(self) -> None:
        super().dispose()
        self.history.location_changed.disconnect(self.on_location_changed)

    def on_location_changed(self, location: Location, previous: Optional[Location] = None) -> None:
        if self.is_disposed:
            return
        if location != previous and location.pathname in self.settings.reset_routes:
            logger.debug(f"Clearing search input on {location.pathname}")
            self._apply(engine.on_text_change(self._state, ""))
            return
        self.sync_from_location(location)

    def sync_from_location(self, location: Location) -> bool:
        """
        Adopt the location's query as the input text.

        Returns:
            True if the input text was replaced
        """
        new_q = location.query_param(self.settings.query_param)
        if new_q is None or new_q == self.text:
            return False
        if self.is_open:
            # The user is editing; the address bar must not clobber it
            logger.debug(f"Ignoring query {new_q!r} while suggestions are open")
            return False
        self.set_text(new_q)
        return True

    def search_url(self, tokens) -> str:
        return f"{self.settings.search_route}?{self.settings.query_param}={serialize_query(tokens)}"

    def _handle_effect(self, effect: Effect) -> None:
        super()._handle_effect(effect)
        if isinstance(effect, SubmitQuery):
            self.history.push(self.search_url(effect.tokens))
