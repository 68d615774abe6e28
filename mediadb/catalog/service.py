"""
Catalog - Tag Catalog Service

Client-side snapshot of the server's tag catalog. Each listing is fetched at
most once; surfaces mounted at the same time share the in-flight request.
"""
import asyncio
from typing import Awaitable, Callable, Dict, List, Optional

from loguru import logger

from mediadb.core.base_system import BaseSystem
from mediadb.core.events import Signal
from mediadb.catalog.backend import CatalogBackend, MediaApiClient
from mediadb.catalog.models import ROOT_TAG_ID, Tag


class TagCatalogService(BaseSystem):
    """
    Tag catalog snapshot shared by the search box, tag editor and tag browser.

    Features:
    - Autocomplete listing (tags with display paths) and flat listing
    - Fetch-once caching with shared in-flight requests
    - Optimistic append of newly created tags
    - Duplicate-name lookup
    """

    depends_on = [MediaApiClient]

    def __init__(self, locator, config):
        super().__init__(locator, config)
        self._backend: Optional[CatalogBackend] = None
        self._autocomplete: Optional[List[Tag]] = None
        self._tags: Optional[List[Tag]] = None
        self._pending: Dict[str, asyncio.Task] = {}
        # Emits the stored Tag after a successful create
        self.tag_added = Signal("TagAdded")

    async def initialize(self) -> None:
        logger.info("TagCatalogService initializing")
        self._backend = self.locator.get_system(MediaApiClient)
        await super().initialize()
        logger.info("TagCatalogService ready")

    async def shutdown(self) -> None:
        logger.info("TagCatalogService shutting down")
        for task in self._pending.values():
            task.cancel()
        self._pending.clear()
        await super().shutdown()

    @property
    def backend(self) -> CatalogBackend:
        if self._backend is None:
            self._backend = self.locator.get_system(MediaApiClient)
        return self._backend

    @property
    def is_loaded(self) -> bool:
        return self._autocomplete is not None or self._tags is not None

    # --- Listings ---

    async def autocomplete_tags(self) -> List[Tag]:
        """
        Tags with root-to-self paths, for suggestion lists.

        Raises:
            TransportError: the listing could not be fetched
        """
        if self._autocomplete is None:
            tags = await self._fetch_once("autocomplete", self.backend.fetch_autocomplete_tags)
            if self._autocomplete is None:
                self._autocomplete = list(tags)
                logger.debug(f"Autocomplete snapshot loaded: {len(tags)} tags")
        return list(self._autocomplete)

    async def tags(self) -> List[Tag]:
        """
        Flat tag list, for the hierarchy browser.

        Raises:
            TransportError: the listing could not be fetched
        """
        if self._tags is None:
            tags = await self._fetch_once("tags", self.backend.fetch_tags)
            if self._tags is None:
                self._tags = list(tags)
                logger.debug(f"Tag snapshot loaded: {len(tags)} tags")
        return list(self._tags)

    async def ensure_loaded(self) -> None:
        """Make sure at least one listing is available for duplicate checks."""
        if not self.is_loaded:
            await self.autocomplete_tags()

    def invalidate(self) -> None:
        """Drop cached listings; the next call fetches again."""
        self._autocomplete = None
        self._tags = None

    async def _fetch_once(self, key: str, fetch: Callable[[], Awaitable[List[Tag]]]) -> List[Tag]:
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(fetch())
            self._pending[key] = task
            task.add_done_callback(lambda t: self._on_fetch_done(key, t))
        # Shield: one cancelled caller must not cancel the shared request
        return await asyncio.shield(task)

    def _on_fetch_done(self, key: str, task: asyncio.Task) -> None:
        self._pending.pop(key, None)
        # Retrieve the failure even when every waiter has been cancelled
        if not task.cancelled() and task.exception() is not None:
            logger.warning(f"Tag listing '{key}' failed: {task.exception()}")

    # --- Lookup ---

    def known_tags(self) -> List[Tag]:
        """Union of the loaded listings, first occurrence of each id wins."""
        seen = set()
        result = []
        for snapshot in (self._autocomplete, self._tags):
            for tag in snapshot or []:
                if tag.id not in seen:
                    seen.add(tag.id)
                    result.append(tag)
        return result

    def get(self, tag_id: int) -> Optional[Tag]:
        for tag in self.known_tags():
            if tag.id == tag_id:
                return tag
        return None

    def find(self, canonical_name: str) -> Optional[Tag]:
        for tag in self.known_tags():
            if tag.canonical_name == canonical_name:
                return tag
        return None

    def is_taken(self, name: str) -> bool:
        """Case-sensitive match against every known display and canonical name."""
        return any(name == tag.name or name == tag.canonical_name for tag in self.known_tags())

    # --- Mutation ---

    async def create_tag(self, name: str, parent_id: int = ROOT_TAG_ID) -> Tag:
        """
        Create a tag on the server and append it to the local snapshots.

        No duplicate check happens here; see TagEditor.

        Raises:
            TransportError: the server call failed
        """
        tag = await self.backend.add_tag(parent_id, name)
        return self.append(tag)

    def append(self, tag: Tag) -> Tag:
        """
        Add a tag to every loaded snapshot and announce it.

        Args:
            tag: Tag as returned by the server

        Returns:
            The stored tag, with its display path filled in when missing
        """
        if not tag.path:
            parent = self.get(tag.parent_id) if tag.parent_id != ROOT_TAG_ID else None
            parent_path = []
            if parent is not None:
                parent_path = list(parent.path) if parent.path else [parent.name]
            tag = tag.model_copy(update={"path": parent_path + [tag.name]})

        for snapshot in (self._autocomplete, self._tags):
            if snapshot is not None and not any(t.canonical_name == tag.canonical_name for t in snapshot):
                snapshot.append(tag)

        logger.info(f"Tag appended to catalog: {tag.display_path}")
        self.tag_added.emit(tag)
        return tag
