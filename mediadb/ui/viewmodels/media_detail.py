"""
Media Detail ViewModel - a single entity and its tag panel.

Navigating between entities can outrun the network: a response is only
applied if it still belongs to the entity being shown.
"""
import asyncio
from typing import Optional, Set

from loguru import logger
from PySide6.QtCore import Signal

from mediadb.catalog.backend import CatalogBackend
from mediadb.catalog.editor import TagEditor, TagEditResult
from mediadb.catalog.models import ROOT_TAG_ID, Entity, Tag
from mediadb.catalog.service import TagCatalogService
from mediadb.core.errors import TransportError
from mediadb.ui.autocomplete.engine import CommitMode
from mediadb.ui.mvvm.bindable import BindableProperty
from mediadb.ui.mvvm.viewmodel import (
    BaseViewModel,
    STATUS_LOADING,
    STATUS_READY,
    STATUS_UNAVAILABLE,
)
from mediadb.ui.viewmodels.autocomplete import AutocompleteViewModel

NO_ENTITY_MESSAGE = "No media item is loaded"


class MediaDetailViewModel(BaseViewModel):
    entityChanged = Signal(object)
    tagsChanged = Signal(object)

    entity = BindableProperty(default=None)
    tags = BindableProperty(default=())

    def __init__(
        self,
        locator,
        catalog: TagCatalogService,
        backend: CatalogBackend,
        editor: Optional[TagEditor] = None,
    ):
        super().__init__(locator)
        self.catalog = catalog
        self.backend = backend
        self.editor = editor or TagEditor(catalog, backend)
        self._current_id: Optional[int] = None
        self._pending: Set[asyncio.Task] = set()

        self.tag_picker = AutocompleteViewModel(locator, catalog, CommitMode.PICK, placeholder="Add tag")
        self.tag_picker.selected.connect(self._on_tag_picked)

    @property
    def current_id(self) -> Optional[int]:
        return self._current_id

    async def mount(self) -> None:
        await self.tag_picker.load_options()

    def dispose(self) -> None:
        super().dispose()
        self.tag_picker.dispose()

    async def show(self, entity_id: int) -> Optional[Entity]:
        """
        Display ``entity_id``.

        Returns:
            The entity, or None if loading failed or another entity was
            requested before this one arrived
        """
        self._current_id = entity_id
        self.status = STATUS_LOADING
        try:
            entity = await self.backend.fetch_entity(entity_id)
        except TransportError as e:
            if self._is_current(entity_id):
                logger.warning(f"Media item {entity_id} unavailable: {e}")
                self.status = STATUS_UNAVAILABLE
                self.set_error(str(e))
            return None

        if not self._is_current(entity_id):
            logger.debug(f"Discarding stale media item {entity_id} (showing {self._current_id})")
            return None

        self.entity = entity
        self.tags = tuple(entity.tags)
        self.status = STATUS_READY
        self.clear_error()
        return entity

    # --- Tag panel ---

    async def add_tag(self, name: str, parent_id: int = ROOT_TAG_ID) -> TagEditResult:
        return await self._edit(lambda entity: self.editor.add_tag(entity, name, parent_id))

    async def attach_tag(self, tag: Tag) -> TagEditResult:
        return await self._edit(lambda entity: self.editor.attach_tag(entity, tag))

    async def remove_tag(self, canonical_name: str) -> TagEditResult:
        return await self._edit(lambda entity: self.editor.remove_tag(entity, canonical_name))

    async def _edit(self, operation) -> TagEditResult:
        entity = self.entity
        if entity is None:
            return TagEditResult.rejected(NO_ENTITY_MESSAGE)

        try:
            result = await operation(entity)
        except TransportError as e:
            # Local changes stay applied; there is no rollback
            logger.error(f"Saving media item {entity.id} failed: {e}")
            result = TagEditResult.rejected(str(e))
        finally:
            if entity is self.entity and not self.is_disposed:
                self.tags = tuple(entity.tags)
                self.entityChanged.emit(entity)

        if result.ok:
            self.clear_error()
        else:
            self.set_error(result.message)
        return result

    def _on_tag_picked(self, tag: Tag) -> None:
        task = asyncio.ensure_future(self.attach_tag(tag))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _is_current(self, entity_id: int) -> bool:
        return not self.is_disposed and entity_id == self._current_id
