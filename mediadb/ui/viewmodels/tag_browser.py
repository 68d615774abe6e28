"""
Tag Browser ViewModel - the browsable tag hierarchy page.

Shows the catalog as a case-insensitively sorted tree and hosts the
"add new tag" form, whose optional parent is picked with a PICK-mode
autocomplete.
"""
from typing import List, Optional

from loguru import logger
from PySide6.QtCore import Signal

from mediadb.catalog.editor import TagEditor, TagEditResult
from mediadb.catalog.models import ROOT_TAG_ID, Tag
from mediadb.catalog.service import TagCatalogService
from mediadb.catalog.tree import TagTree, TagTreeNode
from mediadb.core.config import SearchSettings
from mediadb.core.errors import TagHierarchyError, TransportError
from mediadb.search.tokenizer import serialize_query
from mediadb.ui.autocomplete.engine import CommitMode
from mediadb.ui.mvvm.bindable import BindableProperty
from mediadb.ui.mvvm.viewmodel import (
    BaseViewModel,
    STATUS_LOADING,
    STATUS_READY,
    STATUS_UNAVAILABLE,
)
from mediadb.ui.navigation.service import HistoryService
from mediadb.ui.viewmodels.autocomplete import AutocompleteViewModel

LOADING_TEXT = "Loading"
EMPTY_TEXT = "No tags yet"
UNAVAILABLE_TEXT = "Tags unavailable"
MALFORMED_TEXT = "Tag hierarchy is malformed"
PARENT_PLACEHOLDER = "Add tag parent (optional)"


class TagBrowserViewModel(BaseViewModel):
    statusTextChanged = Signal(str)
    rowsChanged = Signal(object)
    addFormOpenChanged = Signal(bool)
    newTagNameChanged = Signal(str)
    parentTagChanged = Signal(object)

    status_text = BindableProperty(default=LOADING_TEXT, signal_name="statusTextChanged")
    rows = BindableProperty(default=())
    add_form_open = BindableProperty(default=False, signal_name="addFormOpenChanged")
    new_tag_name = BindableProperty(default="", signal_name="newTagNameChanged")
    parent_tag = BindableProperty(default=None, signal_name="parentTagChanged")

    def __init__(
        self,
        locator,
        catalog: TagCatalogService,
        editor: TagEditor,
        history: HistoryService,
        settings: Optional[SearchSettings] = None,
    ):
        super().__init__(locator)
        self.catalog = catalog
        self.editor = editor
        self.history = history
        self.settings = settings or SearchSettings()
        self._tree: Optional[TagTree] = None

        self.parent_picker = AutocompleteViewModel(
            locator, catalog, CommitMode.PICK, placeholder=PARENT_PLACEHOLDER
        )
        self.parent_picker.selected.connect(self.choose_parent)
        self.catalog.tag_added.connect(self._on_tag_added)

    async def mount(self) -> None:
        self.status = STATUS_LOADING
        self.status_text = LOADING_TEXT
        try:
            tags = await self.catalog.tags()
        except TransportError as e:
            if self.is_disposed:
                return
            logger.warning(f"Tag listing unavailable: {e}")
            self.status = STATUS_UNAVAILABLE
            self.status_text = UNAVAILABLE_TEXT
            self.set_error(str(e))
            return

        if self.is_disposed:
            return
        self._tree = TagTree(tags, max_depth=self.settings.max_tree_depth)
        self._refresh()
        await self.parent_picker.load_options()

    def dispose(self) -> None:
        super().dispose()
        self.parent_picker.dispose()
        self.catalog.tag_added.disconnect(self._on_tag_added)

    @property
    def tree(self) -> Optional[List[TagTreeNode]]:
        """Root level of the hierarchy, None while loading or when empty."""
        if self._tree is None:
            return None
        return self._tree.build_subtree(ROOT_TAG_ID)

    def link_for(self, tag: Tag) -> str:
        return f"{self.settings.search_route}?{self.settings.query_param}={serialize_query([tag.canonical_name])}"

    def open_tag(self, tag: Tag) -> None:
        """Follow a tree row to the media matching that tag."""
        self.history.push(self.link_for(tag))

    # --- Add form ---

    def toggle_add_form(self) -> None:
        self.add_form_open = not self.add_form_open

    def set_new_tag_name(self, name: str) -> None:
        self.new_tag_name = name

    def choose_parent(self, tag: Optional[Tag]) -> None:
        self.parent_tag = tag
        self.parent_picker.placeholder = tag.name if tag is not None else PARENT_PLACEHOLDER

    async def submit_new_tag(self) -> TagEditResult:
        """
        Create the tag described by the form.

        Rejections (duplicate or empty name) keep the form as it is and set
        ``error_message``; success resets the form.
        """
        parent_id = self.parent_tag.id if self.parent_tag is not None else ROOT_TAG_ID
        try:
            result = await self.editor.create_tag(self.new_tag_name, parent_id)
        except TransportError as e:
            logger.error(f"Failed to create tag {self.new_tag_name!r}: {e}")
            self.set_error(str(e))
            return TagEditResult.rejected(str(e))

        if not result.ok:
            self.set_error(result.message)
            return result

        self.clear_error()
        self.new_tag_name = ""
        self.choose_parent(None)
        return result

    # --- Internals ---

    def _on_tag_added(self, tag: Tag) -> None:
        if self.is_disposed or self._tree is None:
            return
        self._tree.add(tag)
        self._refresh()

    def _refresh(self) -> None:
        try:
            rows = self._tree.flatten(ROOT_TAG_ID)
        except TagHierarchyError as e:
            logger.error(str(e))
            self.rows = ()
            self.status = STATUS_UNAVAILABLE
            self.status_text = MALFORMED_TEXT
            return
        self.rows = tuple(rows)
        self.status_text = EMPTY_TEXT if not rows else ""
        self.status = STATUS_READY
