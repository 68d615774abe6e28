"""
Autocomplete ViewModel - binds the combobox state machine to a view.

The view forwards raw input events (text, focus, blur, keys, pointer-down on
a suggestion); this view model runs them through the engine and republishes
the resulting state as bindable properties.
"""
from typing import Optional, Union

from loguru import logger
from PySide6.QtCore import Signal

from mediadb.catalog.models import Tag
from mediadb.catalog.service import TagCatalogService
from mediadb.core.errors import TransportError
from mediadb.ui.autocomplete import engine
from mediadb.ui.autocomplete.engine import (
    NO_SELECTION,
    CommitMode,
    Effect,
    SelectTag,
    SubmitQuery,
    SuggestionState,
    Transition,
)
from mediadb.ui.mvvm.bindable import BindableProperty
from mediadb.ui.mvvm.viewmodel import (
    BaseViewModel,
    STATUS_LOADING,
    STATUS_READY,
    STATUS_UNAVAILABLE,
)

SUGGESTIONS_UNAVAILABLE = "Suggestions unavailable"


class AutocompleteViewModel(BaseViewModel):
    """
    Combobox over the tag catalog.

    In QUERY mode a commit rewrites the token string and Enter without a
    highlight emits ``submitted(tokens)``. In PICK mode a commit clears the
    input and emits ``selected(tag)``.
    """

    textChanged = Signal(str)
    isOpenChanged = Signal(bool)
    activeIndexChanged = Signal(int)
    suggestionsChanged = Signal(object)
    placeholderChanged = Signal(str)

    submitted = Signal(object)  # list of tokens
    selected = Signal(object)   # Tag

    text = BindableProperty(default="")
    is_open = BindableProperty(default=False, signal_name="isOpenChanged")
    active_index = BindableProperty(default=NO_SELECTION, signal_name="activeIndexChanged")
    suggestions = BindableProperty(default=())
    placeholder = BindableProperty(default="Search")

    def __init__(
        self,
        locator,
        catalog: TagCatalogService,
        mode: CommitMode = CommitMode.QUERY,
        placeholder: str = "Search",
    ):
        super().__init__(locator)
        self.catalog = catalog
        self._state = engine.initial_state(mode)
        self.placeholder = placeholder
        self.catalog.tag_added.connect(self._on_tag_added)

    @property
    def state(self) -> SuggestionState:
        return self._state

    @property
    def mode(self) -> CommitMode:
        return self._state.mode

    async def load_options(self) -> bool:
        """
        Fetch the catalog once for this surface.

        Returns:
            True when suggestions are available
        """
        self.status = STATUS_LOADING
        try:
            options = await self.catalog.autocomplete_tags()
        except TransportError as e:
            if self.is_disposed:
                return False
            logger.warning(f"Autocomplete catalog unavailable: {e}")
            self.status = STATUS_UNAVAILABLE
            self.set_error(SUGGESTIONS_UNAVAILABLE)
            return False

        if self.is_disposed:
            logger.debug("Catalog arrived after the surface was disposed; ignoring")
            return False

        self._apply(engine.with_options(self._state, options))
        self.status = STATUS_READY
        self.clear_error()
        return True

    # --- Input events ---

    def set_text(self, text: str) -> None:
        self._apply(engine.on_text_change(self._state, text))

    def focus(self) -> None:
        self._apply(engine.on_focus(self._state))

    def blur(self) -> None:
        self._apply(engine.on_blur(self._state))

    def arrow_up(self) -> None:
        self._apply(engine.on_arrow_up(self._state))

    def arrow_down(self) -> None:
        self._apply(engine.on_arrow_down(self._state))

    def enter(self) -> None:
        self._run(engine.on_enter(self._state))

    def key_press(self, key: str) -> None:
        self._run(engine.on_key(self._state, key))

    def pointer_select(self, choice: Union[Tag, str]) -> Optional[Tag]:
        """
        Pointer-down on a suggestion row.

        Args:
            choice: The Tag, or the canonical name the row was rendered with

        Returns:
            The committed tag, or None if the name matched no suggestion
        """
        tag = choice if isinstance(choice, Tag) else self._suggestion_named(choice)
        if tag is None:
            logger.debug(f"Pointer selection of unknown suggestion: {choice!r}")
            return None
        self._run(engine.on_pointer_select(self._state, tag))
        return tag

    def dispose(self) -> None:
        super().dispose()
        self.catalog.tag_added.disconnect(self._on_tag_added)

    # --- Internals ---

    def _suggestion_named(self, canonical_name: str) -> Optional[Tag]:
        for tag in self._state.filtered:
            if tag.canonical_name == canonical_name:
                return tag
        return None

    def _run(self, transition: Transition) -> None:
        self._apply(transition.state)
        if transition.effect is not None:
            self._handle_effect(transition.effect)

    def _handle_effect(self, effect: Effect) -> None:
        if isinstance(effect, SubmitQuery):
            self.submitted.emit(list(effect.tokens))
        elif isinstance(effect, SelectTag):
            self.selected.emit(effect.tag)

    def _apply(self, state: SuggestionState) -> None:
        self._state = state
        self.text = state.text
        self.is_open = state.open
        self.active_index = state.active_index
        self.suggestions = state.visible_suggestions

    def _on_tag_added(self, tag: Tag) -> None:
        if not self.is_disposed:
            self._apply(engine.add_option(self._state, tag))
