"""
Autocomplete Engine - combobox state machine.

Drives a single-line input plus a floating suggestion list. Every transition
is a plain function taking the current SuggestionState (and the event value)
and returning a new state, so views never hold callback-bound state.

States are Closed and Open(active_index). ``active_index`` is NO_SELECTION
when no suggestion is highlighted; otherwise it indexes ``filtered``.

Pointer selection blurs the input in most toolkits before the click lands.
``on_pointer_select`` therefore marks the state so the next ``on_blur`` is
swallowed instead of closing the list.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple, Union

from loguru import logger

from mediadb.catalog.models import Tag
from mediadb.search.tokenizer import (
    SEPARATOR,
    commit_token,
    filter_options,
    strip_trailing_empty,
    tokenize,
)

NO_SELECTION = -1

KEY_ENTER = "Enter"
KEY_ARROW_UP = "ArrowUp"
KEY_ARROW_DOWN = "ArrowDown"


class CommitMode(Enum):
    """What committing a suggestion produces."""
    QUERY = "query"  # rewrite the token string (search box)
    PICK = "pick"    # clear the input and hand the tag over (inline editors)


@dataclass(frozen=True)
class SubmitQuery:
    """Enter without a highlighted suggestion: search for these tokens."""
    tokens: Tuple[str, ...]


@dataclass(frozen=True)
class SelectTag:
    """A PICK-mode surface selected a tag."""
    tag: Tag


Effect = Union[SubmitQuery, SelectTag, None]


@dataclass(frozen=True)
class SuggestionState:
    mode: CommitMode = CommitMode.QUERY
    text: str = ""
    # None until the catalog has loaded
    options: Optional[Tuple[Tag, ...]] = None
    filtered: Tuple[Tag, ...] = ()
    open: bool = False
    active_index: int = NO_SELECTION
    previous_active_index: int = NO_SELECTION
    suppress_blur: bool = False

    @property
    def is_loading(self) -> bool:
        return self.options is None

    @property
    def tokens(self) -> list:
        return tokenize(self.text)

    @property
    def active_tag(self) -> Optional[Tag]:
        if 0 <= self.active_index < len(self.filtered):
            return self.filtered[self.active_index]
        return None

    @property
    def visible_suggestions(self) -> Tuple[Tag, ...]:
        """What the view renders: nothing while closed."""
        return self.filtered if self.open else ()


@dataclass(frozen=True)
class Transition:
    state: SuggestionState
    effect: Effect = None


def _matches(mode: CommitMode, text: str, options: Optional[Sequence[Tag]]) -> Tuple[Tag, ...]:
    if mode is CommitMode.PICK:
        # The whole input is one token; nothing is committed in PICK mode
        return tuple(filter_options([text], options))
    return tuple(filter_options(tokenize(text), options))


def _refilter(state: SuggestionState, **changes) -> SuggestionState:
    """Apply ``changes`` and recompute suggestions; a changed list drops the highlight."""
    updated = replace(state, suppress_blur=False, **changes)
    filtered = _matches(updated.mode, updated.text, updated.options)
    if filtered == state.filtered:
        return replace(updated, filtered=filtered)
    return replace(
        updated,
        filtered=filtered,
        active_index=NO_SELECTION,
        previous_active_index=NO_SELECTION,
    )


def initial_state(mode: CommitMode = CommitMode.QUERY, text: str = "") -> SuggestionState:
    return SuggestionState(mode=mode, text=text)


def with_options(state: SuggestionState, options: Optional[Iterable[Tag]]) -> SuggestionState:
    """Catalog fetch resolved (or was reset to None)."""
    return _refilter(state, options=tuple(options) if options is not None else None)


def add_option(state: SuggestionState, tag: Tag) -> SuggestionState:
    """Optimistically append a newly created tag. Ignored while still loading."""
    if state.options is None or any(t.canonical_name == tag.canonical_name for t in state.options):
        return state
    return with_options(state, state.options + (tag,))


def on_text_change(state: SuggestionState, text: str) -> SuggestionState:
    # Typing never opens a closed list; only focus does
    return _refilter(state, text=text)


def on_focus(state: SuggestionState) -> SuggestionState:
    restored = state.previous_active_index
    if restored >= len(state.filtered):
        restored = NO_SELECTION
    return replace(
        state,
        open=True,
        active_index=restored,
        previous_active_index=NO_SELECTION,
        suppress_blur=False,
    )


def on_blur(state: SuggestionState) -> SuggestionState:
    if state.suppress_blur:
        return replace(state, suppress_blur=False)
    return replace(
        state,
        open=False,
        previous_active_index=state.active_index,
        active_index=NO_SELECTION,
    )


def on_arrow_up(state: SuggestionState) -> SuggestionState:
    if state.active_index <= NO_SELECTION:
        return replace(state, suppress_blur=False)
    return replace(state, active_index=state.active_index - 1, suppress_blur=False)


def on_arrow_down(state: SuggestionState) -> SuggestionState:
    if state.active_index >= len(state.filtered) - 1:
        return replace(state, suppress_blur=False)
    return replace(state, active_index=state.active_index + 1, suppress_blur=False)


def commit(state: SuggestionState, tag: Tag) -> Transition:
    """Turn the in-progress token into ``tag``."""
    if state.mode is CommitMode.PICK:
        cleared = _refilter(state, text="")
        return Transition(replace(cleared, active_index=NO_SELECTION), SelectTag(tag))

    text = commit_token(tokenize(state.text), tag)
    logger.debug(f"Committed token: {tag.canonical_name}")
    updated = _refilter(state, text=text)
    return Transition(replace(updated, open=True, active_index=NO_SELECTION))


def on_enter(state: SuggestionState) -> Transition:
    tag = state.active_tag
    if tag is not None:
        return commit(state, tag)

    if state.mode is CommitMode.PICK:
        return Transition(replace(state, suppress_blur=False))

    tokens = strip_trailing_empty(tokenize(state.text))
    updated = _refilter(state, text=SEPARATOR.join(tokens))
    return Transition(replace(updated, active_index=NO_SELECTION), SubmitQuery(tuple(tokens)))


def on_pointer_select(state: SuggestionState, tag: Tag) -> Transition:
    """Pointer-down on a suggestion: commit it and swallow the blur that follows."""
    result = commit(state, tag)
    return Transition(replace(result.state, suppress_blur=True), result.effect)


def on_key(state: SuggestionState, key: str) -> Transition:
    """Dispatch a key name; keys the combobox does not handle leave the state alone."""
    if key == KEY_ENTER:
        return on_enter(state)
    if key == KEY_ARROW_UP:
        return Transition(on_arrow_up(state))
    if key == KEY_ARROW_DOWN:
        return Transition(on_arrow_down(state))
    return Transition(state)
