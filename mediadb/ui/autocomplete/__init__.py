"""
Autocomplete - the combobox state machine shared by every tag input.
"""
from mediadb.ui.autocomplete.engine import (
    NO_SELECTION,
    KEY_ENTER,
    KEY_ARROW_UP,
    KEY_ARROW_DOWN,
    CommitMode,
    SubmitQuery,
    SelectTag,
    SuggestionState,
    Transition,
    initial_state,
    with_options,
    add_option,
    on_text_change,
    on_focus,
    on_blur,
    on_arrow_up,
    on_arrow_down,
    on_enter,
    on_pointer_select,
    on_key,
    commit,
)

__all__ = [
    "NO_SELECTION",
    "KEY_ENTER",
    "KEY_ARROW_UP",
    "KEY_ARROW_DOWN",
    "CommitMode",
    "SubmitQuery",
    "SelectTag",
    "SuggestionState",
    "Transition",
    "initial_state",
    "with_options",
    "add_option",
    "on_text_change",
    "on_focus",
    "on_blur",
    "on_arrow_up",
    "on_arrow_down",
    "on_enter",
    "on_pointer_select",
    "on_key",
    "commit",
]
