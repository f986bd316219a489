"""
Command-line sub-state embedded in the transcript.

The prompt owns its own slice of state and its own reducer. The transcript
reducer runs first and hands every event on to ``reduce_prompt`` afterwards,
so the prompt always sees the post-transcript state.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from prompt_toolkit.document import Document

from .events import (
    Autocomplete,
    ClearAutocomplete,
    Execute,
    PromptCommand,
    TranscriptEvent,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PromptState:
    """
    Attributes:
        document: Current buffer text and cursor, immutable.
        history: Submitted entries, oldest first.
        history_index: Position while walking history; ``None`` when editing
            a fresh line.
        suggestions_visible: Whether an autocomplete overlay is showing.
    """

    document: Document = field(default_factory=Document)
    history: Tuple[str, ...] = ()
    history_index: Optional[int] = None
    suggestions_visible: bool = False


def _walk_history(state: PromptState, direction: str) -> PromptState:
    if not state.history:
        return state

    if direction == "previous":
        if state.history_index is None:
            index = len(state.history) - 1
        else:
            index = max(state.history_index - 1, 0)
    elif direction == "next":
        if state.history_index is None:
            return state
        if state.history_index + 1 >= len(state.history):
            return replace(state, document=Document(), history_index=None)
        index = state.history_index + 1
    else:
        logger.debug("Ignoring unknown history direction %r", direction)
        return state

    text = state.history[index]
    return replace(
        state, document=Document(text, cursor_position=len(text)), history_index=index
    )


def _edit(state: PromptState, text: Optional[str], cursor: Optional[int]) -> PromptState:
    if text is None:
        return state
    if cursor is None or not 0 <= cursor <= len(text):
        cursor = len(text)
    return replace(state, document=Document(text, cursor_position=cursor))


def reduce_prompt(state: PromptState, event: TranscriptEvent) -> PromptState:
    """Apply one transcript event to the prompt sub-state."""
    match event:
        case PromptCommand(payload=action):
            if action.clear_autocomplete:
                state = replace(state, suggestions_visible=False)
            if action.history:
                return _walk_history(state, action.history)
            return _edit(state, action.text, action.cursor_position)
        case Execute(code=code):
            submitted = code if code is not None else state.document.text
            history = state.history
            if submitted.strip():
                history = history + (submitted,)
            return replace(
                state,
                document=Document(),
                history=history,
                history_index=None,
                suggestions_visible=False,
            )
        case Autocomplete():
            return replace(state, suggestions_visible=True)
        case ClearAutocomplete():
            return replace(state, suggestions_visible=False)
        case _:
            return state
