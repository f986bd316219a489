"""
Handlers for direct UI commands.
"""

import logging
from dataclasses import replace

from .events import (
    Autocomplete,
    ChangePreference,
    Execute,
    Executed,
    Interrupted,
    PromptCommand,
    Restarted,
    WorkingDirectoryChanged,
)
from .execution import ExecuteHelper
from .state import (
    AutocompleteItem,
    TextItem,
    TranscriptState,
    append_item,
    last_item_is_autocomplete,
    remove_last_item,
)

logger = logging.getLogger(__name__)


def on_execute(
    state: TranscriptState, command: Execute, helper: ExecuteHelper
) -> TranscriptState:
    return helper(state, command)


def on_executed(state: TranscriptState, command: Executed) -> TranscriptState:
    """Start listening for protocol messages answering ``request_id``."""
    if state.responses is None:
        return state
    return replace(state, responses={**state.responses, command.request_id: {}})


def _to_number(value: object) -> float:
    """Numeric coercion where blank and missing values count as zero."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return float("nan")


def on_change_preference(
    state: TranscriptState, command: ChangePreference
) -> TranscriptState:
    match command.key:
        case "fontSize":
            return replace(state, font_size=_to_number(command.value))
        case _:
            return state


def on_working_directory_changed(
    state: TranscriptState, command: WorkingDirectoryChanged
) -> TranscriptState:
    if command.cwd:
        state = replace(state, cwd=command.cwd)
    return state


def on_interrupting(state: TranscriptState) -> TranscriptState:
    return state


def on_interrupted(state: TranscriptState, command: Interrupted) -> TranscriptState:
    if command.error:
        logger.error("Unable to interrupt terminal: %r", command.payload)
        return append_item(
            state, TextItem(source="stderr", html="Unable to interrupt terminal")
        )
    return state


def on_restarting(state: TranscriptState) -> TranscriptState:
    return append_item(state, TextItem(source="stdout", html="restarting terminal..."))


def on_restarted(state: TranscriptState, command: Restarted) -> TranscriptState:
    if command.error:
        logger.error("Unable to restart terminal: %r", command.payload)
        return append_item(
            state, TextItem(source="stderr", html="Unable to restart terminal")
        )
    return append_item(state, TextItem(source="stdout", html="done"))


def on_clear(state: TranscriptState) -> TranscriptState:
    return replace(state, items=())


def on_clear_autocomplete(state: TranscriptState) -> TranscriptState:
    if last_item_is_autocomplete(state):
        state = remove_last_item(state)
    return state


def on_autocomplete(state: TranscriptState, command: Autocomplete) -> TranscriptState:
    """Replace the suggestion overlay in place rather than stacking another."""
    state = on_clear_autocomplete(state)
    return append_item(state, AutocompleteItem(matches=tuple(command.matches)))


def on_prompt_command(state: TranscriptState, command: PromptCommand) -> TranscriptState:
    if command.payload.clear_autocomplete:
        state = on_clear_autocomplete(state)
    return state
