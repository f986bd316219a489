"""
Top-level transcript reducer.

``TranscriptReducer`` folds one event into a ``TranscriptState``: the
transcript's own transition runs first, then the embedded prompt reducer runs
on the result and its subtree is merged back.
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable

from .commands import (
    on_autocomplete,
    on_change_preference,
    on_clear,
    on_clear_autocomplete,
    on_execute,
    on_executed,
    on_interrupted,
    on_interrupting,
    on_prompt_command,
    on_restarted,
    on_restarting,
    on_working_directory_changed,
)
from .events import (
    Autocomplete,
    ChangePreference,
    Clear,
    ClearAutocomplete,
    Execute,
    Executed,
    Interrupted,
    Interrupting,
    KernelResponse,
    PromptCommand,
    Restarted,
    Restarting,
    TranscriptEvent,
    WorkingDirectoryChanged,
)
from .execution import ExecuteHelper, submit_execution
from .markup import DEFAULT_MARKUP, MarkupService
from .prompt_viewer import reduce_prompt
from .router import route_kernel_message
from .state import TranscriptState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscriptReducer:
    """
    Pure ``(state, event) -> state`` transition for one transcript viewer.

    Attributes:
        markup: Converters used to render kernel output as HTML.
        execute_helper: Transition applied when an execution is submitted.
    """

    markup: MarkupService = DEFAULT_MARKUP
    execute_helper: ExecuteHelper = submit_execution

    def reduce_core(
        self, state: TranscriptState, event: TranscriptEvent
    ) -> TranscriptState:
        """Apply the transcript's own transition, leaving ``prompt`` alone."""
        match event:
            case KernelResponse(message=message):
                return route_kernel_message(state, message, self.markup)
            case Execute():
                return on_execute(state, event, self.execute_helper)
            case Executed():
                return on_executed(state, event)
            case ChangePreference():
                return on_change_preference(state, event)
            case WorkingDirectoryChanged():
                return on_working_directory_changed(state, event)
            case Interrupting():
                return on_interrupting(state)
            case Interrupted():
                return on_interrupted(state, event)
            case Restarting():
                return on_restarting(state)
            case Restarted():
                return on_restarted(state, event)
            case Clear():
                return on_clear(state)
            case Autocomplete():
                return on_autocomplete(state, event)
            case ClearAutocomplete():
                return on_clear_autocomplete(state)
            case PromptCommand():
                return on_prompt_command(state, event)
            case _:
                logger.warning("Unhandled transcript event: %r", event)
                return state

    def __call__(
        self, state: TranscriptState, event: TranscriptEvent
    ) -> TranscriptState:
        state = self.reduce_core(state, event)
        return replace(state, prompt=reduce_prompt(state.prompt, event))

    def replay(
        self, state: TranscriptState, events: Iterable[TranscriptEvent]
    ) -> TranscriptState:
        """Fold ``events`` into ``state`` in delivery order."""
        for event in events:
            state = self(state, event)
        return state


reduce_transcript = TranscriptReducer()
