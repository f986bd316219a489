"""
Default execution-lifecycle helper for submitted executions.
"""

import logging
from typing import Callable

from .events import Execute
from .state import TranscriptState, last_item_is_autocomplete, remove_last_item

logger = logging.getLogger(__name__)

ExecuteHelper = Callable[[TranscriptState, Execute], TranscriptState]


def submit_execution(state: TranscriptState, command: Execute) -> TranscriptState:
    """Record that a new execution was submitted.

    A submitted execution supersedes any suggestions still on screen, so the
    autocomplete overlay is retracted.
    """
    logger.info("Execution submitted (%d chars)", len(command.code or ""))
    if last_item_is_autocomplete(state):
        state = remove_last_item(state)
    return state
