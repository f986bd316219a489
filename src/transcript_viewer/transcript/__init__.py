"""Transcript state engine: events in, history items out."""

from .events import TranscriptEvent, event_from_dict
from .reducer import TranscriptReducer, reduce_transcript
from .state import TranscriptState

__all__ = [
    "TranscriptEvent",
    "TranscriptReducer",
    "TranscriptState",
    "event_from_dict",
    "reduce_transcript",
]
