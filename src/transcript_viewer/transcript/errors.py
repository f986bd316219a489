"""
Errors raised while decoding raw transcript events.

The reducer itself never raises these; they surface only at the edge where
JSON objects are turned into event values.
"""


class TranscriptEventError(Exception):
    """Base class for event decoding failures."""


class MalformedEventError(TranscriptEventError):
    """Raised when a raw event is not shaped like any event."""


class UnknownEventError(TranscriptEventError):
    """Raised when a raw event names a command this viewer does not know."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown transcript event: {name!r}")
        self.name = name
