"""
Transcript state: history items, active requests and the root state value.

Every value here is frozen. Transitions build new values with
``dataclasses.replace`` and fresh tuples/dicts; nothing is mutated in place,
so a snapshot held by a renderer never changes under it.
"""

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Mapping, Optional, Tuple, Union

from ..runtime_config import ViewerConfig
from .prompt_viewer import PromptState


@dataclass(frozen=True)
class TextItem:
    """Formatted one-way output (stdout/stderr/echoed input)."""

    type: ClassVar[str] = "text"

    source: Optional[str]
    html: str


@dataclass(frozen=True)
class AnnotationItem:
    """Rich payload (e.g. rendered media) passed through verbatim."""

    type: ClassVar[str] = "annotation"

    data: Mapping[str, Any]


@dataclass(frozen=True)
class PythonErrorItem:
    """Raw traceback plus its per-line markup rendering."""

    type: ClassVar[str] = "pythonError"

    name: Optional[str]
    value: Optional[str]
    traceback: Tuple[str, ...]
    stacktrace: Tuple[str, ...]


@dataclass(frozen=True)
class PageBreakItem:
    """Boundary marking a kernel status transition."""

    type: ClassVar[str] = "pageBreak"


@dataclass(frozen=True)
class AutocompleteItem:
    """Transient suggestion overlay; only ever the last item."""

    type: ClassVar[str] = "autocomplete"

    matches: Tuple[str, ...]


HistoryItem = Union[
    TextItem, AnnotationItem, PythonErrorItem, PageBreakItem, AutocompleteItem
]


@dataclass(frozen=True)
class ErrorRecord:
    name: Optional[str]
    value: Optional[str]
    traceback: Tuple[str, ...]


@dataclass(frozen=True)
class ActiveRequest:
    """An execution currently reported busy by the kernel."""

    errors: Optional[Tuple[ErrorRecord, ...]] = None


@dataclass(frozen=True)
class TranscriptState:
    """
    Root state of one transcript viewer.

    Attributes:
        items: History items in display order.
        actives: Request ids whose execution is busy, with collected errors.
        responses: Request ids this viewer issued. ``None`` disables
            correlation entirely, so no kernel message is ever applied.
        font_size: Display font size preference.
        cwd: Kernel working directory as last reported.
        prompt_label: Prefix for the first line of echoed input.
        continue_label: Prefix for the following lines of echoed input.
        prompt: Command-line sub-state, owned by ``prompt_viewer``.
    """

    items: Tuple[HistoryItem, ...] = ()
    actives: Mapping[str, ActiveRequest] = field(default_factory=dict)
    responses: Optional[Mapping[str, Mapping[str, Any]]] = field(
        default_factory=dict
    )
    font_size: Optional[float] = None
    cwd: Optional[str] = None
    prompt_label: Optional[str] = None
    continue_label: Optional[str] = None
    prompt: PromptState = field(default_factory=PromptState)

    @classmethod
    def initial(cls, config: ViewerConfig) -> "TranscriptState":
        """Build the state a new session starts from."""
        return cls(
            responses={} if config.track_responses else None,
            font_size=config.font_size,
            cwd=config.cwd,
            prompt_label=config.prompt_label,
            continue_label=config.continue_label,
        )


def append_item(state: TranscriptState, item: HistoryItem) -> TranscriptState:
    """Return a new state with ``item`` added to the end of the log."""
    return replace(state, items=state.items + (item,))


def remove_last_item(state: TranscriptState) -> TranscriptState:
    """Return a new state without the final history item.

    The log must not be empty.
    """
    if not state.items:
        raise IndexError("remove_last_item called on an empty history")
    return replace(state, items=state.items[:-1])


def last_item_is_autocomplete(state: TranscriptState) -> bool:
    return bool(state.items) and isinstance(state.items[-1], AutocompleteItem)
