"""
Inbound transcript events.

Two kinds of event reach the reducer: a ``KernelResponse`` wrapping one
Jupyter-style protocol message, and the direct UI commands. Raw JSON objects
(as recorded in a session log) are decoded here into these typed values.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple, Union

from .errors import MalformedEventError, UnknownEventError


class MessageType(str, Enum):
    """Protocol message types the transcript reacts to."""

    display_data = "display_data"
    error = "error"
    execute_input = "execute_input"
    execute_result = "execute_result"
    execute_reply = "execute_reply"
    status = "status"
    stream = "stream"


@dataclass(frozen=True)
class KernelMessage:
    """A protocol message, reduced to the fields the transcript consumes."""

    msg_type: Optional[str]
    parent_msg_id: Optional[str]
    content: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class KernelResponse:
    """Envelope event carrying one protocol message."""

    message: KernelMessage


@dataclass(frozen=True)
class Execute:
    """A new execution was submitted from the prompt."""

    code: Optional[str] = None


@dataclass(frozen=True)
class Executed:
    """The kernel accepted an execution; ``request_id`` is its msg_id."""

    request_id: str


@dataclass(frozen=True)
class ChangePreference:
    key: str
    value: Any = None


@dataclass(frozen=True)
class WorkingDirectoryChanged:
    cwd: Optional[str] = None


@dataclass(frozen=True)
class Interrupting:
    pass


@dataclass(frozen=True)
class Interrupted:
    error: bool = False
    payload: Any = None


@dataclass(frozen=True)
class Restarting:
    pass


@dataclass(frozen=True)
class Restarted:
    error: bool = False
    payload: Any = None


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class Autocomplete:
    matches: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ClearAutocomplete:
    pass


@dataclass(frozen=True)
class PromptAction:
    """
    Payload emitted by the command-line sub-component.

    Attributes:
        clear_autocomplete: The user started typing; drop visible suggestions.
        text: New buffer text, if the buffer changed.
        cursor_position: Cursor position within ``text``.
        history: ``"previous"`` or ``"next"`` to walk submitted entries.
    """

    clear_autocomplete: bool = False
    text: Optional[str] = None
    cursor_position: Optional[int] = None
    history: Optional[str] = None


@dataclass(frozen=True)
class PromptCommand:
    payload: PromptAction = field(default_factory=PromptAction)


TranscriptCommand = Union[
    Execute,
    Executed,
    ChangePreference,
    WorkingDirectoryChanged,
    Interrupting,
    Interrupted,
    Restarting,
    Restarted,
    Clear,
    Autocomplete,
    ClearAutocomplete,
    PromptCommand,
]

TranscriptEvent = Union[KernelResponse, TranscriptCommand]


def kernel_message_from_dict(raw: Mapping[str, Any]) -> KernelMessage:
    """Decode a raw protocol envelope ``{msg_type, parent_header, content}``."""
    if not isinstance(raw, Mapping):
        raise MalformedEventError(f"Expected a protocol message object, got {raw!r}")
    parent_header = raw.get("parent_header") or {}
    if not isinstance(parent_header, Mapping):
        raise MalformedEventError(
            f"parent_header must be an object, got {parent_header!r}"
        )
    content = raw.get("content") or {}
    if not isinstance(content, Mapping):
        raise MalformedEventError(f"content must be an object, got {content!r}")
    return KernelMessage(
        msg_type=raw.get("msg_type"),
        parent_msg_id=parent_header.get("msg_id"),
        content=content,
    )


def _optional(value: Any, kind: type) -> Any:
    return value if isinstance(value, kind) and not isinstance(value, bool) else None


def _prompt_action_from_dict(raw: Any) -> PromptAction:
    if not isinstance(raw, Mapping):
        return PromptAction()
    return PromptAction(
        clear_autocomplete=bool(raw.get("clearAutocomplete")),
        text=_optional(raw.get("text"), str),
        cursor_position=_optional(raw.get("cursorPosition"), int),
        history=_optional(raw.get("history"), str),
    )


def _matches_from_payload(payload: Any) -> Tuple[str, ...]:
    if payload is None:
        return ()
    if not isinstance(payload, (list, tuple)) or not all(
        isinstance(match, str) for match in payload
    ):
        raise MalformedEventError(
            f"autocomplete payload must be a list of strings, got {payload!r}"
        )
    return tuple(payload)


def event_from_dict(raw: Mapping[str, Any]) -> TranscriptEvent:
    """
    Decode one recorded event object into a typed event.

    The object's ``type`` names the event; the remaining fields follow the
    command shapes (``payload``, ``value``, ``cwd``, ``error``, ``key``).

    Raises:
        MalformedEventError: If ``raw`` is not an object with a string type,
            or a nested field has the wrong shape.
        UnknownEventError: If the type names no known event.
    """
    if not isinstance(raw, Mapping) or not isinstance(raw.get("type"), str):
        raise MalformedEventError(f"Expected an event object with a type, got {raw!r}")

    payload = raw.get("payload")
    match raw["type"]:
        case "kernelResponse":
            result = payload.get("result") if isinstance(payload, Mapping) else None
            return KernelResponse(kernel_message_from_dict(result or {}))
        case "execute":
            return Execute(code=payload if isinstance(payload, str) else None)
        case "executed":
            if payload is None:
                raise MalformedEventError("executed event requires a request id payload")
            return Executed(request_id=str(payload))
        case "changePreference":
            return ChangePreference(key=raw.get("key", ""), value=raw.get("value"))
        case "workingDirectoryChanged":
            return WorkingDirectoryChanged(cwd=raw.get("cwd"))
        case "interrupting":
            return Interrupting()
        case "interrupted":
            return Interrupted(error=bool(raw.get("error")), payload=payload)
        case "restarting":
            return Restarting()
        case "restarted":
            return Restarted(error=bool(raw.get("error")), payload=payload)
        case "clear":
            return Clear()
        case "autocomplete":
            return Autocomplete(matches=_matches_from_payload(payload))
        case "clearAutocomplete":
            return ClearAutocomplete()
        case "promptCommand":
            return PromptCommand(payload=_prompt_action_from_dict(payload))
        case name:
            raise UnknownEventError(name)
