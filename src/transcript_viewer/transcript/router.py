"""
Route kernel protocol messages to per-type transcript handlers.

Several viewers may listen on the same message bus, so a message is applied
only when its parent msg_id is one this viewer registered in ``responses``.
"""

import logging
from dataclasses import replace
from typing import Mapping, Optional

from .events import KernelMessage, MessageType
from .markup import MarkupService
from .state import (
    ActiveRequest,
    AnnotationItem,
    ErrorRecord,
    PageBreakItem,
    PythonErrorItem,
    TextItem,
    TranscriptState,
    append_item,
)

logger = logging.getLogger(__name__)


def on_display_data(
    state: TranscriptState, message: KernelMessage, markup: MarkupService
) -> TranscriptState:
    data = message.content.get("data")
    if isinstance(data, Mapping):
        state = append_item(state, AnnotationItem(data=data))
    return state


def on_error(
    state: TranscriptState, message: KernelMessage, markup: MarkupService
) -> TranscriptState:
    """
    Render a kernel-reported exception and attach it to its active request.

    ``traceback`` must be a non-empty list of lines; producers guarantee it.
    Each error message gets its own line converter so ANSI state never leaks
    between tracebacks.
    """
    converter = markup.stream_factory()
    name = message.content.get("ename")
    value = message.content.get("evalue")
    traceback = tuple(message.content["traceback"])
    stacktrace = tuple(converter.to_html(line) for line in traceback)

    state = append_item(
        state,
        PythonErrorItem(
            name=name, value=value, traceback=traceback, stacktrace=stacktrace
        ),
    )

    request_id = message.parent_msg_id
    active = state.actives.get(request_id) if request_id is not None else None
    if active is not None:
        record = ErrorRecord(name=name, value=value, traceback=traceback)
        updated = ActiveRequest(errors=(active.errors or ()) + (record,))
        state = replace(state, actives={**state.actives, request_id: updated})

    return state


def _prefix_lines(
    text: str, prompt_label: str, continue_label: Optional[str]
) -> str:
    lines = text.split("\n")
    return "\n".join(
        (prompt_label if index == 0 else (continue_label or prompt_label)) + line
        for index, line in enumerate(lines)
    )


def on_execute_input(
    state: TranscriptState, message: KernelMessage, markup: MarkupService
) -> TranscriptState:
    """Echo the executed source, decorated with the prompt labels."""
    source = message.content.get("name")
    text = message.content.get("code") or ""

    if state.prompt_label:
        text = _prefix_lines(text, state.prompt_label, state.continue_label)

    html = markup.text_to_html(text)
    return append_item(state, TextItem(source=source, html=html))


def on_execute_result(
    state: TranscriptState, message: KernelMessage, markup: MarkupService
) -> TranscriptState:
    data = message.content.get("data")
    if not isinstance(data, Mapping):
        return state

    plain = data.get("text/plain")
    if plain:
        return append_item(
            state, TextItem(source="stdout", html=markup.text_to_html(plain))
        )
    return append_item(state, AnnotationItem(data=data))


def on_execute_reply(
    state: TranscriptState, message: KernelMessage, markup: MarkupService
) -> TranscriptState:
    """Acknowledgement only.

    Completion is tracked through ``status`` messages; whether a reply should
    also settle its active request is left open until a protocol needs it.
    """
    return state


def on_status(
    state: TranscriptState, message: KernelMessage, markup: MarkupService
) -> TranscriptState:
    request_id = message.parent_msg_id
    execution_state = message.content.get("execution_state")

    if execution_state == "busy":
        actives = {**state.actives, request_id: ActiveRequest()}
    else:
        actives = {
            key: active
            for key, active in state.actives.items()
            if key != request_id
        }

    return append_item(replace(state, actives=actives), PageBreakItem())


def on_stream(
    state: TranscriptState, message: KernelMessage, markup: MarkupService
) -> TranscriptState:
    source = message.content.get("name")
    html = markup.text_to_html(message.content.get("text") or "")
    return append_item(state, TextItem(source=source, html=html))


def is_relevant(state: TranscriptState, message: KernelMessage) -> bool:
    """Whether ``message`` answers a request this viewer issued."""
    return (
        state.responses is not None
        and message.parent_msg_id is not None
        and message.parent_msg_id in state.responses
    )


def route_kernel_message(
    state: TranscriptState, message: KernelMessage, markup: MarkupService
) -> TranscriptState:
    """Apply one protocol message to the transcript."""
    if not is_relevant(state, message):
        logger.debug(
            "Ignoring %s for unregistered request %s",
            message.msg_type,
            message.parent_msg_id,
        )
        return state

    match message.msg_type:
        case MessageType.display_data:
            return on_display_data(state, message, markup)
        case MessageType.error:
            return on_error(state, message, markup)
        case MessageType.execute_input:
            return on_execute_input(state, message, markup)
        case MessageType.execute_result:
            return on_execute_result(state, message, markup)
        case MessageType.execute_reply:
            return on_execute_reply(state, message, markup)
        case MessageType.status:
            return on_status(state, message, markup)
        case MessageType.stream:
            return on_stream(state, message, markup)
        case _:
            logger.debug("Ignoring unhandled message type %r", message.msg_type)
            return state
