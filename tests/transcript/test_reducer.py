"""Tests for the composed transcript reducer."""

import random
from typing import List

from conftest import kernel_response

from transcript_viewer.runtime_config import ViewerConfig
from transcript_viewer.transcript.events import (
    Autocomplete,
    ChangePreference,
    Clear,
    ClearAutocomplete,
    Execute,
    Executed,
    Interrupted,
    Interrupting,
    PromptAction,
    PromptCommand,
    Restarted,
    TranscriptEvent,
    WorkingDirectoryChanged,
)
from transcript_viewer.transcript.markup import MarkupService, ascii_to_html
from transcript_viewer.transcript.reducer import TranscriptReducer, reduce_transcript
from transcript_viewer.transcript.state import (
    ActiveRequest,
    AutocompleteItem,
    PageBreakItem,
    TextItem,
    TranscriptState,
)


def test_full_round_trip() -> None:
    state = TranscriptState(items=(), actives={}, responses={})

    state = reduce_transcript(state, Executed(request_id="5"))
    assert state.responses == {"5": {}}

    state = reduce_transcript(state, kernel_response("status", execution_state="busy"))
    assert state.actives == {"5": ActiveRequest()}
    assert state.items == (PageBreakItem(),)

    state = reduce_transcript(
        state, kernel_response("execute_result", data={"text/plain": "42"})
    )
    assert state.items[-1] == TextItem(source="stdout", html=ascii_to_html("42"))

    state = reduce_transcript(state, kernel_response("status", execution_state="idle"))
    assert state.actives == {}
    assert state.items[-1] == PageBreakItem()
    assert len(state.items) == 3


def test_messages_before_executed_are_ignored(reducer: TranscriptReducer) -> None:
    state = TranscriptState()
    state = reducer(state, kernel_response("stream", name="stdout", text="early"))
    assert state.items == ()


def test_clear_keeps_session_attributes(reducer: TranscriptReducer) -> None:
    state = TranscriptState()
    state = reducer.replay(
        state,
        [
            Executed(request_id="5"),
            kernel_response("stream", name="stdout", text="hello"),
            ChangePreference("fontSize", "16"),
            WorkingDirectoryChanged("/work"),
            Clear(),
        ],
    )
    assert state.items == ()
    assert state.font_size == 16.0
    assert state.cwd == "/work"


def test_initial_state_from_config(reducer: TranscriptReducer) -> None:
    config = ViewerConfig(prompt_label=">>> ", continue_label="... ", font_size=12.0)
    state = TranscriptState.initial(config)
    state = reducer.replay(
        state,
        [Executed(request_id="5"), kernel_response("execute_input", name="stdin", code="a\nb")],
    )
    assert state.items == (TextItem(source="stdin", html="<html>>>> a\n... b</html>"),)
    assert state.font_size == 12.0


def test_untracked_viewer_ignores_kernel_messages(reducer: TranscriptReducer) -> None:
    state = TranscriptState.initial(ViewerConfig(track_responses=False))
    state = reducer.replay(
        state,
        [Executed(request_id="5"), kernel_response("status", execution_state="busy")],
    )
    assert state.responses is None
    assert state.items == ()
    assert state.actives == {}


def test_prompt_sees_post_core_state(reducer: TranscriptReducer) -> None:
    state = reducer(TranscriptState(), Autocomplete(matches=("abs", "all")))
    assert state.prompt.suggestions_visible
    assert state.items == (AutocompleteItem(matches=("abs", "all")),)

    state = reducer(
        state, PromptCommand(PromptAction(clear_autocomplete=True, text="ab"))
    )
    assert state.items == ()
    assert not state.prompt.suggestions_visible
    assert state.prompt.document.text == "ab"


def test_execute_drops_overlay_and_records_history(reducer: TranscriptReducer) -> None:
    state = reducer.replay(
        TranscriptState(),
        [
            PromptCommand(PromptAction(text="print(1)")),
            Autocomplete(matches=("print",)),
            Execute(),
        ],
    )
    assert state.items == ()
    assert state.prompt.history == ("print(1)",)
    assert state.prompt.document.text == ""


def test_custom_execute_helper_is_used(markup: MarkupService) -> None:
    seen: List[Execute] = []

    def helper(state: TranscriptState, command: Execute) -> TranscriptState:
        seen.append(command)
        return state

    reducer = TranscriptReducer(markup=markup, execute_helper=helper)
    reducer(TranscriptState(), Execute(code="x = 1"))
    assert seen == [Execute(code="x = 1")]


def test_unknown_event_leaves_state(reducer: TranscriptReducer) -> None:
    state = TranscriptState()
    assert reducer.reduce_core(state, object()) is state  # type: ignore[arg-type]


def test_autocomplete_overlay_is_single_and_last(reducer: TranscriptReducer) -> None:
    rng = random.Random(7)
    events: List[TranscriptEvent] = [
        Autocomplete(matches=("a",)),
        Autocomplete(matches=("b", "c")),
        ClearAutocomplete(),
    ]
    state = reducer(TranscriptState(), Executed(request_id="5"))
    for _ in range(200):
        state = reducer(state, rng.choice(events))
        overlays = [i for i in state.items if isinstance(i, AutocompleteItem)]
        assert len(overlays) <= 1
        if overlays:
            assert state.items[-1] is overlays[0]


def test_items_only_grow_without_clear_or_overlay(reducer: TranscriptReducer) -> None:
    rng = random.Random(11)
    events: List[TranscriptEvent] = [
        kernel_response("status", execution_state="busy"),
        kernel_response("status", execution_state="idle"),
        kernel_response("stream", name="stdout", text="out"),
        kernel_response("error", ename="E", evalue="v", traceback=["tb"]),
        kernel_response("display_data", data={"image/png": "AA"}),
        kernel_response("execute_reply"),
        Interrupting(),
        Interrupted(error=True),
        Restarted(error=False),
        ChangePreference("fontSize", 3),
    ]
    state = reducer(TranscriptState(), Executed(request_id="5"))
    for _ in range(200):
        previous = state.items
        state = reducer(state, rng.choice(events))
        assert len(state.items) >= len(previous)
        assert state.items[: len(previous)] == previous
