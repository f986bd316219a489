from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from transcript_viewer.transcript.events import KernelMessage, KernelResponse
from transcript_viewer.transcript.markup import MarkupService
from transcript_viewer.transcript.reducer import TranscriptReducer


class RecordingStream:
    """Line converter that tags lines instead of rendering them."""

    def __init__(self, created: List["RecordingStream"]) -> None:
        self.lines: List[str] = []
        created.append(self)

    def to_html(self, line: str) -> str:
        self.lines.append(line)
        return f"<line>{line}</line>"


@pytest.fixture
def created_streams() -> List[RecordingStream]:
    """Track the line converters created by the reducer."""
    return []


@pytest.fixture
def markup(created_streams: List[RecordingStream]) -> MarkupService:
    """Markup service with predictable output for assertions."""
    return MarkupService(
        text_to_html=lambda text: f"<html>{text}</html>",
        stream_factory=lambda: RecordingStream(created_streams),
    )


@pytest.fixture
def reducer(markup: MarkupService) -> TranscriptReducer:
    return TranscriptReducer(markup=markup)


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep log files out of the real data directory."""
    data_home = tmp_path / "data"
    monkeypatch.setenv("XDG_DATA_HOME", str(data_home))
    return data_home


def kernel_response(
    msg_type: str,
    msg_id: Optional[str] = "5",
    **content: Any,
) -> KernelResponse:
    """Build a protocol message envelope event."""
    return KernelResponse(
        KernelMessage(msg_type=msg_type, parent_msg_id=msg_id, content=content)
    )


def raw_kernel_response(
    msg_type: str, msg_id: str = "5", **content: Any
) -> Dict[str, Any]:
    """Build a recorded kernelResponse event object."""
    return {
        "type": "kernelResponse",
        "payload": {
            "result": {
                "msg_type": msg_type,
                "parent_header": {"msg_id": msg_id},
                "content": content,
            }
        },
    }
