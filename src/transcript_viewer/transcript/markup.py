"""
Plain/ANSI text to HTML markup, rendered through Rich.

Kernel output arrives as plain text that may carry ANSI colour escapes
(IPython tracebacks always do). Rich decodes the escapes into styled ``Text``
and its recording console exports the result as an HTML fragment.
"""

import io
from dataclasses import dataclass
from typing import Callable, Protocol

from rich.ansi import AnsiDecoder
from rich.console import Console
from rich.text import Text

# Wide enough that no transcript line is ever wrapped by the exporter.
_EXPORT_WIDTH = 10_000


def _text_to_html(text: Text) -> str:
    console = Console(
        record=True,
        file=io.StringIO(),
        width=_EXPORT_WIDTH,
        force_terminal=True,
        color_system="truecolor",
    )
    console.print(text, end="", soft_wrap=True)
    return console.export_html(inline_styles=True, code_format="{code}")


def ascii_to_html(text: str) -> str:
    """Convert a block of plain text with ANSI escapes to HTML."""
    return _text_to_html(Text.from_ansi(text, end=""))


class LineConverter(Protocol):
    def to_html(self, line: str) -> str: ...


class AnsiToHtmlStream:
    """
    Line-by-line converter that keeps ANSI state between lines.

    A style opened on one line and not reset stays applied to the following
    lines, matching how a terminal would paint the same output.
    """

    def __init__(self) -> None:
        self._decoder = AnsiDecoder()

    def to_html(self, line: str) -> str:
        text = Text("", end="")
        for index, decoded in enumerate(self._decoder.decode(line)):
            if index:
                text.append("\n")
            text.append_text(decoded)
        return _text_to_html(text)


@dataclass(frozen=True)
class MarkupService:
    """Converters the reducer renders kernel output with."""

    text_to_html: Callable[[str], str] = ascii_to_html
    stream_factory: Callable[[], LineConverter] = AnsiToHtmlStream


DEFAULT_MARKUP = MarkupService()
