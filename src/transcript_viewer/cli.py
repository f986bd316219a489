import html
import json
import logging
import re
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text
from typing_extensions import Annotated

from transcript_viewer.export import render_transcript_html
from transcript_viewer.logger import setup_logging
from transcript_viewer.runtime_config import (
    CONTINUE_LABEL_ENV,
    FONT_SIZE_ENV,
    PROMPT_LABEL_ENV,
    ViewerConfig,
    load_envs,
)
from transcript_viewer.transcript import (
    TranscriptEvent,
    TranscriptState,
    event_from_dict,
    reduce_transcript,
)
from transcript_viewer.transcript.errors import TranscriptEventError
from transcript_viewer.transcript.state import (
    AnnotationItem,
    AutocompleteItem,
    PythonErrorItem,
    TextItem,
)

logger = logging.getLogger(__name__)

console = Console()


class EventFileError(Exception):
    """Raised when a line of an events file cannot be decoded."""

    def __init__(self, line_number: int, reason: str) -> None:
        super().__init__(f"line {line_number}: {reason}")
        self.line_number = line_number
        self.reason = reason


def read_events(path: Path) -> Iterator[TranscriptEvent]:
    """Decode a JSON-lines file of recorded transcript events."""
    with path.open(encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                yield event_from_dict(json.loads(line))
            except json.JSONDecodeError as e:
                raise EventFileError(line_number, f"invalid JSON ({e.msg})") from e
            except TranscriptEventError as e:
                raise EventFileError(line_number, str(e)) from e


TAG_PATTERN = re.compile(r"<[^>]*>")


def _plain_text(markup: str) -> str:
    return html.unescape(TAG_PATTERN.sub("", markup))


def _describe(item: object) -> str:
    match item:
        case TextItem(source=source, html=text_html):
            return f"[{source}] {_plain_text(text_html)}"
        case AnnotationItem(data=data):
            return ", ".join(sorted(data))
        case PythonErrorItem(name=name, value=value):
            return f"{name}: {value}"
        case AutocompleteItem(matches=matches):
            return " ".join(matches)
        case _:
            return ""


def print_summary(state: TranscriptState) -> None:
    """Print one row per history item."""
    table = Table(title="Transcript", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Content", overflow="fold")
    for index, item in enumerate(state.items, start=1):
        table.add_row(str(index), item.type, Text(_describe(item)))
    console.print(table)
    if state.actives:
        console.print(
            f"[yellow]Still busy:[/yellow] {', '.join(sorted(state.actives))}"
        )


def replay(
    events_file: Annotated[
        Path,
        typer.Argument(
            exists=True, dir_okay=False, help="JSON-lines file of recorded events"
        ),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the transcript as HTML here"),
    ] = None,
    prompt_label: Annotated[
        Optional[str],
        typer.Option(envvar=PROMPT_LABEL_ENV, help="Prefix for echoed input"),
    ] = None,
    continue_label: Annotated[
        Optional[str],
        typer.Option(
            envvar=CONTINUE_LABEL_ENV, help="Prefix for continuation lines"
        ),
    ] = None,
    font_size: Annotated[
        Optional[float],
        typer.Option(envvar=FONT_SIZE_ENV, help="Initial font size"),
    ] = None,
    responses: Annotated[
        bool,
        typer.Option(
            "--responses/--no-responses",
            help="Correlate kernel messages to executed requests",
        ),
    ] = True,
) -> None:
    """Replay recorded kernel messages and commands into a transcript."""
    config = ViewerConfig(
        prompt_label=prompt_label,
        continue_label=continue_label,
        font_size=font_size,
        cwd=str(Path.cwd()),
        track_responses=responses,
    )
    logger.info(f"Replaying {events_file}")

    try:
        state = reduce_transcript.replay(
            TranscriptState.initial(config), read_events(events_file)
        )
    except EventFileError as e:
        typer.echo(f"Error: {events_file}: {e}", err=True)
        raise typer.Exit(code=1)

    if output is None:
        print_summary(state)
        return

    output.write_text(render_transcript_html(state, title=events_file.name))
    typer.echo(f"Wrote {len(state.items)} items to {output}")


def create_app() -> typer.Typer:
    """
    Create and configure the Typer application.

    Returns:
        Typer application
    """
    setup_logging()

    # Load viewer defaults from .env if not already set in the environment
    load_envs()

    app = typer.Typer(rich_markup_mode=None, no_args_is_help=True)
    app.command("replay")(replay)

    @app.callback()
    def main() -> None:
        """TRANSCRIPT VIEWER - render kernel session transcripts"""

    return app


def run() -> None:
    create_app()()


if __name__ == "__main__":
    run()
