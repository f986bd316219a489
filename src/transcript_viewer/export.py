"""
Render a transcript's history items to a standalone HTML page.
"""

import json
from typing import Any, Mapping

from jinja2 import Environment, PackageLoader, select_autoescape

from .transcript.state import TranscriptState

TEMPLATE_ENV = Environment(
    loader=PackageLoader("transcript_viewer", "templates"),
    autoescape=select_autoescape(["html", "jinja2"]),
    keep_trailing_newline=True,
)

IMAGE_MIME_TYPES = ("image/png", "image/jpeg", "image/gif")


def _pretty_json(data: Mapping[str, Any]) -> str:
    return json.dumps(data, indent=2, sort_keys=True, default=str)


TEMPLATE_ENV.filters["pretty_json"] = _pretty_json
TEMPLATE_ENV.globals["IMAGE_MIME_TYPES"] = IMAGE_MIME_TYPES


def render_transcript_html(state: TranscriptState, title: str = "Transcript") -> str:
    """Paint every history item by its type tag."""
    template = TEMPLATE_ENV.get_template("transcript.html.jinja2")
    return template.render(
        title=title,
        items=state.items,
        font_size=state.font_size,
        cwd=state.cwd or "",
    )
