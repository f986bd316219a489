"""
Runtime configuration for the transcript viewer.

This module provides:
- load_envs(): load the TRANSCRIPT_VIEWER_* settings from a .env file
  if they are not already present in the environment.
- ViewerConfig: a dataclass holding the session defaults a transcript
  starts from (prompt labels, font size, working directory).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

# Environment variable names for viewer defaults
PROMPT_LABEL_ENV: str = "TRANSCRIPT_VIEWER_PROMPT_LABEL"
CONTINUE_LABEL_ENV: str = "TRANSCRIPT_VIEWER_CONTINUE_LABEL"
FONT_SIZE_ENV: str = "TRANSCRIPT_VIEWER_FONT_SIZE"
LOG_LEVEL_ENV: str = "TRANSCRIPT_VIEWER_LOG_LEVEL"


def load_envs(env_file: Optional[str] = None) -> None:
    """
    Load the TRANSCRIPT_VIEWER_* settings from a .env file into the process
    environment if they are not already set.
    """
    env_values = dotenv_values(env_file) if env_file else dotenv_values()
    for key in (PROMPT_LABEL_ENV, CONTINUE_LABEL_ENV, FONT_SIZE_ENV, LOG_LEVEL_ENV):
        if not os.environ.get(key):
            val = env_values.get(key)
            if val:
                os.environ[key] = str(val)


@dataclass(frozen=True)
class ViewerConfig:
    """
    Session defaults for one transcript viewer.

    Attributes:
        prompt_label: Prefix for the first line of echoed input, e.g. ">>> ".
        continue_label: Prefix for following lines; falls back to prompt_label.
        font_size: Initial font size preference.
        cwd: Initial working directory shown for the kernel.
        track_responses: Whether this viewer correlates kernel messages to the
            requests it issued. When False no kernel message is applied.
    """

    prompt_label: Optional[str] = None
    continue_label: Optional[str] = None
    font_size: Optional[float] = None
    cwd: Optional[str] = None
    track_responses: bool = True

    @classmethod
    def from_env(cls, track_responses: bool = True) -> "ViewerConfig":
        """Build a ViewerConfig from the TRANSCRIPT_VIEWER_* variables."""
        font_size = os.environ.get(FONT_SIZE_ENV)
        return cls(
            prompt_label=os.environ.get(PROMPT_LABEL_ENV) or None,
            continue_label=os.environ.get(CONTINUE_LABEL_ENV) or None,
            font_size=float(font_size) if font_size else None,
            cwd=os.getcwd(),
            track_responses=track_responses,
        )


def get_data_dir() -> Path:
    """
    Return the transcript viewer data directory under XDG_DATA_HOME or fallback to ~/.local/share.
    """
    data_home = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return data_home / "transcript_viewer"
