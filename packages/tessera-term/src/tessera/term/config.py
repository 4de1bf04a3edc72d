"""Renderer configuration, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from tessera.term.color import AnsiLevel

ENV_ANSI_LEVEL = "TESSERA_ANSI_LEVEL"
ENV_LOG_PATH = "TESSERA_LOG_PATH"
ENV_LOG_LEVEL = "TESSERA_LOG_LEVEL"

LOG_LEVELS = ("debug", "verbose")

_TRUECOLOR_TERM_PROGRAMS = ("iterm.app", "wezterm", "vscode", "ghostty", "alacritty")


def detect_ansi_level(environ: Mapping[str, str] | None = None) -> AnsiLevel:
    """Guess the color support of the attached terminal from *environ*."""
    if environ is None:
        environ = os.environ

    if "NO_COLOR" in environ:
        return AnsiLevel.NONE

    term = environ.get("TERM", "").lower()
    term_program = environ.get("TERM_PROGRAM", "").lower()
    color_term = environ.get("COLORTERM", "").lower()

    if color_term in ("truecolor", "24bit"):
        return AnsiLevel.TRUECOLOR
    if environ.get("KITTY_WINDOW_ID") or term_program in _TRUECOLOR_TERM_PROGRAMS:
        return AnsiLevel.TRUECOLOR
    if "256color" in term:
        return AnsiLevel.ANSI256
    if term == "dumb":
        return AnsiLevel.NONE
    return AnsiLevel.ANSI16


@dataclass
class RenderConfig:
    """Settings for a rendering session."""

    ansi_level: AnsiLevel = AnsiLevel.TRUECOLOR
    # Log file to append to; empty disables file logging.
    log_path: str = ""
    log_level: str = "debug"

    def __post_init__(self) -> None:
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level {self.log_level!r}; expected one of {', '.join(LOG_LEVELS)}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RenderConfig:
        """Build a config from ``TESSERA_*`` variables in *environ*."""
        if environ is None:
            environ = os.environ

        level_name = environ.get(ENV_ANSI_LEVEL, "")
        ansi_level = AnsiLevel.parse(level_name) if level_name else detect_ansi_level(environ)

        return cls(
            ansi_level=ansi_level,
            log_path=environ.get(ENV_LOG_PATH, ""),
            log_level=environ.get(ENV_LOG_LEVEL, "debug").strip().lower() or "debug",
        )
