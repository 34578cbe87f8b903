"""
Logging configuration — central setup for the CLI entrypoint.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Every line has the shape ``[timestamp] [Level] message``.  The console
copy is coloured by level; the file copy is plain and appended to.

Levels are resolved in precedence order:
    CLI flag  >  PROVISION_LOG_LEVEL env var  >  INFO (default)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

# ── Format strings ──────────────────────────────────────────────

_FMT = "[%(asctime)s] [%(levelname)s] %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Operator-facing level names
_LEVEL_NAMES = {
    logging.DEBUG: "Debug",
    logging.INFO: "Info",
    logging.WARNING: "Warning",
    logging.ERROR: "Error",
    logging.CRITICAL: "Error",
}

_LEVEL_COLORS = {
    logging.DEBUG: "bright_black",
    logging.INFO: "cyan",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}

# Third-party loggers that are noisy at INFO/DEBUG
_NOISY_LOGGERS = ("urllib3",)


class BracketFormatter(logging.Formatter):
    """``[timestamp] [Level] message`` with Info/Warning/Error names."""

    def __init__(self, color: bool = False):
        super().__init__(_FMT, datefmt=_DATEFMT)
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        record.levelname = _LEVEL_NAMES.get(record.levelno, original.title())
        try:
            line = super().format(record)
        finally:
            record.levelname = original
        if self.color:
            fg = _LEVEL_COLORS.get(record.levelno)
            line = click.style(line, fg=fg, bold=record.levelno >= logging.ERROR)
        return line


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    quiet_third_party: bool = True,
    color: bool | None = None,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file (opened for append).
        quiet_third_party: If True, keep noisy third-party loggers at
            WARNING unless we're at DEBUG level.
        color: Colourise console output.  Defaults to whether stderr
            is a terminal.
    """
    numeric_level = _parse_level(level)
    if color is None:
        color = sys.stderr.isatty()

    # ── Console handler (stderr) ────────────────────────────────
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(BracketFormatter(color=color))

    # ── Root logger ─────────────────────────────────────────────
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    # ── File handler (optional) ─────────────────────────────────
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, mode="a", encoding="utf-8")
        fh.setLevel(numeric_level)
        fh.setFormatter(BracketFormatter(color=False))
        root.addHandler(fh)

    root.setLevel(numeric_level)

    # ── Third-party noise control ───────────────────────────────
    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.INFO
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.INFO
    return numeric
