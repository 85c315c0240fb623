"""
Shared logging configuration.
"""

import logging

import click

LEVEL_TAGS = {
    logging.DEBUG: ("DEBUG", "blue"),
    logging.INFO: ("INFO", "green"),
    logging.WARNING: ("WARN", "yellow"),
    logging.ERROR: ("ERROR", "red"),
    logging.CRITICAL: ("ERROR", "red"),
}


class TagFormatter(logging.Formatter):
    """Render records as ``[INFO] message``, colouring the tag on a terminal."""

    def __init__(self, color: bool = False):
        super().__init__("%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        tag, fg = LEVEL_TAGS.get(record.levelno, (record.levelname, None))
        label = f"[{tag}]"
        if self.color and fg:
            label = click.style(label, fg=fg, bold=record.levelno >= logging.WARNING)
        return f"{label} {super().format(record)}"


_handler = logging.StreamHandler()
_handler.setFormatter(TagFormatter(color=_handler.stream.isatty()))

logger = logging.getLogger("ableton_fonts")
logger.addHandler(_handler)
logger.setLevel(logging.INFO)


def set_verbose(verbose: bool) -> None:
    """Switch the shared logger between INFO and DEBUG."""
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
