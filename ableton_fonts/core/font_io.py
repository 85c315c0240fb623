"""
Font I/O utilities for loading and saving font files.
"""

import struct
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from fontTools.ttLib import TTFont, TTLibError

from ableton_fonts.core.errors import FontFormatError

REQUIRED_TABLES = ("head", "name")

# What fontTools raises on truncated or malformed table data
DECODE_ERRORS = (TTLibError, struct.error, EOFError, ValueError, IndexError)


def load_font(path: Path) -> TTFont:
    """
    Load a font, raising FontFormatError if it cannot be used.

    The head timestamp is left untouched on save so rewriting the same
    input twice produces the same bytes.

    Args:
        path: Path to a TrueType/OpenType file

    Returns:
        TTFont instance with head and name decompiled
    """
    if not path.is_file():
        raise FontFormatError(f"Font file not found: {path}")

    try:
        font = TTFont(path, recalcTimestamp=False)
    except (*DECODE_ERRORS, OSError) as e:
        raise FontFormatError(f"Not a valid font file: {path.name}", details=str(e)) from e

    try:
        missing = [tag for tag in REQUIRED_TABLES if tag not in font]
        if missing:
            raise FontFormatError(
                f"{path.name} is missing required tables: {', '.join(missing)}"
            )
        for tag in REQUIRED_TABLES:
            font[tag]
    except DECODE_ERRORS as e:
        font.close()
        raise FontFormatError(f"Malformed font file: {path.name}", details=str(e)) from e
    except FontFormatError:
        font.close()
        raise
    return font


def save_font(font: TTFont, dest: Path) -> Path:
    """
    Save a font, raising FontFormatError if its tables do not compile.

    Args:
        font: TTFont instance
        dest: Output path

    Returns:
        The output path
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    try:
        font.save(dest)
    except (*DECODE_ERRORS, OSError) as e:
        raise FontFormatError(f"Could not write font {dest.name}", details=str(e)) from e
    return dest


@contextmanager
def open_font(path: Path, dest: Path | None = None) -> Iterator[TTFont]:
    """
    Context manager for font operations with automatic save.

    Args:
        path: Path to font file
        dest: Where to save; defaults to path

    Yields:
        TTFont instance
    """
    font = load_font(path)
    try:
        yield font
        save_font(font, dest or path)
    finally:
        font.close()
