"""
Replacement font acquisition.

Downloads Atkinson Hyperlegible, or stages a user-supplied font for every
style, into a scratch directory.
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path

import requests

from ableton_fonts.config.slots import ATKINSON_DOWNLOADS, ATKINSON_NAME, DownloadItem, Style
from ableton_fonts.core.errors import (
    AppEnvironmentError,
    DownloadError,
    FontFormatError,
    SlotMappingError,
)
from ableton_fonts.utils.logging import logger

DOWNLOAD_TIMEOUT = 60


@dataclass
class GlyphSet:
    """Replacement font files by style, staged in a scratch directory."""

    name: str
    files: dict[Style, Path] = field(default_factory=dict)

    def path_for(self, style: Style) -> Path:
        """Source file for a style; a missing style is a hard failure."""
        try:
            return self.files[style]
        except KeyError:
            raise SlotMappingError(f"No {style.value} style in {self.name}") from None

    @classmethod
    def from_single_file(cls, font_path: Path, output_dir: Path) -> "GlyphSet":
        """
        Stage one font file as every style.

        Args:
            font_path: User-supplied font
            output_dir: Scratch directory

        Returns:
            GlyphSet with one copy per style
        """
        if not font_path.is_file():
            raise FontFormatError(f"Font file not found: {font_path}")

        glyph_set = cls(font_path.stem)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            for style in Style:
                target = output_dir / f"{font_path.stem}-{style.value}{font_path.suffix}"
                shutil.copyfile(font_path, target)
                glyph_set.files[style] = target
        except OSError as e:
            raise AppEnvironmentError(f"Cannot stage custom font {font_path.name}: {e}") from e

        logger.info(f"Using custom font: {font_path.name}")
        return glyph_set


def download_file(item: DownloadItem, output_dir: Path) -> Path:
    """
    Download a file.

    Args:
        item: Download item configuration
        output_dir: Output directory

    Returns:
        Path of the downloaded file

    Raises:
        DownloadError: If the request fails or returns an empty body
    """
    target = output_dir / item.output_name

    try:
        response = requests.get(item.url, timeout=DOWNLOAD_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        raise DownloadError(f"Failed to download {item.output_name}: {e}") from e

    if not response.content:
        raise DownloadError(f"Failed to download {item.output_name}: empty response")

    try:
        target.write_bytes(response.content)
    except OSError as e:
        raise DownloadError(f"Could not save {item.output_name}: {e}") from e

    size = len(response.content) / 1024
    logger.info(f"Downloaded: {item.output_name} ({size:.0f} KB)")
    return target


def download_atkinson(output_dir: Path) -> GlyphSet:
    """
    Download all four Atkinson Hyperlegible styles.

    Any single failure aborts; a partial set is never returned.

    Args:
        output_dir: Scratch directory

    Returns:
        GlyphSet with every style
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"Downloading {ATKINSON_NAME} font...")

    glyph_set = GlyphSet(ATKINSON_NAME)
    for item in ATKINSON_DOWNLOADS:
        glyph_set.files[item.style] = download_file(item, output_dir)

    return glyph_set
