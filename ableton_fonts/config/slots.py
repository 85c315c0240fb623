"""
Font slot and replacement typeface configuration.

Ableton Live loads its UI fonts by fixed filename and internal name. Each slot
below is filled from one style of the replacement typeface.
"""

from dataclasses import dataclass
from enum import Enum


class Style(Enum):
    """Styles of a replacement typeface."""

    REGULAR = "Regular"
    BOLD = "Bold"
    ITALIC = "Italic"
    BOLD_ITALIC = "BoldItalic"


@dataclass(frozen=True)
class FontSlot:
    """A font file Ableton Live expects, and the style that replaces it."""

    filename: str
    family: str
    subfamily: str
    style: Style


FONT_SLOTS: tuple[FontSlot, ...] = (
    FontSlot("AbletonSans-Light.ttf", "AbletonSans", "Light", Style.REGULAR),
    FontSlot("AbletonSansSmall-Bold.ttf", "AbletonSans Small", "Bold", Style.BOLD),
    FontSlot(
        "AbletonSansSmall-Regular.ttf", "AbletonSans Small", "Regular", Style.REGULAR
    ),
    FontSlot(
        "AbletonSansSmall-RegularItalic.ttf",
        "AbletonSans Small",
        "Regular Italic",
        Style.ITALIC,
    ),
)


@dataclass(frozen=True)
class DownloadItem:
    """Configuration for a replacement font style to download."""

    style: Style
    url: str
    output_name: str


# Atkinson Hyperlegible, from the Braille Institute release on Google Fonts
ATKINSON_NAME = "Atkinson Hyperlegible"
ATKINSON_BASE_URL = (
    "https://github.com/googlefonts/atkinson-hyperlegible/raw/main/fonts/ttf"
)

ATKINSON_DOWNLOADS: tuple[DownloadItem, ...] = tuple(
    DownloadItem(
        style,
        f"{ATKINSON_BASE_URL}/AtkinsonHyperlegible-{style.value}.ttf",
        f"AtkinsonHyperlegible-{style.value}.ttf",
    )
    for style in Style
)

# Suggested alternatives, shown in --help
RECOMMENDED_FONTS = (
    "Atkinson Hyperlegible (default, by Braille Institute)",
    "Inter",
    "OpenDyslexic",
    "Lexie Readable",
)
