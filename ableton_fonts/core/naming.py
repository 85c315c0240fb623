"""
Name table manipulation utilities.

Ableton Live resolves its UI fonts by internal name, so a replacement font
has to carry the family and style names of the slot it is installed into.
"""

from dataclasses import dataclass

from fontTools.ttLib import TTFont

from ableton_fonts.utils.logging import logger

# Name table IDs rewritten for a slot
NAME_ID_FAMILY = 1
NAME_ID_SUBFAMILY = 2
NAME_ID_FULL_NAME = 4
NAME_ID_POSTSCRIPT = 6
NAME_ID_TYPO_FAMILY = 16
NAME_ID_TYPO_SUBFAMILY = 17


@dataclass(frozen=True)
class FontNaming:
    """Target identity of a rewritten font."""

    family: str  # e.g., "AbletonSans Small"
    subfamily: str  # e.g., "Regular Italic"

    def __post_init__(self):
        if not self.family.strip() or not self.subfamily.strip():
            raise ValueError("Family and subfamily names must not be empty")

    @property
    def full_name(self) -> str:
        """Full font name with family and style."""
        return f"{self.family} {self.subfamily}".strip()

    @property
    def postscript_name(self) -> str:
        """PostScript name (no spaces)."""
        return f"{self.family}-{self.subfamily}".replace(" ", "")

    def value_for(self, name_id: int) -> str | None:
        """Replacement text for a name ID, or None if the ID is kept."""
        return {
            NAME_ID_FAMILY: self.family,
            NAME_ID_SUBFAMILY: self.subfamily,
            NAME_ID_FULL_NAME: self.full_name,
            NAME_ID_POSTSCRIPT: self.postscript_name,
            NAME_ID_TYPO_FAMILY: self.family,
            NAME_ID_TYPO_SUBFAMILY: self.subfamily,
        }.get(name_id)


def set_record_text(record, text: str) -> bool:
    """
    Replace a name record's text if its encoding can represent it.

    Returns:
        True if the record was updated, False if it was left unchanged
    """
    original = record.string
    record.string = text
    try:
        record.toBytes()
    except (UnicodeEncodeError, LookupError, TypeError):
        record.string = original
        return False
    return True


def update_name_table(font: TTFont, naming: FontNaming) -> int:
    """
    Rewrite family, style, full and PostScript names on every platform.

    Records whose encoding cannot hold the new text are skipped.

    Args:
        font: TTFont instance to modify
        naming: Target names

    Returns:
        Number of records updated
    """
    updated = 0

    for record in font["name"].names:
        text = naming.value_for(record.nameID)
        if text is None:
            continue

        if set_record_text(record, text):
            updated += 1
        else:
            logger.debug(
                f"Skipped name ID {record.nameID} "
                f"(platform {record.platformID}, encoding {record.platEncID})"
            )

    return updated
