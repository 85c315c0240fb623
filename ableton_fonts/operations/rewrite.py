"""
Font rewrite operations.

Gives a replacement font the internal identity of an Ableton font slot and
optionally rescales it.
"""

import math
from dataclasses import dataclass
from pathlib import Path

from ableton_fonts.config.slots import FontSlot
from ableton_fonts.core.errors import FontFormatError
from ableton_fonts.core.font_io import DECODE_ERRORS, open_font
from ableton_fonts.core.metrics import rescale_units_per_em
from ableton_fonts.core.naming import FontNaming, update_name_table
from ableton_fonts.utils.logging import logger


@dataclass(frozen=True)
class RewriteSpec:
    """Instruction to rewrite one source font."""

    source: Path
    family: str
    subfamily: str
    scale: float = 1.0

    def __post_init__(self):
        if not math.isfinite(self.scale) or self.scale <= 0:
            raise ValueError(f"Scale factor must be a positive number, got {self.scale}")

    @classmethod
    def for_slot(cls, source: Path, slot: FontSlot, scale: float = 1.0) -> "RewriteSpec":
        """Build the instruction that fills a font slot from a source file."""
        return cls(source, slot.family, slot.subfamily, scale)

    @property
    def naming(self) -> FontNaming:
        return FontNaming(self.family, self.subfamily)


def rewrite(
    source: Path,
    dest: Path,
    family: str,
    subfamily: str,
    scale: float = 1.0,
) -> Path:
    """
    Write a copy of a font with new internal names.

    Args:
        source: Source TrueType/OpenType font
        dest: Output path
        family: Target family name
        subfamily: Target style name
        scale: Size factor; 1.0 rewrites names only

    Returns:
        The output path

    Raises:
        FontFormatError: If the source cannot be parsed or written
    """
    return apply_rewrite(RewriteSpec(source, family, subfamily, scale), dest)


def apply_rewrite(spec: RewriteSpec, dest: Path) -> Path:
    """Execute a RewriteSpec, writing the result to dest."""
    naming = spec.naming

    with open_font(spec.source, dest) as font:
        updated = update_name_table(font, naming)
        logger.debug(f"{dest.name}: updated {updated} name records")

        if spec.scale != 1.0:
            try:
                upem = rescale_units_per_em(font, spec.scale)
            # glyf and hmtx decompile lazily, so malformed data surfaces here
            except DECODE_ERRORS as e:
                raise FontFormatError(
                    f"Cannot scale {spec.source.name}: {e}", details=type(e).__name__
                ) from e
            logger.info(
                f"  {dest.name}: unitsPerEm {upem.original_upm} -> {upem.new_upm} "
                f"({spec.scale}x)"
            )

    logger.info(f"Prepared {dest.name} as '{naming.full_name}'")
    return dest
