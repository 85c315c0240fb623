"""
Font metrics manipulation utilities.

Scaling works by lowering (or raising) unitsPerEm and resizing every metric
and outline coordinate by the same ratio, so glyphs render larger (or
smaller) at a given point size while keeping their proportions.
"""

from dataclasses import dataclass

from fontTools.misc.roundTools import otRound
from fontTools.ttLib import TTFont

from ableton_fonts.core.errors import FontFormatError

# Valid range for head.unitsPerEm
MIN_UNITS_PER_EM = 16
MAX_UNITS_PER_EM = 16384

HHEA_FIELDS = ("ascent", "descent", "lineGap")
OS2_FIELDS = ("sTypoAscender", "sTypoDescender", "sTypoLineGap", "sxHeight", "sCapHeight")
POST_FIELDS = ("underlinePosition", "underlineThickness")


@dataclass(frozen=True)
class UpemScale:
    """Result of rescaling a font's em."""

    original_upm: int
    new_upm: int

    @property
    def coord_scale(self) -> float:
        """Ratio applied to every coordinate and metric."""
        return self.new_upm / self.original_upm

    def apply(self, value: float) -> int:
        """Scale a font-unit value and round it to the unit grid."""
        return otRound(value * self.coord_scale)


def compute_upem_scale(original_upm: int, scale_factor: float) -> UpemScale:
    """
    Compute the new unitsPerEm for a scale factor.

    A factor above 1.0 shrinks the em, which enlarges rendered glyphs.

    Args:
        original_upm: Current head.unitsPerEm
        scale_factor: Requested size factor, must be positive

    Returns:
        UpemScale with the original and new unitsPerEm
    """
    if scale_factor <= 0:
        raise ValueError(f"Scale factor must be positive, got {scale_factor}")

    new_upm = otRound(original_upm / scale_factor)
    if not MIN_UNITS_PER_EM <= new_upm <= MAX_UNITS_PER_EM:
        raise ValueError(
            f"Scale factor {scale_factor} gives unitsPerEm {new_upm}, "
            f"outside {MIN_UNITS_PER_EM}-{MAX_UNITS_PER_EM}"
        )
    return UpemScale(original_upm, new_upm)


def _scale_attrs(table, names: tuple[str, ...], upem: UpemScale) -> None:
    for name in names:
        # Older OS/2 versions lack sxHeight and sCapHeight
        if hasattr(table, name):
            setattr(table, name, upem.apply(getattr(table, name)))


def scale_vertical_metrics(font: TTFont, upem: UpemScale) -> None:
    """
    Scale font-wide ascent, descent, line gap and related metrics.

    Updates:
    - hhea ascent/descent/lineGap
    - OS/2 typographic metrics, x-height, cap height
    - OS/2 usWinAscent/usWinDescent (both kept non-negative)
    - post underline position and thickness

    Args:
        font: TTFont instance to modify
        upem: Scale to apply
    """
    if "hhea" in font:
        _scale_attrs(font["hhea"], HHEA_FIELDS, upem)

    if "OS/2" in font:
        os2 = font["OS/2"]
        _scale_attrs(os2, OS2_FIELDS, upem)
        os2.usWinAscent = max(0, upem.apply(os2.usWinAscent))
        # Some fonts store usWinDescent negative; the field is unsigned
        os2.usWinDescent = abs(upem.apply(os2.usWinDescent))

    if "post" in font:
        _scale_attrs(font["post"], POST_FIELDS, upem)


def scale_horizontal_metrics(font: TTFont, upem: UpemScale) -> None:
    """Scale every advance width and left side bearing."""
    hmtx = font["hmtx"]
    for glyph_name in hmtx.metrics:
        width, lsb = hmtx.metrics[glyph_name]
        hmtx.metrics[glyph_name] = (upem.apply(width), upem.apply(lsb))


def scale_glyph_outlines(font: TTFont, upem: UpemScale) -> None:
    """
    Scale TrueType outlines and composite offsets.

    Simple glyphs have every point scaled and their bounds recomputed.
    Composite glyphs only have their component offsets scaled; their
    bounds are recomputed once all simple glyphs are done.

    Args:
        font: TTFont instance to modify
        upem: Scale to apply
    """
    glyf = font["glyf"]
    composites = []

    for glyph_name in font.getGlyphOrder():
        glyph = glyf[glyph_name]

        if glyph.isComposite():
            for component in glyph.components:
                # Point-anchored components have no offset
                if hasattr(component, "x"):
                    component.x = upem.apply(component.x)
                    component.y = upem.apply(component.y)
            composites.append(glyph)
        elif glyph.numberOfContours > 0:
            coordinates = glyph.coordinates
            coordinates.scale((upem.coord_scale, upem.coord_scale))
            coordinates.toInt(round=otRound)
            glyph.recalcBounds(glyf)

    for glyph in composites:
        glyph.recalcBounds(glyf)


def rescale_units_per_em(font: TTFont, scale_factor: float) -> UpemScale:
    """
    Resize a TrueType font by changing its unitsPerEm.

    Args:
        font: TTFont instance to modify
        scale_factor: Size factor; 1.15 renders glyphs 15% larger

    Returns:
        The applied UpemScale
    """
    if "glyf" not in font:
        raise FontFormatError("Scaling requires a font with TrueType outlines")

    upem = compute_upem_scale(font["head"].unitsPerEm, scale_factor)

    font["head"].unitsPerEm = upem.new_upm
    scale_vertical_metrics(font, upem)
    if "hmtx" in font:
        scale_horizontal_metrics(font, upem)
    scale_glyph_outlines(font, upem)

    return upem
