"""
Install, revert and list orchestration.

Install pipeline:
  1. check    - Locate Ableton Live and its fonts directory
  2. acquire  - Download Atkinson Hyperlegible, or stage a custom font
  3. backup   - Snapshot the current slot fonts
  4. prepare  - Rewrite one replacement per slot with the slot's names
  5. install  - Copy the prepared fonts into the bundle
  6. codesign - Strip or re-sign the modified bundle

Nothing in the bundle changes before step 5, so a failed download or rewrite
leaves Ableton untouched.
"""

import math
import tempfile
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ableton_fonts.config.paths import fonts_dir_for
from ableton_fonts.config.slots import FONT_SLOTS, FontSlot
from ableton_fonts.core.errors import AppEnvironmentError
from ableton_fonts.operations.backup import (
    Catalog,
    SnapshotRecord,
    create_snapshot,
    list_snapshots,
    load_catalog,
    restore_snapshot,
)
from ableton_fonts.operations.bundle import SignPolicy, install_fonts, repair_signature
from ableton_fonts.operations.download import GlyphSet, download_atkinson
from ableton_fonts.operations.rewrite import RewriteSpec, apply_rewrite
from ableton_fonts.utils.logging import logger
from ableton_fonts.utils.system import SystemFacade


@dataclass(frozen=True)
class DownloadSource:
    """Replace with the standard Atkinson Hyperlegible download."""


@dataclass(frozen=True)
class CustomSource:
    """Replace every style with one user-supplied font file."""

    path: Path


GlyphSource = DownloadSource | CustomSource


@dataclass
class InstallContext:
    """State shared by the install steps."""

    source: GlyphSource
    scale: float
    system: SystemFacade
    backup_root: Path
    choose_policy: Callable[[], SignPolicy]
    scratch: Path
    app_path: Path | None = None
    bundle: Path | None = None
    fonts_dir: Path | None = None
    glyph_set: GlyphSet | None = None
    catalog: Catalog | None = None
    snapshot: SnapshotRecord | None = None
    prepared: dict[str, Path] = field(default_factory=dict)
    policy: SignPolicy | None = None


def locate_bundle(system: SystemFacade, app_path: Path | None = None) -> tuple[Path, Path]:
    """
    Find the Ableton Live bundle and its fonts directory.

    Args:
        system: System facade used for discovery
        app_path: Explicit bundle path, skips discovery

    Returns:
        Tuple of (bundle, fonts directory)
    """
    bundle = app_path or system.locate_application()
    if bundle is None or not bundle.is_dir():
        raise AppEnvironmentError(
            "Ableton Live not found! Please ensure Ableton Live is installed in /Applications"
        )
    logger.info(f"Found: {bundle}")

    fonts_dir = fonts_dir_for(bundle)
    if not fonts_dir.is_dir():
        raise AppEnvironmentError(f"Fonts directory not found at: {fonts_dir}")

    return bundle, fonts_dir


def prepare_fonts(
    glyph_set: GlyphSet,
    output_dir: Path,
    scale: float = 1.0,
    slots: Iterable[FontSlot] = FONT_SLOTS,
) -> dict[str, Path]:
    """
    Rewrite a replacement font for every slot.

    Args:
        glyph_set: Source fonts by style
        output_dir: Directory for the prepared files
        scale: Size factor applied to every font
        slots: Slots to prepare

    Returns:
        Prepared font path keyed by slot filename
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Preparing replacement fonts with correct internal names...")
    if scale != 1.0:
        logger.info(f"Applying scale factor: {scale}x")

    prepared = {}
    for slot in slots:
        spec = RewriteSpec.for_slot(glyph_set.path_for(slot.style), slot, scale)
        prepared[slot.filename] = apply_rewrite(spec, output_dir / slot.filename)
    return prepared


def _check(ctx: InstallContext) -> None:
    ctx.bundle, ctx.fonts_dir = locate_bundle(ctx.system, ctx.app_path)


def _acquire(ctx: InstallContext) -> None:
    if isinstance(ctx.source, CustomSource):
        ctx.glyph_set = GlyphSet.from_single_file(ctx.source.path, ctx.scratch / "custom")
    else:
        ctx.glyph_set = download_atkinson(ctx.scratch / "download")


def _backup(ctx: InstallContext) -> None:
    ctx.catalog, ctx.snapshot = create_snapshot(
        load_catalog(ctx.backup_root), ctx.bundle, ctx.fonts_dir
    )


def _prepare(ctx: InstallContext) -> None:
    ctx.prepared = prepare_fonts(ctx.glyph_set, ctx.scratch / "prepared", ctx.scale)


def _install(ctx: InstallContext) -> None:
    install_fonts(ctx.prepared, ctx.fonts_dir, ctx.system)


def _codesign(ctx: InstallContext) -> None:
    ctx.policy = repair_signature(ctx.bundle, ctx.system, ctx.choose_policy)


INSTALL_STEPS: list[tuple[str, Callable[[InstallContext], None]]] = [
    ("check", _check),
    ("acquire", _acquire),
    ("backup", _backup),
    ("prepare", _prepare),
    ("install", _install),
    ("codesign", _codesign),
]


def run_install(
    source: GlyphSource,
    scale: float = 1.0,
    *,
    system: SystemFacade,
    backup_root: Path,
    choose_policy: Callable[[], SignPolicy],
    app_path: Path | None = None,
) -> InstallContext:
    """
    Replace Ableton Live's UI fonts.

    Scratch files live in a temporary directory removed on every exit path.

    Args:
        source: DownloadSource or CustomSource
        scale: Size factor, 1.0 keeps the original size
        system: System facade
        backup_root: Snapshot directory root
        choose_policy: Picks a SignPolicy when the bundle is signed
        app_path: Explicit bundle path, skips discovery

    Returns:
        The finished InstallContext
    """
    if not math.isfinite(scale) or scale <= 0:
        raise ValueError(f"Scale factor must be a positive number, got {scale}")

    with tempfile.TemporaryDirectory(prefix="ableton-fonts-") as scratch:
        ctx = InstallContext(
            source=source,
            scale=scale,
            system=system,
            backup_root=backup_root,
            choose_policy=choose_policy,
            scratch=Path(scratch),
            app_path=app_path,
        )

        total = len(INSTALL_STEPS)
        for i, (name, step) in enumerate(INSTALL_STEPS, 1):
            logger.debug(f"[{i}/{total}] Running {name}")
            step(ctx)

    logger.info("Font replacement complete!")
    return ctx


def run_revert(
    *,
    system: SystemFacade,
    backup_root: Path,
    choose_policy: Callable[[], SignPolicy],
    snapshot_id: str | None = None,
) -> SnapshotRecord:
    """
    Restore a snapshot and repair the bundle signature.

    Args:
        system: System facade
        backup_root: Snapshot directory root
        choose_policy: Picks a SignPolicy when the bundle is signed
        snapshot_id: Snapshot to restore, defaults to the latest

    Returns:
        The restored snapshot
    """
    record = restore_snapshot(load_catalog(backup_root), system, snapshot_id)
    repair_signature(Path(record.bundle_path), system, choose_policy)
    logger.info("Fonts reverted successfully!")
    return record


def run_list(backup_root: Path) -> list[tuple[str, str]]:
    """Snapshot history under backup_root as (timestamp, bundle path)."""
    return list_snapshots(load_catalog(backup_root))
