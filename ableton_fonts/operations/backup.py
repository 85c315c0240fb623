"""
Backup and restore operations.

Each snapshot is a directory named by its timestamp under the backup root,
holding copies of the slot fonts as they were before an install plus the
bundle they came from. Snapshots are only ever added; restoring reads one
back without changing the catalog.
"""

import os
import re
import shutil
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ableton_fonts.config.paths import (
    BUNDLE_PATH_FILE,
    LATEST_LINK,
    MISSING_FILE,
    TIMESTAMP_FILE,
    fonts_dir_for,
)
from ableton_fonts.config.slots import FONT_SLOTS, FontSlot
from ableton_fonts.core.errors import (
    AppEnvironmentError,
    CorruptBackupError,
    InstallError,
    InstallPermissionError,
    NoBackupError,
)
from ableton_fonts.operations.bundle import copy_into_bundle
from ableton_fonts.utils.logging import logger
from ableton_fonts.utils.system import SystemFacade

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
# TIMESTAMP_FORMAT with the optional same-second suffix
SNAPSHOT_ID = re.compile(r"\d{8}_\d{6}(_\d{2,})?")
UNKNOWN = "unknown"


@dataclass(frozen=True)
class SnapshotRecord:
    """One snapshot directory and its metadata."""

    snapshot_id: str
    path: Path
    bundle_path: str = UNKNOWN
    timestamp: str = UNKNOWN
    files: tuple[str, ...] = ()
    missing: tuple[str, ...] = ()


@dataclass(frozen=True)
class Catalog:
    """Snapshots under a backup root, oldest first."""

    root: Path
    snapshots: tuple[SnapshotRecord, ...] = field(default_factory=tuple)

    @property
    def latest(self) -> SnapshotRecord | None:
        return self.snapshots[-1] if self.snapshots else None

    def get(self, snapshot_id: str) -> SnapshotRecord | None:
        return next((s for s in self.snapshots if s.snapshot_id == snapshot_id), None)

    def with_snapshot(self, record: SnapshotRecord) -> "Catalog":
        return Catalog(self.root, (*self.snapshots, record))


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8").strip() or None
    except (OSError, UnicodeDecodeError):
        return None


def read_snapshot(directory: Path) -> SnapshotRecord:
    """
    Read a snapshot directory.

    Unreadable metadata degrades to "unknown" instead of raising.
    """
    try:
        files = sorted(
            p.name for p in directory.iterdir() if p.is_file() and not p.name.startswith(".")
        )
    except OSError:
        files = []

    missing = _read_text(directory / MISSING_FILE)
    return SnapshotRecord(
        snapshot_id=directory.name,
        path=directory,
        bundle_path=_read_text(directory / BUNDLE_PATH_FILE) or UNKNOWN,
        timestamp=_read_text(directory / TIMESTAMP_FILE) or directory.name,
        files=tuple(files),
        missing=tuple(missing.splitlines()) if missing else (),
    )


def load_catalog(root: Path) -> Catalog:
    """
    Load every published snapshot under a backup root.

    Directory names double as the sort key. Only timestamp-named
    directories count; staging directories, the latest link and stray
    folders are ignored.

    Args:
        root: Backup root directory

    Returns:
        Catalog, empty if the root does not exist
    """
    if not root.is_dir():
        return Catalog(root)

    snapshots = tuple(
        read_snapshot(entry)
        for entry in sorted(root.iterdir())
        if entry.is_dir() and not entry.is_symlink() and SNAPSHOT_ID.fullmatch(entry.name)
    )
    return Catalog(root, snapshots)


def _new_snapshot_id(catalog: Catalog, stamp: str) -> str:
    snapshot_id = stamp
    counter = 0
    while catalog.get(snapshot_id) or (catalog.root / snapshot_id).exists():
        counter += 1
        snapshot_id = f"{stamp}_{counter:02d}"
    return snapshot_id


def _point_latest(root: Path, snapshot_dir: Path) -> None:
    """Atomically repoint the latest symlink at a snapshot directory."""
    link = root / LATEST_LINK
    temp_link = root / f".{LATEST_LINK}.{snapshot_dir.name}"
    try:
        if temp_link.is_symlink() or temp_link.exists():
            temp_link.unlink()
        temp_link.symlink_to(snapshot_dir.name, target_is_directory=True)
        os.replace(temp_link, link)
    except OSError as e:
        logger.warning(f"Could not update {link}: {e}")


def create_snapshot(
    catalog: Catalog,
    bundle_path: Path,
    fonts_dir: Path,
    slots: Iterable[FontSlot] = FONT_SLOTS,
    now: datetime | None = None,
) -> tuple[Catalog, SnapshotRecord]:
    """
    Capture the current slot fonts before they are replaced.

    Files are staged in a hidden directory and published by renaming it,
    so an interrupted snapshot never shows up in the catalog.

    Args:
        catalog: Current catalog
        bundle_path: Ableton Live bundle being modified
        fonts_dir: Its fonts directory
        slots: Slots to capture
        now: Capture time, defaults to the current time

    Returns:
        Tuple of (updated catalog, new snapshot)
    """
    logger.info("Creating backup of original fonts...")

    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    snapshot_id = _new_snapshot_id(catalog, stamp)

    root = catalog.root
    staging = root / f".{snapshot_id}.partial"
    final = root / snapshot_id

    files: list[str] = []
    missing: list[str] = []
    try:
        root.mkdir(parents=True, exist_ok=True)
        staging.mkdir()
        for slot in slots:
            src = fonts_dir / slot.filename
            if src.is_file():
                shutil.copy2(src, staging / slot.filename)
                files.append(slot.filename)
                logger.info(f"Backed up: {slot.filename}")
            else:
                missing.append(slot.filename)
                logger.warning(f"Not present, not backed up: {slot.filename}")

        (staging / BUNDLE_PATH_FILE).write_text(f"{bundle_path}\n", encoding="utf-8")
        (staging / TIMESTAMP_FILE).write_text(f"{stamp}\n", encoding="utf-8")
        (staging / MISSING_FILE).write_text(
            "".join(f"{name}\n" for name in missing), encoding="utf-8"
        )
        os.rename(staging, final)
    except OSError as e:
        shutil.rmtree(staging, ignore_errors=True)
        raise AppEnvironmentError(f"Cannot write backup to {root}: {e}") from e
    except BaseException:
        shutil.rmtree(staging, ignore_errors=True)
        raise

    _point_latest(root, final)

    record = SnapshotRecord(
        snapshot_id=snapshot_id,
        path=final,
        bundle_path=str(bundle_path),
        timestamp=stamp,
        files=tuple(sorted(files)),
        missing=tuple(missing),
    )
    logger.info(f"Backup saved to: {final}")
    return catalog.with_snapshot(record), record


def restore_snapshot(
    catalog: Catalog,
    system: SystemFacade,
    snapshot_id: str | None = None,
    slots: Iterable[FontSlot] = FONT_SLOTS,
) -> SnapshotRecord:
    """
    Copy a snapshot's fonts back into the bundle they were taken from.

    Slot files missing from the snapshot are warned about and skipped.

    Args:
        catalog: Current catalog
        system: System facade used for privileged copies
        snapshot_id: Snapshot to restore, defaults to the latest
        slots: Slots to restore

    Returns:
        The restored snapshot

    Raises:
        NoBackupError: If there is no snapshot, or no snapshot with that id
        CorruptBackupError: If the snapshot has no bundle path
        AppEnvironmentError: If the bundle's fonts directory is gone
        InstallError: If one or more files could not be copied back
    """
    logger.info("Reverting to original fonts...")

    if catalog.latest is None:
        raise NoBackupError(f"No backup found! Backup directory: {catalog.root}")

    record = catalog.latest if snapshot_id is None else catalog.get(snapshot_id)
    if record is None:
        raise NoBackupError(f"No backup named {snapshot_id} in {catalog.root}")

    bundle_text = _read_text(record.path / BUNDLE_PATH_FILE)
    if bundle_text is None:
        raise CorruptBackupError(f"Invalid backup - missing metadata: {record.path}")

    bundle = Path(bundle_text)
    fonts_dir = fonts_dir_for(bundle)

    logger.info(f"Restoring from: {record.path}")
    logger.info(f"Target: {bundle}")

    if not fonts_dir.is_dir():
        raise AppEnvironmentError(f"Target fonts directory not found: {fonts_dir}")

    failures: list[str] = []
    for slot in slots:
        src = record.path / slot.filename
        if not src.is_file():
            logger.warning(f"Backup file not found: {slot.filename}")
            continue

        try:
            copy_into_bundle(src, fonts_dir / slot.filename, system)
            logger.info(f"Restored: {slot.filename}")
        except (OSError, InstallPermissionError) as e:
            logger.error(f"Failed to restore {slot.filename}: {e}")
            failures.append(slot.filename)

    if failures:
        raise InstallError(
            f"Failed to restore {len(failures)} fonts from {record.snapshot_id}",
            details=failures,
        )

    return record


def list_snapshots(catalog: Catalog) -> list[tuple[str, str]]:
    """Snapshot history as (timestamp, bundle path), oldest first."""
    return [(s.timestamp, s.bundle_path) for s in catalog.snapshots]
