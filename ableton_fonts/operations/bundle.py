"""
Application bundle operations.

Copies font files into the Ableton Live bundle and repairs its code
signature afterwards.
"""

import os
import shutil
from collections.abc import Callable, Iterable
from enum import Enum
from pathlib import Path

from ableton_fonts.config.slots import FONT_SLOTS, FontSlot
from ableton_fonts.core.errors import (
    AppEnvironmentError,
    InstallError,
    InstallPermissionError,
    SlotMappingError,
)
from ableton_fonts.utils.logging import logger
from ableton_fonts.utils.system import SystemFacade


class SignPolicy(Enum):
    """What to do with the code signature of a modified bundle."""

    STRIP = "strip"
    ADHOC = "adhoc"
    SKIP = "skip"


def is_writable(dest: Path) -> bool:
    """Whether the current user can write dest without elevation."""
    if dest.exists():
        return os.access(dest, os.W_OK) and os.access(dest.parent, os.W_OK)
    return os.access(dest.parent, os.W_OK)


def copy_into_bundle(src: Path, dest: Path, system: SystemFacade) -> None:
    """
    Copy a file into the bundle, escalating only when needed.

    Args:
        src: File to copy
        dest: Destination inside the bundle
        system: System facade used for privileged copies
    """
    if is_writable(dest):
        shutil.copy2(src, dest)
    else:
        logger.debug(f"{dest.parent} is not writable, copying with sudo")
        system.copy_privileged(src, dest)


def install_fonts(
    prepared: dict[str, Path],
    fonts_dir: Path,
    system: SystemFacade,
    slots: Iterable[FontSlot] = FONT_SLOTS,
) -> None:
    """
    Install prepared fonts over the bundle's slot files.

    Every slot must have a prepared file before anything is copied. Copy
    failures are reported per file; files already copied stay in place.

    Args:
        prepared: Prepared font path keyed by slot filename
        fonts_dir: Bundle fonts directory
        system: System facade used for privileged copies
        slots: Slots to fill

    Raises:
        SlotMappingError: If a slot has no prepared file
        InstallError: If one or more copies failed
    """
    slots = list(slots)
    unmapped = [
        slot.filename
        for slot in slots
        if slot.filename not in prepared or not prepared[slot.filename].is_file()
    ]
    if unmapped:
        raise SlotMappingError(f"No replacement prepared for: {', '.join(unmapped)}")

    logger.info("Installing replacement fonts...")
    if not os.access(fonts_dir, os.W_OK):
        logger.warning("Need administrator privileges to modify Ableton fonts")

    failures: list[str] = []
    for slot in slots:
        try:
            copy_into_bundle(prepared[slot.filename], fonts_dir / slot.filename, system)
            logger.debug(f"Installed: {slot.filename}")
        except (OSError, InstallPermissionError) as e:
            logger.error(f"Failed to install {slot.filename}: {e}")
            failures.append(slot.filename)

    if failures:
        raise InstallError(
            f"Failed to install {len(failures)} of {len(slots)} fonts; "
            "run --revert to restore the originals",
            details=failures,
        )

    logger.info("Fonts installed successfully")


def repair_signature(
    bundle: Path,
    system: SystemFacade,
    choose_policy: Callable[[], SignPolicy],
) -> SignPolicy | None:
    """
    Handle the code signature invalidated by modifying the bundle.

    If the bundle is signed, choose_policy decides whether to strip the
    signature, re-sign ad-hoc, or leave it. The quarantine attribute is
    cleared afterwards on a best-effort basis.

    Args:
        bundle: Application bundle
        system: System facade
        choose_policy: Called only when the bundle is signed

    Returns:
        The policy applied, or None if the bundle was unsigned
    """
    logger.info("Handling code signature...")

    policy = None
    if system.has_signature(bundle):
        logger.warning("App is code-signed. Modifications will invalidate signature.")
        policy = choose_policy()

        if policy is SignPolicy.STRIP:
            system.strip_signature(bundle)
        elif policy is SignPolicy.ADHOC:
            system.ad_hoc_sign(bundle)
        else:
            logger.warning("Skipping code signature handling")

    try:
        system.clear_quarantine(bundle)
    except (AppEnvironmentError, InstallPermissionError) as e:
        logger.debug(f"Could not clear quarantine attribute: {e}")

    return policy
