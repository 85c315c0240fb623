"""
Operating system integration.

Everything that shells out (application discovery, privileged copies, code
signing) sits behind SystemFacade so the rest of the package can be driven
by a fake in tests.
"""

import subprocess
from pathlib import Path
from typing import Protocol

from ableton_fonts.config.paths import APP_GLOB, APPLICATIONS_DIR, SPOTLIGHT_QUERY
from ableton_fonts.core.errors import AppEnvironmentError, InstallPermissionError
from ableton_fonts.utils.logging import logger
from ableton_fonts.utils.subprocess import run_command, run_privileged

QUARANTINE_ATTR = "com.apple.quarantine"


class SystemFacade(Protocol):
    """System operations needed to patch an application bundle."""

    def locate_application(self) -> Path | None: ...

    def copy_privileged(self, src: Path, dst: Path) -> None: ...

    def has_signature(self, bundle: Path) -> bool: ...

    def strip_signature(self, bundle: Path) -> None: ...

    def ad_hoc_sign(self, bundle: Path) -> None: ...

    def clear_quarantine(self, bundle: Path) -> None: ...


class MacSystem:
    """SystemFacade backed by macOS command line tools."""

    def __init__(self, applications_dir: Path = APPLICATIONS_DIR):
        self.applications_dir = applications_dir

    def locate_application(self) -> Path | None:
        """Find Ableton Live in /Applications, then through Spotlight."""
        for app in sorted(self.applications_dir.glob(APP_GLOB)):
            if app.is_dir():
                return app

        try:
            result = run_command(["mdfind", SPOTLIGHT_QUERY], check=False)
        except AppEnvironmentError as e:
            logger.debug(f"Spotlight search unavailable: {e}")
            return None

        for line in result.stdout.splitlines():
            if line.strip():
                return Path(line.strip())
        return None

    def copy_privileged(self, src: Path, dst: Path) -> None:
        self._privileged(["cp", str(src), str(dst)], f"copy {dst.name}")

    def has_signature(self, bundle: Path) -> bool:
        # codesign -dv reports on stderr and exits non-zero for unsigned code
        result = run_command(["codesign", "-dv", str(bundle)], check=False)
        return "Signature" in (result.stdout + result.stderr)

    def strip_signature(self, bundle: Path) -> None:
        self._privileged(
            ["codesign", "--remove-signature", str(bundle)],
            "remove code signature",
            "Removing code signature...",
        )

    def ad_hoc_sign(self, bundle: Path) -> None:
        self._privileged(
            ["codesign", "--force", "--deep", "--sign", "-", str(bundle)],
            "re-sign application",
            "Re-signing with ad-hoc signature...",
        )

    def clear_quarantine(self, bundle: Path) -> None:
        result = run_privileged(
            ["xattr", "-rd", QUARANTINE_ATTR, str(bundle)], check=False
        )
        if result.returncode != 0:
            logger.debug(f"No quarantine attribute cleared on {bundle.name}")

    def _privileged(
        self, cmd: list[str], action: str, description: str | None = None
    ) -> None:
        try:
            run_privileged(cmd, description)
        except subprocess.CalledProcessError as e:
            raise InstallPermissionError(
                f"Could not {action} with administrator privileges",
                details=(e.stderr or "").strip(),
            ) from e
