"""
Filesystem path constants.

Centralizes the Ableton bundle layout and the backup location.
"""

from pathlib import Path

# Where snapshots of the original fonts are kept
BACKUP_DIR = Path.home() / ".ableton-font-backup"
LATEST_LINK = "latest"

# Snapshot sidecar files
BUNDLE_PATH_FILE = ".ableton_path"
TIMESTAMP_FILE = ".timestamp"
MISSING_FILE = ".missing"

# Application discovery
APPLICATIONS_DIR = Path("/Applications")
APP_GLOB = "Ableton Live*.app"
SPOTLIGHT_QUERY = "kMDItemKind == 'Application' && kMDItemFSName == 'Ableton Live*'"

# UI fonts inside the application bundle
FONTS_SUBPATH = Path("Contents") / "App-Resources" / "Fonts"


def fonts_dir_for(bundle: Path) -> Path:
    """Fonts directory inside an Ableton Live bundle."""
    return bundle / FONTS_SUBPATH
