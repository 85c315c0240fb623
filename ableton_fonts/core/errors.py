"""
Exception hierarchy for font replacement.

Every error the tool reports to the user derives from FontReplaceError; the CLI
turns these into a logged message and a non-zero exit.
"""

from typing import Any


class FontReplaceError(Exception):
    """Base exception for all font replacement errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


class AppEnvironmentError(FontReplaceError):
    """Ableton Live, its fonts directory, or a required system tool is missing."""


class DownloadError(FontReplaceError):
    """A replacement font could not be downloaded."""


class FontFormatError(FontReplaceError):
    """A source font cannot be parsed or is unsuitable for rewriting."""


class SlotMappingError(FontReplaceError):
    """A font slot has no replacement font mapped to it."""


class NoBackupError(FontReplaceError):
    """Revert was requested but no matching snapshot exists."""


class CorruptBackupError(FontReplaceError):
    """A snapshot is missing its provenance metadata."""


class InstallError(FontReplaceError):
    """One or more font files could not be copied into the bundle."""


class InstallPermissionError(InstallError):
    """Privilege elevation was refused or the privileged command failed."""
