"""
errors.py – exception classes for the arcade screensaver.

Every failure that reaches the user derives from ArcadeSaverError and is
shown exactly once; nothing here is retried.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class ArcadeSaverError(Exception):
    """Base class for all project-specific errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Converts the exception to a dictionary for structured logging."""
        return {
            "error": type(self).__name__,
            "message": str(self),
            "details": self.details,
        }


class CatalogueUnavailable(ArcadeSaverError):
    """The emulator could not produce its -listxml catalogue."""


class VerificationUnavailable(ArcadeSaverError):
    """The emulator could not be started for -verifyroms."""


class LaunchFailure(ArcadeSaverError):
    """A picked game could not be started."""

    def __init__(self, message: str, game: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        game_details = details or {}
        if game:
            game_details["game"] = game
        super().__init__(message, game_details)
