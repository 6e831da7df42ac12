# routeinfo/errors

"""
routeinfo.errors

Central exception hierarchy for routeinfo.

Callers can catch RouteInfoError (broad) or specific subclasses (narrow).
Track errors carry the pipeline stage and the offending point index so a
failure can be traced back to the input.
"""

from __future__ import annotations

from typing import Any, Optional


class RouteInfoError(RuntimeError):
    """Base class for all routeinfo runtime errors."""


# ---- Configuration errors ----------------------

class ConfigError(RouteInfoError):
    """Configuration could not be loaded."""

class InvalidConfigurationError(ConfigError):
    """A threshold is outside of its allowed range."""

    def __init__(self, name: str, value: Any, requirement: str) -> None:
        self.name = name
        self.value = value
        self.requirement = requirement
        super().__init__(f"{name} must be {requirement} (got {value!r})")


# ---- Track errors ------------------------------

class TrackError(RouteInfoError):
    """Errors about the point sequence handed to the analyzer."""

    def __init__(
            self, message: str, *,
            stage: Optional[str] = None,
            index: Optional[int] = None,
    ) -> None:
        self.stage = stage
        self.index = index
        where = []
        if stage:
            where.append(f"stage={stage}")
        if index is not None:
            where.append(f"index={index}")
        if where:
            message = f"{message} [{', '.join(where)}]"
        super().__init__(message)

class EmptyOrInsufficientTrackError(TrackError):
    """Too few points for the requested stage."""

class MalformedPointError(TrackError):
    """A point is missing a finite longitude, latitude or elevation."""


# ---- Format errors -----------------------------

class FormatError(RouteInfoError):
    """Errors reading track files."""

class InvalidGpxError(FormatError):
    """GPX file could not be parsed or did not contain a track or route."""
