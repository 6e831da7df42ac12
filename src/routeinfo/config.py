"""
routeinfo configuration loader

This module centralizes *all* configuration handling for routeinfo.

The analyzer needs three distance thresholds. They are fixed when an
analyzer is constructed and never read from anywhere implicitly; this module
is only the place where a caller (the CLI, mostly) resolves them.

Precedence (highest to lowest) for any given value:
1) CLI argument (handled by the CLI)
2) Environment variables (ROUTEINFO_*)
3) User config: ~/.config/routeinfo/config.toml
4) Repo config: <repo_root>/config/config.toml
5) Hard defaults

Example config.toml:

    [analyzer]
    distance_threshold = 10.0
    slope_section_threshold = 50.0
    elevation_distance_threshold = 0.0

    [paths]
    work_root = "~/GPS/_work"
"""

from __future__ import annotations

import math
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from routeinfo.errors import ConfigError, InvalidConfigurationError

DEFAULT_DISTANCE_THRESHOLD = 10.0
DEFAULT_SLOPE_SECTION_THRESHOLD = 50.0
DEFAULT_ELEVATION_DISTANCE_THRESHOLD = 0.0


# ---------------------------------------------------------------------------
# Threshold validation
# ---------------------------------------------------------------------------
def validate_threshold(name: str, value: Any, *, allow_zero: bool = False) -> float:
    """
    Check a distance threshold and return it as a float.

    Thresholds must be finite real numbers, strictly positive unless
    `allow_zero` is set.
    """
    requirement = "a finite number >= 0" if allow_zero else "a finite number > 0"
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfigurationError(name, value, requirement)
    value = float(value)
    if not math.isfinite(value):
        raise InvalidConfigurationError(name, value, requirement)
    if value < 0 or (value == 0 and not allow_zero):
        raise InvalidConfigurationError(name, value, requirement)
    return value


# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    Behavior:
    - If the file does not exist, return an empty dict (non-fatal).
    - If the file exists but is invalid TOML, raise ConfigError
      with a clear, user-facing message.
    """
    if not path.is_file():
        return {}

    try:
        return tomllib.loads(path.read_text(encoding="utf-8")) or {}
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "analyzer.distance_threshold")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_path(v: Any) -> Optional[Path]:
    """
    Coerce a config value into a pathlib.Path if possible.

    Returns None if value cannot be interpreted as a path.
    """
    if v is None:
        return None
    if isinstance(v, Path):
        return v.expanduser()
    if isinstance(v, str):
        return Path(v).expanduser()
    return None


def _as_float(v: Any, key: str) -> float:
    """
    Coerce a config value into a float.

    Environment variables arrive as strings; TOML may hold ints. Anything
    that is not a number is an error rather than a silent default.
    """
    if isinstance(v, str):
        try:
            return float(v.strip())
        except ValueError:
            raise InvalidConfigurationError(key, v, "a number") from None
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise InvalidConfigurationError(key, v, "a number")
    return float(v)


# ---------------------------------------------------------------------------
# Repo discovery + defaults
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward from `start` looking for the repo root.

    Heuristic:
    - The presence of a `config/` directory marks the repo root
    """
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


def default_work_root() -> Path:
    """Default directory scanned for GPX files when none are given."""
    return Path.home() / "GPS" / "_work"


# ---------------------------------------------------------------------------
# Typed config dataclasses
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AnalyzerConfig:
    """
    Thresholds for one analyzer, all in meters.

    - distance_threshold: minimum spacing used by the point thinner
    - distance_slope_section_threshold: distance after which a slope segment
      is committed to the histogram
    - elevation_distance_threshold: distance that must accumulate before an
      elevation change counts as gain or loss
    """

    distance_threshold: float = DEFAULT_DISTANCE_THRESHOLD
    distance_slope_section_threshold: float = DEFAULT_SLOPE_SECTION_THRESHOLD
    elevation_distance_threshold: float = DEFAULT_ELEVATION_DISTANCE_THRESHOLD

    def __post_init__(self) -> None:
        # frozen: write the normalized floats back through object.__setattr__
        object.__setattr__(
            self, "distance_threshold",
            validate_threshold("distance_threshold", self.distance_threshold),
        )
        object.__setattr__(
            self, "distance_slope_section_threshold",
            validate_threshold(
                "distance_slope_section_threshold", self.distance_slope_section_threshold
            ),
        )
        object.__setattr__(
            self, "elevation_distance_threshold",
            validate_threshold(
                "elevation_distance_threshold", self.elevation_distance_threshold,
                allow_zero=True,
            ),
        )


@dataclass(frozen=True)
class RouteInfoPaths:
    work_root: Path


@dataclass(frozen=True)
class RouteInfoConfig:
    """
    Fully merged routeinfo configuration.

    Attributes:
    - analyzer: validated thresholds
    - paths: resolved filesystem layout
    - source: provenance map showing where each value came from
    """

    analyzer: AnalyzerConfig
    paths: RouteInfoPaths
    source: dict[str, str]


# TOML key -> AnalyzerConfig field
_ANALYZER_KEYS = {
    "analyzer.distance_threshold": "distance_threshold",
    "analyzer.slope_section_threshold": "distance_slope_section_threshold",
    "analyzer.elevation_distance_threshold": "elevation_distance_threshold",
}

_ENV_MAP = {
    "ROUTEINFO_DISTANCE_THRESHOLD": "analyzer.distance_threshold",
    "ROUTEINFO_SLOPE_SECTION_THRESHOLD": "analyzer.slope_section_threshold",
    "ROUTEINFO_ELEVATION_DISTANCE_THRESHOLD": "analyzer.elevation_distance_threshold",
    "ROUTEINFO_WORK_ROOT": "paths.work_root",
}


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> RouteInfoConfig:
    """
    Load, merge, and validate all routeinfo configuration.

    Raises:
      ConfigError for unreadable TOML
      InvalidConfigurationError for thresholds that are not valid numbers
    """

    # Locate repo and config files
    if repo_root is None:
        repo_root = find_repo_root(Path(__file__).resolve())
    if repo_config_path is None and repo_root is not None:
        repo_config_path = repo_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "routeinfo" / "config.toml"

    repo_cfg = _load_toml(repo_config_path) if repo_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    values: dict[str, Any] = {
        "distance_threshold": DEFAULT_DISTANCE_THRESHOLD,
        "distance_slope_section_threshold": DEFAULT_SLOPE_SECTION_THRESHOLD,
        "elevation_distance_threshold": DEFAULT_ELEVATION_DISTANCE_THRESHOLD,
    }
    work_root = default_work_root()

    src = {key: "default" for key in _ANALYZER_KEYS}
    src["paths.work_root"] = "default"

    # Repo, then user (user wins)
    for cfg, label, path in ((repo_cfg, "repo", repo_config_path),
                             (user_cfg, "user", user_config_path)):
        for key, field_name in _ANALYZER_KEYS.items():
            v = _deep_get(cfg, key)
            if v is None:
                continue
            values[field_name] = _as_float(v, key)
            src[key] = f"{label}:{path}"

        p = _as_path(_deep_get(cfg, "paths.work_root"))
        if p is not None:
            work_root = p
            src["paths.work_root"] = f"{label}:{path}"

    # Environment variable overrides (highest non-CLI precedence)
    for env, key in _ENV_MAP.items():
        raw = os.environ.get(env)
        if not raw:
            continue
        if key == "paths.work_root":
            work_root = Path(raw).expanduser()
        else:
            values[_ANALYZER_KEYS[key]] = _as_float(raw, env)
        src[key] = f"env:{env}"

    return RouteInfoConfig(
        analyzer=AnalyzerConfig(**values),
        paths=RouteInfoPaths(work_root=work_root.expanduser()),
        source=src,
    )
