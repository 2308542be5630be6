"""Runtime settings.

Configuration is via environment variables only (`.env` loaded first if present).
Source watch lists live in `ingestion/config/sources.yaml`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from app.core.env import load_env_if_present


BACKEND_DIR: Final[Path] = Path(__file__).resolve().parents[2]
REPO_ROOT: Final[Path] = BACKEND_DIR.parent

DEFAULT_SOURCES_YAML: Final[Path] = BACKEND_DIR / "ingestion" / "config" / "sources.yaml"
DEFAULT_OUTPUT_DIRS: Final[tuple[str, ...]] = ("data", "public/data")


@dataclass(frozen=True, slots=True)
class Settings:
    helius_api_key: str
    github_token: str
    sources_yaml: Path
    output_dirs: tuple[Path, ...]
    lookback_days: int
    http_timeout_seconds: float


def _resolve(path: str) -> Path:
    p = Path(path)
    return p if p.is_absolute() else REPO_ROOT / p


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid integer for {name}: {raw!r}") from e


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid number for {name}: {raw!r}") from e


def get_settings() -> Settings:
    load_env_if_present()

    dirs_raw = os.environ.get("SOLRADAR_OUTPUT_DIRS")
    dirs = [d.strip() for d in dirs_raw.split(",") if d.strip()] if dirs_raw else list(DEFAULT_OUTPUT_DIRS)

    sources = os.environ.get("SOLRADAR_SOURCES_YAML")
    return Settings(
        helius_api_key=os.environ.get("HELIUS_API_KEY", ""),
        github_token=os.environ.get("GITHUB_TOKEN", ""),
        sources_yaml=_resolve(sources) if sources else DEFAULT_SOURCES_YAML,
        output_dirs=tuple(_resolve(d) for d in dirs),
        lookback_days=_int_env("SOLRADAR_LOOKBACK_DAYS", 7),
        http_timeout_seconds=_float_env("SOLRADAR_HTTP_TIMEOUT", 15.0),
    )
