from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional


ENV_FILE_VAR = "SOLRADAR_ENV_FILE"


def parse_env_line(line: str) -> Optional[tuple[str, str]]:
    """Parse one `.env` line; blank lines, comments and malformed lines yield None."""
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    if line.startswith("export "):
        line = line[len("export "):]
    key, value = (part.strip() for part in line.split("=", 1))
    if not key:
        return None
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1]
    return key, value


def _candidates() -> Iterable[Path]:
    explicit = os.environ.get(ENV_FILE_VAR)
    if explicit:
        yield Path(explicit)
    # backend/app/core/env.py -> parents[3] is the repo root
    repo_root = Path(__file__).resolve().parents[3]
    yield repo_root / ".env"
    yield repo_root / "backend" / ".env"


def load_env_if_present(*, override: bool = False) -> list[Path]:
    """Load `.env` files into the process environment; returns the files read.

    Existing variables win unless override=True. Unreadable files are skipped.
    """
    loaded: list[Path] = []
    for path in _candidates():
        if not path.is_file():
            continue
        try:
            content = path.read_text(encoding="utf-8")
        except OSError:
            continue
        for raw in content.splitlines():
            parsed = parse_env_line(raw)
            if parsed is None:
                continue
            key, value = parsed
            if override or key not in os.environ:
                os.environ[key] = value
        loaded.append(path)
    return loaded
