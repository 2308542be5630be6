"""Minimal API smoke: hit the report endpoints in-process and show access logs."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from fastapi.testclient import TestClient


ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = ROOT / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from app.core.env import load_env_if_present  # noqa: E402
from app.main import app  # noqa: E402


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


def main() -> int:
    load_env_if_present()

    logger = logging.getLogger("solradar")
    logger.setLevel(logging.INFO)
    h = ListHandler()
    logger.addHandler(h)

    c = TestClient(app, raise_server_exceptions=True)
    try:
        for path in ("/v1/definitions", "/v1/narratives?limit=3"):
            r = c.get(path)
            print(path, "status:", r.status_code)
            print("x-request-id:", r.headers.get("x-request-id"))
            print("body:", r.text[:300])
    except Exception as ex:  # noqa: BLE001
        print("EXCEPTION:", type(ex).__name__, str(ex))

    logger.removeHandler(h)
    print("solradar logs:", h.messages[-3:])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
