from __future__ import annotations

"""FetchContext for collectors (conservative, low-risk fetching).

Intent:
- No concurrency: one request at a time, sequential per source.
- Per-request timeout; no aggressive retries.
- Optional random jitter between page scrapes to avoid bot-like patterns.
- Failures surface as FetchError/ParseError, never as raw httpx exceptions.
"""

import logging
import random
import time
from typing import Any, Optional

import httpx

from ingestion.core.errors import FetchError, ParseError


logger = logging.getLogger("solradar.ingestion.fetch")

DEFAULT_USER_AGENT = "solradar/1.0 (+narrative detection)"

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class FetchContext:
    """Holds runtime controls for fetch behavior within a single detection run."""

    def __init__(
        self,
        *,
        timeout_seconds: float = 15.0,
        jitter_seconds_min: float = 0.0,
        jitter_seconds_max: float = 0.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._timeout = float(timeout_seconds)
        self._jmin = float(jitter_seconds_min)
        self._jmax = float(jitter_seconds_max)
        # Injected in tests (httpx.MockTransport); None means real network.
        self._transport = transport

    def jitter_sleep(self) -> None:
        if self._jmax <= 0:
            return
        time.sleep(random.uniform(self._jmin, self._jmax))

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self._timeout, follow_redirects=True, transport=self._transport)

    def _send(self, method: str, url: str, *, source_key: str, **kwargs: Any) -> httpx.Response:
        try:
            with self._client() as client:
                resp = client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise FetchError(f"{source_key}: {type(e).__name__}: {e}") from e

        if resp.status_code in (403, 429):
            logger.warning(
                f"Fetch {source_key} BLOCKED: Status {resp.status_code}. "
                f"Retry-After: {resp.headers.get('Retry-After')}"
            )
        if resp.status_code >= 400:
            raise FetchError(f"{source_key}: HTTP {resp.status_code}")
        return resp

    def get_json(
        self,
        url: str,
        *,
        source_key: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        h = {"User-Agent": DEFAULT_USER_AGENT, "Accept": "application/json"}
        h.update(headers or {})
        resp = self._send("GET", url, source_key=source_key, params=params, headers=h)
        try:
            return resp.json()
        except ValueError as e:
            raise ParseError(f"{source_key}: invalid JSON body") from e

    def get_text(self, url: str, *, source_key: str) -> str:
        resp = self._send("GET", url, source_key=source_key, headers=dict(BROWSER_HEADERS))
        return resp.text

    def rpc_call(self, url: str, method: str, params: Any = None, *, source_key: str) -> Any:
        """Single JSON-RPC 2.0 call; returns `result` or raises FetchError on `error`."""
        body: dict[str, Any] = {"jsonrpc": "2.0", "id": 1, "method": method}
        if params is not None:
            body["params"] = params
        resp = self._send(
            "POST",
            url,
            source_key=source_key,
            json=body,
            headers={"Content-Type": "application/json", "User-Agent": DEFAULT_USER_AGENT},
        )
        try:
            data = resp.json()
        except ValueError as e:
            raise ParseError(f"{source_key}: invalid JSON-RPC body") from e
        if not isinstance(data, dict):
            raise ParseError(f"{source_key}: JSON-RPC body is not an object")
        if data.get("error"):
            err = data["error"]
            message = err.get("message") if isinstance(err, dict) else str(err)
            raise FetchError(f"{source_key}: RPC {method} failed: {message}")
        return data.get("result")
