from __future__ import annotations

"""GitHub search collector.

Scope:
- trendingRepos: repos matching the trending query pushed within the lookback
  window, sorted by stars.
- newRepos: repos matching the new query created within the lookback window.

Each query fails independently; a failed query contributes an empty list.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from ingestion.core.adapter import BaseCollector
from ingestion.core.errors import CollectionError, ParseError
from ingestion.core.fetch_context import FetchContext
from ingestion.core.source_registry import GitHubSourceConfig


UTC = timezone.utc


def empty_repository_payload(timestamp: Optional[str] = None) -> dict[str, Any]:
    return {
        "timestamp": timestamp or datetime.now(tz=UTC).isoformat(),
        "trendingRepos": [],
        "newRepos": [],
    }


def parse_repo(item: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": item.get("id"),
        "name": item.get("name"),
        "fullName": item.get("full_name"),
        "description": item.get("description"),
        "url": item.get("html_url"),
        "stars": int(item.get("stargazers_count") or 0),
        "createdAt": item.get("created_at"),
        "pushedAt": item.get("pushed_at"),
        "language": item.get("language"),
        "topics": list(item.get("topics") or []),
    }


class GitHubCollector(BaseCollector):
    source_type = "github"

    def __init__(
        self,
        config: GitHubSourceConfig,
        *,
        token: Optional[str] = None,
        lookback_days: int = 7,
        context: Optional[FetchContext] = None,
    ) -> None:
        super().__init__(context)
        self.config = config
        self.lookback_days = lookback_days
        self._token = token if token is not None else os.environ.get("GITHUB_TOKEN", "")

    def empty_payload(self) -> dict[str, Any]:
        return empty_repository_payload()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def search(self, query: str, *, sort: str, order: str = "desc") -> list[dict[str, Any]]:
        data = self.context.get_json(
            f"{self.config.api_url}/search/repositories",
            source_key="github:search",
            params={"q": query, "sort": sort, "order": order, "per_page": self.config.per_page},
            headers=self._headers(),
        )
        if not isinstance(data, dict):
            raise ParseError("github: search response is not an object")
        return [parse_repo(item) for item in data.get("items") or [] if isinstance(item, dict)]

    def fetch(self) -> dict[str, Any]:
        now = datetime.now(tz=UTC)
        payload = empty_repository_payload(now.isoformat())
        if not self.config.enabled:
            self.logger.info("github source disabled; skipping")
            return payload

        since = (now - timedelta(days=self.lookback_days)).date().isoformat()

        try:
            payload["trendingRepos"] = self.search(f"{self.config.trending_query} pushed:>{since}", sort="stars")
        except CollectionError as e:
            self.logger.warning(f"github trending search failed: {e}")

        try:
            payload["newRepos"] = self.search(f"{self.config.new_query} created:>{since}", sort="updated")
        except CollectionError as e:
            self.logger.warning(f"github new-repo search failed: {e}")

        self.logger.info(
            f"github collected trending={len(payload['trendingRepos'])} new={len(payload['newRepos'])}"
        )
        return payload
