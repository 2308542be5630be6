from __future__ import annotations

"""Social collector (Nitter profile scrape).

Scope:
- Fetch the public Nitter timeline of each configured account.
- Parse the first N tweets (content, date, stats, links) with BeautifulSoup.
- Attach keywords matched against the social keyword list (launch/airdrop
  vocabulary, independent of narrative vocabularies).
- Emit only tweets with at least one keyword.

Non-goals:
- No sample-data fallback when scraping is blocked; the account yields nothing.
- No login, no official Twitter API.
"""

import re
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from bs4 import BeautifulSoup

from ingestion.core.adapter import BaseCollector
from ingestion.core.errors import CollectionError
from ingestion.core.fetch_context import FetchContext
from ingestion.core.source_registry import SocialSourceConfig


UTC = timezone.utc

_URL_RE = re.compile(r"https?://[^\s]+")
_NITTER_DATE_FORMAT = "%b %d, %Y · %I:%M %p %Z"

_STAT_ICONS = {
    "icon-heart": "likes",
    "icon-retweet": "retweets",
    "icon-comment": "replies",
}


def match_social_keywords(text: str, keywords: Sequence[str]) -> list[str]:
    lowered = (text or "").lower()
    return [kw for kw in keywords if kw.lower() in lowered]


def _parse_count(text: str) -> int:
    digits = re.sub(r"[^\d]", "", text or "")
    return int(digits) if digits else 0


def _parse_date(title: Optional[str]) -> str:
    if title:
        try:
            return datetime.strptime(title, _NITTER_DATE_FORMAT).replace(tzinfo=UTC).isoformat()
        except ValueError:
            pass
    return datetime.now(tz=UTC).isoformat()


def parse_timeline(html: str, author: str, *, limit: int) -> list[dict[str, Any]]:
    """Parse a Nitter timeline page into raw tweets (no keyword filtering)."""
    soup = BeautifulSoup(html, "html.parser")
    tweets: list[dict[str, Any]] = []

    for item in soup.select("div.timeline-item")[:limit]:
        body = item.select_one(".tweet-content")
        if body is None:
            continue
        content = re.sub(r"\s+", " ", body.get_text(" ", strip=True)).strip()

        date_link = item.select_one(".tweet-date a")
        created_at = _parse_date(date_link.get("title") if date_link is not None else None)

        engagement = {"likes": 0, "retweets": 0, "replies": 0}
        for stat in item.select(".tweet-stat"):
            icon = stat.select_one("span[class^=icon-]")
            if icon is None:
                continue
            for cls in icon.get("class") or []:
                field = _STAT_ICONS.get(cls)
                if field:
                    engagement[field] = _parse_count(stat.get_text())

        urls = [a["href"] for a in body.select("a[href]") if str(a["href"]).startswith("http")]
        for found in _URL_RE.findall(content):
            if found not in urls:
                urls.append(found)

        tweets.append(
            {
                "author": author,
                "content": content,
                "engagement": engagement,
                "urls": urls,
                "createdAt": created_at,
            }
        )

    return tweets


class SocialCollector(BaseCollector):
    source_type = "social"

    def __init__(self, config: SocialSourceConfig, *, context: Optional[FetchContext] = None) -> None:
        super().__init__(context)
        self.config = config

    def empty_payload(self) -> list[dict[str, Any]]:
        return []

    def scrape_account(self, account: str) -> list[dict[str, Any]]:
        handle = account.lstrip("@")
        html = self.context.get_text(f"{self.config.nitter_url}/{handle}", source_key=f"social:{handle}")
        return parse_timeline(html, f"@{handle}", limit=self.config.max_posts_per_account)

    def fetch(self) -> list[dict[str, Any]]:
        if not self.config.enabled:
            self.logger.info("social source disabled; skipping")
            return []

        observed_at = datetime.now(tz=UTC).isoformat()
        posts: list[dict[str, Any]] = []
        for i, account in enumerate(self.config.accounts):
            if i:
                self.context.jitter_sleep()
            try:
                tweets = self.scrape_account(account)
            except CollectionError as e:
                self.logger.warning(f"Skipping account {account}: {e}")
                continue

            for tweet in tweets:
                keywords = match_social_keywords(tweet["content"], self.config.keywords)
                if not keywords:
                    continue
                posts.append(
                    {
                        "timestamp": observed_at,
                        "source": "twitter",
                        "keywords": keywords,
                        **tweet,
                    }
                )

        self.logger.info(f"social collected posts={len(posts)} accounts={len(self.config.accounts)}")
        return posts
