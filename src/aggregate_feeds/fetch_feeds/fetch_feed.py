"""Feed fetching through the CORS relay."""

import io
import logging
from typing import Any
from urllib.parse import quote

import feedparser
import requests

from aggregate_feeds.config import RelayConfig
from aggregate_feeds.models import FeedResult, FeedSource

logger = logging.getLogger(__name__)


class FeedFetchError(Exception):
    """The relay could not deliver a feed body."""


class FeedParseError(FeedFetchError):
    """The relayed feed body did not yield a feed document."""


def build_relay_url(feed_url: str, endpoint: str) -> str:
    """Wrap a feed URL as the percent-encoded `url` parameter of the relay."""
    return f"{endpoint}?url={quote(feed_url, safe='')}"


def _fetch_contents(feed_url: str, relay: RelayConfig) -> str:
    relay_url = build_relay_url(feed_url, relay.endpoint)
    try:
        response = requests.get(
            relay_url,
            timeout=relay.request_timeout,
            headers={"User-Agent": relay.user_agent},
        )
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as e:
        raise FeedFetchError(f"relay request failed for {feed_url}: {e}") from e

    contents = payload.get("contents") if isinstance(payload, dict) else None
    if not isinstance(contents, str) or not contents.strip():
        raise FeedFetchError(f"relay response for {feed_url} has no contents")
    return contents


def parse_feed_document(contents: str) -> Any:
    """Parse raw feed text, raising FeedParseError when no feed comes out."""
    # A byte stream keeps feedparser from treating the text as a URL or path
    document = feedparser.parse(
        io.BytesIO(contents.encode("utf-8")),
        response_headers={"content-type": "application/xml; charset=utf-8"},
    )

    if not document.get("version") and not document.entries:
        reason = document.get("bozo_exception", "unrecognised feed format")
        raise FeedParseError(f"could not parse feed: {reason}")

    if document.get("bozo"):
        logger.warning(
            "Feed parsed with errors (%s); keeping %d recovered entries",
            document.get("bozo_exception"),
            len(document.entries),
        )
    return document


def fetch_feed_document(feed_url: str, relay: RelayConfig) -> Any:
    """Fetch one feed through the relay and return its parsed document."""
    contents = _fetch_contents(feed_url, relay)
    return parse_feed_document(contents)


def fetch_feed(source: FeedSource, relay: RelayConfig) -> FeedResult:
    """Fetch one source, turning any feed failure into a failed FeedResult."""
    try:
        document = fetch_feed_document(source.url, relay)
    except FeedFetchError as e:
        logger.warning("Failed to fetch %s: %s", source.source_name, e)
        return FeedResult(source=source, error=str(e))

    logger.info("Fetched %d items from %s", len(document.entries), source.source_name)
    return FeedResult(source=source, document=document)
