"""Concurrent fetch of every configured feed."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from aggregate_feeds.config import RelayConfig
from aggregate_feeds.fetch_feeds.fetch_feed import fetch_feed
from aggregate_feeds.models import FeedResult, FeedSource

logger = logging.getLogger(__name__)


def fetch_feeds(
    sources: list[FeedSource],
    relay: RelayConfig,
    max_workers: int = 8,
) -> list[FeedResult]:
    """Fetch all sources concurrently and return results in source order.

    Waits for every feed to succeed or fail before returning.
    """
    if not sources:
        return []

    results: dict[int, FeedResult] = {}
    workers = max(1, min(max_workers, len(sources)))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(fetch_feed, source, relay): index
            for index, source in enumerate(sources)
        }
        for future in as_completed(futures):
            index = futures[future]
            try:
                results[index] = future.result()
            except Exception as e:
                source = sources[index]
                logger.error("Failed to fetch %s: %s", source.source_name, e)
                results[index] = FeedResult(source=source, error=str(e))

    ordered = [results[i] for i in range(len(sources))]
    failed = sum(1 for r in ordered if not r.ok)
    logger.info("Fetched %d feeds (%d failed)", len(ordered), failed)
    return ordered
