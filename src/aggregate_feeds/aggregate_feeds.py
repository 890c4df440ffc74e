"""Aggregation engine: owns the merged article set and its derived views."""

import logging
import threading
from collections.abc import Iterable
from typing import Callable

from aggregate_feeds.config import Config, RelayConfig, get_config
from aggregate_feeds.fetch_feeds.fetch_feeds import fetch_feeds
from aggregate_feeds.keywords import extract_trending_keywords, format_keywords
from aggregate_feeds.models import (
    AggregateSnapshot,
    AggregateState,
    Article,
    FeedResult,
    FeedSource,
)
from aggregate_feeds.normalize_articles.normalize import normalize_feed
from aggregate_feeds.views import (
    build_category_buckets,
    filter_by_sources,
    merge_articles,
    rank_category_buckets,
    sort_by_recency,
)

logger = logging.getLogger(__name__)

Fetcher = Callable[[list[FeedSource], RelayConfig, int], list[FeedResult]]


class AggregationEngine:
    """State container for loaded articles.

    Only `load` and `set_source_filter` change state, and both replace the
    whole AggregateState once their inputs are ready. The presentation layer
    reads snapshots and calls `set_source_filter` on selection changes.
    """

    def __init__(self, config: Config | None = None, fetcher: Fetcher = fetch_feeds):
        self._config = config or get_config()
        self._fetcher = fetcher
        self._state = AggregateState()
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def state(self) -> AggregateState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return not self._state.is_empty

    def load(self, sources: list[FeedSource] | None = None) -> AggregateSnapshot:
        """Fetch and normalize every source, then rebuild all views.

        A load that is overtaken by a newer one drops its results.
        """
        sources = list(self._config.sources if sources is None else sources)
        with self._lock:
            self._generation += 1
            generation = self._generation

        logger.info("Loading %d feeds", len(sources))
        results = self._fetcher(sources, self._config.relay, self._config.max_workers)

        per_feed = [
            normalize_feed(result.document, result.source, self._config.normalize)
            for result in results
            if result.ok
        ]
        all_articles = sort_by_recency(merge_articles(per_feed))

        with self._lock:
            if generation != self._generation:
                logger.info("Discarding results of superseded load %d", generation)
                return self.snapshot()
            selected = frozenset(source.source_name for source in sources)
            self._state = self._derive_state(all_articles, selected)

        if self._state.is_empty:
            logger.warning("No stories could be loaded from %d feeds", len(sources))
        else:
            logger.info("Loaded %d articles", len(all_articles))
        return self.snapshot()

    def set_source_filter(self, selected_source_names: Iterable[str]) -> AggregateSnapshot:
        """Restrict every view to the selected sources, without re-fetching."""
        selected = frozenset(selected_source_names)
        with self._lock:
            self._state = self._derive_state(self._state.all_articles, selected)
        logger.info(
            "Filtered to %d of %d articles (%s)",
            len(self._state.filtered_articles),
            len(self._state.all_articles),
            ", ".join(sorted(selected)) or "no sources",
        )
        return self.snapshot()

    def _derive_state(self, all_articles: list[Article], selected: frozenset[str]) -> AggregateState:
        filtered = filter_by_sources(all_articles, selected)
        trending = self._config.trending
        return AggregateState(
            all_articles=all_articles,
            selected_sources=selected,
            filtered_articles=filtered,
            category_buckets=build_category_buckets(filtered, self._config.buckets.general_label),
            trending_keywords=extract_trending_keywords(
                filtered,
                stopwords=trending.stopwords,
                limit=trending.keyword_limit,
                min_length=trending.min_token_length,
            ),
        )

    def snapshot(self) -> AggregateSnapshot:
        """Read-only view of the current state for the presentation layer."""
        state = self._state
        buckets = self._config.buckets
        return AggregateSnapshot(
            articles=list(state.filtered_articles),
            category_buckets=rank_category_buckets(
                state.category_buckets,
                min_size=buckets.min_size,
                preview_size=buckets.preview_size,
            ),
            trending_keywords=list(state.trending_keywords),
            keywords_label=format_keywords(state.trending_keywords),
            lead_article=state.filtered_articles[0] if state.filtered_articles else None,
            total_count=len(state.filtered_articles),
            no_stories=state.is_empty,
        )
