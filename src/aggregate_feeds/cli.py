"""CLI for fetching and aggregating news feeds."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from dotenv import load_dotenv

from aggregate_feeds.aggregate_feeds import AggregationEngine
from aggregate_feeds.config import load_config
from aggregate_feeds.helpers import parse_aggregate_feeds_args, parse_sources
from aggregate_feeds.models import AggregateSnapshot
from common.cli_helpers import save_jsonl_local, setup_logging
from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)


def _log_snapshot(snapshot: AggregateSnapshot) -> None:
    logger.info("%d stories", snapshot.total_count)
    if snapshot.lead_article is not None:
        logger.info("Top story: %s (%s)", snapshot.lead_article.title, snapshot.lead_article.source_name)
    logger.info("Trending: %s", snapshot.keywords_label)
    for bucket in snapshot.category_buckets:
        logger.info("  %s: %d", bucket.label, bucket.count)


def main(argv: list[str] | None = None) -> int:
    args = parse_aggregate_feeds_args(argv)

    load_dotenv()
    setup_logging(args.verbose)

    config = load_config(args.config)
    selected = parse_sources(args.sources, config.sources)

    engine = AggregationEngine(config)
    snapshot = engine.load()
    if snapshot.no_stories:
        logger.warning("No stories could be loaded")
        return 1

    if args.sources:
        snapshot = engine.set_source_filter(selected)

    _log_snapshot(snapshot)

    if args.load_local:
        now = datetime.now(timezone.utc)
        records = [serialize_dataclass(article) for article in snapshot.articles]
        filepath = save_jsonl_local(records, "aggregated_articles", now, args.output_dir)
        logger.info("Saved %d articles to %s", len(records), filepath)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
