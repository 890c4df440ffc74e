"""Helper functions for aggregate_feeds CLI."""

from __future__ import annotations

import argparse
import logging

from aggregate_feeds.models import FeedSource
from common.cli_helpers import split_csv

logger = logging.getLogger(__name__)


def parse_sources(value: str | None, sources: list[FeedSource]) -> list[str]:
    '''Parse the --sources argument into a list of source names.'''

    names = [source.source_name for source in sources]

    # If no value is provided or if "all" is specified, keep every source
    if not value or value.strip().lower() == "all":
        return names

    valid_names = set(names)
    parsed = [s for s in split_csv(value) if s.lower() != "all"]

    for name in parsed:
        if name not in valid_names:
            logger.warning("Invalid source: %s", name)

    selected = [name for name in parsed if name in valid_names]

    if not selected:
        raise ValueError(f"No valid sources provided. Valid sources: {', '.join(sorted(valid_names))}")

    return selected


def parse_aggregate_feeds_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for aggregate_feeds.'''

    parser = argparse.ArgumentParser(description="Fetch, normalize and aggregate news feeds.")
    parser.add_argument(
        "--config",
        default=None,
        help="Config name under aggregate_feeds/configs (default: $CONFIG_ENV or prod).",
    )
    parser.add_argument(
        "--sources",
        default=None,
        help="Comma-separated source names to keep (default: all).",
    )
    parser.add_argument("--load-local", action="store_true", help="Save filtered articles to a local JSONL file")
    parser.add_argument("--output-dir", default="output")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)
