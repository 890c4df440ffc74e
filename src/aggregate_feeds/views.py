"""Derived views over the merged article set."""

import logging
from collections.abc import Iterable

from aggregate_feeds.models import Article, CategoryBucket

logger = logging.getLogger(__name__)

GENERAL_LABEL = "General"


def merge_articles(article_lists: Iterable[list[Article]]) -> list[Article]:
    """Concatenate per-feed articles, dropping repeated ids (first one wins)."""
    merged = []
    seen_ids = set()
    duplicates = 0
    for articles in article_lists:
        for article in articles:
            if article.id in seen_ids:
                duplicates += 1
                continue
            seen_ids.add(article.id)
            merged.append(article)

    if duplicates:
        logger.info("Dropped %d duplicate articles", duplicates)
    return merged


def sort_by_recency(articles: list[Article]) -> list[Article]:
    """Newest first; undated articles after every dated one, in input order."""
    dated = [a for a in articles if a.pub_date is not None]
    undated = [a for a in articles if a.pub_date is None]
    dated.sort(key=lambda a: a.pub_date.timestamp(), reverse=True)
    return dated + undated


def filter_by_sources(articles: list[Article], selected: Iterable[str]) -> list[Article]:
    """Keep articles whose source is selected, preserving order."""
    selected = set(selected)
    return [a for a in articles if a.source_name in selected]


def build_category_buckets(
    articles: list[Article],
    general_label: str = GENERAL_LABEL,
) -> dict[str, list[Article]]:
    """Group articles under each of their categories.

    Uncategorized articles go under the general label only.
    """
    buckets: dict[str, list[Article]] = {}
    for article in articles:
        labels = article.categories or [general_label]
        for label in labels:
            buckets.setdefault(label, []).append(article)
    return buckets


def rank_category_buckets(
    buckets: dict[str, list[Article]],
    min_size: int = 2,
    preview_size: int = 4,
) -> list[CategoryBucket]:
    """Buckets by descending size, ties in insertion order, small ones dropped.

    Each bucket previews its most recent members.
    """
    ranked = sorted(
        (label for label, members in buckets.items() if len(members) >= min_size),
        key=lambda label: len(buckets[label]),
        reverse=True,
    )
    return [
        CategoryBucket(
            label=label,
            count=len(buckets[label]),
            articles=sort_by_recency(buckets[label])[:preview_size],
        )
        for label in ranked
    ]
