"""Normalize parsed feed documents into Article records."""

import logging
from typing import Any, Optional

from aggregate_feeds.config import NormalizeConfig
from aggregate_feeds.models import Article, FeedSource
from aggregate_feeds.normalize_articles.extractors import (
    AUTHOR_CHAIN,
    CONTENT_CHAIN,
    DATE_CHAIN,
    ID_CHAIN,
    IMAGE_CHAIN,
    LINK_CHAIN,
    FeedContext,
    extract_categories,
    extract_enclosure,
    first_value,
    raw_description,
)
from aggregate_feeds.normalize_articles.text import strip_html, truncate_text
from common.datetime import parse_feed_datetime

logger = logging.getLogger(__name__)


def _feed_context(document: Any, source: FeedSource) -> FeedContext:
    channel = document.get("feed") or {}
    return FeedContext(
        source=source,
        feed_title=(channel.get("title") or "").strip(),
        feed_link=(channel.get("link") or "").strip(),
    )


def normalize_entry(
    entry: Any,
    context: FeedContext,
    settings: NormalizeConfig,
) -> Optional[Article]:
    """Build an Article from one feed entry, or None when it has no title."""
    title = (entry.get("title") or "").strip()
    if not title:
        return None

    raw = raw_description(entry, context) or ""
    description = truncate_text(strip_html(raw), settings.description_max_length)
    pub_date = parse_feed_datetime(first_value(DATE_CHAIN, entry, context, default=""))

    return Article(
        id=first_value(ID_CHAIN, entry, context, default=title),
        title=title,
        link=first_value(LINK_CHAIN, entry, context, default="#"),
        description=description,
        raw_description=raw,
        content_html=first_value(CONTENT_CHAIN, entry, context, default=""),
        image=first_value(IMAGE_CHAIN, entry, context, default=settings.placeholder_image),
        enclosure=extract_enclosure(entry),
        pub_date=pub_date,
        author=first_value(AUTHOR_CHAIN, entry, context, default=context.source.source_name),
        categories=extract_categories(entry, settings.max_categories),
        source_name=context.source.source_name,
        feed_title=context.feed_title,
        feed_link=context.feed_link,
    )


def normalize_feed(
    document: Any,
    source: FeedSource,
    settings: NormalizeConfig | None = None,
) -> list[Article]:
    """Normalize every titled item of a parsed feed, keeping feed order."""
    if document is None:
        return []
    settings = settings or NormalizeConfig()
    context = _feed_context(document, source)

    articles = []
    skipped = 0
    for entry in document.get("entries") or []:
        article = normalize_entry(entry, context, settings)
        if article is None:
            skipped += 1
            continue
        articles.append(article)

    if skipped:
        logger.debug("Skipped %d untitled items from %s", skipped, source.source_name)
    logger.info("Normalized %d articles from %s", len(articles), source.source_name)
    return articles
