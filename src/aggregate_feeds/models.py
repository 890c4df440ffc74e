"""Data models for the feed aggregation pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class FeedSource:
    """A configured feed endpoint and its display label."""
    url: str
    source_name: str


@dataclass(frozen=True)
class Enclosure:
    """Non-image media attached to a feed item (audio, video, other)."""
    url: str
    mime_type: str


@dataclass
class Article:
    """Canonical article normalized from one feed item."""
    id: str
    title: str
    link: str
    description: str
    raw_description: str
    content_html: str
    image: str
    enclosure: Optional[Enclosure]
    pub_date: Optional[datetime]
    author: str
    categories: list[str]
    source_name: str
    feed_title: str
    feed_link: str


@dataclass
class FeedResult:
    """Outcome of fetching one feed: a parsed document or a failure marker."""
    source: FeedSource
    document: Optional[Any] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.document is not None and self.error is None


@dataclass
class CategoryBucket:
    """Ranked category group exposed to the presentation layer."""
    label: str
    count: int
    articles: list[Article]


@dataclass
class AggregateState:
    """Working set owned by the aggregation engine.

    Replaced wholesale on every load or filter change.
    """
    all_articles: list[Article] = field(default_factory=list)
    selected_sources: frozenset[str] = frozenset()
    filtered_articles: list[Article] = field(default_factory=list)
    category_buckets: dict[str, list[Article]] = field(default_factory=dict)
    trending_keywords: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.all_articles


@dataclass
class AggregateSnapshot:
    """Read-only view handed to the presentation layer after each cycle."""
    articles: list[Article]
    category_buckets: list[CategoryBucket]
    trending_keywords: list[str]
    keywords_label: str
    lead_article: Optional[Article]
    total_count: int
    no_stories: bool
