"""Trending keywords by raw token frequency.

A naive heuristic: tokens are runs of letters, counted across titles and
descriptions after a stoplist is removed. Frequent is all it means.
"""

import re
from collections import Counter
from collections.abc import Collection

from aggregate_feeds.config import DEFAULT_STOPWORDS
from aggregate_feeds.models import Article
from aggregate_feeds.normalize_articles.text import strip_html

KEYWORD_SEPARATOR = " · "
EMPTY_KEYWORDS_LABEL = "—"


def tokenize(text: str, min_length: int = 4) -> list[str]:
    """Lowercased runs of at least min_length ASCII letters."""
    pattern = re.compile(rf"\b[A-Za-z]{{{min_length},}}\b", re.ASCII)
    return [token.lower() for token in pattern.findall(text)]


def _article_text(article: Article) -> str:
    return f"{article.title} {strip_html(article.raw_description)}"


def extract_trending_keywords(
    articles: list[Article],
    stopwords: Collection[str] = DEFAULT_STOPWORDS,
    limit: int = 10,
    min_length: int = 4,
) -> list[str]:
    """Most frequent tokens, ties broken by first occurrence."""
    text = " ".join(_article_text(a) for a in articles)
    counts = Counter(t for t in tokenize(text, min_length) if t not in stopwords)
    # Counter keeps first-seen order and sorted() is stable
    ranked = sorted(counts, key=lambda token: counts[token], reverse=True)
    return ranked[:limit]


def format_keywords(keywords: list[str]) -> str:
    return KEYWORD_SEPARATOR.join(keywords) if keywords else EMPTY_KEYWORDS_LABEL
