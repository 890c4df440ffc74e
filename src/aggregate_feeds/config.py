"""Configuration loader for aggregate_feeds."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from aggregate_feeds.models import FeedSource
from aggregate_feeds.sources import FEED_SOURCES

CONFIG_DIR = Path(__file__).parent / "configs"

PLACEHOLDER_IMAGE = (
    "https://images.unsplash.com/photo-1495020689067-958852a7765e"
    "?q=80&auto=format&fit=crop&w=1200"
)

# Source brands, city names and common English filler
DEFAULT_STOPWORDS = frozenset({
    # brands
    "times", "india", "hindustan", "hindu", "news", "express", "deccan",
    # places
    "bengaluru", "bangalore", "karnataka", "city",
    # filler
    "about", "after", "also", "been", "before", "being", "could", "does",
    "during", "from", "have", "here", "into", "just", "many", "more",
    "most", "much", "only", "other", "over", "said", "says", "some",
    "such", "than", "that", "their", "them", "then", "there", "these",
    "they", "this", "those", "through", "under", "very", "were", "what",
    "when", "where", "which", "while", "will", "with", "would", "year",
    "years", "your",
})


@dataclass
class RelayConfig:
    endpoint: str = "https://api.allorigins.win/get"
    request_timeout: int = 15
    user_agent: str = "aggregate-feeds/1.0 (RSS reader)"


@dataclass
class NormalizeConfig:
    description_max_length: int = 320
    max_categories: int = 4
    placeholder_image: str = PLACEHOLDER_IMAGE


@dataclass
class BucketConfig:
    general_label: str = "General"
    min_size: int = 2
    preview_size: int = 4


@dataclass
class TrendingConfig:
    keyword_limit: int = 10
    min_token_length: int = 4
    stopwords: frozenset[str] = DEFAULT_STOPWORDS


@dataclass
class Config:
    max_workers: int = 8
    relay: RelayConfig = field(default_factory=RelayConfig)
    normalize: NormalizeConfig = field(default_factory=NormalizeConfig)
    buckets: BucketConfig = field(default_factory=BucketConfig)
    trending: TrendingConfig = field(default_factory=TrendingConfig)
    sources: list[FeedSource] = field(default_factory=lambda: list(FEED_SOURCES))


def load_config(config_name: str | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        config_name: Name of config file (without .yaml extension).
                    If None, uses CONFIG_ENV env var or "prod".

    Returns:
        Loaded Config object
    """
    if config_name is None:
        config_name = os.environ.get("CONFIG_ENV", "prod")

    config_path = CONFIG_DIR / f"{config_name}.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    return _parse_config(data)


def _parse_sources(data: list[dict] | None) -> list[FeedSource]:
    if not data:
        return list(FEED_SOURCES)
    return [FeedSource(url=item["url"], source_name=item["source_name"]) for item in data]


def _parse_config(data: dict) -> Config:
    """Parse config dictionary into Config object."""
    relay_data = data.get("relay", {})
    relay = RelayConfig(
        endpoint=relay_data.get("endpoint", RelayConfig.endpoint),
        request_timeout=relay_data.get("request_timeout", RelayConfig.request_timeout),
        user_agent=relay_data.get("user_agent", RelayConfig.user_agent),
    )

    normalize_data = data.get("normalize", {})
    normalize = NormalizeConfig(
        description_max_length=normalize_data.get("description_max_length", 320),
        max_categories=normalize_data.get("max_categories", 4),
        placeholder_image=normalize_data.get("placeholder_image", PLACEHOLDER_IMAGE),
    )

    bucket_data = data.get("buckets", {})
    buckets = BucketConfig(
        general_label=bucket_data.get("general_label", "General"),
        min_size=bucket_data.get("min_size", 2),
        preview_size=bucket_data.get("preview_size", 4),
    )

    trending_data = data.get("trending", {})
    stopwords = trending_data.get("stopwords")
    trending = TrendingConfig(
        keyword_limit=trending_data.get("keyword_limit", 10),
        min_token_length=trending_data.get("min_token_length", 4),
        stopwords=frozenset(w.lower() for w in stopwords) if stopwords else DEFAULT_STOPWORDS,
    )

    return Config(
        max_workers=data.get("max_workers", 8),
        relay=relay,
        normalize=normalize,
        buckets=buckets,
        trending=trending,
        sources=_parse_sources(data.get("sources")),
    )


# Global config instance (loaded on first access)
_config: Config | None = None


def get_config() -> Config:
    """Get the current configuration (lazy-loaded)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Config):
    """Set the global configuration (useful for testing)."""
    global _config
    _config = config


def reset_config():
    """Reset the global configuration (forces reload on next access)."""
    global _config
    _config = None
