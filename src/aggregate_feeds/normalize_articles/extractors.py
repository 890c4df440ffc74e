"""Field extractors and their fallback chains.

Each chain is an ordered list of callables taking a feed entry and the
feed context. `first_value` tries them in order and returns the first
non-empty result, falling back to a fixed default.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from aggregate_feeds.models import Enclosure, FeedSource
from aggregate_feeds.normalize_articles.text import find_first_image

NON_IMAGE_MEDIUMS = {"video", "audio", "document", "executable"}


@dataclass
class FeedContext:
    """Channel-level fallback values for the items of one feed."""
    source: FeedSource
    feed_title: str
    feed_link: str


Extractor = Callable[[Any, FeedContext], Optional[str]]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def first_value(extractors: list[Extractor], entry: Any, context: FeedContext, default: str) -> str:
    """Run extractors in order until one yields a non-empty string."""
    for extractor in extractors:
        value = _text(extractor(entry, context))
        if value:
            return value
    return default


def _is_image_type(mime_type: str) -> bool:
    return mime_type.lower().startswith("image/")


def _is_non_image_media(item: dict) -> bool:
    medium = _text(item.get("medium")).lower()
    mime_type = _text(item.get("type")).lower()
    if medium in NON_IMAGE_MEDIUMS:
        return True
    return bool(mime_type) and not _is_image_type(mime_type)


# --- identity / link ---

def guid(entry, context) -> Optional[str]:
    return entry.get("id")


def _is_http_url(value: str) -> bool:
    return value.lower().startswith(("http://", "https://"))


def item_link(entry, context) -> Optional[str]:
    link = _text(entry.get("link"))
    # feedparser copies a permalink-default guid into link, opaque ids included
    if entry.get("guidislink") and not _is_http_url(link):
        return None
    return link


def item_title(entry, context) -> Optional[str]:
    return entry.get("title")


def channel_link(entry, context) -> Optional[str]:
    return context.feed_link


# --- descriptions ---

def raw_description(entry, context) -> Optional[str]:
    return entry.get("summary")


def encoded_content(entry, context) -> Optional[str]:
    for content in entry.get("content") or []:
        value = _text(content.get("value"))
        if value:
            return value
    return None


# --- images ---

def media_content_image(entry, context) -> Optional[str]:
    for media in entry.get("media_content") or []:
        url = _text(media.get("url"))
        if url and not _is_non_image_media(media):
            return url
    return None


def image_enclosure(entry, context) -> Optional[str]:
    for enclosure in entry.get("enclosures") or []:
        url = _text(enclosure.get("href") or enclosure.get("url"))
        if url and _is_image_type(_text(enclosure.get("type"))):
            return url
    return None


def media_thumbnail(entry, context) -> Optional[str]:
    for thumbnail in entry.get("media_thumbnail") or []:
        url = _text(thumbnail.get("url"))
        if url:
            return url
    return None


def embedded_image(entry, context) -> Optional[str]:
    return find_first_image(raw_description(entry, context), encoded_content(entry, context))


# --- provenance ---

def item_author(entry, context) -> Optional[str]:
    return entry.get("author")


def feed_title(entry, context) -> Optional[str]:
    return context.feed_title


def source_name(entry, context) -> Optional[str]:
    return context.source.source_name


# --- dates ---

def published(entry, context) -> Optional[str]:
    return entry.get("published")


def updated(entry, context) -> Optional[str]:
    return entry.get("updated")


ID_CHAIN: list[Extractor] = [guid, item_link, item_title]
LINK_CHAIN: list[Extractor] = [item_link, channel_link]
CONTENT_CHAIN: list[Extractor] = [encoded_content, raw_description]
IMAGE_CHAIN: list[Extractor] = [media_content_image, image_enclosure, media_thumbnail, embedded_image]
AUTHOR_CHAIN: list[Extractor] = [item_author, feed_title, source_name]
DATE_CHAIN: list[Extractor] = [published, updated]


def extract_enclosure(entry) -> Optional[Enclosure]:
    """First attached media resource that is not an image."""
    for enclosure in entry.get("enclosures") or []:
        url = _text(enclosure.get("href") or enclosure.get("url"))
        mime_type = _text(enclosure.get("type"))
        if url and not _is_image_type(mime_type):
            return Enclosure(url=url, mime_type=mime_type or "application/octet-stream")
    return None


def extract_categories(entry, max_categories: int) -> list[str]:
    """Distinct category labels in order of first appearance, capped."""
    categories: list[str] = []
    for tag in entry.get("tags") or []:
        label = _text(tag.get("term") or tag.get("label"))
        if label and label not in categories:
            categories.append(label)
            if len(categories) == max_categories:
                break
    return categories
