"""Text helpers for feed item markup."""

import html
import re
from typing import Optional

ELLIPSIS = "…"

# A space before this position is too early to be a reasonable break point
MIN_BREAK_POSITION = 40

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")
_IMG_SRC_RE = re.compile(r"""<img\b[^>]*?\bsrc\s*=\s*["']([^"']+)["']""", re.IGNORECASE)


def strip_html(markup: Optional[str]) -> str:
    """Drop tags, decode entities and collapse whitespace."""
    if not markup:
        return ""
    text = _TAG_RE.sub(" ", markup)
    text = html.unescape(text)
    return _WS_RE.sub(" ", text).strip()


def truncate_text(text: str, max_length: int) -> str:
    """Shorten text to at most max_length characters, ending in an ellipsis.

    Cuts at the last space when it falls past MIN_BREAK_POSITION, otherwise
    at the hard limit.
    """
    if len(text) <= max_length:
        return text
    sliced = text[: max_length - 1]
    last_space = sliced.rfind(" ")
    cut = last_space if last_space > MIN_BREAK_POSITION else max_length - 1
    return sliced[:cut].rstrip() + ELLIPSIS


def find_first_image(*markups: Optional[str]) -> Optional[str]:
    """Return the src of the first <img> tag found in the given markup."""
    for markup in markups:
        if not markup:
            continue
        match = _IMG_SRC_RE.search(markup)
        if match:
            return html.unescape(match.group(1)).strip() or None
    return None
