"""Build tweet intent URLs and estimate the length of the resulting post.

Both functions accept a ShareParams, a plain dict with the same keys, or
None. Missing fields default to empty values.
"""

from urllib.parse import quote

from .models import share_fields
from .normalize import (
    is_non_empty_string,
    normalize_handles,
    normalize_hashtags,
    strip_handle,
)

X_INTENT_BASE = "https://x.com/intent/tweet"  # twitter.com works too

MAX_TWEET_LENGTH = 280
WARN_TWEET_LENGTH = 260

# Characters left unescaped, matching JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "!*'()"


def _encode(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_intent_url(params=None, base_url: str = X_INTENT_BASE) -> str:
    """Compose the intent URL for the given share parameters.

    Parts are appended in a fixed order (text, url, hashtags, via, related)
    and only when present. ``text`` and ``url`` are judged by their trimmed
    form but encoded as given.
    """
    p = share_fields(params)
    text = p.get("text") or ""
    url = p.get("url") or ""

    parts = []
    if is_non_empty_string(text):
        parts.append("text=" + _encode(text))
    if is_non_empty_string(url):
        parts.append("url=" + _encode(url))

    tags = normalize_hashtags(p.get("hashtags"))
    if tags:
        parts.append("hashtags=" + _encode(",".join(tags)))

    via = strip_handle(p.get("via"))
    if via:
        parts.append("via=" + _encode(via))

    related = normalize_handles(p.get("related"))
    if related:
        parts.append("related=" + _encode(",".join(related)))

    if not parts:
        return base_url
    return base_url + "?" + "&".join(parts)


def estimate_tweet_length(params=None) -> int:
    """Approximate the length of the post the intent URL would pre-fill.

    Not the platform's real counting rules: URLs count at their literal
    length, hashtags are assumed appended as ``" #a #b"``, via as
    ``" via @handle"``. Related accounts never count.
    """
    p = share_fields(params)
    text = p.get("text") or ""
    url = p.get("url") or ""

    count = len(text.strip()) if isinstance(text, str) else 0

    if is_non_empty_string(url):
        count += 1 + len(url.strip())

    tags = normalize_hashtags(p.get("hashtags"))
    if tags:
        count += 1 + len(" ".join("#" + t for t in tags))

    via = strip_handle(p.get("via"))
    if via:
        count += len(" via @" + via)

    return count


def length_state(length: int) -> str:
    """Classify an estimated length as ``ok``, ``warn`` or ``over``."""
    if length > MAX_TWEET_LENGTH:
        return "over"
    if length > WARN_TWEET_LENGTH:
        return "warn"
    return "ok"
