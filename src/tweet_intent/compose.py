"""Helpers for moving values between compose-form fields and the core.

Form fields are plain strings: hashtags are shown as ``#a #b`` and related
accounts as ``a, b``.
"""

from .models import Draft, ShareParams
from .normalize import normalize_hashtags, uniq


def params_from_form(
    text: str = "",
    url: str = "",
    tags: str = "",
    via: str = "",
    related: str = "",
) -> ShareParams:
    return ShareParams(
        text=text or "",
        url=url or "",
        hashtags=normalize_hashtags(tags or ""),
        via=via or "",
        related=[s.strip() for s in (related or "").split(",") if s.strip()],
    )


def format_hashtags(tags: list[str]) -> str:
    return " ".join("#" + t for t in tags)


def form_from_draft(draft: Draft | None) -> dict[str, str]:
    """Field values to pre-fill the form with. Unsaved fields come back empty."""
    if draft is None:
        return {"text": "", "url": "", "tags": "", "via": "", "related": ""}
    return {
        "text": draft.text or "",
        "url": draft.url or "",
        "tags": format_hashtags(draft.hashtags or []),
        "via": draft.via or "",
        "related": ", ".join(draft.related or []),
    }


def insert_snippet(
    text: str, content: str, start: int | None = None, end: int | None = None
) -> tuple[str, int]:
    """Insert *content* over the selection ``text[start:end]``.

    A space is added on either side when the neighbouring text is not
    already whitespace. Without a selection the content is appended.
    Returns the new text and the caret position just after the insert.
    """
    start = len(text) if start is None else start
    end = len(text) if end is None else end
    before = text[:start]
    after = text[end:]
    if before and not before[-1].isspace():
        content = " " + content
    if after and not after[0].isspace():
        content = content + " "
    return before + content + after, len(before + content)


def add_hashtag_to_field(field_value: str, tag: str) -> str:
    """Return the hashtag field with *tag* added once, as ``#a #b``."""
    tags = normalize_hashtags(field_value) + normalize_hashtags(tag)
    return format_hashtags(uniq(tags))
