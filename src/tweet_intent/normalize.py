"""Text normalization helpers shared by the URL builder, length estimator
and snippet store.

Hashtag tokens are always handled without their leading ``#``; callers add
it back for display only.
"""

import re

_SEPARATORS = re.compile(r"[,\s]+")
_HASH_OR_SPACE = re.compile(r"[#\s]")


def is_non_empty_string(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


def uniq(items: list) -> list:
    """Remove duplicates, keeping the first occurrence of each value."""
    return list(dict.fromkeys(items))


def normalize_hashtags(value) -> list[str]:
    """Normalize a hashtag field into a list of bare, unique tokens.

    Accepts a comma/whitespace separated string or a list of strings.
    ``"#foo, bar #foo"`` and ``["#foo", "bar"]`` both yield ``["foo", "bar"]``.
    Anything else yields an empty list.
    """
    if value is None:
        return []
    if isinstance(value, str):
        candidates = _SEPARATORS.split(value)
    elif isinstance(value, (list, tuple)):
        candidates = value
    else:
        return []

    tokens = []
    for candidate in candidates:
        token = str(candidate if candidate is not None else "").strip()
        if not token:
            continue
        if token.startswith("#"):
            token = token[1:]
        token = _HASH_OR_SPACE.sub("", token)
        if token:
            tokens.append(token)
    return uniq(tokens)


def strip_handle(handle) -> str:
    """Drop one leading ``@``, then surrounding whitespace, from a handle."""
    if not isinstance(handle, str):
        return ""
    if handle.startswith("@"):
        handle = handle[1:]
    return handle.strip()


def normalize_handles(value) -> list[str]:
    """Normalize related accounts given as a list or a comma-separated string."""
    if isinstance(value, (list, tuple)):
        candidates = value
    elif is_non_empty_string(value):
        candidates = value.split(",")
    else:
        return []
    handles = []
    for candidate in candidates:
        handle = str(candidate if candidate is not None else "").strip()
        if not handle:
            continue
        if handle.startswith("@"):
            handle = handle[1:]
        handles.append(handle)
    return uniq(handles)
