"""Version ordering for release tags and package header versions."""

from __future__ import annotations

import re

_SEPARATOR_RE = re.compile(r"[-_+.]+")
_DIGIT_ALPHA_RE = re.compile(r"(?<=\d)(?=[^\d])|(?<=[^\d])(?=\d)")

# Pre-release markers sort below a numeric component, "pl"/"p" above it.
_SPECIAL_RANKS = {
    "dev": 0,
    "alpha": 1,
    "a": 1,
    "beta": 2,
    "b": 2,
    "rc": 3,
    "c": 3,
    "pl": 5,
    "p": 5,
}
_NUMBER_RANK = 4
_UNKNOWN_RANK = -1

Component = tuple[int, int, str]
_MISSING: Component = (_NUMBER_RANK, 0, "")


def strip_version_prefix(value: str) -> str:
    text = (value or "").strip()
    if text[:1] in {"v", "V"} and text[1:2].isdigit():
        return text[1:]
    return text


def _component(token: str) -> Component:
    if token.isdigit():
        return (_NUMBER_RANK, int(token), "")
    lowered = token.lower()
    rank = _SPECIAL_RANKS.get(lowered)
    if rank is not None:
        return (rank, 0, "")
    return (_UNKNOWN_RANK, 0, lowered)


def version_key(value: str) -> tuple[Component, ...]:
    text = strip_version_prefix(value)
    parts: list[Component] = []
    for chunk in _SEPARATOR_RE.split(text):
        for token in _DIGIT_ALPHA_RE.split(chunk):
            if token:
                parts.append(_component(token))
    return tuple(parts)


def compare_versions(left: str, right: str) -> int:
    """Return 1, 0 or -1 as ``left`` is newer, equal to or older than ``right``.

    Components are compared pairwise, numbers numerically and unknown words
    lexicographically. A missing trailing component counts as ``0``, so
    ``1.0`` equals ``1.0.0`` while ``1.0.0-beta`` sorts below ``1.0.0``.
    """
    a = version_key(left)
    b = version_key(right)
    for index in range(max(len(a), len(b))):
        ca = a[index] if index < len(a) else _MISSING
        cb = b[index] if index < len(b) else _MISSING
        if ca != cb:
            return 1 if ca > cb else -1
    return 0


def is_newer(remote: str, local: str) -> bool:
    return compare_versions(remote, local) > 0
