# File: utils/tag_utils.py
"""Session tag normalization for KidsTraining.

Pure Python, no Home Assistant imports.
"""

from __future__ import annotations

from collections.abc import Iterable
import re

_LEADING_HASH_RE = re.compile(r"^[#＃]+")
_WHITESPACE_RE = re.compile(r"[\s　]+")


def normalize_tag(raw: str) -> str:
    """Normalize a single tag.

    Trims, strips leading '#' (ASCII or full-width), removes inner whitespace
    and lowercases. Returns "" when nothing is left.

    Examples:
        normalize_tag("  #Soccer Drills ") → "soccerdrills"
        normalize_tag("＃") → ""
    """
    trimmed = _LEADING_HASH_RE.sub("", raw.strip())
    return _WHITESPACE_RE.sub("", trimmed).lower()


def normalize_tags(tags: Iterable[str] | None) -> list[str]:
    """Normalize a tag list, dropping empties and duplicates (first wins)."""
    if not tags:
        return []
    seen: set[str] = set()
    result: list[str] = []
    for raw in tags:
        tag = normalize_tag(str(raw))
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def parse_tags_from_text(text: str | None) -> list[str]:
    """Split free text on whitespace and normalize every token as a tag."""
    if not text:
        return []
    return normalize_tags(_WHITESPACE_RE.split(text))
