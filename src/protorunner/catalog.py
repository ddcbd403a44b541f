"""Catalog browsing helpers: search, tag list and card descriptions."""

from __future__ import annotations

from typing import Iterable

from .types import Protocol
from .util.defaults import DESCRIPTION_TRUNCATE_LEN

NO_DESCRIPTION = "No description available."


def matches(protocol: Protocol, query: str) -> bool:
    """Case-insensitive match of the query against name, description or a tag."""
    if not query:
        return True
    q = query.lower()
    return (
        q in protocol.name.lower()
        or q in (protocol.description or "").lower()
        or any(q in tag.lower() for tag in protocol.tags)
    )


def filter_protocols(protocols: Iterable[Protocol], query: str = "") -> list[Protocol]:
    return [p for p in protocols if matches(p, query)]


def unique_tags(protocols: Iterable[Protocol]) -> list[str]:
    """All tags in first-seen order."""
    seen: dict[str, None] = {}
    for p in protocols:
        for tag in p.tags:
            seen.setdefault(tag, None)
    return list(seen)


def truncate_description(
    description: str | None, limit: int = DESCRIPTION_TRUNCATE_LEN
) -> str:
    if not description:
        return NO_DESCRIPTION
    if len(description) > limit:
        return description[:limit] + "..."
    return description
