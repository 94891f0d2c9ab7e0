"""
Clue search.

Suggestions are a pure function of the catalog and the query text, so the
caller can recompute them on every keystroke without keeping any cache.
"""

from typing import Iterable, List

from .models import Treasure


def filter_treasures(catalog: Iterable[Treasure], query: str) -> List[Treasure]:
    """Return treasures whose name or clue contains the query.

    A blank query (after trimming) yields no suggestions at all, which is
    not the same as "show everything". Matching is case-insensitive and
    the catalog order is preserved.

    Args:
        catalog: Treasures in display order.
        query: Raw search box text.

    Returns:
        Matching treasures, in catalog order.
    """
    if not query or not query.strip():
        return []

    needle = query.lower()
    return [
        t for t in catalog
        if needle in t.clue.lower() or needle in t.name.lower()
    ]
