"""
Name resolution adapter.

Collapses the names of a parsed upload into one resolve-cards call. Name
matching is exact but case-insensitive, so "lightning bolt" and
"Lightning Bolt" are looked up once.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol

from binderimport.models.catalog import ResolveCardsResult

logger = logging.getLogger(__name__)


class CardResolver(Protocol):
    """Anything that resolves card names, normally a BinderApiClient."""

    async def resolve_cards(self, card_names: Sequence[str]) -> ResolveCardsResult: ...


class _Named(Protocol):
    @property
    def name(self) -> str: ...


def unique_card_names(rows: Iterable[_Named]) -> list[str]:
    """
    Distinct card names, case-insensitively.

    The first spelling seen is kept and input order is preserved.
    """
    seen: set[str] = set()
    names: list[str] = []
    for row in rows:
        key = row.name.lower()
        if key in seen:
            continue
        seen.add(key)
        names.append(row.name)
    return names


async def resolve_rows(client: CardResolver, rows: Sequence[_Named]) -> ResolveCardsResult:
    """
    Resolve every distinct name in rows with a single lookup.

    Args:
        client: Card resolver, normally the binder API client
        rows: Parsed rows (anything with a name)

    Returns:
        The lookup result; empty without a call when rows is empty
    """
    names = unique_card_names(rows)
    if not names:
        return ResolveCardsResult()

    logger.info("Resolving %d unique names from %d rows", len(names), len(rows))
    return await client.resolve_cards(names)
