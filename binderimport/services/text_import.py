"""
Decklist text import.

build_text_import parses pasted text locally and resolves the card names
with one resolve-cards call, producing the same TextImportResult the
binder service's parse-text endpoint returns. Matched entries are then
turned into commit rows.
"""

import logging
from collections.abc import Iterable

from binderimport.models.catalog import ResolvedCard
from binderimport.models.condition import WishlistPriority
from binderimport.models.decklist import (
    ParsedDecklist,
    TextImportEntry,
    TextImportResult,
    TextImportStats,
)
from binderimport.models.import_result import ImportRow, TargetType, WishlistImportRow
from binderimport.parsers.decklist import parse_decklist
from binderimport.services.binder_api import BinderApiClient
from binderimport.services.resolver import CardResolver, unique_card_names

logger = logging.getLogger(__name__)


async def build_text_import(parsed: ParsedDecklist, resolver: CardResolver) -> TextImportResult:
    """
    Resolve the entries of a parsed decklist.

    Args:
        parsed: Output of parse_decklist
        resolver: Card resolver, normally the binder API client

    Returns:
        TextImportResult with every entry matched or not_found
    """
    names = unique_card_names(parsed.entries)
    card_map: dict[str, ResolvedCard] = {}
    if names:
        resolution = await resolver.resolve_cards(names)
        card_map = resolution.card_map()

    entries: list[TextImportEntry] = []
    for entry in parsed.entries:
        card = card_map.get(entry.card_name.lower())
        entries.append(
            TextImportEntry(
                quantity=entry.quantity,
                card_name=entry.card_name,
                set_code=entry.set_code,
                collector_number=entry.collector_number,
                is_foil=entry.is_foil,
                is_etched=entry.is_etched,
                category=entry.category,
                resolved_card=card,
                status="matched" if card else "not_found",
            )
        )

    matched = sum(1 for e in entries if e.status == "matched")
    stats = TextImportStats(total=len(entries), matched=matched, not_found=len(entries) - matched)
    logger.info(
        "Text import (%s): %d entries, %d matched, %d not found, %d unparsed lines",
        parsed.detected_format,
        stats.total,
        stats.matched,
        stats.not_found,
        len(parsed.errors),
    )
    return TextImportResult(
        entries=entries,
        errors=list(parsed.errors),
        detected_format=parsed.detected_format,
        stats=stats,
    )


async def import_text(text: str, resolver: CardResolver) -> TextImportResult:
    """Parse and resolve decklist text locally."""
    return await build_text_import(parse_decklist(text), resolver)


async def import_text_remote(
    client: BinderApiClient, text: str, target_type: TargetType = "collection"
) -> TextImportResult:
    """Let the binder service parse and resolve the text in one call."""
    if not text.strip():
        return TextImportResult(errors=["No text provided."], stats=TextImportStats())
    return await client.parse_text(text, target_type)


def text_entries_to_import_rows(entries: Iterable[TextImportEntry]) -> list[ImportRow]:
    """
    Convert matched entries to collection commit rows.

    Foil entries count toward foil_quantity. Unmatched entries are dropped.
    """
    rows: list[ImportRow] = []
    for entry in entries:
        if entry.status != "matched" or entry.resolved_card is None:
            continue
        rows.append(
            ImportRow(
                name=entry.card_name,
                quantity=0 if entry.is_foil else entry.quantity,
                foil_quantity=entry.quantity if entry.is_foil else 0,
                card_id=entry.resolved_card.id,
            )
        )
    return rows


def text_entries_to_wishlist_import_rows(
    entries: Iterable[TextImportEntry],
    priority: WishlistPriority = WishlistPriority.NORMAL,
) -> list[WishlistImportRow]:
    """Convert matched entries to wishlist commit rows with a shared priority."""
    return [
        WishlistImportRow(
            name=entry.card_name,
            quantity=max(1, entry.quantity),
            priority=priority,
            foil_only=entry.is_foil,
            card_id=entry.resolved_card.id,
        )
        for entry in entries
        if entry.status == "matched" and entry.resolved_card is not None
    ]

