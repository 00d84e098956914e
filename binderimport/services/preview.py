"""
Preview reconciliation.

Joins parsed rows with catalog resolution into a PreviewSession, and turns
the reviewed preview back into commit rows.
"""

import logging
from collections.abc import Iterable, Sequence

from binderimport.models.catalog import ResolveCardsResult
from binderimport.models.import_result import ImportRow, WishlistImportRow
from binderimport.models.preview import NotFound, PreviewRow, PreviewSession, Ready, RowStatus
from binderimport.models.rows import ParsedRow, ParsedWishlistRow, RowT
from binderimport.services.resolver import CardResolver, resolve_rows

logger = logging.getLogger(__name__)


def reconcile(rows: Sequence[RowT], resolution: ResolveCardsResult) -> PreviewSession[RowT]:
    """
    Attach a resolution outcome to every row.

    The not-found set is consulted first, then the resolved map. A name the
    service left out of both is treated as not found.
    """
    card_map = resolution.card_map()
    not_found = resolution.not_found_names()

    preview_rows: list[PreviewRow[RowT]] = []
    for row in rows:
        key = row.name.lower()
        status: RowStatus
        if key in not_found:
            status = NotFound()
        elif key in card_map:
            status = Ready(card_map[key])
        else:
            logger.warning("Resolution result omitted %r, marking not found", row.name)
            status = NotFound()
        preview_rows.append(PreviewRow(row=row, status=status))

    session = PreviewSession(preview_rows)
    logger.info(
        "Preview built: %d rows, %d ready, %d not found",
        session.stats.total,
        session.stats.ready,
        session.stats.not_found,
    )
    return session


async def build_preview(rows: Sequence[RowT], resolver: CardResolver) -> PreviewSession[RowT]:
    """
    Resolve parsed rows and build the preview.

    Issues exactly one resolution call for the distinct names in rows.
    """
    resolution = await resolve_rows(resolver, rows)
    return reconcile(rows, resolution)


def _commit_card_id(preview_row: PreviewRow) -> str | None:
    if preview_row.custom_card_id:
        return preview_row.custom_card_id
    card = preview_row.resolved_card
    return card.id if card else None


def _is_committable(preview_row: PreviewRow) -> bool:
    return isinstance(preview_row.status, Ready) or bool(preview_row.custom_card_id)


def preview_rows_to_import_rows(preview_rows: Iterable[PreviewRow[ParsedRow]]) -> list[ImportRow]:
    """
    Convert reviewed collection rows to commit rows.

    Only ready rows and rows with a manual selection are kept. The manual
    selection wins over the resolved printing.
    """
    return [
        ImportRow(
            name=p.row.name,
            quantity=p.row.quantity,
            foil_quantity=p.row.foil_quantity,
            condition=p.row.condition,
            language=p.row.language,
            for_trade=p.row.for_trade,
            trade_price=p.row.trade_price,
            card_id=_commit_card_id(p),
        )
        for p in preview_rows
        if _is_committable(p)
    ]


def preview_rows_to_wishlist_import_rows(
    preview_rows: Iterable[PreviewRow[ParsedWishlistRow]],
) -> list[WishlistImportRow]:
    """Convert reviewed wishlist rows to commit rows. See preview_rows_to_import_rows."""
    return [
        WishlistImportRow(
            name=p.row.name,
            quantity=p.row.quantity,
            priority=p.row.priority,
            max_price=p.row.max_price,
            min_condition=p.row.min_condition,
            foil_only=p.row.foil_only,
            card_id=_commit_card_id(p),
        )
        for p in preview_rows
        if _is_committable(p)
    ]
