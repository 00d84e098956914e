"""
Batched commit of import rows.

Small imports go to the store in a single call. Larger ones are cut into
windows of BATCH_SIZE rows that are committed strictly one after another,
with a progress event before each window. A window that fails does not
abort the run: every row in it is recorded as failed and the next window
is sent.
"""

import logging
import math
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import httpx

from binderimport.config import BATCH_SIZE, SINGLE_BATCH_THRESHOLD
from binderimport.models.failure import KnownError
from binderimport.models.import_result import (
    BatchProgress,
    DuplicateMode,
    ImportResult,
    ImportRow,
    ImportRowError,
    WishlistDuplicateMode,
    WishlistImportRow,
)
from binderimport.services.binder_api import BinderApiClient

logger = logging.getLogger(__name__)

BATCH_FAILED_MESSAGE = "Batch import failed"

RowT = TypeVar("RowT", ImportRow, WishlistImportRow)
ModeT = TypeVar("ModeT", bound=str)

ProgressCallback = Callable[[BatchProgress], None]


def split_batches(rows: Sequence[RowT], size: int = BATCH_SIZE) -> list[Sequence[RowT]]:
    """
    Cut rows into consecutive windows.

    Imports of up to SINGLE_BATCH_THRESHOLD rows stay in one window.
    """
    if not rows:
        return []
    if len(rows) <= SINGLE_BATCH_THRESHOLD:
        return [rows]
    return [rows[i : i + size] for i in range(0, len(rows), size)]


def batch_percentage(current: int, total: int) -> int:
    """
    Share of batches started, rounded up to a whole percent.

    Rounding up gives 34/67/100 for three batches, the sequence the progress
    display expects. Round-to-nearest would report 33 for the first batch, so
    values can sit one above round(current / total * 100), e.g. 15 and 58 for
    batches 1 and 4 of 7.
    """
    return math.ceil(current * 100 / total)


def _notify(on_progress: ProgressCallback | None, progress: BatchProgress) -> None:
    if on_progress is None:
        return
    try:
        on_progress(progress)
    except Exception as e:
        logger.warning("Progress callback raised, ignoring: %s", e)


def _failure_message(error: Exception) -> str:
    if isinstance(error, KnownError):
        return error.message or BATCH_FAILED_MESSAGE
    return str(error) or BATCH_FAILED_MESSAGE


def _merge(total: ImportResult, batch: ImportResult, offset: int) -> None:
    total.imported += batch.imported
    total.updated += batch.updated
    total.skipped += batch.skipped
    total.failed += batch.failed
    total.errors.extend(
        ImportRowError(row=e.row + offset, card_name=e.card_name, error=e.error)
        for e in batch.errors
    )


def _record_failure(
    total: ImportResult, window: Sequence[RowT], offset: int, message: str
) -> None:
    total.failed += len(window)
    total.errors.extend(
        ImportRowError(row=offset + j + 1, card_name=row.name, error=message)
        for j, row in enumerate(window)
    )


async def run_batched_import(
    rows: Sequence[RowT],
    duplicate_mode: ModeT,
    commit: Callable[[Sequence[RowT], ModeT], Awaitable[ImportResult]],
    on_progress: ProgressCallback | None = None,
) -> ImportResult:
    """
    Commit rows in sequential batches and fold the results.

    Args:
        rows: Rows to commit, in submission order
        duplicate_mode: Store-side duplicate policy, forwarded unchanged
        commit: Sends one batch, normally a BinderApiClient import method
        on_progress: Called before each batch is sent

    Returns:
        Summed counters across batches. Error rows are numbered within the
        full submission (1-based), not within their batch.
    """
    result = ImportResult()
    batches = split_batches(rows)
    if not batches:
        return result

    total_batches = len(batches)
    offset = 0

    for index, window in enumerate(batches, start=1):
        _notify(
            on_progress,
            BatchProgress(
                current_batch=index,
                total_batches=total_batches,
                percentage=batch_percentage(index, total_batches),
            ),
        )
        logger.info("Committing batch %d/%d (%d rows)", index, total_batches, len(window))

        try:
            batch_result = await commit(window, duplicate_mode)
        except KnownError as e:
            logger.warning("Batch %d/%d rejected: %s", index, total_batches, e.message)
            _record_failure(result, window, offset, _failure_message(e))
        except httpx.HTTPError as e:
            logger.error("HTTP error in batch %d/%d: %s", index, total_batches, e)
            _record_failure(result, window, offset, _failure_message(e))
        except Exception as e:
            logger.exception("Unexpected error in batch %d/%d", index, total_batches)
            _record_failure(result, window, offset, _failure_message(e))
        else:
            _merge(result, batch_result, offset)

        offset += len(window)

    logger.info(
        "Import complete: %d imported, %d updated, %d skipped, %d failed",
        result.imported,
        result.updated,
        result.skipped,
        result.failed,
    )
    return result


async def import_collection_batched(
    client: BinderApiClient,
    rows: Sequence[ImportRow],
    mode: DuplicateMode = "add",
    on_progress: ProgressCallback | None = None,
) -> ImportResult:
    """Commit collection rows through the binder API in batches."""
    return await run_batched_import(rows, mode, client.import_collection, on_progress)


async def import_wishlist_batched(
    client: BinderApiClient,
    rows: Sequence[WishlistImportRow],
    mode: WishlistDuplicateMode = "skip",
    on_progress: ProgressCallback | None = None,
) -> ImportResult:
    """Commit wishlist rows through the binder API in batches."""
    return await run_batched_import(rows, mode, client.import_wishlist, on_progress)
