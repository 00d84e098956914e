"""
Import session: one pipeline run from load to commit.

The session owns the parsed rows, the preview and the final result of a
single import. It runs one step at a time; starting a step while another is
in flight is refused with ImportSessionBusyError instead of queued.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, cast

from binderimport.models.catalog import ResolvedCard
from binderimport.models.condition import WishlistPriority
from binderimport.models.decklist import ParsedDecklist
from binderimport.models.failure import (
    FailureKind,
    ImportSessionBusyError,
    ImportStateError,
    KnownError,
)
from binderimport.models.import_result import (
    DuplicateMode,
    ImportResult,
    TargetType,
    WishlistDuplicateMode,
)
from binderimport.models.preview import PreviewRow, PreviewSession
from binderimport.models.rows import CSVParseResult
from binderimport.parsers.csv_import import (
    parse_collection_csv,
    parse_collection_csv_file,
    parse_wishlist_csv,
    parse_wishlist_csv_file,
)
from binderimport.parsers.decklist import (
    decklist_to_collection_rows,
    decklist_to_wishlist_rows,
    parse_decklist,
)
from binderimport.services.batch_import import (
    ProgressCallback,
    import_collection_batched,
    import_wishlist_batched,
)
from binderimport.services.binder_api import BinderApiClient
from binderimport.services.preview import (
    build_preview,
    preview_rows_to_import_rows,
    preview_rows_to_wishlist_import_rows,
)

logger = logging.getLogger(__name__)

COLLECTION_MODES = ("add", "skip", "replace")
WISHLIST_MODES = ("skip", "update")

DEFAULT_MODES: dict[TargetType, str] = {"collection": "add", "wishlist": "skip"}


class ImportSession:
    """
    A single collection or wishlist import.

    Usage:
        session = ImportSession(client, "collection")
        await session.load_csv(data, "cards.csv")
        preview = await session.preview()
        session.override(3, card)
        result = await session.commit("add", on_progress)
    """

    def __init__(self, client: BinderApiClient, target: TargetType = "collection") -> None:
        if target not in DEFAULT_MODES:
            raise KnownError(
                kind=FailureKind.INVALID_INPUT,
                message=f"Unknown import target: {target}",
            )
        self.client = client
        self.target: TargetType = target
        self._lock = asyncio.Lock()
        self._parse_result: CSVParseResult[Any] | None = None
        self._decklist: ParsedDecklist | None = None
        self._preview: PreviewSession[Any] | None = None
        self._result: ImportResult | None = None

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @property
    def parse_result(self) -> CSVParseResult[Any] | None:
        return self._parse_result

    @property
    def decklist(self) -> ParsedDecklist | None:
        """The parsed decklist, when rows were loaded from text."""
        return self._decklist

    @property
    def preview_session(self) -> PreviewSession[Any] | None:
        return self._preview

    @property
    def result(self) -> ImportResult | None:
        return self._result

    def _ensure_idle(self, operation: str) -> None:
        if self._lock.locked():
            raise ImportSessionBusyError(operation)

    @asynccontextmanager
    async def _exclusive(self, operation: str) -> AsyncIterator[None]:
        # Checked before acquiring: a busy session refuses rather than waits
        self._ensure_idle(operation)
        async with self._lock:
            yield

    def _store_parsed(self, parsed: CSVParseResult[Any]) -> None:
        self._parse_result = parsed
        self._preview = None
        self._result = None

    async def load_csv(self, data: bytes | str, filename: str) -> CSVParseResult[Any]:
        """Parse an uploaded CSV for this session's target."""
        async with self._exclusive("load a file"):
            if self.target == "wishlist":
                parsed: CSVParseResult[Any] = parse_wishlist_csv(data, filename)
            else:
                parsed = parse_collection_csv(data, filename)
            self._decklist = None
            self._store_parsed(parsed)
            return parsed

    async def load_csv_file(self, path: Path) -> CSVParseResult[Any]:
        """Parse a CSV file from disk for this session's target."""
        async with self._exclusive("load a file"):
            if self.target == "wishlist":
                parsed: CSVParseResult[Any] = parse_wishlist_csv_file(path)
            else:
                parsed = parse_collection_csv_file(path)
            self._decklist = None
            self._store_parsed(parsed)
            return parsed

    async def load_text(
        self, text: str, priority: WishlistPriority = WishlistPriority.NORMAL
    ) -> ParsedDecklist:
        """
        Parse pasted decklist text into rows for this session's target.

        Unparseable lines are reported on the returned ParsedDecklist.
        """
        async with self._exclusive("load text"):
            decklist = parse_decklist(text)
            if self.target == "wishlist":
                rows: list[Any] = decklist_to_wishlist_rows(decklist.entries, priority)
            else:
                rows = decklist_to_collection_rows(decklist.entries)
            self._decklist = decklist
            self._store_parsed(CSVParseResult(rows=rows))
            return decklist

    async def preview(self) -> PreviewSession[Any]:
        """
        Resolve the loaded rows against the catalog.

        Raises:
            ImportStateError: Nothing has been loaded, or the file was rejected
            ImportApiError: The resolution call failed
        """
        async with self._exclusive("build a preview"):
            if self._parse_result is None:
                raise ImportStateError("Nothing to preview. Load a file or text first.")
            if self._parse_result.rejected:
                raise ImportStateError("The loaded file was rejected and has no rows to preview.")

            self._preview = await build_preview(self._parse_result.rows, self.client)
            self._result = None
            return self._preview

    def override(self, row_index: int, card: ResolvedCard) -> PreviewRow[Any]:
        """
        Pin a preview row to a manually chosen printing.

        Raises:
            ImportSessionBusyError: Another step is in flight
            ImportStateError: No preview has been built
            InvalidOverrideError: The row cannot be overridden
        """
        self._ensure_idle("change a card")
        if self._preview is None:
            raise ImportStateError("Build a preview before choosing printings.")
        return self._preview.apply_override(row_index, card)

    async def commit(
        self,
        duplicate_mode: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ImportResult:
        """
        Commit the ready rows of the preview in batches.

        Args:
            duplicate_mode: Store duplicate policy; defaults to "add" for
                collections and "skip" for wishlists
            on_progress: Called before each batch

        Raises:
            ImportSessionBusyError: Another step is in flight
            ImportStateError: No preview has been built
            KnownError: duplicate_mode is not valid for the target
        """
        async with self._exclusive("import"):
            if self._preview is None:
                raise ImportStateError("Build a preview before importing.")

            mode = duplicate_mode or DEFAULT_MODES[self.target]
            valid_modes = WISHLIST_MODES if self.target == "wishlist" else COLLECTION_MODES
            if mode not in valid_modes:
                raise KnownError(
                    kind=FailureKind.INVALID_INPUT,
                    message=f"Invalid duplicate mode for {self.target}: {mode}",
                    suggestion=f"Use one of: {', '.join(valid_modes)}",
                )

            if self.target == "wishlist":
                wishlist_rows = preview_rows_to_wishlist_import_rows(self._preview.rows)
                logger.info("Importing %d wishlist rows (mode=%s)", len(wishlist_rows), mode)
                result = await import_wishlist_batched(
                    self.client, wishlist_rows, cast(WishlistDuplicateMode, mode), on_progress
                )
            else:
                import_rows = preview_rows_to_import_rows(self._preview.rows)
                logger.info("Importing %d collection rows (mode=%s)", len(import_rows), mode)
                result = await import_collection_batched(
                    self.client, import_rows, cast(DuplicateMode, mode), on_progress
                )

            self._result = result
            return result

    def reset(self) -> None:
        """
        Discard everything loaded so far.

        Raises:
            ImportSessionBusyError: A step is in flight
        """
        self._ensure_idle("reset the import")
        self._parse_result = None
        self._decklist = None
        self._preview = None
        self._result = None
