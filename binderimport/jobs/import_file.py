"""
Import a CSV file or decklist into the binder.

Parses the file, resolves every card name, prints the preview and then
commits the ready rows in batches. Can be run as a standalone script:

    binder-import cards.csv
    binder-import wants.csv --wishlist --mode update
    binder-import deck.txt --dry-run
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from binderimport.models.failure import KnownError
from binderimport.models.import_result import BatchProgress, ImportResult, TargetType
from binderimport.models.preview import PreviewSession
from binderimport.parsers.csv_import import COLLECTION_CSV_TEMPLATE, WISHLIST_CSV_TEMPLATE
from binderimport.services.binder_api import BinderApiClient, get_binder_client
from binderimport.services.session import COLLECTION_MODES, WISHLIST_MODES, ImportSession

logger = logging.getLogger(__name__)

# Not-found names listed before the output is truncated
MAX_LISTED_NOT_FOUND = 25


def _log_progress(progress: BatchProgress) -> None:
    logger.info(
        "Batch %d/%d (%d%%)",
        progress.current_batch,
        progress.total_batches,
        progress.percentage,
    )


def _print_preview(preview: PreviewSession) -> None:
    stats = preview.stats
    print(
        f"Preview: {stats.total} rows, {stats.ready} ready, "
        f"{stats.not_found} not found, {stats.errors} errors"
    )
    missing = preview.not_found_names()
    for name in missing[:MAX_LISTED_NOT_FOUND]:
        print(f"  not found: {name}")
    if len(missing) > MAX_LISTED_NOT_FOUND:
        print(f"  ... and {len(missing) - MAX_LISTED_NOT_FOUND} more")


def _print_result(result: ImportResult) -> None:
    print(
        f"Imported {result.imported}, updated {result.updated}, "
        f"skipped {result.skipped}, failed {result.failed}"
    )
    for error in result.errors:
        print(f"  row {error.row} ({error.card_name}): {error.error}")


async def _load(session: ImportSession, path: Path) -> bool:
    """Load path into the session. Returns False if the file was rejected."""
    if not path.is_file():
        print(f"File: {path} does not exist.", file=sys.stderr)
        return False

    if path.suffix.lower() == ".csv":
        parsed = await session.load_csv_file(path)
        for error in parsed.errors:
            prefix = "File" if error.is_file_level else f"Row {error.row}"
            print(f"{prefix}: {error.message}", file=sys.stderr)
        if parsed.rejected:
            return False
        logger.info("Parsed %d rows from %s", len(parsed.rows), path.name)
        return True

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"File: Could not read {path.name}: {e}", file=sys.stderr)
        return False

    decklist = await session.load_text(text)
    for message in decklist.errors:
        print(message, file=sys.stderr)
    if not decklist.entries:
        print("File: No card lines found.", file=sys.stderr)
        return False
    logger.info(
        "Parsed %d entries from %s (%s format)",
        len(decklist.entries),
        path.name,
        decklist.detected_format,
    )
    return True


async def run_import(
    path: Path,
    target: TargetType = "collection",
    duplicate_mode: str | None = None,
    dry_run: bool = False,
    client: BinderApiClient | None = None,
) -> int:
    """
    Run one import end to end.

    Args:
        path: CSV file (.csv) or decklist text file (any other extension)
        target: "collection" or "wishlist"
        duplicate_mode: Store duplicate policy; target default when None
        dry_run: Stop after the preview
        client: Binder API client. Defaults to the shared client.

    Returns:
        Process exit status: 1 if the file was rejected or a step failed, else 0
    """
    session = ImportSession(client or get_binder_client(), target)

    try:
        if not await _load(session, path):
            return 1

        preview = await session.preview()
        _print_preview(preview)

        if dry_run:
            logger.info("Dry run, nothing committed")
            return 0

        result = await session.commit(duplicate_mode, on_progress=_log_progress)
    except KnownError as e:
        logger.error("Import of %s failed: %s", path, e.message)
        print(f"Error: {e.message}", file=sys.stderr)
        if e.suggestion:
            print(e.suggestion, file=sys.stderr)
        return 1

    _print_result(result)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="binder-import",
        description="Import a CSV file or decklist into your collection or wishlist.",
    )
    parser.add_argument("path", type=Path, nargs="?", help="CSV or decklist file to import")
    parser.add_argument(
        "--wishlist", action="store_true", help="Import into the wishlist instead of the collection"
    )
    parser.add_argument(
        "--mode",
        choices=sorted(set(COLLECTION_MODES) | set(WISHLIST_MODES)),
        help="How to handle cards already present (default: add, or skip for wishlists)",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Only parse and preview, do not import"
    )
    parser.add_argument(
        "--template", action="store_true", help="Print the CSV template for the target and exit"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for importing a file."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    target: TargetType = "wishlist" if args.wishlist else "collection"

    if args.template:
        print(WISHLIST_CSV_TEMPLATE if args.wishlist else COLLECTION_CSV_TEMPLATE, end="")
        return 0

    if args.path is None:
        parser.error("the following arguments are required: path")

    return asyncio.run(run_import(args.path, target, args.mode, args.dry_run))


if __name__ == "__main__":
    sys.exit(main())
