"""
CSV parsers for collection and wishlist imports.

Collection columns (headers case- and separator-insensitive):
    name (required), quantity, foilQuantity, condition, language,
    forTrade, tradePrice

Wishlist columns:
    name (required), quantity, priority, maxPrice, minCondition, foilOnly

Each data row is validated on its own: a bad row becomes a ParseError and
parsing carries on with the next one. File-level problems (wrong extension,
oversize, empty, row ceiling) are reported with row 0.
"""

import csv
import logging
from collections.abc import Callable
from io import StringIO
from pathlib import Path

from binderimport.config import MAX_FILE_SIZE, MAX_ROWS
from binderimport.models.condition import (
    DEFAULT_CONDITION,
    DEFAULT_PRIORITY,
    VALID_CONDITIONS,
    VALID_PRIORITIES,
    normalize_condition,
    parse_condition,
    parse_priority,
)
from binderimport.models.rows import CSVParseResult, ParsedRow, ParsedWishlistRow, ParseError, RowT
from binderimport.parsers.fields import (
    get_field,
    is_blank,
    is_blank_record,
    normalize_record,
    parse_bool,
    parse_non_negative_int,
    parse_price,
)

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "EN"

FILE_TOO_LARGE = f"File too large. Maximum size is {MAX_FILE_SIZE // (1024 * 1024)}MB."
NOT_A_CSV = "File must be a CSV file (.csv extension)."
EMPTY_FILE = "CSV file is empty or has no valid rows."
TOO_MANY_ROWS = f"Maximum {MAX_ROWS} rows allowed."

COLLECTION_CSV_TEMPLATE = """name,quantity,foilQuantity,condition,language,forTrade,tradePrice
Lightning Bolt,4,0,NM,EN,2,0.50
Black Lotus,1,1,LP,EN,0,
Sol Ring,10,2,M,EN,5,1.20
"""

WISHLIST_CSV_TEMPLATE = """name,quantity,priority,maxPrice,minCondition,foilOnly
Lightning Bolt,4,HIGH,1.00,LP,false
Sol Ring,1,NORMAL,,,yes
"""


def check_upload(filename: str, size: int) -> ParseError | None:
    """
    Check the file-level preconditions of an upload.

    Returns a row-0 ParseError if the file is too large or not a .csv file.
    """
    if size > MAX_FILE_SIZE:
        return ParseError(row=0, message=FILE_TOO_LARGE)
    if not filename.lower().endswith(".csv"):
        return ParseError(row=0, message=NOT_A_CSV)
    return None


def _parse_records(
    data: bytes | str,
    filename: str,
    parse_record: Callable[[dict[str, str]], RowT | str],
) -> CSVParseResult[RowT]:
    """
    Drive a per-record parser over a CSV payload.

    parse_record returns either a row or the error message for that row.
    """
    result: CSVParseResult[RowT] = CSVParseResult()

    raw = data.encode("utf-8") if isinstance(data, str) else data
    rejection = check_upload(filename, len(raw))
    if rejection:
        logger.info("Rejected upload %s: %s", filename, rejection.message)
        result.errors.append(rejection)
        return result

    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        result.errors.append(ParseError(row=0, message="File must be UTF-8 encoded text."))
        return result

    reader = csv.reader(StringIO(text, newline=""))
    headers: list[str] | None = None
    row_index = 0

    try:
        for cells in reader:
            if is_blank_record(cells):
                continue
            # First non-blank line is the header
            if headers is None:
                headers = cells
                continue

            row_index += 1
            if row_index > MAX_ROWS:
                logger.warning("Row ceiling reached in %s, stopping at %d rows", filename, MAX_ROWS)
                result.errors.append(ParseError(row=0, message=TOO_MANY_ROWS))
                break

            outcome = parse_record(normalize_record(headers, cells))
            if isinstance(outcome, str):
                logger.debug("Row %d rejected: %s", row_index, outcome)
                result.errors.append(ParseError(row=row_index, message=outcome))
            else:
                result.rows.append(outcome)
    except csv.Error as e:
        result.errors.append(ParseError(row=0, message=f"CSV parsing failed: {e}"))

    if not result.rows and not result.errors:
        result.errors.insert(0, ParseError(row=0, message=EMPTY_FILE))

    logger.info(
        "Parsed %s: %d rows accepted, %d errors",
        filename,
        len(result.rows),
        len(result.errors),
    )
    return result


def _parse_collection_record(record: dict[str, str]) -> ParsedRow | str:
    name = (get_field(record, "name") or "").strip()
    if not name:
        return "Missing card name."

    quantity = parse_non_negative_int(get_field(record, "quantity"), 1)
    if quantity is None:
        return "Invalid quantity (must be non-negative integer)."

    foil_quantity = parse_non_negative_int(get_field(record, "foilQuantity"), 0)
    if foil_quantity is None:
        return "Invalid foil quantity (must be non-negative integer)."

    condition_raw = get_field(record, "condition")
    if is_blank(condition_raw):
        condition = DEFAULT_CONDITION
    else:
        parsed_condition = parse_condition(condition_raw or "")
        if parsed_condition is None:
            return (
                f'Invalid condition "{(condition_raw or "").strip().upper()}". '
                f"Valid: {', '.join(VALID_CONDITIONS)}."
            )
        condition = parsed_condition

    language = (get_field(record, "language") or "").strip().upper() or DEFAULT_LANGUAGE

    for_trade = parse_non_negative_int(get_field(record, "forTrade"), 0)
    if for_trade is None:
        return "Invalid forTrade value (must be non-negative integer)."

    total_quantity = quantity + foil_quantity
    if for_trade > total_quantity:
        return f"forTrade ({for_trade}) exceeds total quantity ({total_quantity})."

    return ParsedRow(
        name=name,
        quantity=quantity,
        foil_quantity=foil_quantity,
        condition=condition,
        language=language,
        for_trade=for_trade,
        trade_price=parse_price(get_field(record, "tradePrice")),
    )


def _parse_wishlist_record(record: dict[str, str]) -> ParsedWishlistRow | str:
    name = (get_field(record, "name") or "").strip()
    if not name:
        return "Missing card name."

    quantity = parse_non_negative_int(get_field(record, "quantity"), 1)
    if quantity is None or quantity < 1:
        return "Invalid quantity (must be a positive integer)."

    priority_raw = get_field(record, "priority")
    if is_blank(priority_raw):
        priority = DEFAULT_PRIORITY
    else:
        parsed_priority = parse_priority(priority_raw or "")
        if parsed_priority is None:
            return (
                f'Invalid priority "{(priority_raw or "").strip().upper()}". '
                f"Valid: {', '.join(VALID_PRIORITIES)}."
            )
        priority = parsed_priority

    min_condition_raw = get_field(record, "minCondition")
    min_condition = None
    if not is_blank(min_condition_raw):
        min_condition = parse_condition(min_condition_raw or "")
        if min_condition is None:
            return (
                f'Invalid minimum condition "{normalize_condition(min_condition_raw or "")}". '
                f"Valid: {', '.join(VALID_CONDITIONS)}."
            )

    return ParsedWishlistRow(
        name=name,
        quantity=quantity,
        priority=priority,
        max_price=parse_price(get_field(record, "maxPrice")),
        min_condition=min_condition,
        foil_only=parse_bool(get_field(record, "foilOnly")),
    )


def parse_collection_csv(data: bytes | str, filename: str) -> CSVParseResult[ParsedRow]:
    """
    Parse a collection CSV upload.

    Args:
        data: Raw file contents (bytes are decoded as UTF-8, BOM tolerated)
        filename: Original file name, used for the extension check

    Returns:
        Accepted rows and every file-level and row-level error.
    """
    return _parse_records(data, filename, _parse_collection_record)


def parse_wishlist_csv(data: bytes | str, filename: str) -> CSVParseResult[ParsedWishlistRow]:
    """Parse a wishlist CSV upload. See parse_collection_csv."""
    return _parse_records(data, filename, _parse_wishlist_record)


def _read_checked(path: Path) -> bytes | ParseError:
    # Refuse oversize files before reading them into memory
    rejection = check_upload(path.name, path.stat().st_size)
    if rejection:
        return rejection
    return path.read_bytes()


def parse_collection_csv_file(path: Path) -> CSVParseResult[ParsedRow]:
    """Parse a collection CSV from disk."""
    data = _read_checked(path)
    if isinstance(data, ParseError):
        return CSVParseResult(errors=[data])
    return parse_collection_csv(data, path.name)


def parse_wishlist_csv_file(path: Path) -> CSVParseResult[ParsedWishlistRow]:
    """Parse a wishlist CSV from disk."""
    data = _read_checked(path)
    if isinstance(data, ParseError):
        return CSVParseResult(errors=[data])
    return parse_wishlist_csv(data, path.name)
