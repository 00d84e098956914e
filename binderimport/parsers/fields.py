"""
Cell-level helpers shared by the import parsers.

Column lookup ignores case and separators so that "foilQuantity",
"foil_quantity", "FOILQUANTITY" and "Foil Quantity" all address the same
column.
"""

import re
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_SEPARATORS = re.compile(r"[\s_\-]+")
_NON_NEGATIVE_INT = re.compile(r"^\+?\d+$")

TRUTHY_VALUES = frozenset({"true", "1", "yes"})

CENT = Decimal("0.01")


def normalize_header(header: str) -> str:
    """Reduce a column header to its lookup key: lower-case, no separators."""
    return _SEPARATORS.sub("", header.strip().lower())


def normalize_record(headers: Sequence[str], cells: Sequence[str]) -> dict[str, str]:
    """
    Key a row's cells by normalized header.

    Cells past the last header are dropped, missing trailing cells are
    absent. When two headers normalize to the same key the first non-blank
    value wins.
    """
    normalized: dict[str, str] = {}
    for key, value in zip(headers, cells):
        norm_key = normalize_header(key)
        if norm_key not in normalized or not normalized[norm_key].strip():
            normalized[norm_key] = value
    return normalized


def get_field(record: dict[str, str], name: str) -> str | None:
    """Look up a cell by column name in a normalized record."""
    return record.get(normalize_header(name))


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def is_blank_record(cells: Sequence[str]) -> bool:
    """True if every cell of the physical row is empty or whitespace."""
    return all(is_blank(v) for v in cells)


def parse_non_negative_int(value: str | None, default: int) -> int | None:
    """
    Parse a whole number >= 0.

    Blank input returns default. Anything that is not a plain run of digits
    (negative, fractional, or text) returns None.
    """
    if value is None or not value.strip():
        return default
    stripped = value.strip()
    if not _NON_NEGATIVE_INT.match(stripped):
        return None
    return int(stripped)


def parse_price(value: str | None) -> Decimal | None:
    """
    Parse a non-negative price rounded half-up to cents.

    Blank, non-numeric, non-finite and negative values all yield None.
    """
    if value is None or not value.strip():
        return None
    try:
        parsed = Decimal(value.strip())
        if not parsed.is_finite() or parsed < 0:
            return None
        return parsed.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None


def parse_bool(value: str | None) -> bool:
    """Interpret true/1/yes (any case) as True, everything else as False."""
    if value is None:
        return False
    return value.strip().lower() in TRUTHY_VALUES
