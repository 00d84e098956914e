"""
Parsed import rows.

Rows are produced by the format parsers from one physical input line and
are never modified afterwards. Everything downstream (preview, commit)
wraps or copies them.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Generic, TypeVar

from binderimport.models.condition import CardCondition, WishlistPriority


@dataclass(frozen=True, slots=True)
class ParsedRow:
    """
    One validated collection row.

    Attributes:
        name: Card name as written in the file
        quantity: Non-foil copies
        foil_quantity: Foil copies
        condition: Normalized condition code
        language: Upper-cased language code (e.g., "EN", "JA")
        for_trade: Copies offered for trade, never more than quantity + foil_quantity
        trade_price: Asking price per copy, rounded to cents
    """

    name: str
    quantity: int = 1
    foil_quantity: int = 0
    condition: CardCondition = CardCondition.NM
    language: str = "EN"
    for_trade: int = 0
    trade_price: Decimal | None = None

    @property
    def total_quantity(self) -> int:
        return self.quantity + self.foil_quantity


@dataclass(frozen=True, slots=True)
class ParsedWishlistRow:
    """
    One validated wishlist row.

    Attributes:
        name: Card name as written in the file
        quantity: Copies wanted (at least 1)
        priority: Wishlist priority
        max_price: Highest acceptable price per copy
        min_condition: Worst acceptable condition, None for any
        foil_only: Only foil copies are wanted
    """

    name: str
    quantity: int = 1
    priority: WishlistPriority = WishlistPriority.NORMAL
    max_price: Decimal | None = None
    min_condition: CardCondition | None = None
    foil_only: bool = False


@dataclass(frozen=True, slots=True)
class ParseError:
    """
    A rejected row or file.

    row is the 1-based index of the data row (header and blank lines not
    counted); row 0 marks a file-level problem.
    """

    row: int
    message: str

    @property
    def is_file_level(self) -> bool:
        return self.row == 0


RowT = TypeVar("RowT", ParsedRow, ParsedWishlistRow)


@dataclass
class CSVParseResult(Generic[RowT]):
    """Rows accepted from a file plus every error encountered."""

    rows: list[RowT] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)

    @property
    def file_errors(self) -> list[ParseError]:
        return [e for e in self.errors if e.is_file_level]

    @property
    def row_errors(self) -> list[ParseError]:
        return [e for e in self.errors if not e.is_file_level]

    @property
    def rejected(self) -> bool:
        """True if the file was refused as a whole and produced no rows."""
        return not self.rows and bool(self.file_errors)
