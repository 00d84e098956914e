"""Tests for the wishlist CSV parser."""

from decimal import Decimal
from pathlib import Path

from binderimport.models.condition import CardCondition, WishlistPriority
from binderimport.models.rows import ParsedWishlistRow, ParseError
from binderimport.parsers.csv_import import (
    EMPTY_FILE,
    WISHLIST_CSV_TEMPLATE,
    parse_wishlist_csv,
    parse_wishlist_csv_file,
)


def _parse(text: str):
    return parse_wishlist_csv(text, "wants.csv")


class TestWishlistRows:
    def test_template_parses(self) -> None:
        result = _parse(WISHLIST_CSV_TEMPLATE)

        assert result.errors == []
        assert result.rows == [
            ParsedWishlistRow(
                name="Lightning Bolt",
                quantity=4,
                priority=WishlistPriority.HIGH,
                max_price=Decimal("1.00"),
                min_condition=CardCondition.LP,
                foil_only=False,
            ),
            ParsedWishlistRow(name="Sol Ring", quantity=1, foil_only=True),
        ]

    def test_defaults(self) -> None:
        result = _parse("name\nCounterspell")

        row = result.rows[0]
        assert row.quantity == 1
        assert row.priority is WishlistPriority.NORMAL
        assert row.max_price is None
        assert row.min_condition is None
        assert row.foil_only is False

    def test_headers_separator_insensitive(self) -> None:
        result = _parse("Name,Max Price,min_condition,FOIL-ONLY\nCounterspell,2.499,near mint,YES")

        row = result.rows[0]
        assert row.max_price == Decimal("2.50")
        assert row.min_condition is CardCondition.NM
        assert row.foil_only is True

    def test_foil_only_values(self) -> None:
        result = _parse("name,foilOnly\nA,true\nB,1\nC,Yes\nD,no\nE,\nF,y")

        assert [r.foil_only for r in result.rows] == [True, True, True, False, False, False]


class TestWishlistValidation:
    def test_missing_name(self) -> None:
        result = _parse("name,quantity\n,2")

        assert result.errors == [ParseError(row=1, message="Missing card name.")]

    def test_zero_quantity_rejected(self) -> None:
        result = _parse("name,quantity\nSol Ring,0")

        assert result.errors == [
            ParseError(row=1, message="Invalid quantity (must be a positive integer).")
        ]

    def test_invalid_priority(self) -> None:
        result = _parse("name,priority\nSol Ring,asap")

        assert result.errors[0].message == (
            'Invalid priority "ASAP". Valid: LOW, NORMAL, HIGH, URGENT.'
        )

    def test_priority_case_insensitive(self) -> None:
        result = _parse("name,priority\nSol Ring,urgent")

        assert result.rows[0].priority is WishlistPriority.URGENT

    def test_invalid_min_condition(self) -> None:
        result = _parse("name,minCondition\nSol Ring,pristine")

        assert result.rows == []
        assert result.errors[0].message.startswith('Invalid minimum condition "PRISTINE"')

    def test_negative_max_price_is_dropped(self) -> None:
        result = _parse("name,maxPrice\nSol Ring,-3")

        assert result.errors == []
        assert result.rows[0].max_price is None


class TestWishlistFile:
    def test_empty_file(self) -> None:
        result = _parse("name,quantity,priority\n\n")

        assert result.errors == [ParseError(row=0, message=EMPTY_FILE)]

    def test_reads_from_disk(self, tmp_path: Path) -> None:
        path = tmp_path / "wants.csv"
        path.write_text("name,priority\nBlack Lotus,URGENT\n", encoding="utf-8")

        result = parse_wishlist_csv_file(path)

        assert result.rows[0].priority is WishlistPriority.URGENT
