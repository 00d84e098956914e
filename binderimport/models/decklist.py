"""
Decklist models for free-text and deck-URL imports.

DecklistEntry is what the local text parser produces. The Text* and
UrlImportResult models mirror the binder API's parse-text and from-url
responses, where each entry has already been resolved against the catalog.
"""

from dataclasses import dataclass, field
from typing import Literal

from pydantic import Field

from binderimport.models.catalog import ResolvedCard, WireModel

DetectedFormat = Literal["manabox", "moxfield", "archidekt", "arena", "generic"]
UrlSource = Literal["archidekt", "moxfield", "mtggoldfish"]
EntryStatus = Literal["matched", "not_found"]


@dataclass(frozen=True, slots=True)
class DecklistEntry:
    """
    One card line of a pasted decklist.

    Attributes:
        quantity: Number of copies
        card_name: Card name with set/collector/foil markers stripped
        set_code: Upper-cased set code from "(SET)", if present
        collector_number: Collector number following the set code
        is_foil: Line carried a *F* marker
        is_etched: Line carried a *E* marker
        category: Deck section (main, sideboard, commander, ...)
    """

    quantity: int
    card_name: str
    set_code: str | None = None
    collector_number: str | None = None
    is_foil: bool = False
    is_etched: bool = False
    category: str = "main"

    @property
    def name(self) -> str:
        return self.card_name


@dataclass
class ParsedDecklist:
    """Result of parsing decklist text."""

    entries: list[DecklistEntry] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    detected_format: DetectedFormat = "generic"


class TextImportEntry(WireModel):
    """A decklist entry after catalog resolution."""

    quantity: int
    card_name: str
    set_code: str | None = None
    collector_number: str | None = None
    is_foil: bool = False
    is_etched: bool = False
    category: str = "main"
    resolved_card: ResolvedCard | None = None
    status: EntryStatus = "not_found"


class TextImportStats(WireModel):
    total: int = 0
    matched: int = 0
    not_found: int = 0


class TextImportResult(WireModel):
    """Parsed and resolved decklist text."""

    entries: list[TextImportEntry] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    detected_format: DetectedFormat | None = None
    stats: TextImportStats = Field(default_factory=TextImportStats)


class UrlImportResult(TextImportResult):
    """A deck fetched from a deck-building site, resolved like pasted text."""

    deck_name: str | None = None
    deck_author: str | None = None
    source: UrlSource
