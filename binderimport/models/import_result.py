"""
Commit payloads and results.

ImportRow / WishlistImportRow are what the commit endpoints receive;
ImportResult is what they return, and also what the batch orchestrator
accumulates across batches.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, Field, field_serializer

from binderimport.models.catalog import WireModel
from binderimport.models.condition import CardCondition, WishlistPriority

DuplicateMode = Literal["add", "skip", "replace"]
WishlistDuplicateMode = Literal["skip", "update"]
TargetType = Literal["collection", "wishlist"]


class ImportRow(WireModel):
    """A collection row ready to commit, pinned to a catalog printing."""

    model_config = ConfigDict(frozen=True)

    name: str
    quantity: int = 1
    foil_quantity: int = 0
    condition: CardCondition = CardCondition.NM
    language: str = "EN"
    for_trade: int = 0
    trade_price: Decimal | None = None
    card_id: str | None = None

    @field_serializer("trade_price")
    def _price_as_number(self, value: Decimal | None) -> float | None:
        return float(value) if value is not None else None


class WishlistImportRow(WireModel):
    """A wishlist row ready to commit, pinned to a catalog printing."""

    model_config = ConfigDict(frozen=True)

    name: str
    quantity: int = 1
    priority: WishlistPriority = WishlistPriority.NORMAL
    max_price: Decimal | None = None
    min_condition: CardCondition | None = None
    foil_only: bool = False
    card_id: str | None = None

    @field_serializer("max_price")
    def _price_as_number(self, value: Decimal | None) -> float | None:
        return float(value) if value is not None else None


class ImportRowError(WireModel):
    """A row the store could not commit, numbered within the full submission."""

    row: int
    card_name: str
    error: str


class ImportResult(WireModel):
    """Counters and per-row errors of one commit."""

    imported: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[ImportRowError] = Field(default_factory=list)

    @property
    def total(self) -> int:
        """Rows accounted for: imported + updated + skipped + failed."""
        return self.imported + self.updated + self.skipped + self.failed


@dataclass(frozen=True, slots=True)
class BatchProgress:
    """Progress notification emitted before each batch is sent."""

    current_batch: int
    total_batches: int
    percentage: int
