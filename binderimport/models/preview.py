"""
Preview model: parsed rows reconciled against the catalog.

A preview row's status is a closed tagged union. Only Ready carries a card
and only NotFound / RowError carry a message, so the two can never disagree
with the status.

PreviewSession is the single owner of the preview rows and their stats.
apply_override is its only mutating operation and updates the row and the
stats together.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from typing import ClassVar, Generic, Literal

from binderimport.models.catalog import ResolvedCard
from binderimport.models.failure import InvalidOverrideError
from binderimport.models.rows import RowT

StatusName = Literal["ready", "not_found", "error"]

NOT_FOUND_MESSAGE = "Card not found in database"


@dataclass(frozen=True, slots=True)
class Ready:
    """Row resolved to a printing and eligible for commit."""

    card: ResolvedCard
    name: ClassVar[StatusName] = "ready"


@dataclass(frozen=True, slots=True)
class NotFound:
    """Catalog has no card with the row's name."""

    message: str = NOT_FOUND_MESSAGE
    name: ClassVar[StatusName] = "not_found"


@dataclass(frozen=True, slots=True)
class RowError:
    """Row failed a validation step after parsing."""

    message: str
    name: ClassVar[StatusName] = "error"


RowStatus = Ready | NotFound | RowError


@dataclass(frozen=True, slots=True)
class PreviewRow(Generic[RowT]):
    """
    One import candidate pending the user's commit decision.

    Attributes:
        row: The parsed row (collection or wishlist)
        status: Resolution outcome
        custom_card_id: Printing chosen manually, overriding resolution
    """

    row: RowT
    status: RowStatus
    custom_card_id: str | None = None

    @property
    def name(self) -> str:
        return self.row.name

    @property
    def status_name(self) -> StatusName:
        return self.status.name

    @property
    def resolved_card(self) -> ResolvedCard | None:
        return self.status.card if isinstance(self.status, Ready) else None

    @property
    def error_message(self) -> str | None:
        if isinstance(self.status, (NotFound, RowError)):
            return self.status.message
        return None

    @property
    def can_override(self) -> bool:
        return not isinstance(self.status, RowError)


@dataclass(frozen=True, slots=True)
class PreviewStats:
    """Aggregate counts over a preview."""

    total: int = 0
    ready: int = 0
    not_found: int = 0
    errors: int = 0

    @classmethod
    def from_rows(cls, rows: Sequence[PreviewRow]) -> "PreviewStats":
        return cls(
            total=len(rows),
            ready=sum(1 for r in rows if isinstance(r.status, Ready)),
            not_found=sum(1 for r in rows if isinstance(r.status, NotFound)),
            errors=sum(1 for r in rows if isinstance(r.status, RowError)),
        )


class PreviewSession(Generic[RowT]):
    """
    Preview rows and their stats, kept in lock-step.

    Build one with binderimport.services.preview.build_preview. Rows are
    exposed read-only; apply_override is the only way to change them.
    """

    def __init__(self, rows: Iterable[PreviewRow[RowT]] = ()) -> None:
        self._rows: list[PreviewRow[RowT]] = list(rows)
        self._stats = PreviewStats.from_rows(self._rows)

    @property
    def rows(self) -> tuple[PreviewRow[RowT], ...]:
        return tuple(self._rows)

    @property
    def stats(self) -> PreviewStats:
        return self._stats

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, index: int) -> PreviewRow[RowT]:
        return self._rows[index]

    def not_found_names(self) -> list[str]:
        """Names of the rows still unresolved, in row order."""
        return [r.name for r in self._rows if isinstance(r.status, NotFound)]

    def apply_override(self, row_index: int, card: ResolvedCard) -> PreviewRow[RowT]:
        """
        Point a row at a manually chosen printing.

        The row becomes Ready(card) with custom_card_id = card.id. Stats move
        one row from not_found to ready only if the row was not_found before
        the override; re-pointing an already ready row leaves them unchanged.

        Raises:
            InvalidOverrideError: Index out of range or row in error state
        """
        if not 0 <= row_index < len(self._rows):
            raise InvalidOverrideError(row_index, "no such row")

        previous = self._rows[row_index]
        if not previous.can_override:
            raise InvalidOverrideError(row_index, "row has a validation error")

        was_not_found = isinstance(previous.status, NotFound)

        updated = replace(previous, status=Ready(card), custom_card_id=card.id)
        self._rows[row_index] = updated

        if was_not_found:
            self._stats = replace(
                self._stats,
                ready=self._stats.ready + 1,
                not_found=self._stats.not_found - 1,
            )
        return updated
