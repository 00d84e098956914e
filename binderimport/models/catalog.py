"""
Catalog lookup results.

These mirror the JSON returned by the binder API's resolve-cards endpoint.
The API speaks camelCase; the models accept either spelling and dump
camelCase when serialized by alias.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for models exchanged with the binder API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResolvedCard(WireModel):
    """A single catalog printing, treated as a read-only snapshot."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    set_code: str
    set_name: str
    scryfall_id: str | None = None
    price_eur: float | None = None


class ResolvedName(WireModel):
    """A requested name paired with the printing it resolved to."""

    model_config = ConfigDict(frozen=True)

    name: str
    card: ResolvedCard


class ResolveCardsResult(WireModel):
    """
    Outcome of one name resolution call.

    Names are matched exactly but case-insensitively; each requested name
    appears either in resolved or in not_found.
    """

    resolved: list[ResolvedName] = Field(default_factory=list)
    not_found: list[str] = Field(default_factory=list)

    def card_map(self) -> dict[str, ResolvedCard]:
        """Lower-cased name -> resolved printing."""
        return {item.name.lower(): item.card for item in self.resolved}

    def not_found_names(self) -> set[str]:
        """Lower-cased names the catalog does not know."""
        return {name.lower() for name in self.not_found}
