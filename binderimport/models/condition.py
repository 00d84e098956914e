"""
Card condition and wishlist priority vocabularies.

Conditions are graded from best (M) to worst (DMG). Import files use a mix
of short codes and long names ("Near Mint", "LIGHTLY_PLAYED"); every value is
funnelled through normalize_condition before it is validated.
"""

from enum import Enum


class CardCondition(str, Enum):
    """Physical card condition, best to worst."""

    M = "M"
    NM = "NM"
    LP = "LP"
    MP = "MP"
    HP = "HP"
    DMG = "DMG"


class WishlistPriority(str, Enum):
    """How urgently a wishlist card is wanted."""

    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"


DEFAULT_CONDITION = CardCondition.NM
DEFAULT_PRIORITY = WishlistPriority.NORMAL

VALID_CONDITIONS = tuple(c.value for c in CardCondition)
VALID_PRIORITIES = tuple(p.value for p in WishlistPriority)

# Long-form spellings -> short code
CONDITION_SYNONYMS: dict[str, str] = {
    "MINT": "M",
    "NEAR_MINT": "NM",
    "NEAR MINT": "NM",
    "NEARMINT": "NM",
    "LIGHTLY_PLAYED": "LP",
    "LIGHTLY PLAYED": "LP",
    "LIGHTLYPLAYED": "LP",
    "MODERATELY_PLAYED": "MP",
    "MODERATELY PLAYED": "MP",
    "MODERATELYPLAYED": "MP",
    "HEAVILY_PLAYED": "HP",
    "HEAVILY PLAYED": "HP",
    "HEAVILYPLAYED": "HP",
    "DAMAGED": "DMG",
}

CONDITION_RANK: dict[CardCondition, int] = {
    CardCondition.M: 0,
    CardCondition.NM: 1,
    CardCondition.LP: 2,
    CardCondition.MP: 3,
    CardCondition.HP: 4,
    CardCondition.DMG: 5,
}

CONDITION_LABELS: dict[CardCondition, str] = {
    CardCondition.M: "Mint",
    CardCondition.NM: "Near Mint",
    CardCondition.LP: "Lightly Played",
    CardCondition.MP: "Moderately Played",
    CardCondition.HP: "Heavily Played",
    CardCondition.DMG: "Damaged",
}


def normalize_condition(value: str) -> str:
    """
    Map a condition spelling to its short code.

    Values not in the synonym table come back trimmed and upper-cased, so
    the result still has to be checked against CardCondition. The function
    is idempotent: normalizing a short code returns it unchanged.
    """
    normalized = value.strip().upper()
    return CONDITION_SYNONYMS.get(normalized, normalized)


def parse_condition(value: str) -> CardCondition | None:
    """Normalize and validate a condition, returning None if unrecognized."""
    normalized = normalize_condition(value)
    if normalized in VALID_CONDITIONS:
        return CardCondition(normalized)
    return None


def parse_priority(value: str) -> WishlistPriority | None:
    """Validate a wishlist priority (case-insensitive)."""
    normalized = value.strip().upper()
    if normalized in VALID_PRIORITIES:
        return WishlistPriority(normalized)
    return None


def is_condition_acceptable(
    condition: CardCondition, min_condition: CardCondition | None
) -> bool:
    """Check whether a card meets a minimum condition (None accepts anything)."""
    if min_condition is None:
        return True
    return CONDITION_RANK[condition] <= CONDITION_RANK[min_condition]


def condition_label(condition: CardCondition) -> str:
    """Human-readable name of a condition."""
    return CONDITION_LABELS[condition]
