"""
Parser for pasted decklists.

Accepts the text exports of the common deck sites:
- ManaBox: "4 Tarmogoyf" or "3 Verdant Catacombs (MH2) 260"
- Moxfield: "1 Card Name (SET) 123 *F*" (foil) or "*E*" (etched)
- Archidekt: "1x Card Name (set) 123 [Category]"
- Arena/MTGO: "4 Lightning Bolt (SET) 123"
- Generic: "4 Lightning Bolt", "4x Card", "Card x4"

Section markers ("Sideboard", "SB:", "// Commander", ...) switch the
category of the lines that follow.
"""

import re

from binderimport.config import FORMAT_SAMPLE_LINES
from binderimport.models.condition import WishlistPriority
from binderimport.models.decklist import DecklistEntry, DetectedFormat, ParsedDecklist
from binderimport.models.rows import ParsedRow, ParsedWishlistRow

# Pattern: "4 Lightning Bolt ..."
# Groups: (quantity, rest)
PREFIX_QUANTITY = re.compile(r"^(\d+)\s+(.+)$")

# Pattern: "4x Lightning Bolt ..." or "4X Lightning Bolt ..."
PREFIX_X_QUANTITY = re.compile(r"^(\d+)x\s+(.+)$", re.IGNORECASE)

# Pattern: "Lightning Bolt x4"
# Groups: (rest, quantity)
SUFFIX_QUANTITY = re.compile(r"^(.+?)\s+x(\d+)$", re.IGNORECASE)

# Pattern: "Name (SET) 123", collector number may carry symbols ("260★", "290a")
# Groups: (name, set_code, collector_number)
NAME_SET_NUMBER = re.compile(r"^(.+?)\s*\(([A-Z0-9]{2,5})\)\s*(\S+)\s*$", re.IGNORECASE)

# Pattern: "Name (SET)"
NAME_SET = re.compile(r"^(.+?)\s*\(([A-Z0-9]{2,5})\)\s*$", re.IGNORECASE)

# Trailing "*F*" (foil) or "*E*" (etched)
FINISH_MARKER = re.compile(r"\s*\*([FE])\*\s*$", re.IGNORECASE)

# Trailing "[Category]"
CATEGORY_TAG = re.compile(r"\s*\[([^\]]+)\]\s*$")

# Format detection hints
COLLECTOR_NUMBER_HINT = re.compile(r"\([A-Z0-9]{2,5}\)\s+\d+")
X_QUANTITY_HINT = re.compile(r"^\d+x\s+", re.IGNORECASE)

# Section header -> category
SECTION_MARKER = re.compile(
    r"^(?:(sideboard|sb|mainboard|main|deck|commander|companion|maybeboard|considering):?"
    r"|//\s*(sideboard|mainboard|main|deck|commander|companion)\b.*)$",
    re.IGNORECASE,
)

CATEGORY_ALIASES = {
    "sb": "sideboard",
    "mainboard": "main",
    "deck": "main",
    "considering": "maybeboard",
}


def parse_section_marker(line: str) -> str | None:
    """
    Return the category a section header switches to, or None.

    "Sideboard", "SB:", "Deck", "// Commander" are markers;
    "4 Sideboard Hoser" is not.
    """
    match = SECTION_MARKER.match(line.strip())
    if not match:
        return None
    marker = (match.group(1) or match.group(2)).lower()
    return CATEGORY_ALIASES.get(marker, marker)


def detect_format(lines: list[str]) -> DetectedFormat:
    """
    Guess which site produced a decklist from its first card lines.

    Only the first FORMAT_SAMPLE_LINES non-marker lines are inspected.
    """
    has_x_quantity = False
    has_finish_marker = False
    has_category_tag = False
    has_collector_number = False
    sampled = 0

    for raw in lines:
        line = raw.strip()
        if not line or parse_section_marker(line):
            continue

        sampled += 1
        if sampled > FORMAT_SAMPLE_LINES:
            break

        if X_QUANTITY_HINT.match(line):
            has_x_quantity = True
        if FINISH_MARKER.search(line):
            has_finish_marker = True
        if CATEGORY_TAG.search(line):
            has_category_tag = True
        if COLLECTOR_NUMBER_HINT.search(line):
            has_collector_number = True

    if has_finish_marker:
        return "moxfield"
    if has_x_quantity:
        return "archidekt"
    if has_collector_number and not has_category_tag:
        return "manabox"
    if has_collector_number:
        return "arena"
    return "generic"


def _card_details(card_part: str, quantity: int) -> DecklistEntry:
    match = NAME_SET_NUMBER.match(card_part)
    if match:
        name, set_code, collector_number = match.groups()
        return DecklistEntry(
            quantity=quantity,
            card_name=name.strip(),
            set_code=set_code.upper(),
            collector_number=collector_number.strip(),
        )

    match = NAME_SET.match(card_part)
    if match:
        name, set_code = match.groups()
        return DecklistEntry(quantity=quantity, card_name=name.strip(), set_code=set_code.upper())

    return DecklistEntry(quantity=quantity, card_name=card_part.strip())


def parse_decklist_line(line: str, category: str = "main") -> DecklistEntry | None:
    """
    Parse one card line.

    Returns None if the line matches none of the quantity forms.
    """
    working = line.strip()
    is_foil = False
    is_etched = False

    finish = FINISH_MARKER.search(working)
    if finish:
        is_foil = finish.group(1).upper() == "F"
        is_etched = finish.group(1).upper() == "E"
        working = working[: finish.start()].strip()

    tag = CATEGORY_TAG.search(working)
    if tag:
        category = tag.group(1).strip().lower()
        working = working[: tag.start()].strip()

    for pattern, qty_group, card_group in (
        (PREFIX_QUANTITY, 1, 2),
        (PREFIX_X_QUANTITY, 1, 2),
        (SUFFIX_QUANTITY, 2, 1),
    ):
        match = pattern.match(working)
        if match:
            entry = _card_details(match.group(card_group).strip(), int(match.group(qty_group)))
            if not entry.card_name:
                return None
            return DecklistEntry(
                quantity=entry.quantity,
                card_name=entry.card_name,
                set_code=entry.set_code,
                collector_number=entry.collector_number,
                is_foil=is_foil,
                is_etched=is_etched,
                category=category,
            )

    return None


def parse_decklist(text: str) -> ParsedDecklist:
    """
    Parse decklist text into entries.

    Args:
        text: Pasted decklist, one card per line

    Returns:
        ParsedDecklist with entries in input order, one message per
        unparseable line, and the detected source format.
    """
    lines = text.splitlines()
    result = ParsedDecklist(detected_format=detect_format(lines))
    category = "main"

    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue

        marker = parse_section_marker(line)
        if marker:
            category = marker
            continue

        entry = parse_decklist_line(line, category)
        if entry:
            result.entries.append(entry)
        else:
            result.errors.append(f'Line {line_number}: Could not parse "{line}"')

    return result


def decklist_to_collection_rows(entries: list[DecklistEntry]) -> list[ParsedRow]:
    """
    Convert decklist entries to collection rows.

    Foil entries count toward foil_quantity, all others toward quantity.
    """
    rows: list[ParsedRow] = []
    for entry in entries:
        if entry.is_foil:
            rows.append(ParsedRow(name=entry.card_name, quantity=0, foil_quantity=entry.quantity))
        else:
            rows.append(ParsedRow(name=entry.card_name, quantity=entry.quantity))
    return rows


def decklist_to_wishlist_rows(
    entries: list[DecklistEntry],
    priority: WishlistPriority = WishlistPriority.NORMAL,
) -> list[ParsedWishlistRow]:
    """Convert decklist entries to wishlist rows with a shared priority."""
    return [
        ParsedWishlistRow(
            name=entry.card_name,
            quantity=max(1, entry.quantity),
            priority=priority,
            foil_only=entry.is_foil,
        )
        for entry in entries
    ]
