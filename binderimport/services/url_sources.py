"""
Deck URL recognition.

The binder service fetches decks from Archidekt, Moxfield and MTGGoldfish.
URLs are checked here first so an unsupported link fails without a round
trip.
"""

import logging
import re

from binderimport.models.decklist import UrlImportResult, UrlSource
from binderimport.models.failure import UnsupportedUrlError
from binderimport.models.import_result import TargetType
from binderimport.services.binder_api import BinderApiClient

logger = logging.getLogger(__name__)

# Source name -> pattern capturing the deck id
URL_PATTERNS: dict[UrlSource, re.Pattern[str]] = {
    "archidekt": re.compile(r"archidekt\.com/decks/(\d+)", re.IGNORECASE),
    "moxfield": re.compile(r"moxfield\.com/decks/([a-zA-Z0-9_-]+)", re.IGNORECASE),
    "mtggoldfish": re.compile(r"mtggoldfish\.com/deck/(\d+)", re.IGNORECASE),
}


def detect_url_source(url: str) -> UrlSource | None:
    """Return the deck site a URL belongs to, or None if unsupported."""
    normalized = url.strip()
    for source, pattern in URL_PATTERNS.items():
        if pattern.search(normalized):
            return source
    return None


def extract_deck_id(url: str) -> str | None:
    """Extract the site-specific deck id from a supported URL."""
    normalized = url.strip()
    for pattern in URL_PATTERNS.values():
        match = pattern.search(normalized)
        if match:
            return match.group(1)
    return None


def is_url_supported(url: str) -> bool:
    return detect_url_source(url) is not None


async def import_deck_url(
    client: BinderApiClient, url: str, target_type: TargetType = "collection"
) -> UrlImportResult:
    """
    Import a deck from a supported site.

    Raises:
        UnsupportedUrlError: URL does not belong to a supported site
        ImportApiError: The service failed to fetch or resolve the deck
    """
    source = detect_url_source(url)
    if source is None:
        logger.info("Refusing unsupported deck URL: %s", url)
        raise UnsupportedUrlError(url)

    logger.info("Importing %s deck %s", source, extract_deck_id(url))
    return await client.import_from_url(url.strip(), target_type)
