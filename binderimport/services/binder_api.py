"""
Binder API client.

Wraps the import endpoints of the binder service:
- POST /import/resolve-cards
- POST /import/collection
- POST /import/wishlist
- POST /import/parse-text
- POST /import/from-url

Successful responses are wrapped as {"data": ...}; failures carry
{"error": "<message>"} with a 4xx/5xx status. Both HTTP errors and
transport failures surface as ImportApiError.
"""

import logging
from collections.abc import Sequence
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from binderimport.config import settings
from binderimport.models.catalog import ResolveCardsResult
from binderimport.models.decklist import TextImportResult, UrlImportResult
from binderimport.models.failure import ImportApiError
from binderimport.models.import_result import (
    DuplicateMode,
    ImportResult,
    ImportRow,
    TargetType,
    WishlistDuplicateMode,
    WishlistImportRow,
)

logger = logging.getLogger(__name__)

USER_AGENT = "BinderImport/1.0"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse(model: type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ImportApiError(
            message="Binder service returned an unexpected response.",
            status_code=502,
            detail=str(e)[:200],
        ) from e


def _error_message(response: httpx.Response) -> str:
    """Pull the server's error message out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        return str(body["error"])
    return f"Request failed with status {response.status_code}"


class BinderApiClient:
    """
    Client for the binder service's import API.

    One HTTP connection is opened per call; calls on the same client are
    never issued concurrently by the import pipeline.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        api_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the binder API client.

        Args:
            base_url: API base URL. Defaults to settings.binder_api_url.
            timeout: Request timeout in seconds. Defaults to settings.request_timeout.
            api_token: Bearer token. Defaults to settings.binder_api_token.
            transport: Optional httpx transport (used to run against an in-process app).
        """
        self.base_url = (base_url or settings.binder_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.api_token = api_token if api_token is not None else settings.binder_api_token
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    async def _post(self, path: str, payload: dict[str, Any]) -> Any:
        """
        POST a JSON payload and return the unwrapped "data" member.

        Raises:
            ImportApiError: On a 4xx/5xx response or a transport failure
        """
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers=self._headers(),
                transport=self._transport,
            ) as client:
                response = await client.post(url, json=payload)
        except httpx.TransportError as e:
            logger.warning("Binder API unreachable at %s: %s", url, e)
            raise ImportApiError(
                message="Could not reach the binder service.",
                status_code=503,
                detail=f"{type(e).__name__}: {e}",
            ) from e

        if response.is_error:
            message = _error_message(response)
            logger.warning("Binder API %s failed (%d): %s", path, response.status_code, message)
            raise ImportApiError(message=message, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise ImportApiError(
                message="Binder service returned an invalid response.",
                status_code=502,
            ) from e

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    async def resolve_cards(self, card_names: Sequence[str]) -> ResolveCardsResult:
        """
        Resolve card names to their default printings.

        Args:
            card_names: Names to look up (exact, case-insensitive)

        Returns:
            ResolveCardsResult splitting names into resolved and not found
        """
        if not card_names:
            return ResolveCardsResult()

        data = await self._post("/import/resolve-cards", {"cardNames": list(card_names)})
        result = _parse(ResolveCardsResult, data)
        logger.info(
            "Resolved %d of %d card names (%d not found)",
            len(result.resolved),
            len(card_names),
            len(result.not_found),
        )
        return result

    async def import_collection(
        self, rows: Sequence[ImportRow], duplicate_mode: DuplicateMode
    ) -> ImportResult:
        """Commit one batch of collection rows."""
        data = await self._post(
            "/import/collection",
            {
                "rows": [r.model_dump(by_alias=True, mode="json", exclude_none=True) for r in rows],
                "duplicateMode": duplicate_mode,
            },
        )
        return _parse(ImportResult, data)

    async def import_wishlist(
        self, rows: Sequence[WishlistImportRow], duplicate_mode: WishlistDuplicateMode
    ) -> ImportResult:
        """Commit one batch of wishlist rows."""
        data = await self._post(
            "/import/wishlist",
            {
                "rows": [r.model_dump(by_alias=True, mode="json", exclude_none=True) for r in rows],
                "duplicateMode": duplicate_mode,
            },
        )
        return _parse(ImportResult, data)

    async def parse_text(
        self, text: str, target_type: TargetType = "collection"
    ) -> TextImportResult:
        """Parse and resolve decklist text server-side."""
        data = await self._post("/import/parse-text", {"text": text, "targetType": target_type})
        return _parse(TextImportResult, data)

    async def import_from_url(
        self, url: str, target_type: TargetType = "collection"
    ) -> UrlImportResult:
        """Fetch a deck from a supported deck site and resolve its cards."""
        data = await self._post("/import/from-url", {"url": url, "targetType": target_type})
        return _parse(UrlImportResult, data)


# Default client instance
_client: BinderApiClient | None = None


def get_binder_client() -> BinderApiClient:
    """
    Get the default binder API client instance.

    Returns:
        Singleton BinderApiClient configured from settings
    """
    global _client
    if _client is None:
        _client = BinderApiClient()
    return _client


def reset_binder_client() -> None:
    """Reset the default client instance (for testing)."""
    global _client
    _client = None
