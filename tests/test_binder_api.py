"""Tests for the binder API client."""

import json
from decimal import Decimal

import httpx
import pytest
import respx

from binderimport.models.condition import WishlistPriority
from binderimport.models.failure import FailureKind, ImportApiError
from binderimport.models.import_result import ImportRow, WishlistImportRow
from binderimport.services.binder_api import BinderApiClient, get_binder_client

BASE_URL = "http://binder.test/api"


@pytest.fixture
def client() -> BinderApiClient:
    return BinderApiClient(base_url=BASE_URL, api_token="secret-token", timeout=5.0)


@pytest.fixture
def bolt_json() -> dict:
    return {
        "id": "card-bolt-2xm",
        "name": "Lightning Bolt",
        "setCode": "2XM",
        "setName": "Double Masters",
        "scryfallId": "e3285e6b",
        "priceEur": 1.5,
    }


class TestResolveCards:
    @pytest.mark.asyncio
    @respx.mock
    async def test_resolves_and_sends_names(self, client: BinderApiClient, bolt_json: dict) -> None:
        route = respx.post(f"{BASE_URL}/import/resolve-cards").mock(
            return_value=httpx.Response(
                200,
                json={
                    "data": {
                        "resolved": [{"name": "Lightning Bolt", "card": bolt_json}],
                        "notFound": ["Black Lotus"],
                    }
                },
            )
        )

        result = await client.resolve_cards(["Lightning Bolt", "Black Lotus"])

        assert json.loads(route.calls.last.request.content) == {
            "cardNames": ["Lightning Bolt", "Black Lotus"]
        }
        assert route.calls.last.request.headers["Authorization"] == "Bearer secret-token"
        assert result.resolved[0].card.set_code == "2XM"
        assert result.card_map()["lightning bolt"].id == "card-bolt-2xm"
        assert result.not_found_names() == {"black lotus"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_names_make_no_request(self, client: BinderApiClient) -> None:
        route = respx.post(f"{BASE_URL}/import/resolve-cards")

        result = await client.resolve_cards([])

        assert not route.called
        assert result.resolved == []
        assert result.not_found == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_no_auth_header_without_token(self) -> None:
        client = BinderApiClient(base_url=BASE_URL, api_token="")
        route = respx.post(f"{BASE_URL}/import/resolve-cards").mock(
            return_value=httpx.Response(200, json={"data": {"resolved": [], "notFound": ["X"]}})
        )

        await client.resolve_cards(["X"])

        assert "Authorization" not in route.calls.last.request.headers


class TestErrors:
    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_message_is_used(self, client: BinderApiClient) -> None:
        respx.post(f"{BASE_URL}/import/collection").mock(
            return_value=httpx.Response(500, json={"error": "Database unavailable"})
        )

        with pytest.raises(ImportApiError) as exc_info:
            await client.import_collection([ImportRow(name="Sol Ring", card_id="c1")], "add")

        assert exc_info.value.message == "Database unavailable"
        assert exc_info.value.status_code == 500
        assert exc_info.value.kind == FailureKind.SERVICE_UNAVAILABLE

    @pytest.mark.asyncio
    @respx.mock
    async def test_client_error_without_body(self, client: BinderApiClient) -> None:
        respx.post(f"{BASE_URL}/import/parse-text").mock(return_value=httpx.Response(400))

        with pytest.raises(ImportApiError) as exc_info:
            await client.parse_text("4 Lightning Bolt")

        assert exc_info.value.message == "Request failed with status 400"
        assert exc_info.value.kind == FailureKind.INVALID_INPUT

    @pytest.mark.asyncio
    @respx.mock
    async def test_not_found_status(self, client: BinderApiClient) -> None:
        respx.post(f"{BASE_URL}/import/from-url").mock(
            return_value=httpx.Response(404, json={"error": "Deck not found"})
        )

        with pytest.raises(ImportApiError) as exc_info:
            await client.import_from_url("https://moxfield.com/decks/abc")

        assert exc_info.value.kind == FailureKind.NOT_FOUND

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_failure_is_503(self, client: BinderApiClient) -> None:
        respx.post(f"{BASE_URL}/import/resolve-cards").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with pytest.raises(ImportApiError) as exc_info:
            await client.resolve_cards(["Sol Ring"])

        assert exc_info.value.status_code == 503
        assert exc_info.value.message == "Could not reach the binder service."

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_payload_is_502(self, client: BinderApiClient) -> None:
        respx.post(f"{BASE_URL}/import/resolve-cards").mock(
            return_value=httpx.Response(200, json={"data": {"resolved": [{"name": "X"}]}})
        )

        with pytest.raises(ImportApiError) as exc_info:
            await client.resolve_cards(["X"])

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_body_is_502(self, client: BinderApiClient) -> None:
        respx.post(f"{BASE_URL}/import/wishlist").mock(
            return_value=httpx.Response(200, text="<html>gateway</html>")
        )

        with pytest.raises(ImportApiError) as exc_info:
            await client.import_wishlist([], "skip")

        assert exc_info.value.status_code == 502


class TestCommit:
    @pytest.mark.asyncio
    @respx.mock
    async def test_collection_payload(self, client: BinderApiClient) -> None:
        route = respx.post(f"{BASE_URL}/import/collection").mock(
            return_value=httpx.Response(
                200,
                json={
                    "data": {
                        "imported": 1,
                        "updated": 0,
                        "skipped": 0,
                        "failed": 1,
                        "errors": [{"row": 2, "cardName": "Mox Jet", "error": "Invalid card"}],
                    }
                },
            )
        )
        rows = [
            ImportRow(name="Sol Ring", quantity=2, trade_price=Decimal("1.20"), card_id="c1"),
            ImportRow(name="Mox Jet", card_id="c2"),
        ]

        result = await client.import_collection(rows, "replace")

        body = json.loads(route.calls.last.request.content)
        assert body["duplicateMode"] == "replace"
        assert body["rows"][0] == {
            "name": "Sol Ring",
            "quantity": 2,
            "foilQuantity": 0,
            "condition": "NM",
            "language": "EN",
            "forTrade": 0,
            "tradePrice": 1.2,
            "cardId": "c1",
        }
        assert "tradePrice" not in body["rows"][1]
        assert result.imported == 1
        assert result.errors[0].card_name == "Mox Jet"

    @pytest.mark.asyncio
    @respx.mock
    async def test_wishlist_payload(self, client: BinderApiClient) -> None:
        route = respx.post(f"{BASE_URL}/import/wishlist").mock(
            return_value=httpx.Response(200, json={"data": {"imported": 1}})
        )

        await client.import_wishlist(
            [
                WishlistImportRow(
                    name="Sol Ring",
                    priority=WishlistPriority.URGENT,
                    foil_only=True,
                    card_id="c1",
                )
            ],
            "update",
        )

        body = json.loads(route.calls.last.request.content)
        assert body["duplicateMode"] == "update"
        assert body["rows"][0]["priority"] == "URGENT"
        assert body["rows"][0]["foilOnly"] is True


class TestTextAndUrl:
    @pytest.mark.asyncio
    @respx.mock
    async def test_parse_text(self, client: BinderApiClient, bolt_json: dict) -> None:
        route = respx.post(f"{BASE_URL}/import/parse-text").mock(
            return_value=httpx.Response(
                200,
                json={
                    "data": {
                        "entries": [
                            {
                                "quantity": 4,
                                "cardName": "Lightning Bolt",
                                "isFoil": False,
                                "category": "main",
                                "resolvedCard": bolt_json,
                                "status": "matched",
                            }
                        ],
                        "errors": [],
                        "detectedFormat": "generic",
                        "stats": {"total": 1, "matched": 1, "notFound": 0},
                    }
                },
            )
        )

        result = await client.parse_text("4 Lightning Bolt", "wishlist")

        assert json.loads(route.calls.last.request.content) == {
            "text": "4 Lightning Bolt",
            "targetType": "wishlist",
        }
        assert result.entries[0].resolved_card is not None
        assert result.entries[0].resolved_card.id == "card-bolt-2xm"
        assert result.stats.matched == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_import_from_url(self, client: BinderApiClient) -> None:
        respx.post(f"{BASE_URL}/import/from-url").mock(
            return_value=httpx.Response(
                200,
                json={
                    "data": {
                        "entries": [],
                        "errors": [],
                        "stats": {"total": 0, "matched": 0, "notFound": 0},
                        "deckName": "Mono Red",
                        "deckAuthor": "someone",
                        "source": "archidekt",
                    }
                },
            )
        )

        result = await client.import_from_url("https://archidekt.com/decks/123")

        assert result.deck_name == "Mono Red"
        assert result.source == "archidekt"


class TestDefaultClient:
    def test_singleton(self) -> None:
        assert get_binder_client() is get_binder_client()

    def test_trailing_slash_stripped(self) -> None:
        assert BinderApiClient(base_url="http://x/api/").base_url == "http://x/api"
