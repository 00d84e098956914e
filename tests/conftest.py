from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from httpx import ASGITransport

from binderimport.models.catalog import ResolvedCard
from binderimport.services.binder_api import BinderApiClient, reset_binder_client

FAKE_BASE_URL = "http://binder.test/api"


class FakeBinder:
    """
    In-memory stand-in for the binder service's import API.

    Names resolve case-insensitively against the catalog. Commit calls
    whose 1-based number is in fail_calls answer 500; otherwise every row
    with a cardId is imported and rows without one fail.
    """

    def __init__(self, cards: list[ResolvedCard]) -> None:
        self.catalog = {card.name.lower(): card for card in cards}
        self.resolve_calls: list[list[str]] = []
        self.commit_calls: list[dict[str, Any]] = []
        self.fail_calls: set[int] = set()

    def resolve(self, names: list[str]) -> dict[str, Any]:
        self.resolve_calls.append(names)
        resolved = []
        not_found = []
        for name in names:
            card = self.catalog.get(name.lower())
            if card:
                resolved.append({"name": name, "card": card.model_dump(by_alias=True)})
            else:
                not_found.append(name)
        return {"resolved": resolved, "notFound": not_found}

    def commit(self, payload: dict[str, Any]) -> dict[str, Any] | None:
        self.commit_calls.append(payload)
        if len(self.commit_calls) in self.fail_calls:
            return None

        imported = 0
        errors = []
        for j, row in enumerate(payload["rows"], start=1):
            if row.get("cardId"):
                imported += 1
            else:
                errors.append({"row": j, "cardName": row["name"], "error": "Missing card id"})
        return {
            "imported": imported,
            "updated": 0,
            "skipped": 0,
            "failed": len(errors),
            "errors": errors,
        }


def create_fake_binder_app(binder: FakeBinder) -> FastAPI:
    app = FastAPI()

    @app.post("/api/import/resolve-cards")
    async def resolve_cards(payload: dict[str, Any]) -> dict[str, Any]:
        return {"data": binder.resolve(payload["cardNames"])}

    @app.post("/api/import/collection")
    async def import_collection(payload: dict[str, Any]) -> Any:
        result = binder.commit(payload)
        if result is None:
            return JSONResponse(status_code=500, content={"error": "Database unavailable"})
        return {"data": result}

    @app.post("/api/import/wishlist")
    async def import_wishlist(payload: dict[str, Any]) -> Any:
        result = binder.commit(payload)
        if result is None:
            return JSONResponse(status_code=500, content={"error": "Database unavailable"})
        return {"data": result}

    return app


@pytest.fixture(autouse=True)
def clear_default_client():
    """Reset the shared binder client around each test."""
    reset_binder_client()
    yield
    reset_binder_client()


@pytest.fixture
def bolt() -> ResolvedCard:
    return ResolvedCard(
        id="card-bolt-2xm",
        name="Lightning Bolt",
        set_code="2XM",
        set_name="Double Masters",
        scryfall_id="e3285e6b",
        price_eur=1.5,
    )


@pytest.fixture
def sol_ring() -> ResolvedCard:
    return ResolvedCard(
        id="card-sol-ring-c21", name="Sol Ring", set_code="C21", set_name="Commander 2021"
    )


@pytest.fixture
def counterspell() -> ResolvedCard:
    return ResolvedCard(
        id="card-counterspell-mh2",
        name="Counterspell",
        set_code="MH2",
        set_name="Modern Horizons 2",
    )


@pytest.fixture
def fake_binder(
    bolt: ResolvedCard, sol_ring: ResolvedCard, counterspell: ResolvedCard
) -> FakeBinder:
    return FakeBinder([bolt, sol_ring, counterspell])


@pytest.fixture
def binder_client(fake_binder: FakeBinder) -> BinderApiClient:
    """Binder API client wired to the in-process fake service."""
    transport = ASGITransport(app=create_fake_binder_app(fake_binder))
    return BinderApiClient(base_url=FAKE_BASE_URL, api_token="", transport=transport)
