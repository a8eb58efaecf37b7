"""HTTP API tests against the ASGI app."""

import logging
from decimal import Decimal

import httpx
import pytest
import pytest_asyncio

from tripquote.dependencies import get_currency_service
from tripquote.main import app

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture()
async def api(currency):
    app.dependency_overrides[get_currency_service] = lambda: currency
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


def _gbp(amount: str) -> dict:
    return {
        "amount": amount,
        "currency_code": "GBP",
        "original_amount": amount,
        "original_currency_code": "GBP",
    }


def _composition(**sections) -> dict:
    return {
        "client": {"first_name": "Ada", "last_name": "Lovelace"},
        "trip": {
            "primary_destination": "Monaco",
            "start_date": "2025-05-22",
            "end_date": "2025-05-26",
            "party": {"total_adults": 2, "total_children": 0},
        },
        "preferences": {"tone": "luxury", "currency": "GBP"},
        **sections,
    }


HOTELS = {
    "enabled": True,
    "selections": [{
        "group_id": "default",
        "room_count": 2,
        "chosen_offer": {
            "offer": {
                "offer_id": "h1",
                "hotel_name": "Hotel de Paris",
                "price_per_night": {"amount": "100", "currency_code": "GBP"},
            },
            "price_per_night": _gbp("100"),
        },
    }],
}


async def test_health(api):
    resp = await api.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_partition_group_auto(api):
    resp = await api.post("/api/travelers/partition", json={
        "total_adults": 2,
        "total_children": 3,
        "child_ages": [9, 13, 15],
    })
    assert resp.status_code == 200
    groups = resp.json()
    assert {g["name"] for g in groups} == {"Older Children", "Younger Children"}
    assert sum(g["adults"] for g in groups) == 2
    assert sum(g["children"] for g in groups) == 3


async def test_partition_family_returns_default_group(api):
    resp = await api.post("/api/travelers/partition", json={
        "total_adults": 2,
        "total_children": 1,
        "strategy": "family",
    })
    assert [g["id"] for g in resp.json()] == ["default"]


async def test_validate_groups(api):
    resp = await api.post("/api/travelers/validate", json={
        "party": {"total_adults": 3, "use_subgroups": True},
        "groups": [{"id": "a", "name": "A", "adults": 2}],
    })
    body = resp.json()
    assert body["valid"] is False
    assert "2/3 adults" in body["reason"]


async def test_supported_currencies(api):
    resp = await api.get("/api/currency/supported")
    codes = {c["code"] for c in resp.json()["currencies"]}
    assert {"GBP", "USD", "EUR", "JPY"} <= codes


async def test_convert(api):
    resp = await api.post("/api/currency/convert", json={
        "amount": "100",
        "from_currency": "GBP",
        "to_currency": "USD",
    })
    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["amount"]) == Decimal("127.50")
    assert body["display"] == "$127.50"


async def test_convert_rejects_unknown_target(api):
    resp = await api.post("/api/currency/convert", json={
        "amount": "1",
        "from_currency": "GBP",
        "to_currency": "XYZ",
    })
    assert resp.status_code == 400


async def test_breakdown(api):
    resp = await api.post("/api/quotes/breakdown", json=_composition(hotels=HOTELS))
    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["subtotals"]["hotels"]) == Decimal("800")
    assert Decimal(body["total"]) == Decimal("800")
    assert body["currency"] == "GBP"


async def test_readiness_reports_empty_enabled_category(api):
    resp = await api.post("/api/quotes/readiness", json=_composition(events={"enabled": True}))
    body = resp.json()
    assert body["ready"] is False
    assert body["events"] is False
    assert body["hotels"] is True


async def test_finalize_not_ready(api):
    resp = await api.post("/api/quotes/finalize", json=_composition(flights={"enabled": True}))
    assert resp.status_code == 422
    assert resp.json()["detail"]["reasons"]


async def test_finalize_unallocated_travelers(api):
    data = _composition()
    data["trip"]["party"]["use_subgroups"] = True
    data["groups"] = [{"id": "a", "name": "A", "adults": 1}]

    resp = await api.post("/api/quotes/finalize", json=data)
    assert resp.status_code == 422
    assert "1/2 adults" in resp.json()["detail"]


async def test_finalize_returns_payload(api):
    resp = await api.post("/api/quotes/finalize", json=_composition(hotels=HOTELS))
    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["breakdown"]["total"]) == Decimal("800")
    assert body["finalized_at"]
    assert body["hotels"]["selections"][0]["room_count"] == 2


async def test_rejected_finalize_is_logged(api, caplog):
    data = _composition()
    data["trip"]["party"]["use_subgroups"] = True

    with caplog.at_level(logging.INFO, logger="tripquote.routers.quotes"):
        resp = await api.post("/api/quotes/finalize", json=data)

    assert resp.status_code == 422
    assert "Finalize rejected, travelers not allocated" in caplog.text
