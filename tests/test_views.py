import asyncio
import json

import pytest
from django.core.exceptions import ImproperlyConfigured
from django.test import AsyncClient, Client, override_settings

from restock_server.api import get_server, reset_server

AUTH = {"X-API-Key": "test-key"}


@pytest.fixture
def client(default_server) -> Client:
    return Client()


def _post(client: Client, path: str, payload) -> object:
    return client.post(path, data=json.dumps(payload), content_type="application/json", headers=AUTH)


def test_health_needs_no_key(client):
    response = client.get("/health/")

    assert response.status_code == 200
    assert response.content == b"Server is healthy and running."


@pytest.mark.parametrize("headers", [{}, {"X-API-Key": "wrong"}])
def test_missing_or_wrong_key_is_unauthorized(client, headers):
    assert client.get("/stock/", headers=headers).status_code == 401
    assert client.post("/force-restock/", headers=headers).status_code == 401


def test_unset_key_is_a_configuration_error(default_server):
    with override_settings(RESTOCK_SERVER={"AUTOSTART_TIMER": False}):
        with pytest.raises(ImproperlyConfigured):
            Client(raise_request_exception=True).get("/stock/", headers=AUTH)


def test_stock_returns_snapshot(client, default_server):
    snapshot = default_server.get_snapshot()

    body = client.get("/stock/", headers=AUTH).json()

    assert body == {
        "gearStock": snapshot.stock,
        "timeUntilRestock": snapshot.seconds_until_restock,
        "restockId": snapshot.epoch_id,
    }


def test_force_restock(client, default_server):
    before = default_server.get_snapshot().epoch_id

    response = client.post("/force-restock/", headers=AUTH)

    body = response.json()
    assert response.status_code == 200
    assert body["message"] == "Restock forced successfully."
    assert body["restockId"] != before
    assert body["restockId"] == default_server.get_snapshot().epoch_id
    assert set(body["gearStock"]) == set(default_server.engine.catalog.names())


def test_force_restock_requires_post(client):
    assert client.get("/force-restock/", headers=AUTH).status_code == 405


def test_set_timer(client, default_server):
    response = _post(client, "/set-timer/", {"newInterval": 10})

    assert response.status_code == 200
    assert response.json()["timeUntilRestock"] == 10
    assert default_server.get_snapshot().restock_interval == 10


@pytest.mark.parametrize("payload", [{"newInterval": 0}, {"newInterval": "10"}, {}, [10]])
def test_set_timer_rejects_invalid_interval(client, default_server, payload):
    response = _post(client, "/set-timer/", payload)

    assert response.status_code == 400
    assert default_server.get_snapshot().restock_interval == 300


def test_set_timer_rejects_malformed_json(client):
    response = client.post(
        "/set-timer/", data="{not json", content_type="application/json", headers=AUTH
    )

    assert response.status_code == 400
    assert response.json()["code"] == "bad_request"


def test_set_stock(client, default_server):
    before = default_server.get_snapshot().epoch_id

    response = _post(client, "/set-stock/", {"item": "Jade Clover", "amount": 5})

    body = response.json()
    assert response.status_code == 200
    assert body["gearStock"]["Jade Clover"] == 5
    assert body["restockId"] != before


def test_set_stock_unknown_item_is_404(client, default_server):
    before = default_server.get_snapshot()

    response = _post(client, "/set-stock/", {"item": "Unknown", "amount": 5})

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"
    assert default_server.get_snapshot() == before


@pytest.mark.parametrize("amount", [True, 2.5, "3"])
def test_set_stock_rejects_non_integer_amount(client, default_server, amount):
    before = default_server.get_snapshot()

    response = _post(client, "/set-stock/", {"item": "Jade Clover", "amount": amount})

    assert response.status_code == 400
    assert response.json()["code"] == "bad_request"
    assert default_server.get_snapshot() == before


def test_set_stock_negative_amount_is_400(client):
    response = _post(client, "/set-stock/", {"item": "Jade Clover", "amount": -1})

    assert response.status_code == 400
    assert response.json()["code"] == "invalid_amount"


def test_listen_answers_stale_client_immediately(default_server):
    current = default_server.get_snapshot().epoch_id

    async def scenario():
        return await AsyncClient().get(
            "/listen-for-restock/", {"currentId": "stale"}, headers=AUTH
        )

    response = asyncio.run(scenario())

    assert response.status_code == 200
    assert response.json() == {"restockId": current}


def test_listen_is_held_until_restock(default_server):
    known = default_server.get_snapshot().epoch_id

    async def scenario():
        request = asyncio.create_task(
            AsyncClient().get("/listen-for-restock/", {"currentId": known}, headers=AUTH)
        )
        for _ in range(200):
            if len(default_server.engine.registry):
                break
            await asyncio.sleep(0.005)
        restocked = default_server.force_restock()
        return restocked, await request

    restocked, response = asyncio.run(scenario())

    assert response.status_code == 200
    assert response.json() == {"restockId": restocked.epoch_id}


def test_listen_requires_key(default_server):
    async def scenario():
        return await AsyncClient().get("/listen-for-restock/")

    assert asyncio.run(scenario()).status_code == 401


@pytest.mark.parametrize(
    "overrides, status",
    [
        ({"MAX_WAIT_SECONDS": 0.02}, 204),
        ({"MAX_WAITERS": 0}, 503),
    ],
)
def test_listen_limits(overrides, status):
    conf = {"API_KEY": "test-key", "AUTOSTART_TIMER": False, **overrides}
    with override_settings(RESTOCK_SERVER=conf):
        reset_server()
        try:
            known = get_server().get_snapshot().epoch_id

            async def scenario():
                return await AsyncClient().get(
                    "/listen-for-restock/", {"currentId": known}, headers=AUTH
                )

            response = asyncio.run(scenario())
        finally:
            reset_server()

    assert response.status_code == status
