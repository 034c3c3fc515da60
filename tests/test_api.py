"""Tests for the shared garden HTTP and WebSocket API.

The router runs on a bare FastAPI app wired to the in-memory store, so no
database or Redis is needed.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from app.main import register_exception_handlers
from app.modules.shared_garden.infrastructure.memory.garden_store_memory import InMemoryGardenStore
from app.modules.shared_garden.presentation.api.v1.garden import garden_router
from app.modules.shared_garden.presentation.dependencies import GardenServices, get_garden_services

from conftest import ALICE, BOB

BASE = "/api/v1/gardens"


def as_user(user_id):
    return {"X-User-ID": user_id}


def build_app(services):
    app = FastAPI()
    app.include_router(garden_router, prefix=BASE)
    register_exception_handlers(app)
    app.dependency_overrides[get_garden_services] = lambda: services
    return app


@pytest.fixture
def services(rules, clock):
    garden_services = GardenServices()
    garden_services.initialize(
        InMemoryGardenStore(rules=rules, clock=clock), rules, dev_tools_enabled=True, clock=clock,
    )
    return garden_services


@pytest.fixture
def client(services):
    with TestClient(build_app(services)) as test_client:
        yield test_client


def earn_water(client):
    for user_id, partner_id in ((ALICE, BOB), (BOB, ALICE)):
        response = client.post(f"{BASE}/{partner_id}/water-drops", headers=as_user(user_id))
        assert response.json()["earned"] is True


def grant_gold(client, user_id, partner_id, amount):
    response = client.post(f"{BASE}/{partner_id}/dev/gold", json={"amount": amount}, headers=as_user(user_id))
    assert response.status_code == 200
    return response.json()


# ============================================================================
# Reads and errors
# ============================================================================

class TestReadEndpoints:

    def test_missing_user_header(self, client):
        response = client.get(f"{BASE}/{BOB}")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"

    def test_get_garden_creates_it(self, client):
        response = client.get(f"{BASE}/{BOB}", headers=as_user(ALICE))

        assert response.status_code == 200
        body = response.json()
        assert body["garden"]["couple_key"] == "alice_bob"
        assert body["status"]["health"] == "fresh"
        assert body["watering"]["can_water"] is True
        assert body["wallet"]["user_id"] == ALICE

    def test_pairing_with_self_rejected(self, client):
        response = client.get(f"{BASE}/{ALICE}", headers=as_user(ALICE))
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_status_and_wallet(self, client):
        assert client.get(f"{BASE}/{BOB}/status", headers=as_user(ALICE)).json()["health"] == "fresh"
        assert client.get(f"{BASE}/{BOB}/wallet", headers=as_user(ALICE)).json()["gold"] == 0

    def test_catalog(self, client):
        body = client.get(f"{BASE}/catalog").json()
        assert body["refund_ratio"] == 0.6
        assert "rose" in {item["type"] for item in body["items"]}

        landmarks = client.get(f"{BASE}/catalog", params={"category": "landmark"}).json()["items"]
        assert {item["type"] for item in landmarks} == {"mountain", "windmill", "cooling_tower"}


# ============================================================================
# Commands
# ============================================================================

class TestWateringEndpoints:

    def test_watering_without_drops(self, client):
        response = client.post(f"{BASE}/{BOB}/water", headers=as_user(ALICE))
        assert response.status_code == 200
        assert response.json()["not_enough_water"] is True
        assert response.json()["watered"] is False

    def test_water_twice(self, client):
        earn_water(client)
        first = client.post(f"{BASE}/{BOB}/water", headers=as_user(ALICE))
        second = client.post(f"{BASE}/{BOB}/water", headers=as_user(ALICE))

        assert first.json()["watered"] is True
        assert second.status_code == 200
        assert second.json()["too_soon_to_water"] is True
        assert second.json()["already_watered_today"] is True

    def test_harmony_and_acknowledge(self, client):
        earn_water(client)
        client.post(f"{BASE}/{BOB}/water", headers=as_user(ALICE))
        harmony = client.post(f"{BASE}/{ALICE}/water", headers=as_user(BOB)).json()
        assert harmony["harmony_bonus"] is True

        ack = client.post(f"{BASE}/{BOB}/harmony-bonus/acknowledge", headers=as_user(ALICE)).json()
        assert ack == {"cleared": True, "still_pending_for": 1}

    def test_punishment_revive_and_water_drop(self, client, clock):
        client.get(f"{BASE}/{BOB}", headers=as_user(ALICE))
        grant_gold(client, ALICE, BOB, 10)
        clock.advance(hours=30)

        punishment = client.post(f"{BASE}/{BOB}/punishment-check", headers=as_user(ALICE)).json()
        assert punishment["applied"] is True

        revival = client.post(f"{BASE}/{BOB}/revive", headers=as_user(ALICE)).json()
        assert revival["revived"] is True

        drop = client.post(f"{BASE}/{BOB}/water-drops", headers=as_user(ALICE)).json()
        assert drop["earned"] is True


class TestPlantingEndpoints:

    def test_plant_without_gold(self, client):
        response = client.post(f"{BASE}/{BOB}/flowers", json={"type": "rose", "x": 10, "y": 10}, headers=as_user(ALICE))
        assert response.status_code == 200
        assert response.json()["outcome"] == "insufficient_funds"
        assert response.json()["placed"] is False

    def test_plant_and_remove_all(self, client):
        grant_gold(client, ALICE, BOB, 20)

        placed = client.post(f"{BASE}/{BOB}/flowers", json={"type": "tulip", "x": 10, "y": 10}, headers=as_user(ALICE))
        assert placed.json()["placed"] is True
        assert placed.json()["is_first_plant"] is True

        clash = client.post(f"{BASE}/{BOB}/flowers", json={"type": "rose", "x": 12, "y": 10}, headers=as_user(ALICE))
        assert clash.json()["outcome"] == "placement_conflict"

        refund = client.delete(f"{BASE}/{BOB}/flowers", headers=as_user(ALICE)).json()
        assert refund == {"removed_count": 1, "refund": 3, "gold_after": 18}

    def test_off_canvas_is_rejected(self, client):
        grant_gold(client, ALICE, BOB, 20)
        response = client.post(f"{BASE}/{BOB}/decor", json={"type": "pond", "x": 999, "y": 10}, headers=as_user(ALICE))
        assert response.status_code == 422
        assert response.json()["error"]["details"]["field"] == "position"

    def test_unknown_category(self, client):
        response = client.delete(f"{BASE}/{BOB}/trees", headers=as_user(ALICE))
        assert response.status_code == 404


class TestLandmarkEndpoints:

    def test_landmark_lifecycle(self, client):
        grant_gold(client, ALICE, BOB, 60)
        first = client.post(f"{BASE}/{BOB}/landmarks", json={"type": "mountain", "x": 10, "y": 10},
                            headers=as_user(ALICE)).json()["item"]
        client.post(f"{BASE}/{BOB}/landmarks", json={"type": "windmill", "x": 10, "y": 10}, headers=as_user(ALICE))

        moved = client.patch(f"{BASE}/{ALICE}/landmarks/{first['id']}", json={"x": 200, "y": 100}, headers=as_user(BOB))
        assert moved.json()["landmark"]["x"] == 200

        front = client.post(f"{BASE}/{ALICE}/landmarks/{first['id']}/front", headers=as_user(BOB))
        assert front.json()["landmark"]["z_index"] == 2
        back = client.post(f"{BASE}/{ALICE}/landmarks/{first['id']}/back", headers=as_user(BOB))
        assert back.json()["landmark"]["z_index"] == 0

        deleted = client.delete(f"{BASE}/{ALICE}/landmarks/{first['id']}", headers=as_user(BOB))
        assert deleted.json()["outcome"] == "deleted"

    def test_unknown_landmark_is_404(self, client):
        response = client.post(f"{BASE}/{BOB}/landmarks/missing/front", headers=as_user(ALICE))
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"


# ============================================================================
# Developer tools
# ============================================================================

class TestDevEndpoints:

    def test_dev_flow(self, client):
        added = client.post(f"{BASE}/{BOB}/dev/flowers", json={"type": "rose", "x": 10, "y": 10}, headers=as_user(ALICE))
        assert added.status_code == 200

        aged = client.post(f"{BASE}/{BOB}/dev/time-travel", json={"hours": 30}, headers=as_user(ALICE)).json()
        assert aged["couple_key"] == "alice_bob"
        assert client.get(f"{BASE}/{BOB}/status", headers=as_user(ALICE)).json()["health"] == "wilted"

        removed = client.delete(f"{BASE}/{BOB}/dev/flowers/last", headers=as_user(ALICE)).json()
        assert removed["id"] == added.json()["id"]

        cleared = client.delete(f"{BASE}/{BOB}/dev/garden", headers=as_user(ALICE)).json()
        assert cleared["flowers"] == []

    def test_time_travel_must_be_positive(self, client):
        response = client.post(f"{BASE}/{BOB}/dev/time-travel", json={"hours": 0}, headers=as_user(ALICE))
        assert response.status_code == 422

    def test_disabled_dev_tools(self, rules, clock):
        services = GardenServices()
        services.initialize(InMemoryGardenStore(rules=rules, clock=clock), rules, dev_tools_enabled=False)
        with TestClient(build_app(services)) as client:
            response = client.post(f"{BASE}/{BOB}/dev/gold", json={"amount": 5}, headers=as_user(ALICE))
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "DEV_TOOLS_DISABLED"


# ============================================================================
# Live stream
# ============================================================================

class TestStream:

    def test_stream_pushes_current_state_then_changes(self, client):
        earn_water(client)
        with client.websocket_connect(f"{BASE}/{ALICE}/stream", headers=as_user(BOB)) as websocket:
            initial = websocket.receive_json()
            assert initial["garden"]["couple_key"] == "alice_bob"
            assert initial["status"]["health"] == "fresh"

            client.post(f"{BASE}/{BOB}/water", headers=as_user(ALICE))

            update = websocket.receive_json()
            while ALICE not in update["garden"]["watered_by_today"]:
                update = websocket.receive_json()
            assert update["garden"]["watered_by_today"] == [ALICE]

    def test_stream_requires_user_header(self, client):
        with pytest.raises(WebSocketDisconnect) as exc:
            with client.websocket_connect(f"{BASE}/{ALICE}/stream") as websocket:
                websocket.receive_json()
        assert exc.value.code == 4401

    def test_stream_rejects_invalid_pair(self, client):
        with pytest.raises(WebSocketDisconnect) as exc:
            with client.websocket_connect(f"{BASE}/{ALICE}/stream", headers=as_user(ALICE)) as websocket:
                websocket.receive_json()
        assert exc.value.code == 4422
