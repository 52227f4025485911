# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for the adapter HTTP API."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from warehouse_adapter.bus.models import WarehouseEvent
from warehouse_adapter.server.api import create_app
from warehouse_adapter.server.services import build_services


@pytest.fixture
def services(settings, scripted_transport):
    order_client = AsyncMock()
    order_client.test_connection.return_value = True
    return build_services(
        settings,
        transport=scripted_transport(),
        order_client=order_client,
        publisher=AsyncMock(),
    )


@pytest.fixture
def client(services):
    return TestClient(create_app(services))


def _seed(services, *order_ids):
    async def run():
        for order_id in order_ids:
            await services.handler.handle_order_created(WarehouseEvent.model_validate({
                "eventType": "ORDER_CREATED",
                "orderId": order_id,
                "orderNumber": f"ORD-{order_id}",
                "trackingNumber": f"TRK-{order_id}",
            }))
    asyncio.run(run())


class TestService:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["service"] == "warehouse-adapter-service"

    def test_info(self, client):
        data = client.get("/info").json()["data"]
        assert data["consumedTopics"] == ["order-events", "order-status-events"]
        assert data["producedTopics"] == ["warehouse-notifications"]


class TestWarehouse:
    def test_deep_health_with_kafka_disabled(self, client):
        response = client.get("/api/warehouse/health")
        assert response.status_code == 200
        assert response.json()["data"]["checks"] == {"kafka": True, "orderService": True, "wms": True}

    def test_deep_health_unhealthy_order_service(self, client, services):
        services.order_client.test_connection.return_value = False
        response = client.get("/api/warehouse/health")
        assert response.status_code == 503
        assert response.json()["success"] is False

    def test_history_newest_first_and_filtered(self, client, services):
        _seed(services, "O1", "O2", "O3")

        messages = client.get("/api/warehouse/history").json()["data"]["messages"]
        assert [m["key"] for m in messages] == ["O3", "O2", "O1"]

        data = client.get("/api/warehouse/history", params={"orderId": "O2", "limit": 10}).json()["data"]
        assert [m["orderId"] for m in data["messages"]] == ["O2"]
        assert data["filteredBy"] == "orderId: O2"

    @pytest.mark.parametrize("limit", [0, 1001])
    def test_history_limit_bounds(self, client, limit):
        assert client.get("/api/warehouse/history", params={"limit": limit}).status_code == 422

    def test_statistics(self, client, services):
        _seed(services, "O1")
        data = client.get("/api/warehouse/statistics").json()["data"]
        assert data["totalMessages"] == 1
        assert data["successRate"] == "100.00%"

    def test_clear_history(self, client, services):
        _seed(services, "O1")
        body = client.delete("/api/warehouse/history", params={"hoursToKeep": 0}).json()
        assert body["success"] is True
        assert body["data"]["removed"] == 1

    @pytest.mark.parametrize("hours", ["1e10", "inf", "-1"])
    def test_clear_history_rejects_out_of_range_retention(self, client, services, hours):
        _seed(services, "O1")
        response = client.delete("/api/warehouse/history", params={"hoursToKeep": hours})
        assert response.status_code == 422
        assert client.get("/api/warehouse/statistics").json()["data"]["totalMessages"] == 1

    def test_clear_history_accepts_a_century(self, client, services):
        _seed(services, "O1")
        body = client.delete("/api/warehouse/history", params={"hoursToKeep": 24 * 365 * 100}).json()
        assert body["data"]["removed"] == 0
        assert body["data"]["clearedBefore"] is not None

    def test_wms_probe(self, client, services):
        body = client.get("/api/warehouse/test/wms").json()
        assert body["success"] is True
        assert body["data"]["testResult"] is True

    def test_send_manual_message_is_not_recorded(self, client, services):
        response = client.post("/api/warehouse/test/send", json={"message": "NEW_ORDER|X|Y|A|B|C"})
        assert response.status_code == 200
        assert response.json()["data"]["result"]["attempts"] == 1
        assert "correlationId" in response.json()["data"]["result"]
        assert services.transport_manager.transport.sent == ["NEW_ORDER|X|Y|A|B|C"]
        assert client.get("/api/warehouse/statistics").json()["data"]["totalMessages"] == 0

    def test_send_manual_message_validation(self, client):
        assert client.post("/api/warehouse/test/send", json={"message": ""}).status_code == 422
        assert client.post("/api/warehouse/test/send", json={"message": "x" * 1001}).status_code == 422

    def test_send_manual_message_transport_failure(self, settings, scripted_transport):
        services = build_services(
            settings,
            transport=scripted_transport(failures=10),
            order_client=AsyncMock(),
            publisher=AsyncMock(),
        )
        response = TestClient(create_app(services)).post("/api/warehouse/test/send", json={"message": "PING"})
        assert response.status_code == 502
        assert response.json()["data"]["result"]["attempts"] == 3
        assert response.json()["data"]["result"]["correlationId"].startswith("manual_test_")


class TestDeliveries:
    def _assign(self, client, order_id="O1"):
        return client.post(
            "/api/deliveries",
            json={"orderId": order_id, "deliveryPersonId": "DP1", "deliveryPersonName": "Dana"},
        )

    def test_assign_and_get(self, client):
        response = self._assign(client)
        assert response.status_code == 201
        assert response.json()["data"]["status"] == "Picking"

        data = client.get("/api/deliveries/O1").json()["data"]
        assert data["deliveryPersonName"] == "Dana"

    def test_duplicate_is_conflict(self, client):
        self._assign(client)
        response = self._assign(client)
        assert response.status_code == 409
        assert response.json()["success"] is False

    def test_missing_is_not_found(self, client):
        assert client.get("/api/deliveries/missing").status_code == 404

    def test_status_flow(self, client):
        self._assign(client)
        response = client.patch("/api/deliveries/O1/status", json={"status": "PickedUp"})
        assert response.status_code == 200
        assert response.json()["data"]["pickedUpAt"] is not None

        response = client.patch("/api/deliveries/O1/status", json={"status": "Picking"})
        assert response.status_code == 400

    def test_cancel(self, client):
        self._assign(client)
        response = client.post("/api/deliveries/O1/cancel", json={"reason": "Customer unavailable"})
        assert response.status_code == 200
        assert response.json()["data"]["cancelReason"] == "Customer unavailable"

        assert client.post("/api/deliveries/O1/cancel").status_code == 409

    def test_statistics_and_person_listing(self, client):
        self._assign(client, "O1")
        self._assign(client, "O2")

        stats = client.get("/api/deliveries/statistics", params={"deliveryPersonId": "DP1"}).json()["data"]
        assert stats["totalDeliveries"] == 2

        listed = client.get("/api/deliveries/person/DP1").json()["data"]
        assert {d["orderId"] for d in listed} == {"O1", "O2"}
