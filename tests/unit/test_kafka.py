# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for the Kafka consumer and notification publisher."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from aiokafka.errors import KafkaConnectionError

from warehouse_adapter.bus.consumer import KafkaEventConsumer
from warehouse_adapter.bus.producer import WarehouseNotificationPublisher
from warehouse_adapter.server.server import start_kafka
from warehouse_adapter.server.services import build_services


class FakeConsumer:
    def __init__(self, messages):
        self._messages = messages
        self.start = AsyncMock()
        self.stop = AsyncMock()

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for message in self._messages:
            yield message


def _record(topic, value, offset=0):
    return SimpleNamespace(topic=topic, partition=0, offset=offset, value=value)


class TestConsumer:
    @pytest.mark.asyncio
    async def test_routes_messages_in_order(self, settings):
        router = AsyncMock()
        fake = FakeConsumer([
            _record("order-events", b"first", 0),
            _record("order-status-events", b"second", 1),
        ])
        consumer = KafkaEventConsumer(settings.kafka, router, consumer=fake)

        await consumer.run()

        assert [c.args for c in router.route.await_args_list] == [
            ("order-events", b"first"),
            ("order-status-events", b"second"),
        ]
        fake.start.assert_awaited_once()
        fake.stop.assert_awaited_once()
        assert consumer.health()["connected"] is False

    @pytest.mark.asyncio
    async def test_health_after_start(self, settings):
        consumer = KafkaEventConsumer(settings.kafka, AsyncMock(), consumer=FakeConsumer([]))
        await consumer.start()
        assert consumer.health() == {
            "connected": True,
            "topics": ["order-events", "order-status-events"],
            "groupId": "warehouse-adapter-group",
        }


class TestPublisher:
    @pytest.mark.asyncio
    async def test_not_connected_reports_failure(self, settings):
        publisher = WarehouseNotificationPublisher(settings.kafka, producer=AsyncMock())
        result = await publisher.notify_order_reached_warehouse("O1", "ORD-1", "TRK-1", "Main Warehouse")
        assert result["success"] is False

    @pytest.mark.asyncio
    async def test_order_reached_warehouse_payload(self, settings):
        producer = AsyncMock()
        producer.send_and_wait.return_value = SimpleNamespace(partition=2, offset=17)
        publisher = WarehouseNotificationPublisher(settings.kafka, producer=producer)
        await publisher.start()

        result = await publisher.notify_order_reached_warehouse(
            "O1", "ORD-1", "TRK-1", "Main Warehouse", received_by="Warehouse Staff"
        )

        assert result == {"success": True, "partition": 2, "offset": 17}
        topic = producer.send_and_wait.await_args.args[0]
        kwargs = producer.send_and_wait.await_args.kwargs
        payload = json.loads(kwargs["value"])

        assert topic == "warehouse-notifications"
        assert kwargs["key"] == b"O1"
        assert kwargs["headers"] == [
            ("eventType", b"ORDER_REACHED_WAREHOUSE"),
            ("source", b"warehouse-adapter-service"),
        ]
        assert payload["eventType"] == "ORDER_REACHED_WAREHOUSE"
        assert payload["status"] == "inwarehouse"
        assert payload["message"] == "Order reached at warehouse"
        assert payload["source"] == "warehouse-adapter-service"
        assert payload["warehouse"]["location"] == "Main Warehouse"
        assert payload["warehouse"]["receivedBy"] == "Warehouse Staff"
        assert "receivedAt" in payload["warehouse"]
        assert payload["orderNumber"] == "ORD-1"
        assert payload["trackingNumber"] == "TRK-1"

    @pytest.mark.asyncio
    async def test_send_error_is_reported(self, settings):
        producer = AsyncMock()
        producer.send_and_wait.side_effect = KafkaConnectionError("broker down")
        publisher = WarehouseNotificationPublisher(settings.kafka, producer=producer)
        await publisher.start()

        result = await publisher.send_warehouse_notification("ORDER_REACHED_WAREHOUSE", {"orderId": "O1"})
        assert result["success"] is False


class TestStartupFailure:
    @pytest.mark.asyncio
    async def test_publisher_closes_client_after_failed_start(self, settings):
        producer = AsyncMock()
        producer.start.side_effect = KafkaConnectionError("broker down")
        publisher = WarehouseNotificationPublisher(settings.kafka, producer=producer)

        with pytest.raises(KafkaConnectionError):
            await publisher.start()
        await publisher.stop()

        producer.stop.assert_awaited_once()
        assert publisher.connected is False

    @pytest.mark.asyncio
    async def test_start_kafka_closes_both_clients(self, settings, scripted_transport):
        producer = AsyncMock()
        fake = FakeConsumer([])
        fake.start.side_effect = KafkaConnectionError("broker down")
        services = build_services(
            settings,
            transport=scripted_transport(),
            order_client=AsyncMock(),
            publisher=WarehouseNotificationPublisher(settings.kafka, producer=producer),
        )
        consumer = KafkaEventConsumer(settings.kafka, services.router, consumer=fake)

        assert await start_kafka(services, consumer) is False

        producer.stop.assert_awaited_once()
        fake.stop.assert_awaited_once()
        assert services.consumer is None
        assert services.publisher.connected is False
