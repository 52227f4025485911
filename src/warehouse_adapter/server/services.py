# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Wiring of the adapter's long-lived components."""

import time
from dataclasses import dataclass, field
from typing import Optional

from warehouse_adapter.bus.consumer import KafkaEventConsumer
from warehouse_adapter.bus.producer import WarehouseNotificationPublisher
from warehouse_adapter.bus.router import EventRouter
from warehouse_adapter.config import Settings
from warehouse_adapter.delivery.engine import DeliveryStatusEngine
from warehouse_adapter.handlers.warehouse_event_handler import WarehouseEventHandler, build_router
from warehouse_adapter.history.store import MessageHistoryStore
from warehouse_adapter.order_service.client import OrderServiceClient
from warehouse_adapter.transport import create_transport
from warehouse_adapter.transport.interface import WmsTransport
from warehouse_adapter.transport.manager import TransportManager


@dataclass
class AdapterServices:
    settings: Settings
    history: MessageHistoryStore
    transport_manager: TransportManager
    publisher: WarehouseNotificationPublisher
    order_client: OrderServiceClient
    handler: WarehouseEventHandler
    router: EventRouter
    deliveries: DeliveryStatusEngine
    consumer: Optional[KafkaEventConsumer] = None
    started_at: float = field(default_factory=time.monotonic)

    def kafka_health(self) -> dict:
        if self.consumer is not None:
            return {"enabled": True, **self.consumer.health()}
        return {
            "enabled": self.settings.kafka.enabled,
            "connected": False,
            "topics": list(self.settings.kafka.consumed_topics),
            "groupId": self.settings.kafka.group_id,
        }

    def uptime(self) -> float:
        return round(time.monotonic() - self.started_at, 3)


def build_services(
    settings: Settings,
    transport: Optional[WmsTransport] = None,
    order_client: Optional[OrderServiceClient] = None,
    publisher: Optional[WarehouseNotificationPublisher] = None,
    history: Optional[MessageHistoryStore] = None,
    deliveries: Optional[DeliveryStatusEngine] = None,
) -> AdapterServices:
    """Build every component from ``settings``; any of them may be supplied instead."""
    history = history or MessageHistoryStore()
    transport_manager = TransportManager(
        transport or create_transport(settings.wms),
        max_attempts=settings.wms.retry_attempts,
        retry_delay=settings.wms.retry_delay_seconds,
    )
    publisher = publisher or WarehouseNotificationPublisher(settings.kafka)
    order_client = order_client or OrderServiceClient(
        settings.order_service.base_url, timeout=settings.order_service.timeout_seconds
    )
    handler = WarehouseEventHandler(
        transport_manager,
        publisher,
        order_client,
        history,
        warehouse_location=settings.wms.warehouse_location,
        processing_delay=settings.wms.processing_delay_seconds,
    )
    return AdapterServices(
        settings=settings,
        history=history,
        transport_manager=transport_manager,
        publisher=publisher,
        order_client=order_client,
        handler=handler,
        router=build_router(handler),
        deliveries=deliveries or DeliveryStatusEngine(),
    )
