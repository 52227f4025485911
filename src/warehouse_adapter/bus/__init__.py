# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

from warehouse_adapter.bus.consumer import KafkaEventConsumer
from warehouse_adapter.bus.models import EventType, OrderReachedWarehouse, WarehouseEvent
from warehouse_adapter.bus.producer import WarehouseNotificationPublisher
from warehouse_adapter.bus.router import EventRouter, parse_payload

__all__ = [
    "EventRouter",
    "EventType",
    "KafkaEventConsumer",
    "OrderReachedWarehouse",
    "WarehouseEvent",
    "WarehouseNotificationPublisher",
    "parse_payload",
]
