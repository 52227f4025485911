# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Publisher for the ``warehouse-notifications`` topic."""

import json
from typing import Any, Dict, Optional

from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError

from warehouse_adapter.bus.models import OrderReachedWarehouse, WarehouseInfo
from warehouse_adapter.common.logging import get_logger
from warehouse_adapter.config import SERVICE_NAME, KafkaSettings

logger = get_logger("bus.producer")


class WarehouseNotificationPublisher:
    def __init__(self, settings: KafkaSettings, producer: Optional[AIOKafkaProducer] = None):
        self.settings = settings
        self._producer = producer
        self._connected = False

    async def start(self) -> None:
        if self._producer is None:
            self._producer = AIOKafkaProducer(
                bootstrap_servers=",".join(self.settings.bootstrap_servers),
                client_id=self.settings.client_id,
                enable_idempotence=True,
            )
        await self._producer.start()
        self._connected = True
        logger.info("Kafka producer connected")

    async def stop(self) -> None:
        if self._producer is None:
            return
        try:
            await self._producer.stop()
        except KafkaError as e:
            logger.error(f"Error disconnecting Kafka producer: {e}")
        self._producer = None
        if self._connected:
            self._connected = False
            logger.info("Kafka producer disconnected")

    @property
    def connected(self) -> bool:
        return self._connected

    async def send_warehouse_notification(self, event_type: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Publish ``payload`` keyed by its ``orderId``; report instead of raising."""
        if not self._connected:
            logger.warning(f"Kafka producer not connected, dropping {event_type} notification")
            return {"success": False, "error": "Producer not connected"}

        key = payload.get("orderId")
        try:
            metadata = await self._producer.send_and_wait(
                self.settings.notifications_topic,
                value=json.dumps(payload).encode("utf-8"),
                key=str(key).encode("utf-8") if key is not None else None,
                headers=[
                    ("eventType", event_type.encode("utf-8")),
                    ("source", SERVICE_NAME.encode("utf-8")),
                ],
            )
        except KafkaError as e:
            logger.error(f"Error sending {event_type} notification: {e}")
            return {"success": False, "error": str(e)}

        logger.info(f"Sent {event_type} to {self.settings.notifications_topic} for order {key}")
        return {"success": True, "partition": metadata.partition, "offset": metadata.offset}

    async def notify_order_reached_warehouse(
        self,
        order_id: str,
        order_number: Optional[str],
        tracking_number: Optional[str],
        warehouse_location: str,
        received_by: str = SERVICE_NAME,
    ) -> Dict[str, Any]:
        notification = OrderReachedWarehouse(
            order_id=order_id,
            warehouse=WarehouseInfo(location=warehouse_location, received_by=received_by),
            order_number=order_number,
            tracking_number=tracking_number,
            warehouse_location=warehouse_location,
            received_by=received_by,
        )
        return await self.send_warehouse_notification(
            notification.event_type, notification.model_dump(by_alias=True)
        )
