# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Turns order lifecycle events into WMS messages.

Every event is formatted, sent through the transport manager and recorded in
the message history, whether or not the WMS acknowledged it. Two order
statuses carry extra warehouse work after a successful send:

* ``Inwarehouse``: publish ORDER_REACHED_WAREHOUSE, wait the modeled WMS
  processing time, then confirm the status back into the order system.
* ``Pickedup_from_warehouse``: send a WAREHOUSE_ASSIGN message.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from warehouse_adapter.bus.models import (
    INWAREHOUSE,
    PICKEDUP_FROM_WAREHOUSE,
    WAREHOUSE_STATUSES,
    EventType,
    WarehouseEvent,
)
from warehouse_adapter.bus.producer import WarehouseNotificationPublisher
from warehouse_adapter.bus.router import EventRouter
from warehouse_adapter.common.logging import get_logger
from warehouse_adapter.config import ORDER_EVENTS_TOPIC, ORDER_STATUS_EVENTS_TOPIC
from warehouse_adapter.errors import ReconciliationFailure, TransportFailure
from warehouse_adapter.history.models import HistoryResult
from warehouse_adapter.history.store import MessageHistoryStore
from warehouse_adapter.order_service.client import OrderServiceClient, StatusUpdate
from warehouse_adapter.protocol import formatter
from warehouse_adapter.transport.manager import TransportManager, TransportOutcome

logger = get_logger("handlers.warehouse")

STATUS_CHANGED_BY = "warehouse-adapter"
ARRIVAL_CHANGE_REASON = "Confirmed arrival at warehouse by WMS"
RECEIVED_BY = "Warehouse Staff"


class WarehouseEventHandler:
    def __init__(
        self,
        transport_manager: TransportManager,
        publisher: WarehouseNotificationPublisher,
        order_client: OrderServiceClient,
        history: MessageHistoryStore,
        warehouse_location: str = "Main Warehouse",
        processing_delay: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.transport_manager = transport_manager
        self.publisher = publisher
        self.order_client = order_client
        self.history = history
        self.warehouse_location = warehouse_location
        self.processing_delay = processing_delay
        self._sleep = sleep

    async def _send_and_record(
        self,
        key: str,
        event: WarehouseEvent,
        message: str,
        correlation_id: str,
    ) -> Optional[TransportOutcome]:
        """Send one message; return None when every attempt failed."""
        logger.debug(f"Formatted WMS message: {message}")
        try:
            outcome = await self.transport_manager.send(message, correlation_id)
        except TransportFailure as e:
            logger.error(
                f"Failed to send {event.event_type} for order {event.order_id} to WMS "
                f"after {e.attempts} attempt(s), manual intervention required: {e.error}"
            )
            await self.history.record(
                key, event.order_id, event.event_type, message,
                HistoryResult(success=False, attempts=e.attempts, error=e.error),
            )
            return None

        await self.history.record(
            key, event.order_id, event.event_type, message,
            HistoryResult(success=True, response=outcome.response, attempts=outcome.attempts),
        )
        logger.info(
            f"{event.event_type} for order {event.order_id} ({event.order_number}) "
            f"sent to WMS, response {outcome.response}"
        )
        return outcome

    async def handle_order_created(self, event: WarehouseEvent) -> bool:
        logger.info(f"Processing ORDER_CREATED event: {event.order_id}")
        message = formatter.format_order_created(event)
        outcome = await self._send_and_record(
            event.order_id, event, message, f"order_created_{event.order_id}"
        )
        return outcome is not None

    async def handle_order_status_updated(self, event: WarehouseEvent) -> bool:
        logger.info(
            f"Processing ORDER_STATUS_UPDATED event: {event.order_id} "
            f"({event.previous_status} -> {event.new_status})"
        )
        message = formatter.format_order_status_update(event)
        stamp = int(self.history.now().timestamp() * 1000)
        outcome = await self._send_and_record(
            f"{event.order_id}_{event.new_status}", event, message,
            f"status_update_{event.order_id}_{stamp}",
        )
        if outcome is None:
            return False

        if self.is_warehouse_status(event.new_status):
            await self.handle_warehouse_status_update(event)
        return True

    async def handle_order_cancelled(self, event: WarehouseEvent) -> bool:
        logger.info(f"Processing ORDER_CANCELLED event: {event.order_id}")
        message = formatter.format_order_cancelled(event)
        outcome = await self._send_and_record(
            f"cancelled_{event.order_id}", event, message, f"order_cancelled_{event.order_id}"
        )
        return outcome is not None

    async def handle_warehouse_status_update(self, event: WarehouseEvent) -> None:
        if event.new_status == INWAREHOUSE:
            await self._handle_arrival(event)
        elif event.new_status == PICKEDUP_FROM_WAREHOUSE:
            await self._handle_pickup(event)

    async def _handle_arrival(self, event: WarehouseEvent) -> None:
        logger.info(f"Order {event.order_id} arrived at warehouse, notifying order system")
        result = await self.publisher.notify_order_reached_warehouse(
            event.order_id,
            event.order_number,
            event.tracking_number,
            self.warehouse_location,
            received_by=RECEIVED_BY,
        )
        if not result.get("success"):
            logger.error(f"Failed to publish ORDER_REACHED_WAREHOUSE for {event.order_id}: {result.get('error')}")

        await self._sleep(self.processing_delay)

        update = StatusUpdate(
            new_status=INWAREHOUSE,
            status_changed_by=STATUS_CHANGED_BY,
            change_reason=ARRIVAL_CHANGE_REASON,
            location=self.warehouse_location,
        )
        try:
            await self.order_client.update_order_status(event.order_id, update)
        except Exception as e:
            failure = ReconciliationFailure(event.order_id, INWAREHOUSE, e)
            logger.error(f"{failure}; manual intervention required")
            return
        logger.info(f"Order {event.order_id} confirmed as {INWAREHOUSE} in the order system")

    async def _handle_pickup(self, event: WarehouseEvent) -> None:
        logger.info(f"Order {event.order_id} picked up from warehouse, notifying WMS")
        message = formatter.format_warehouse_assignment(
            event.order_number, event.tracking_number, self.warehouse_location
        )
        try:
            outcome = await self.transport_manager.send(message, f"warehouse_assign_{event.order_id}")
        except TransportFailure as e:
            logger.error(f"WAREHOUSE_ASSIGN for order {event.order_id} failed, manual intervention required: {e.error}")
            await self.history.record(
                f"warehouse_assign_{event.order_id}", event.order_id,
                formatter.MessageType.WAREHOUSE_ASSIGN.value, message,
                HistoryResult(success=False, attempts=e.attempts, error=e.error),
            )
            return
        await self.history.record(
            f"warehouse_assign_{event.order_id}", event.order_id,
            formatter.MessageType.WAREHOUSE_ASSIGN.value, message,
            HistoryResult(success=True, response=outcome.response, attempts=outcome.attempts),
        )

    @staticmethod
    def is_warehouse_status(status: Optional[str]) -> bool:
        return status in WAREHOUSE_STATUSES

    async def test_wms_connection(self) -> bool:
        logger.info("Testing WMS connection...")
        try:
            await self.transport_manager.send(formatter.format_health_check(), "test_connection")
        except TransportFailure as e:
            logger.error(f"WMS connection test failed: {e.error}")
            return False
        logger.info("WMS connection test successful")
        return True


def build_router(handler: WarehouseEventHandler) -> EventRouter:
    router = EventRouter()
    router.register(ORDER_EVENTS_TOPIC, EventType.ORDER_CREATED.value, handler.handle_order_created)
    router.register(ORDER_EVENTS_TOPIC, EventType.ORDER_CANCELLED.value, handler.handle_order_cancelled)
    router.register(ORDER_STATUS_EVENTS_TOPIC, EventType.ORDER_STATUS_UPDATED.value, handler.handle_order_status_updated)
    return router
