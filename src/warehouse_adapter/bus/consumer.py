# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Kafka consumer feeding the event router."""

from typing import Optional

from aiokafka import AIOKafkaConsumer
from aiokafka.errors import KafkaError

from warehouse_adapter.bus.router import EventRouter
from warehouse_adapter.common.logging import get_logger
from warehouse_adapter.config import KafkaSettings

logger = get_logger("bus.consumer")


class KafkaEventConsumer:
    """Consume order topics and route each message before fetching the next.

    Messages are awaited one by one, so processing is sequential within a
    partition and across partitions. Offsets are committed automatically by
    the client; failed messages are logged by the router and not redelivered.
    """

    def __init__(self, settings: KafkaSettings, router: EventRouter, consumer: Optional[AIOKafkaConsumer] = None):
        self.settings = settings
        self.router = router
        self._consumer = consumer
        self._connected = False

    def _build_consumer(self) -> AIOKafkaConsumer:
        return AIOKafkaConsumer(
            *self.settings.consumed_topics,
            bootstrap_servers=",".join(self.settings.bootstrap_servers),
            group_id=self.settings.group_id,
            client_id=self.settings.client_id,
            auto_offset_reset="latest",
            session_timeout_ms=30000,
            heartbeat_interval_ms=3000,
        )

    async def start(self) -> None:
        if self._consumer is None:
            self._consumer = self._build_consumer()
        await self._consumer.start()
        self._connected = True
        logger.info(f"Kafka consumer connected, subscribed to topics: {', '.join(self.settings.consumed_topics)}")

    async def run(self) -> None:
        """Consume until stopped or cancelled."""
        if not self._connected:
            await self.start()
        try:
            async for message in self._consumer:
                logger.debug(
                    f"Received Kafka message topic={message.topic} partition={message.partition} "
                    f"offset={message.offset}"
                )
                await self.router.route(message.topic, message.value)
        except KafkaError as e:
            logger.error(f"Kafka consumer stopped on error: {e}")
            raise
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Close the client, including one whose start failed."""
        if self._consumer is None:
            return
        try:
            await self._consumer.stop()
        except KafkaError as e:
            logger.error(f"Error disconnecting Kafka consumer: {e}")
        self._consumer = None
        if self._connected:
            self._connected = False
            logger.info("Kafka consumer disconnected")

    def health(self) -> dict:
        return {
            "connected": self._connected,
            "topics": list(self.settings.consumed_topics),
            "groupId": self.settings.group_id,
        }
