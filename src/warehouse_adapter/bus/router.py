# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Dispatch of raw bus messages to typed event handlers."""

import json
from typing import Any, Awaitable, Callable, Dict, Tuple, Union

from pydantic import ValidationError

from warehouse_adapter.bus.models import WarehouseEvent
from warehouse_adapter.common.logging import get_logger
from warehouse_adapter.errors import ParseError, UnhandledEventType

logger = get_logger("bus.router")

EventHandler = Callable[[WarehouseEvent], Awaitable[Any]]
RawMessage = Union[bytes, str, Dict[str, Any]]


def parse_payload(raw: RawMessage) -> Dict[str, Any]:
    """Decode a bus message into a JSON object carrying an ``eventType``."""
    if isinstance(raw, dict):
        payload = raw
    else:
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise ParseError(f"Invalid JSON: {e}", raw) from e

    if not isinstance(payload, dict):
        raise ParseError("Message is not a JSON object", raw)
    if not payload.get("eventType"):
        raise ParseError("Missing eventType", raw)
    return payload


class EventRouter:
    """Routes (topic, eventType) pairs to registered handlers.

    ``route`` never raises: parse failures, unknown event types and handler
    errors are logged and the message is dropped, so one bad message cannot
    stop the consumer.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Tuple[str, str], EventHandler] = {}

    def register(self, topic: str, event_type: str, handler: EventHandler) -> None:
        self._handlers[(topic, str(event_type))] = handler

    async def dispatch(self, topic: str, raw: RawMessage) -> Any:
        """Parse, validate and hand ``raw`` to its handler; errors propagate."""
        payload = parse_payload(raw)
        event_type = payload["eventType"]

        handler = self._handlers.get((topic, event_type))
        if handler is None:
            raise UnhandledEventType(topic, event_type)

        try:
            event = WarehouseEvent.model_validate(payload)
        except ValidationError as e:
            raise ParseError(f"Invalid {event_type} envelope: {e.error_count()} error(s)", raw) from e

        logger.info(f"Processing {event_type} for order {event.order_id} from {topic}")
        return await handler(event)

    async def route(self, topic: str, raw: RawMessage) -> bool:
        """Dispatch ``raw``; return True when a handler ran to completion."""
        try:
            await self.dispatch(topic, raw)
        except ParseError as e:
            logger.error(f"Dropping unparseable message on {topic}: {e.reason}")
            return False
        except UnhandledEventType as e:
            logger.warning(f"Dropping message: {e}")
            return False
        except Exception as e:
            logger.exception(f"Error processing message on {topic}: {e}")
            return False
        return True
