# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Exception taxonomy for the warehouse adapter."""

from typing import Any, Dict, Optional


class WarehouseAdapterError(Exception):
    """Base class for every error raised by the adapter."""


# ---------------------------------------------------------------------------
# Bus / routing
# ---------------------------------------------------------------------------


class ParseError(WarehouseAdapterError):
    """A bus message that can never be turned into a valid envelope."""

    def __init__(self, reason: str, raw: Any = None):
        super().__init__(reason)
        self.reason = reason
        self.raw = raw


class UnhandledEventType(WarehouseAdapterError):
    """No handler is registered for this (topic, eventType) pair."""

    def __init__(self, topic: str, event_type: str):
        super().__init__(f"No handler for {event_type} on topic {topic}")
        self.topic = topic
        self.event_type = event_type


# ---------------------------------------------------------------------------
# WMS transport
# ---------------------------------------------------------------------------


class WmsProtocolError(WarehouseAdapterError):
    """The WMS answered with something other than an acknowledgement."""

    def __init__(self, response: str):
        super().__init__(f"Invalid WMS response: {response}")
        self.response = response


class TransportFailure(WarehouseAdapterError):
    """All attempts to deliver a message to the WMS failed."""

    def __init__(self, error: str, correlation_id: str, attempts: int):
        super().__init__(f"WMS delivery failed after {attempts} attempt(s): {error}")
        self.error = error
        self.correlation_id = correlation_id
        self.attempts = attempts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": self.error,
            "correlationId": self.correlation_id,
            "attempts": self.attempts,
        }


# ---------------------------------------------------------------------------
# Order system
# ---------------------------------------------------------------------------


class OrderServiceError(WarehouseAdapterError):
    """The order system answered but reported the call as unsuccessful."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ReconciliationFailure(WarehouseAdapterError):
    """Confirming a warehouse status back into the order system failed."""

    def __init__(self, order_id: str, new_status: str, cause: Exception):
        super().__init__(f"Could not confirm {new_status} for order {order_id}: {cause}")
        self.order_id = order_id
        self.new_status = new_status
        self.cause = cause


# ---------------------------------------------------------------------------
# Delivery status engine
# ---------------------------------------------------------------------------


class DeliveryError(WarehouseAdapterError):
    """Base class for delivery record domain errors."""


class DeliveryNotFound(DeliveryError):
    def __init__(self, order_id: str):
        super().__init__(f"Delivery not found for order {order_id}")
        self.order_id = order_id


class DuplicateDelivery(DeliveryError):
    def __init__(self, order_id: str):
        super().__init__(f"Delivery record already exists for order {order_id}")
        self.order_id = order_id


class InvalidTransition(DeliveryError):
    def __init__(self, order_id: str, current: str, requested: str):
        super().__init__(f"Invalid status transition from {current} to {requested}")
        self.order_id = order_id
        self.current = current
        self.requested = requested


class AlreadyTerminal(DeliveryError):
    def __init__(self, order_id: str, status: str):
        if status == "Delivered":
            message = "Cannot cancel delivered delivery"
        else:
            message = "Delivery is already cancelled"
        super().__init__(message)
        self.order_id = order_id
        self.status = status
