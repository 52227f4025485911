# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Envelope and notification payloads carried on the bus."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EventType(str, Enum):
    ORDER_CREATED = "ORDER_CREATED"
    ORDER_STATUS_UPDATED = "ORDER_STATUS_UPDATED"
    ORDER_CANCELLED = "ORDER_CANCELLED"


# Order statuses that trigger the warehouse reconciliation path
INWAREHOUSE = "Inwarehouse"
PICKEDUP_FROM_WAREHOUSE = "Pickedup_from_warehouse"
WAREHOUSE_STATUSES = frozenset({INWAREHOUSE, PICKEDUP_FROM_WAREHOUSE})


def utc_timestamp() -> str:
    """Return current UTC timestamp in ISO 8601 (milliseconds)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


class WarehouseEvent(BaseModel):
    """Inbound order lifecycle envelope.

    Field names follow the camelCase JSON produced by the order system;
    numeric identifiers are accepted and kept as strings.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    event_type: str
    order_id: str
    order_number: str
    tracking_number: str

    # ORDER_CREATED
    sender_name: Optional[str] = None
    receiver_name: Optional[str] = None
    order_status: Optional[str] = None

    # ORDER_STATUS_UPDATED
    previous_status: Optional[str] = None
    new_status: Optional[str] = None
    location: Optional[str] = None

    # ORDER_CANCELLED
    cancel_reason: Optional[str] = None

    timestamp: Optional[str] = None


class WarehouseInfo(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    location: str
    received_by: str
    received_at: str = Field(default_factory=utc_timestamp)


class OrderReachedWarehouse(BaseModel):
    """Outbound notification published once an order is in the warehouse."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    event_type: str = "ORDER_REACHED_WAREHOUSE"
    order_id: str
    timestamp: str = Field(default_factory=utc_timestamp)
    source: str = "warehouse-adapter-service"
    status: str = "inwarehouse"
    message: str = "Order reached at warehouse"
    warehouse: WarehouseInfo
    order_number: Optional[str] = None
    tracking_number: Optional[str] = None
    warehouse_location: Optional[str] = None
    received_by: Optional[str] = None
