# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Legacy WMS wire format.

Every message is one ASCII line of pipe-delimited fields whose first field
names the message type. The number of fields per type is fixed: optional
values are replaced by sentinel tokens, never dropped. Field values are not
escaped, so a value containing ``|`` corrupts the message.

    NEW_ORDER|OrderNumber|TrackingNumber|Sender|Receiver|Status
    ORDER_UPDATE|OrderNumber|TrackingNumber|PrevStatus|NewStatus|Location
    ORDER_CANCEL|OrderNumber|TrackingNumber|Reason
    WAREHOUSE_ASSIGN|OrderNumber|TrackingNumber|Location
"""

from enum import Enum
from typing import Optional

from warehouse_adapter.bus.models import WarehouseEvent

DELIMITER = "|"

NO_PREVIOUS_STATUS = "NONE"
UNKNOWN_LOCATION = "UNKNOWN"
DEFAULT_CANCEL_REASON = "CANCELLED"


class MessageType(str, Enum):
  NEW_ORDER = "NEW_ORDER"
  ORDER_UPDATE = "ORDER_UPDATE"
  ORDER_CANCEL = "ORDER_CANCEL"
  WAREHOUSE_ASSIGN = "WAREHOUSE_ASSIGN"
  TEST_CONNECTION = "TEST_CONNECTION"


def _join(message_type: MessageType, *fields: Optional[str]) -> str:
  return DELIMITER.join([message_type.value, *("" if f is None else str(f) for f in fields)])


def format_order_created(event: WarehouseEvent) -> str:
  return _join(
    MessageType.NEW_ORDER,
    event.order_number,
    event.tracking_number,
    event.sender_name,
    event.receiver_name,
    event.order_status,
  )


def format_order_status_update(event: WarehouseEvent) -> str:
  return _join(
    MessageType.ORDER_UPDATE,
    event.order_number,
    event.tracking_number,
    event.previous_status or NO_PREVIOUS_STATUS,
    event.new_status,
    event.location or UNKNOWN_LOCATION,
  )


def format_order_cancelled(event: WarehouseEvent) -> str:
  return _join(
    MessageType.ORDER_CANCEL,
    event.order_number,
    event.tracking_number,
    event.cancel_reason or DEFAULT_CANCEL_REASON,
  )


def format_warehouse_assignment(order_number: str, tracking_number: str, warehouse_location: str) -> str:
  return _join(MessageType.WAREHOUSE_ASSIGN, order_number, tracking_number, warehouse_location)


def format_health_check() -> str:
  return _join(MessageType.TEST_CONNECTION, "HEALTH_CHECK")
