# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional


class DeliveryStatus(str, Enum):
  PICKING = "Picking"
  PICKED_UP = "PickedUp"
  DELIVERING = "Delivering"
  DELIVERED = "Delivered"
  CANCELLED = "Cancelled"


VALID_TRANSITIONS: dict[DeliveryStatus, frozenset[DeliveryStatus]] = {
  DeliveryStatus.PICKING: frozenset({
    DeliveryStatus.PICKED_UP,
    DeliveryStatus.DELIVERING,
    DeliveryStatus.DELIVERED,
    DeliveryStatus.CANCELLED,
  }),
  DeliveryStatus.PICKED_UP: frozenset({
    DeliveryStatus.DELIVERING,
    DeliveryStatus.DELIVERED,
    DeliveryStatus.CANCELLED,
  }),
  DeliveryStatus.DELIVERING: frozenset({DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED}),
  DeliveryStatus.DELIVERED: frozenset(),
  DeliveryStatus.CANCELLED: frozenset(),
}

TERMINAL = frozenset({DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED})


def can_transition(current: DeliveryStatus, new: DeliveryStatus) -> bool:
  return new in VALID_TRANSITIONS.get(current, frozenset())


@dataclass(slots=True, frozen=True)
class DeliveryRecord:
  order_id: str
  delivery_person_id: str
  delivery_person_name: str
  status: DeliveryStatus = DeliveryStatus.PICKING
  picked_up_at: Optional[datetime] = None
  delivered_at: Optional[datetime] = None
  cancel_reason: Optional[str] = None
  created_at: Optional[datetime] = field(default=None, compare=False)

  def with_status(self, status: DeliveryStatus, at: datetime, reason: Optional[str] = None) -> DeliveryRecord:
    """Return a copy moved to ``status`` with its side-effect timestamps set."""
    changes: dict = {"status": status}
    if status is DeliveryStatus.PICKED_UP and self.picked_up_at is None:
      changes["picked_up_at"] = at
    if status is DeliveryStatus.DELIVERED and self.delivered_at is None:
      changes["delivered_at"] = at
    if status is DeliveryStatus.CANCELLED:
      changes["cancel_reason"] = reason
    return replace(self, **changes)

  def to_dict(self) -> dict:
    return {
      "orderId": self.order_id,
      "deliveryPersonId": self.delivery_person_id,
      "deliveryPersonName": self.delivery_person_name,
      "status": self.status.value,
      "pickedUpAt": self.picked_up_at.isoformat() if self.picked_up_at else None,
      "deliveredAt": self.delivered_at.isoformat() if self.delivered_at else None,
      "cancelReason": self.cancel_reason,
      "createdAt": self.created_at.isoformat() if self.created_at else None,
    }
