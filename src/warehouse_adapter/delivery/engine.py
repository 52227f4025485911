# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Delivery record lifecycle.

A delivery record is created in ``Picking`` when an order is assigned to a
delivery agent and then moves forward only:

    Picking    -> PickedUp, Delivering, Delivered, Cancelled
    PickedUp   -> Delivering, Delivered, Cancelled
    Delivering -> Delivered, Cancelled

Delivered and Cancelled are terminal. ``picked_up_at`` and ``delivered_at``
are stamped in the same store update that changes the status.
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional, Union

from warehouse_adapter.common.logging import get_logger
from warehouse_adapter.delivery.interface import DeliveryStore
from warehouse_adapter.delivery.memory import InMemoryDeliveryStore
from warehouse_adapter.delivery.models import (
  TERMINAL,
  DeliveryRecord,
  DeliveryStatus,
  can_transition,
)
from warehouse_adapter.errors import (
  AlreadyTerminal,
  DeliveryNotFound,
  DuplicateDelivery,
  InvalidTransition,
)

logger = get_logger("delivery")


def _utcnow() -> datetime:
  return datetime.now(timezone.utc)


class DeliveryStatusEngine:
  def __init__(self, store: Optional[DeliveryStore] = None, clock: Callable[[], datetime] = _utcnow) -> None:
    self.store = store or InMemoryDeliveryStore()
    self._clock = clock

  async def assign(self, order_id: str, delivery_person_id: str, delivery_person_name: str) -> DeliveryRecord:
    record = DeliveryRecord(
      order_id=order_id,
      delivery_person_id=delivery_person_id,
      delivery_person_name=delivery_person_name,
      created_at=self._clock(),
    )
    if not await self.store.create(record):
      raise DuplicateDelivery(order_id)
    logger.info(f"Delivery for order {order_id} assigned to {delivery_person_name} ({delivery_person_id})")
    return record

  async def get(self, order_id: str) -> DeliveryRecord:
    record = await self.store.get(order_id)
    if record is None:
      raise DeliveryNotFound(order_id)
    return record

  async def transition(self, order_id: str, new_status: Union[DeliveryStatus, str]) -> DeliveryRecord:
    """Move a delivery to ``new_status``.

    Raises:
      DeliveryNotFound: no record for ``order_id``
      InvalidTransition: the move is not allowed from the current status
    """
    target = self._coerce(order_id, new_status)
    return await self._apply(order_id, target)

  async def cancel(self, order_id: str, reason: Optional[str] = None) -> DeliveryRecord:
    def check(current: DeliveryRecord) -> None:
      if current.status in TERMINAL:
        raise AlreadyTerminal(order_id, current.status.value)

    return await self._apply(order_id, DeliveryStatus.CANCELLED, reason=reason, precheck=check)

  async def list_for_person(self, delivery_person_id: str) -> List[DeliveryRecord]:
    records = await self.store.list_records(delivery_person_id)
    # most recently picked up first, never-picked-up last
    return sorted(
      records,
      key=lambda r: r.picked_up_at or datetime.min.replace(tzinfo=timezone.utc),
      reverse=True,
    )

  async def statistics(self, delivery_person_id: Optional[str] = None) -> dict:
    records = await self.store.list_records(delivery_person_id)
    counts = {status.value: 0 for status in DeliveryStatus}
    durations = []
    for r in records:
      counts[r.status.value] += 1
      if r.picked_up_at is not None and r.delivered_at is not None:
        durations.append((r.delivered_at - r.picked_up_at).total_seconds() / 3600)

    average = round(sum(durations) / len(durations), 2) if durations else 0
    return {
      "totalDeliveries": len(records),
      "byStatus": counts,
      "averageDeliveryTimeHours": average,
    }

  async def _apply(
      self,
      order_id: str,
      target: DeliveryStatus,
      reason: Optional[str] = None,
      precheck: Optional[Callable[[DeliveryRecord], None]] = None,
  ) -> DeliveryRecord:
    now = self._clock()

    def update(current: DeliveryRecord) -> DeliveryRecord:
      if precheck is not None:
        precheck(current)
      if not can_transition(current.status, target):
        raise InvalidTransition(order_id, current.status.value, target.value)
      return current.with_status(target, now, reason=reason)

    updated = await self.store.update(order_id, update)
    if updated is None:
      raise DeliveryNotFound(order_id)
    logger.info(f"Delivery for order {order_id} is now {updated.status.value}")
    return updated

  @staticmethod
  def _coerce(order_id: str, status: Union[DeliveryStatus, str]) -> DeliveryStatus:
    if isinstance(status, DeliveryStatus):
      return status
    try:
      return DeliveryStatus(status)
    except ValueError:
      # unknown names can never be reached from any status
      raise InvalidTransition(order_id, "unknown", str(status)) from None
