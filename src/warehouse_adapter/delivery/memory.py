# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

import asyncio
from typing import Optional, Sequence
from .interface import DeliveryStore, RecordUpdate
from .models import DeliveryRecord

class InMemoryDeliveryStore(DeliveryStore):
  def __init__(self) -> None:
    self._data: dict[str, DeliveryRecord] = {}
    self._lock = asyncio.Lock()

  async def create(self, record: DeliveryRecord) -> bool:
    async with self._lock:
      if record.order_id in self._data:
        return False
      self._data[record.order_id] = record
      return True

  async def get(self, order_id: str) -> Optional[DeliveryRecord]:
    async with self._lock:
      return self._data.get(order_id)

  async def update(self, order_id: str, fn: RecordUpdate) -> Optional[DeliveryRecord]:
    async with self._lock:
      current = self._data.get(order_id)
      if current is None:
        return None
      # fn may raise; the stored record is left untouched in that case
      updated = fn(current)
      self._data[order_id] = updated
      return updated

  async def list_records(self, delivery_person_id: Optional[str] = None) -> Sequence[DeliveryRecord]:
    async with self._lock:
      records = list(self._data.values())
    if delivery_person_id is None:
      return records
    return [r for r in records if r.delivery_person_id == delivery_person_id]
