# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

import abc
from typing import Callable, Optional, Sequence
from .models import DeliveryRecord

# Receives the current record and returns its replacement
RecordUpdate = Callable[[DeliveryRecord], DeliveryRecord]

class DeliveryStore(abc.ABC):
  @abc.abstractmethod
  async def create(self, record: DeliveryRecord) -> bool:
    """Insert ``record``; return False when one already exists for its order."""
  @abc.abstractmethod
  async def get(self, order_id: str) -> Optional[DeliveryRecord]: ...
  @abc.abstractmethod
  async def update(self, order_id: str, fn: RecordUpdate) -> Optional[DeliveryRecord]:
    """Apply ``fn`` to the stored record atomically; None if there is no record."""
  @abc.abstractmethod
  async def list_records(self, delivery_person_id: Optional[str] = None) -> Sequence[DeliveryRecord]: ...
