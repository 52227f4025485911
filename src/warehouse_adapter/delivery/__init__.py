# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

from warehouse_adapter.delivery.engine import DeliveryStatusEngine
from warehouse_adapter.delivery.interface import DeliveryStore
from warehouse_adapter.delivery.memory import InMemoryDeliveryStore
from warehouse_adapter.delivery.models import (
    TERMINAL,
    VALID_TRANSITIONS,
    DeliveryRecord,
    DeliveryStatus,
)

__all__ = [
    "DeliveryRecord",
    "DeliveryStatus",
    "DeliveryStatusEngine",
    "DeliveryStore",
    "InMemoryDeliveryStore",
    "TERMINAL",
    "VALID_TRANSITIONS",
]
