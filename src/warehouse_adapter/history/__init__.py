# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

from warehouse_adapter.history.models import HistoryEntry, HistoryResult
from warehouse_adapter.history.store import MessageHistoryStore

__all__ = [
    "HistoryEntry",
    "HistoryResult",
    "MessageHistoryStore",
]
