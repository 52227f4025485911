# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""In-memory record of every message exchanged with the WMS.

The event handler is the only writer; the HTTP API reads. All access goes
through an ``asyncio.Lock`` so readers never observe a half-applied sweep.
"""

import asyncio
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, List, Optional

from warehouse_adapter.common.logging import get_logger
from warehouse_adapter.history.models import HistoryEntry, HistoryResult

logger = get_logger("history")


def _utcnow() -> datetime:
  return datetime.now(timezone.utc)


class MessageHistoryStore:
  def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
    # keyed by history key; insertion order is chronological
    self._entries: dict[str, HistoryEntry] = {}
    self._lock = asyncio.Lock()
    self._clock = clock

  def now(self) -> datetime:
    return self._clock()

  async def record(
      self,
      key: str,
      order_id: str,
      message_type: str,
      message: str,
      result: HistoryResult,
  ) -> HistoryEntry:
    entry = HistoryEntry(
      key=key,
      order_id=order_id,
      type=message_type,
      message=message,
      timestamp=self._clock(),
      result=result,
    )
    async with self._lock:
      # a re-sent key moves to the end with its latest outcome
      self._entries.pop(key, None)
      self._entries[key] = entry
    return entry

  async def get_history(self, order_id: Optional[str] = None, limit: Optional[int] = None) -> List[HistoryEntry]:
    """Entries oldest first, optionally restricted to one order and the newest ``limit``."""
    async with self._lock:
      entries = list(self._entries.values())
    if order_id is not None:
      entries = [e for e in entries if e.order_id == order_id]
    if limit is not None:
      entries = entries[-limit:] if limit > 0 else []
    return entries

  async def get_statistics(self) -> dict:
    now = self._clock()
    async with self._lock:
      entries = list(self._entries.values())

    total = len(entries)
    recent = sum(1 for e in entries if now - e.timestamp <= timedelta(hours=1))
    by_type = Counter(e.type for e in entries)
    successes = sum(1 for e in entries if e.result.success)

    success_rate = f"{successes / total * 100:.2f}%" if total else "0%"
    last = max((e.timestamp for e in entries), default=None)
    return {
      "totalMessages": total,
      "recentMessages": recent,
      "messagesByType": dict(by_type),
      "successRate": success_rate,
      "lastMessageTime": last.isoformat() if last else None,
    }

  def cutoff(self, hours_to_keep: float) -> Optional[datetime]:
    """Oldest timestamp kept by a sweep, or None when nothing would be removed."""
    try:
      return self._clock() - timedelta(hours=hours_to_keep)
    except (OverflowError, ValueError):
      return None

  async def clear_old_history(self, hours_to_keep: float = 24) -> int:
    cutoff = self.cutoff(hours_to_keep)
    if cutoff is None:
      return 0
    async with self._lock:
      stale = [k for k, e in self._entries.items() if e.timestamp < cutoff]
      for k in stale:
        del self._entries[k]
    if stale:
      logger.info(f"Cleared {len(stale)} history entries older than {hours_to_keep}h")
    return len(stale)

  async def periodic_cleanup(
      self,
      retention_hours: float = 72,
      interval_hours: float = 6,
      sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
  ) -> None:
    """Sweep old entries forever; cancel the task to stop it."""
    while True:
      await sleep(interval_hours * 3600)
      try:
        await self.clear_old_history(retention_hours)
      except Exception as e:
        logger.error(f"History cleanup failed: {e}")
