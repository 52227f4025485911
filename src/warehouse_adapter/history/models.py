# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True, frozen=True)
class HistoryResult:
  success: bool
  response: Optional[str] = None
  attempts: int = 0
  error: Optional[str] = None

  def to_dict(self) -> dict:
    return {
      "success": self.success,
      "response": self.response,
      "attempts": self.attempts,
      "error": self.error,
    }


@dataclass(slots=True, frozen=True)
class HistoryEntry:
  key: str
  order_id: str
  type: str
  message: str
  timestamp: datetime
  result: HistoryResult

  def to_dict(self) -> dict:
    return {
      "key": self.key,
      "orderId": self.order_id,
      "type": self.type,
      "message": self.message,
      "timestamp": self.timestamp.isoformat(),
      "result": self.result.to_dict(),
    }
