# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Simulated WMS peer for development and testing.

Answers every message with ``ACK_RECEIVED`` after a random latency, failing a
configurable share of the attempts as if the connection had been refused.
"""

import asyncio
import random
from typing import Awaitable, Callable, Optional

from warehouse_adapter.common.logging import get_logger
from warehouse_adapter.transport.interface import WmsTransport

logger = get_logger("transport.simulated")

ACK_RECEIVED = "ACK_RECEIVED"


class SimulatedWmsTransport(WmsTransport):
  name = "simulated"

  def __init__(
      self,
      success_rate: float = 0.9,
      min_latency: float = 0.5,
      max_latency: float = 1.5,
      rng: Optional[random.Random] = None,
      sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
  ) -> None:
    self.success_rate = success_rate
    self.min_latency = min_latency
    self.max_latency = max_latency
    self._rng = rng or random.Random()
    self._sleep = sleep
    self.sent: list[str] = []

  def configure(self, success_rate: float = 0.9) -> None:
    """Change the simulated success probability at runtime."""
    self.success_rate = success_rate

  async def exchange(self, message: str) -> str:
    await self._sleep(self._rng.uniform(self.min_latency, self.max_latency))
    if self._rng.random() >= self.success_rate:
      logger.debug("Simulated WMS refused connection")
      raise ConnectionRefusedError("WMS connection failed")
    self.sent.append(message)
    logger.debug(f"Simulated WMS acknowledged: {message}")
    return ACK_RECEIVED

  def describe(self) -> dict:
    return {"transport": self.name, "successRate": self.success_rate}
