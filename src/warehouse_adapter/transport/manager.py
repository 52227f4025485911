# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Bounded-retry delivery of wire messages to the WMS."""

import asyncio
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from warehouse_adapter.common.logging import get_logger
from warehouse_adapter.errors import TransportFailure
from warehouse_adapter.transport.interface import WmsTransport

logger = get_logger("transport.manager")

ACK_RECEIVED = "ACK_RECEIVED"


class TransportOutcome(BaseModel):
  """Result of a message the WMS acknowledged."""

  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

  success: bool = True
  correlation_id: str
  attempts: int
  response: str = ACK_RECEIVED
  timestamp: datetime


class TransportManager:
  """Send one message at a time to the WMS, retrying with a fixed delay.

  The WMS is a point-to-point peer that cannot be assumed to tolerate
  concurrent sessions, so ``send`` holds a lock for its whole retry loop.
  """

  def __init__(
      self,
      transport: WmsTransport,
      max_attempts: int = 3,
      retry_delay: float = 2.0,
      sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
      clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
  ) -> None:
    if max_attempts < 1:
      raise ValueError("max_attempts must be at least 1")
    self.transport = transport
    self.max_attempts = max_attempts
    self.retry_delay = retry_delay
    self._sleep = sleep
    self._clock = clock
    self._lock = asyncio.Lock()

  async def send(self, message: str, correlation_id: Optional[str] = None) -> TransportOutcome:
    """Deliver ``message``; raise TransportFailure once every attempt failed."""
    correlation_id = correlation_id or str(int(self._clock().timestamp() * 1000))
    started_at = self._clock()

    async with self._lock:
      last_error = "no attempt made"
      for attempt in range(1, self.max_attempts + 1):
        logger.info(f"Sending WMS message (attempt {attempt}/{self.max_attempts}): {message}")
        try:
          await self.transport.exchange(message)
        except Exception as e:
          last_error = str(e) or type(e).__name__
          logger.warning(f"WMS send attempt {attempt} failed for {correlation_id}: {last_error}")
          if attempt < self.max_attempts:
            logger.info(f"Retrying in {self.retry_delay:.1f}s...")
            await self._sleep(self.retry_delay)
          continue

        logger.info(f"WMS acknowledged {correlation_id} after {attempt} attempt(s)")
        return TransportOutcome(
          correlation_id=correlation_id,
          attempts=attempt,
          timestamp=started_at,
        )

    logger.error(f"All WMS send attempts failed for {correlation_id}: {message}")
    raise TransportFailure(last_error, correlation_id, self.max_attempts)
