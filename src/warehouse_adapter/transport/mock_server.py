# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Line-oriented mock WMS for local development and tests.

Every received line is recorded and answered with ``ACK|<TYPE>|<orderNumber>``
unless a custom responder is supplied. ``reply_delay`` holds the connection
open before answering, so a WMS that never acknowledges in time can be
played. Run it with ``python -m warehouse_adapter.transport.mock_server``.
"""

import asyncio
import os
from typing import Callable, List, Optional, Set

from warehouse_adapter.common.logging import configure_logger, get_logger
from warehouse_adapter.protocol.formatter import DELIMITER

logger = get_logger("transport.mock_server")


def acknowledge(message: str) -> str:
  parts = message.split(DELIMITER)
  return DELIMITER.join(["ACK", *parts[:2]])


class MockWmsServer:
  def __init__(
      self,
      host: str = "127.0.0.1",
      port: int = 0,
      responder: Callable[[str], Optional[str]] = acknowledge,
      reply_delay: float = 0.0,
  ) -> None:
    self.host = host
    self.port = port
    self.responder = responder
    self.reply_delay = reply_delay
    self.received: List[str] = []
    self._server: Optional[asyncio.AbstractServer] = None
    self._clients: Set[asyncio.Task] = set()

  async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    addr = writer.get_extra_info("peername")
    task = asyncio.current_task()
    self._clients.add(task)
    try:
      data = await reader.readline()
      if not data:
        return
      message = data.decode("ascii", errors="replace").strip()
      self.received.append(message)
      logger.info(f"Mock WMS received from {addr}: {message}")

      if self.reply_delay:
        await asyncio.sleep(self.reply_delay)
      response = self.responder(message)
      # None means hang up without answering
      if response is not None:
        writer.write((response + "\n").encode("ascii"))
        await writer.drain()
    finally:
      self._clients.discard(task)
      writer.close()
      try:
        await writer.wait_closed()
      except OSError:
        pass

  async def start(self) -> int:
    """Start listening and return the bound port."""
    self._server = await asyncio.start_server(self._handle_client, self.host, self.port)
    self.port = self._server.sockets[0].getsockname()[1]
    logger.info(f"Mock WMS listening on {self.host}:{self.port}")
    return self.port

  async def stop(self) -> None:
    if self._server is not None:
      self._server.close()
      # connections still waiting out reply_delay
      for task in list(self._clients):
        task.cancel()
      await self._server.wait_closed()
      self._server = None

  async def __aenter__(self) -> "MockWmsServer":
    await self.start()
    return self

  async def __aexit__(self, exc_type, exc, tb) -> None:
    await self.stop()

  async def serve_forever(self) -> None:
    if self._server is None:
      await self.start()
    async with self._server:
      await self._server.serve_forever()


if __name__ == "__main__":
  configure_logger(debug=True)
  server = MockWmsServer(host=os.getenv("WMS_HOST", "0.0.0.0"), port=int(os.getenv("WMS_PORT", "9999")))
  try:
    asyncio.run(server.serve_forever())
  except KeyboardInterrupt:
    print("\nShutting down gracefully on keyboard interrupt.")
