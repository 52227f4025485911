# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Socket transport to a real WMS over TCP."""

import asyncio

from warehouse_adapter.common.logging import get_logger
from warehouse_adapter.errors import WmsProtocolError
from warehouse_adapter.transport.interface import WmsTransport

logger = get_logger("transport.tcp")

ACK_PREFIXES = ("ACK", "OK")


def is_acknowledgement(response: str) -> bool:
  return response.startswith(ACK_PREFIXES)


def encode_line(message: str) -> bytes:
  """ASCII-encode one protocol line; characters the WMS cannot take become ``?``."""
  if not message.isascii():
    logger.warning(f"Replacing non-ASCII characters in WMS message: {message}")
  return (message + "\n").encode("ascii", errors="replace")


class TcpWmsTransport(WmsTransport):
  """Open a connection per message, write one line, read one line, close."""

  name = "tcp"

  def __init__(self, host: str, port: int, timeout: float = 5.0) -> None:
    self.host = host
    self.port = port
    self.timeout = timeout

  async def exchange(self, message: str) -> str:
    reader, writer = await asyncio.wait_for(
      asyncio.open_connection(self.host, self.port), timeout=self.timeout
    )
    logger.debug(f"TCP connected to WMS at {self.host}:{self.port}")
    try:
      writer.write(encode_line(message))
      await writer.drain()

      data = await asyncio.wait_for(reader.readline(), timeout=self.timeout)
      if not data:
        raise ConnectionError("Connection closed without response")
      response = data.decode("ascii", errors="replace").strip()
      logger.debug(f"WMS response: {response}")

      if not is_acknowledgement(response):
        raise WmsProtocolError(response)
      return response
    finally:
      writer.close()
      try:
        await writer.wait_closed()
      except OSError as e:
        logger.debug(f"Error while closing WMS connection: {e}")

  def describe(self) -> dict:
    return {"transport": self.name, "host": self.host, "port": self.port, "connectionType": "TCP/IP"}
