# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

import abc


class WmsTransport(abc.ABC):
  """One request/acknowledgement exchange with the WMS peer.

  Implementations open a session, write a single line, wait for a single
  acknowledgement line and close. Any failure is raised; retrying is the
  caller's job.
  """

  name: str = "wms"

  @abc.abstractmethod
  async def exchange(self, message: str) -> str:
    """Send ``message`` and return the acknowledgement line."""
    ...

  def describe(self) -> dict:
    return {"transport": self.name}
