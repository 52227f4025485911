# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

from warehouse_adapter.config import WmsSettings
from warehouse_adapter.transport.interface import WmsTransport
from warehouse_adapter.transport.manager import TransportManager, TransportOutcome
from warehouse_adapter.transport.simulated import SimulatedWmsTransport
from warehouse_adapter.transport.tcp import TcpWmsTransport


def create_transport(settings: WmsSettings) -> WmsTransport:
    """Build the WMS transport selected by ``WMS_TRANSPORT``."""
    if settings.transport == "tcp":
        return TcpWmsTransport(settings.host, settings.port, timeout=settings.timeout_seconds)
    return SimulatedWmsTransport(success_rate=settings.simulated_success_rate)


__all__ = [
    "SimulatedWmsTransport",
    "TcpWmsTransport",
    "TransportManager",
    "TransportOutcome",
    "WmsTransport",
    "create_transport",
]
