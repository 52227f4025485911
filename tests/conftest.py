# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Shared pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from warehouse_adapter.config import (
    KafkaSettings,
    OrderServiceSettings,
    Settings,
    WmsSettings,
)
from warehouse_adapter.transport.interface import WmsTransport


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: Optional[datetime] = None):
        self.current = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class RecordingSleep:
    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class ScriptedTransport(WmsTransport):
    """Fails the first ``failures`` exchanges, then acknowledges."""

    name = "scripted"

    def __init__(self, failures: int = 0, error: Exception = None):
        self.failures = failures
        self.error = error or ConnectionRefusedError("WMS connection failed")
        self.sent: List[str] = []
        self.calls = 0

    async def exchange(self, message: str) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        self.sent.append(message)
        return "ACK_RECEIVED"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def settings():
    return Settings(
        port=5004,
        kafka=KafkaSettings(
            enabled=False,
            bootstrap_servers=("localhost:9092",),
            group_id="warehouse-adapter-group",
            client_id="warehouse-adapter-service",
        ),
        wms=WmsSettings(
            transport="simulated",
            host="localhost",
            port=9999,
            timeout_seconds=5.0,
            retry_attempts=3,
            retry_delay_seconds=0.0,
            processing_delay_seconds=0.0,
            simulated_success_rate=1.0,
            warehouse_location="Main Warehouse",
        ),
        order_service=OrderServiceSettings(base_url="http://orders.test", timeout_seconds=10.0),
        history_retention_hours=72,
        history_cleanup_interval_hours=6,
        debug=False,
        log_file=None,
    )


@pytest.fixture
def scripted_transport():
    """Factory for transports that fail a fixed number of times before acknowledging."""
    return ScriptedTransport
