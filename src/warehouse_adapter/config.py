# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Adapter configuration from environment variables.

Environment Variables:
    PORT: HTTP port of the adapter API (default: 5004)
    ENABLE_KAFKA: Consume/produce on Kafka ("true"/"false", default: "true")
    KAFKA_BROKER: Comma-separated bootstrap servers (default: localhost:9092)
    KAFKA_GROUP_ID: Consumer group (default: warehouse-adapter-group)
    KAFKA_CLIENT_ID: Client id (default: warehouse-adapter-service)

    WMS_TRANSPORT: "simulated" or "tcp" (default: simulated)
    WMS_HOST / WMS_PORT: WMS TCP peer (default: localhost:9999)
    WMS_TIMEOUT: Per-attempt acknowledgement timeout in ms (default: 5000)
    WMS_RETRY_ATTEMPTS: Attempts per message (default: 3)
    WMS_RETRY_DELAY: Delay between attempts in ms (default: 2000)
    WMS_PROCESSING_DELAY: Modeled WMS processing time before reconciliation in ms (default: 2000)
    WMS_SIMULATED_SUCCESS_RATE: Success probability of the simulated peer (default: 0.9)
    WAREHOUSE_LOCATION: Location reported to WMS and order system (default: Main Warehouse)

    ORDER_SERVICE_URL: Order system base URL (default: http://localhost:5003)
    ORDER_SERVICE_TIMEOUT: Order system request timeout in seconds (default: 10)

    HISTORY_RETENTION_HOURS: Retention used by the periodic sweep (default: 72)
    HISTORY_CLEANUP_INTERVAL_HOURS: Sweep period (default: 6)

    LOG_LEVEL_DEBUG: Enable debug logging (default: false)
    LOG_FILE: Optional log file path
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

from warehouse_adapter.common.logging import get_logger

load_dotenv()  # Automatically loads from `.env` or `.env.local`

logger = get_logger("config")

SERVICE_NAME = "warehouse-adapter-service"
SERVICE_VERSION = "1.0.0"

ORDER_EVENTS_TOPIC = "order-events"
ORDER_STATUS_EVENTS_TOPIC = "order-status-events"
WAREHOUSE_NOTIFICATIONS_TOPIC = "warehouse-notifications"


@dataclass(frozen=True)
class KafkaSettings:
    """Bus connection settings."""
    enabled: bool
    bootstrap_servers: Tuple[str, ...]
    group_id: str
    client_id: str
    consumed_topics: Tuple[str, ...] = (ORDER_EVENTS_TOPIC, ORDER_STATUS_EVENTS_TOPIC)
    notifications_topic: str = WAREHOUSE_NOTIFICATIONS_TOPIC


@dataclass(frozen=True)
class WmsSettings:
    """WMS peer and transport reliability settings."""
    transport: str
    host: str
    port: int
    timeout_seconds: float
    retry_attempts: int
    retry_delay_seconds: float
    processing_delay_seconds: float
    simulated_success_rate: float
    warehouse_location: str


@dataclass(frozen=True)
class OrderServiceSettings:
    base_url: str
    timeout_seconds: float


@dataclass(frozen=True)
class Settings:
    """Combined adapter configuration."""
    port: int
    kafka: KafkaSettings
    wms: WmsSettings
    order_service: OrderServiceSettings
    history_retention_hours: int
    history_cleanup_interval_hours: float
    debug: bool
    log_file: Optional[str]


def _parse_bool(value: str, default: bool = True) -> bool:
    """Parse a boolean from environment variable string."""
    if not value:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_int(value: str, default: int) -> int:
    """Parse an integer from environment variable string."""
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer value '{value}', using default {default}")
        return default


def _parse_float(value: str, default: float) -> float:
    """Parse a float from environment variable string."""
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid numeric value '{value}', using default {default}")
        return default


def _parse_servers(value: str) -> Tuple[str, ...]:
    servers = tuple(s.strip() for s in value.split(",") if s.strip())
    return servers or ("localhost:9092",)


def load_settings() -> Settings:
    """Load adapter configuration from environment variables.

    Returns:
        Settings with all values populated from env vars or defaults.
    """
    transport = os.getenv("WMS_TRANSPORT", "simulated").lower()
    if transport not in ("simulated", "tcp"):
        logger.warning(
            f"Invalid WMS_TRANSPORT '{transport}', valid options: ['simulated', 'tcp']. "
            f"Using default 'simulated'"
        )
        transport = "simulated"

    kafka = KafkaSettings(
        enabled=_parse_bool(os.getenv("ENABLE_KAFKA", "true")),
        bootstrap_servers=_parse_servers(os.getenv("KAFKA_BROKER", "localhost:9092")),
        group_id=os.getenv("KAFKA_GROUP_ID", "warehouse-adapter-group"),
        client_id=os.getenv("KAFKA_CLIENT_ID", SERVICE_NAME),
    )

    wms = WmsSettings(
        transport=transport,
        host=os.getenv("WMS_HOST", "localhost"),
        port=_parse_int(os.getenv("WMS_PORT", ""), 9999),
        timeout_seconds=_parse_int(os.getenv("WMS_TIMEOUT", ""), 5000) / 1000,
        retry_attempts=max(1, _parse_int(os.getenv("WMS_RETRY_ATTEMPTS", ""), 3)),
        retry_delay_seconds=_parse_int(os.getenv("WMS_RETRY_DELAY", ""), 2000) / 1000,
        processing_delay_seconds=_parse_int(os.getenv("WMS_PROCESSING_DELAY", ""), 2000) / 1000,
        simulated_success_rate=_parse_float(os.getenv("WMS_SIMULATED_SUCCESS_RATE", ""), 0.9),
        warehouse_location=os.getenv("WAREHOUSE_LOCATION", "Main Warehouse"),
    )

    order_service = OrderServiceSettings(
        base_url=os.getenv("ORDER_SERVICE_URL", "http://localhost:5003").rstrip("/"),
        timeout_seconds=_parse_float(os.getenv("ORDER_SERVICE_TIMEOUT", ""), 10.0),
    )

    settings = Settings(
        port=_parse_int(os.getenv("PORT", ""), 5004),
        kafka=kafka,
        wms=wms,
        order_service=order_service,
        history_retention_hours=_parse_int(os.getenv("HISTORY_RETENTION_HOURS", ""), 72),
        history_cleanup_interval_hours=_parse_float(os.getenv("HISTORY_CLEANUP_INTERVAL_HOURS", ""), 6.0),
        debug=_parse_bool(os.getenv("LOG_LEVEL_DEBUG", "false"), default=False),
        log_file=os.getenv("LOG_FILE") or None,
    )

    logger.info(
        f"Settings loaded: wms_transport={wms.transport}, wms={wms.host}:{wms.port}, "
        f"kafka_enabled={kafka.enabled}, order_service={order_service.base_url}"
    )

    return settings
