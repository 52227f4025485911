# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

from warehouse_adapter.protocol.formatter import (
    DELIMITER,
    MessageType,
    format_health_check,
    format_order_cancelled,
    format_order_created,
    format_order_status_update,
    format_warehouse_assignment,
)

__all__ = [
    "DELIMITER",
    "MessageType",
    "format_health_check",
    "format_order_cancelled",
    "format_order_created",
    "format_order_status_update",
    "format_warehouse_assignment",
]
