# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

from warehouse_adapter.handlers.warehouse_event_handler import WarehouseEventHandler, build_router

__all__ = [
    "WarehouseEventHandler",
    "build_router",
]
