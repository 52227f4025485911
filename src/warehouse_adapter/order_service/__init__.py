# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

from warehouse_adapter.order_service.client import OrderServiceClient, StatusUpdate

__all__ = [
    "OrderServiceClient",
    "StatusUpdate",
]
