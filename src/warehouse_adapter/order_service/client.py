# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""HTTP client for the order system."""

from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from warehouse_adapter.common.logging import get_logger
from warehouse_adapter.config import SERVICE_NAME, SERVICE_VERSION
from warehouse_adapter.errors import OrderServiceError

logger = get_logger("order_service")


class StatusUpdate(BaseModel):
    """Body of ``PATCH /orders/{order_id}/status``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    new_status: str
    status_changed_by: str
    change_reason: str
    location: Optional[str] = None


class OrderServiceClient:
    """Thin async wrapper around the order system REST API.

    Calls are made once; retrying is left to the caller. A shared
    ``httpx.AsyncClient`` may be injected (tests pass one backed by
    ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5003",
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers={
                "Content-Type": "application/json",
                "User-Agent": f"{SERVICE_NAME}/{SERVICE_VERSION}",
            },
        )

    async def update_order_status(self, order_id: str, update: StatusUpdate) -> Dict[str, Any]:
        """Change an order's status.

        Raises:
            httpx.HTTPStatusError: the order system answered with a non-2xx status
            OrderServiceError: the body reported ``success: false``
        """
        logger.info(f"Updating order {order_id} status to {update.new_status}")
        response = await self._client.patch(
            f"/orders/{order_id}/status",
            json=update.model_dump(by_alias=True, exclude_none=True),
        )
        response.raise_for_status()

        body = response.json()
        if not body.get("success", False):
            raise OrderServiceError(
                body.get("message") or "Failed to update order status",
                status_code=response.status_code,
            )
        logger.info(f"Order {order_id} status updated to {update.new_status}")
        return body

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        response = await self._client.get(f"/orders/order/{order_id}")
        response.raise_for_status()

        body = response.json()
        if not body.get("success", False):
            raise OrderServiceError(
                body.get("message") or "Failed to get order details",
                status_code=response.status_code,
            )
        return body.get("data") or {}

    async def test_connection(self) -> bool:
        try:
            response = await self._client.get("/health")
        except httpx.HTTPError as e:
            logger.error(f"Order service connection test failed: {e}")
            return False
        if response.status_code != 200:
            logger.warning(f"Order service health returned {response.status_code}")
            return False
        return True

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "OrderServiceClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
