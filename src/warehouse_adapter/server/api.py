# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Operator HTTP API.

Every response uses the ``{success, message, data}`` envelope. The API only
reads adapter state, apart from the manual WMS send, the history sweep and
the delivery endpoints.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from warehouse_adapter.bus.models import utc_timestamp
from warehouse_adapter.common.logging import get_logger
from warehouse_adapter.config import SERVICE_NAME, SERVICE_VERSION
from warehouse_adapter.errors import (
  AlreadyTerminal,
  DeliveryError,
  DeliveryNotFound,
  DuplicateDelivery,
  InvalidTransition,
  TransportFailure,
)
from warehouse_adapter.server.services import AdapterServices

logger = get_logger("server.api")

warehouse_router = APIRouter(prefix="/api/warehouse", tags=["warehouse"])
delivery_router = APIRouter(prefix="/api/deliveries", tags=["deliveries"])
root_router = APIRouter()

# a century; larger retention values cannot be turned into a cutoff date
MAX_RETENTION_HOURS = 24 * 365 * 100


def envelope(message: str, data: Any = None, success: bool = True) -> dict:
  return {"success": success, "message": message, "data": data}


def services_of(request: Request) -> AdapterServices:
  return request.app.state.services


class CamelModel(BaseModel):
  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ManualMessageRequest(CamelModel):
  message: str = Field(min_length=1, max_length=1000)
  message_id: Optional[str] = None


class AssignDeliveryRequest(CamelModel):
  order_id: str = Field(min_length=1)
  delivery_person_id: str = Field(min_length=1)
  delivery_person_name: str = Field(min_length=1)


class StatusChangeRequest(CamelModel):
  status: str


class CancelRequest(CamelModel):
  reason: Optional[str] = None


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


def _service_info(services: AdapterServices) -> dict:
  return {
    "service": SERVICE_NAME,
    "version": SERVICE_VERSION,
    "description": "Bridges order events from Kafka to the warehouse management system",
    "consumedTopics": list(services.settings.kafka.consumed_topics),
    "producedTopics": [services.settings.kafka.notifications_topic],
    "wms": services.transport_manager.transport.describe(),
    "orderService": {"baseUrl": services.settings.order_service.base_url},
    "endpoints": {
      "health": "GET /api/warehouse/health",
      "status": "GET /api/warehouse/status",
      "history": "GET /api/warehouse/history",
      "statistics": "GET /api/warehouse/statistics",
      "testWms": "GET /api/warehouse/test/wms",
      "testOrderService": "GET /api/warehouse/test/order-service",
      "testSend": "POST /api/warehouse/test/send",
      "clearHistory": "DELETE /api/warehouse/history",
      "deliveries": "/api/deliveries",
    },
  }


@root_router.get("/health")
async def service_health(request: Request):
  services = services_of(request)
  return envelope(
    "Warehouse adapter service is running",
    {"service": SERVICE_NAME, "status": "running", "uptime": services.uptime(), "timestamp": utc_timestamp()},
  )


@root_router.get("/info")
async def service_info(request: Request):
  return envelope("Service information", _service_info(services_of(request)))


# ---------------------------------------------------------------------------
# Warehouse
# ---------------------------------------------------------------------------


@warehouse_router.get("/health")
async def warehouse_health(request: Request):
  """
  Deep health check: Kafka consumer, order system and a WMS round trip.

  Returns 503 when any dependency is unavailable. A disabled Kafka
  integration does not count as a failure.
  """
  services = services_of(request)
  kafka = services.kafka_health()
  kafka_ok = kafka["connected"] or not kafka["enabled"]
  order_ok = await services.order_client.test_connection()
  wms_ok = await services.handler.test_wms_connection()

  healthy = kafka_ok and order_ok and wms_ok
  body = envelope(
    "Warehouse adapter service is healthy" if healthy else "Warehouse adapter service is unhealthy",
    {
      "service": SERVICE_NAME,
      "status": "healthy" if healthy else "unhealthy",
      "checks": {"kafka": kafka_ok, "orderService": order_ok, "wms": wms_ok},
      "kafka": kafka,
      "timestamp": utc_timestamp(),
    },
    success=healthy,
  )
  return JSONResponse(status_code=200 if healthy else 503, content=body)


@warehouse_router.get("/status")
async def warehouse_status(request: Request):
  services = services_of(request)
  return envelope(
    "Warehouse adapter service status",
    {
      "service": SERVICE_NAME,
      "status": "running",
      "kafka": services.kafka_health(),
      "wms": services.transport_manager.transport.describe(),
      "orderService": {"baseUrl": services.settings.order_service.base_url},
      "statistics": await services.history.get_statistics(),
      "uptime": services.uptime(),
      "timestamp": utc_timestamp(),
    },
  )


@warehouse_router.get("/info")
async def warehouse_info(request: Request):
  return envelope("Service information", _service_info(services_of(request)))


@warehouse_router.get("/history")
async def message_history(
    request: Request,
    order_id: Optional[str] = Query(None, alias="orderId"),
    limit: int = Query(50, ge=1, le=1000),
):
  entries = await services_of(request).history.get_history(order_id=order_id, limit=limit)
  messages = [e.to_dict() for e in reversed(entries)]
  return envelope(
    "Message history retrieved successfully",
    {
      "messages": messages,
      "total": len(messages),
      "filteredBy": f"orderId: {order_id}" if order_id else "all orders",
      "timestamp": utc_timestamp(),
    },
  )


@warehouse_router.delete("/history")
async def clear_history(
    request: Request,
    hours_to_keep: float = Query(24, alias="hoursToKeep", ge=0, le=MAX_RETENTION_HOURS),
):
  history = services_of(request).history
  cleared_before = history.cutoff(hours_to_keep)
  removed = await history.clear_old_history(hours_to_keep)
  return envelope(
    f"Message history older than {hours_to_keep:g} hours cleared successfully",
    {"removed": removed, "clearedBefore": cleared_before.isoformat() if cleared_before else None, "timestamp": utc_timestamp()},
  )


@warehouse_router.get("/statistics")
async def message_statistics(request: Request):
  stats = await services_of(request).history.get_statistics()
  return envelope("Statistics retrieved successfully", {**stats, "timestamp": utc_timestamp()})


@warehouse_router.get("/test/wms")
async def test_wms(request: Request):
  services = services_of(request)
  ok = await services.handler.test_wms_connection()
  return envelope(
    "WMS connection test successful" if ok else "WMS connection test failed",
    {**services.transport_manager.transport.describe(), "testResult": ok, "timestamp": utc_timestamp()},
    success=ok,
  )


@warehouse_router.get("/test/order-service")
async def test_order_service(request: Request):
  services = services_of(request)
  ok = await services.order_client.test_connection()
  return envelope(
    "Order Service connection test successful" if ok else "Order Service connection test failed",
    {"orderServiceUrl": services.settings.order_service.base_url, "testResult": ok, "timestamp": utc_timestamp()},
    success=ok,
  )


@warehouse_router.post("/test/send")
async def send_test_message(request: Request, body: ManualMessageRequest):
  """Send an operator-supplied line to the WMS. Not recorded in history."""
  services = services_of(request)
  correlation_id = body.message_id or f"manual_test_{int(services.history.now().timestamp() * 1000)}"
  try:
    outcome = await services.transport_manager.send(body.message, correlation_id)
  except TransportFailure as e:
    return JSONResponse(
      status_code=502,
      content=envelope("Failed to send test message", {"sentMessage": body.message, "result": e.to_dict()}, success=False),
    )
  return envelope(
    "Test message sent successfully",
    {"sentMessage": body.message, "result": outcome.model_dump(mode="json", by_alias=True), "timestamp": utc_timestamp()},
  )


# ---------------------------------------------------------------------------
# Deliveries
# ---------------------------------------------------------------------------


@delivery_router.post("", status_code=201)
async def assign_delivery(request: Request, body: AssignDeliveryRequest):
  record = await services_of(request).deliveries.assign(
    body.order_id, body.delivery_person_id, body.delivery_person_name
  )
  return envelope("Delivery assigned successfully", record.to_dict())


@delivery_router.get("/statistics")
async def delivery_statistics(
    request: Request,
    delivery_person_id: Optional[str] = Query(None, alias="deliveryPersonId"),
):
  stats = await services_of(request).deliveries.statistics(delivery_person_id)
  return envelope("Delivery statistics retrieved successfully", stats)


@delivery_router.get("/person/{delivery_person_id}")
async def deliveries_for_person(request: Request, delivery_person_id: str):
  records = await services_of(request).deliveries.list_for_person(delivery_person_id)
  return envelope("Deliveries retrieved successfully", [r.to_dict() for r in records])


@delivery_router.get("/{order_id}")
async def get_delivery(request: Request, order_id: str):
  record = await services_of(request).deliveries.get(order_id)
  return envelope("Delivery retrieved successfully", record.to_dict())


@delivery_router.patch("/{order_id}/status")
async def change_delivery_status(request: Request, order_id: str, body: StatusChangeRequest):
  record = await services_of(request).deliveries.transition(order_id, body.status)
  return envelope(f"Delivery status updated to {record.status.value}", record.to_dict())


@delivery_router.post("/{order_id}/cancel")
async def cancel_delivery(request: Request, order_id: str, body: Optional[CancelRequest] = Body(None)):
  reason = body.reason if body else None
  record = await services_of(request).deliveries.cancel(order_id, reason)
  return envelope("Delivery cancelled successfully", record.to_dict())


_DELIVERY_ERROR_STATUS = {
  DeliveryNotFound: 404,
  DuplicateDelivery: 409,
  AlreadyTerminal: 409,
  InvalidTransition: 400,
}


async def _delivery_error_handler(request: Request, exc: DeliveryError) -> JSONResponse:
  status_code = _DELIVERY_ERROR_STATUS.get(type(exc), 400)
  logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
  return JSONResponse(status_code=status_code, content=envelope(str(exc), success=False))


def create_app(services: AdapterServices) -> FastAPI:
  app = FastAPI(title="Warehouse Adapter Service", version=SERVICE_VERSION)
  app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
  )
  app.state.services = services
  app.add_exception_handler(DeliveryError, _delivery_error_handler)
  app.include_router(root_router)
  app.include_router(warehouse_router)
  app.include_router(delivery_router)
  return app
