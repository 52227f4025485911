# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for warehouse_adapter.protocol.formatter."""

from warehouse_adapter.bus.models import WarehouseEvent
from warehouse_adapter.protocol.formatter import (
    DELIMITER,
    format_health_check,
    format_order_cancelled,
    format_order_created,
    format_order_status_update,
    format_warehouse_assignment,
)


def _event(**overrides) -> WarehouseEvent:
    payload = {
        "eventType": "ORDER_CREATED",
        "orderId": "O1",
        "orderNumber": "ORD-1",
        "trackingNumber": "TRK-1",
    }
    payload.update(overrides)
    return WarehouseEvent.model_validate(payload)


class TestOrderCreated:
    def test_all_fields(self):
        event = _event(senderName="Alice", receiverName="Bob", orderStatus="Pending")
        assert format_order_created(event) == "NEW_ORDER|ORD-1|TRK-1|Alice|Bob|Pending"

    def test_missing_fields_keep_field_count(self):
        message = format_order_created(_event())
        assert message == "NEW_ORDER|ORD-1|TRK-1|||"
        assert len(message.split(DELIMITER)) == 6


class TestOrderStatusUpdate:
    def test_all_fields(self):
        event = _event(
            eventType="ORDER_STATUS_UPDATED",
            previousStatus="Pickedup_from_client",
            newStatus="Inwarehouse",
            location="Dock 4",
        )
        assert (
            format_order_status_update(event)
            == "ORDER_UPDATE|ORD-1|TRK-1|Pickedup_from_client|Inwarehouse|Dock 4"
        )

    def test_sentinels_for_missing_previous_status_and_location(self):
        event = _event(eventType="ORDER_STATUS_UPDATED", newStatus="Selected_for_pickup")
        assert format_order_status_update(event) == "ORDER_UPDATE|ORD-1|TRK-1|NONE|Selected_for_pickup|UNKNOWN"


class TestOrderCancelled:
    def test_reason(self):
        event = _event(eventType="ORDER_CANCELLED", cancelReason="Customer request")
        assert format_order_cancelled(event) == "ORDER_CANCEL|ORD-1|TRK-1|Customer request"

    def test_default_reason(self):
        message = format_order_cancelled(_event(eventType="ORDER_CANCELLED"))
        assert message.split(DELIMITER)[3] == "CANCELLED"


def test_warehouse_assignment():
    assert (
        format_warehouse_assignment("ORD-1", "TRK-1", "Main Warehouse")
        == "WAREHOUSE_ASSIGN|ORD-1|TRK-1|Main Warehouse"
    )


def test_health_check():
    assert format_health_check() == "TEST_CONNECTION|HEALTH_CHECK"


def test_numeric_ids_are_rendered_as_strings():
    event = WarehouseEvent.model_validate(
        {"eventType": "ORDER_CREATED", "orderId": 7, "orderNumber": 1001, "trackingNumber": "T"}
    )
    assert event.order_id == "7"
    assert format_order_created(event).startswith("NEW_ORDER|1001|T|")
