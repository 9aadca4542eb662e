"""Tests for payload conversion.

Run with: pytest tests/test_serializers.py -v
"""

import json
from datetime import date, time
from decimal import Decimal

import pytest
from rest_framework.exceptions import ValidationError
from rest_framework.renderers import JSONRenderer

from planner.domain import EventId, EventStatus, EventType, SaleMode
from planner.domain.value_objects import EquipmentType
from planner.handlers.serializers import (
    parse_contract_document,
    parse_event,
    parse_events,
    render_changes,
    render_draft,
    render_event,
)


class TestParseEvent:
    """Tests for building domain events from payloads."""

    def test_parses_full_payload(self, event_payload):
        """Given a complete payload, returns a typed Event."""
        event = parse_event(event_payload())

        assert event.id == EventId("evt-100")
        assert event.type is EventType.FESTIVAL
        assert event.status is EventStatus.PLANNING
        assert event.date == date(2025, 7, 7)
        assert event.main_contact.name == "Leo Park"

    def test_parses_nested_documents(self, event_payload):
        """Box offices and assigned staff keep their ids and nested values."""
        event = parse_event(event_payload())

        (office,) = event.ticketing.box_offices
        assert event.ticketing.sale_mode is SaleMode.HYBRID
        assert office.id == "bo-1"
        assert office.schedule.operating_hours.start == time(9, 0)
        assert office.staff.ticket_sellers == 3
        assert event.access_control.equipment.type is EquipmentType.WE_RENT
        assert event.access_control.equipment.cost == Decimal("250")
        assert event.access_control.staff.assigned[0].email == "ana@example.com"

    def test_totals_are_recomputed(self, event_payload):
        """Stored totals that disagree with the inputs are replaced."""
        payload = event_payload()
        payload["salesProjection"]["totalRevenue"] = 1
        payload["salesProjection"]["projectedProfit"] = 1

        projection = parse_event(payload).sales_projection

        assert projection.total_revenue == Decimal("5000")
        assert projection.total_costs == Decimal("1400")
        assert projection.projected_profit == Decimal("3600")

    def test_unknown_keys_are_ignored(self, event_payload):
        """Keys the client does not model are dropped."""
        payload = event_payload(budgetNotes="n/a")
        payload["salesProjection"]["onlineTickets"] = 10

        assert parse_event(payload).name == "Summer Fest"

    def test_null_amounts_count_as_zero(self, event_payload):
        """A null money or count value reads as zero."""
        payload = event_payload()
        payload["salesProjection"]["costs"]["fuel"] = None
        payload["salesProjection"]["estimatedTickets"] = None

        projection = parse_event(payload).sales_projection

        assert projection.costs.fuel == Decimal("0")
        assert projection.total_revenue == Decimal("0")

    def test_null_equipment_cost_stays_unset(self, event_payload):
        """A null equipment cost means no quote yet, not a zero cost."""
        payload = event_payload()
        payload["accessControl"]["equipment"]["cost"] = None

        assert parse_event(payload).access_control.equipment.cost is None

    def test_zero_equipment_cost_is_kept(self, event_payload):
        """An equipment cost of 0 is read as zero."""
        payload = event_payload()
        payload["accessControl"]["equipment"]["cost"] = 0

        assert parse_event(payload).access_control.equipment.cost == Decimal("0")

    def test_minimal_payload_uses_defaults(self):
        """Optional documents are None and scalars take their defaults."""
        event = parse_event({"id": "evt-1", "name": "Meetup", "type": "other", "date": "2025-03-01"})

        assert event.sales_projection is None
        assert event.ticketing is None
        assert event.status is EventStatus.DRAFT
        assert event.change_logs == ()

    def test_change_log_field_name(self, event_payload):
        """The wire key `field` maps to field_name."""
        payload = event_payload(
            changeLogs=[
                {
                    "id": "log-1",
                    "eventId": "evt-100",
                    "action": "update",
                    "field": "venue",
                    "oldValue": "Hall A",
                    "newValue": "Hall B",
                    "timestamp": "2025-02-01T10:00:00Z",
                    "userId": "u-1",
                    "userName": "Maria Lopez",
                }
            ]
        )

        (entry,) = parse_event(payload).change_logs

        assert entry.field_name == "venue"
        assert entry.new_value == "Hall B"

    def test_rejects_unknown_event_type(self, event_payload):
        """parse_event raises ValidationError for a type outside the enum."""
        with pytest.raises(ValidationError):
            parse_event(event_payload(type="wedding"))

    def test_rejects_negative_cost(self, event_payload):
        """parse_event raises ValidationError for a negative cost."""
        payload = event_payload()
        payload["salesProjection"]["costs"]["fuel"] = -1

        with pytest.raises(ValidationError):
            parse_event(payload)

    def test_rejects_missing_id(self, event_payload):
        """A payload without an id is not an Event."""
        payload = event_payload()
        del payload["id"]

        with pytest.raises(ValidationError):
            parse_event(payload)

    def test_parse_events_requires_list(self, event_payload):
        """parse_events raises ValidationError for a single object."""
        with pytest.raises(ValidationError):
            parse_events(event_payload())

    def test_parse_contract_document(self):
        """Contract upload responses become ContractDocument."""
        document = parse_contract_document(
            {"message": "ok", "documentUrl": "/uploads/contracts/a.pdf", "documentName": "a.pdf"}
        )

        assert document.document_url == "/uploads/contracts/a.pdf"
        assert document.document_name == "a.pdf"


class TestRender:
    """Tests for rendering domain objects as payloads."""

    def test_render_draft_uses_wire_names(self, event_payload):
        """Draft payloads are camelCase and omit server-owned fields."""
        draft = parse_event(event_payload()).to_draft()

        payload = render_draft(draft)

        assert payload["salesProjection"]["averageTicketPrice"] == 50
        assert payload["accessControl"]["staff"]["assigned"][0]["id"] == "st-1"
        assert payload["ticketing"]["boxOffices"][0]["schedule"]["operatingHours"]["start"] == "09:00"
        assert "id" not in payload
        assert "createdAt" not in payload

    def test_rendered_money_is_a_json_number(self, event_payload):
        """Decimal amounts render as JSON numbers."""
        body = JSONRenderer().render(render_event(parse_event(event_payload())))

        projection = json.loads(body)["salesProjection"]
        assert projection["totalRevenue"] == 5000
        assert projection["costs"]["accessControl"] == 400

    def test_render_event_round_trips(self, event_payload):
        """A rendered event parses back to an equal event."""
        event = parse_event(event_payload())

        assert parse_event(json.loads(JSONRenderer().render(render_event(event)))) == event

    def test_render_changes_maps_field_names(self, event_payload):
        """Changes keyed by attribute name render under wire names."""
        event = parse_event(event_payload())

        payload = render_changes({"sales_projection": event.sales_projection, "status": EventStatus.ACTIVE})

        assert set(payload) == {"salesProjection", "status"}
        assert payload["status"] == "active"
        assert payload["salesProjection"]["estimatedTickets"] == 100

    def test_render_changes_keeps_nulls(self):
        """A cleared field renders as null."""
        assert render_changes({"main_contact": None}) == {"mainContact": None}

    def test_render_changes_rejects_unknown_field(self):
        """render_changes raises ValueError for an unknown attribute."""
        with pytest.raises(ValueError):
            render_changes({"budget": 10})
