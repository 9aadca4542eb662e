"""Serializers for transforming API payloads to domain models and back.

Field names follow the wire format (camelCase); `source` maps each one to
the domain attribute. Parsing validates the payload and builds frozen
domain objects through DomainSerializer.create; rendering reads attributes
straight off the dataclasses.

Derived sales totals are rendered but never parsed: they are recomputed
from the projection inputs on the way in.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from rest_framework import serializers

from planner.domain import (
    AccessControl,
    AccessEquipment,
    AccessStaff,
    BoxOffice,
    BoxOfficeSchedule,
    BoxOfficeStaff,
    CalendarIntegrations,
    ChangeLogEntry,
    Contact,
    Contract,
    ContractDocument,
    Costs,
    Event,
    EventDraft,
    ExperienceDetails,
    OperatingHours,
    PreviousExperience,
    RecurrenceConfig,
    SalesProjection,
    StaffMember,
    Ticketing,
)
from planner.domain.value_objects import (
    AccessMethod,
    ChangeLogAction,
    EquipmentType,
    EventStatus,
    EventType,
    InternetSource,
    RecurrenceFrequency,
    SaleMode,
)

ZERO = Decimal("0")


class EnumField(serializers.ChoiceField):
    """Choice field that reads and writes Enum members by value."""

    def __init__(self, enum_class, **kwargs) -> None:
        self.enum_class = enum_class
        super().__init__(choices=[(member.value, member.value) for member in enum_class], **kwargs)

    def to_internal_value(self, data):
        return self.enum_class(super().to_internal_value(data))

    def to_representation(self, value):
        if isinstance(value, self.enum_class):
            return value.value
        return super().to_representation(value)


class NullAsZeroMixin:
    """Read an explicit JSON null as zero."""

    zero: Any = 0

    def validate_empty_values(self, data):
        if data is None:
            return True, self.zero
        return super().validate_empty_values(data)


class CountField(NullAsZeroMixin, serializers.IntegerField):
    pass


class AmountField(serializers.DecimalField):
    """Unbounded decimal amount rendered as a JSON number."""

    def __init__(self, **kwargs) -> None:
        kwargs.setdefault("max_digits", None)
        kwargs.setdefault("decimal_places", None)
        kwargs.setdefault("coerce_to_string", False)
        super().__init__(**kwargs)


class MoneyField(NullAsZeroMixin, AmountField):
    zero = ZERO


class DomainSerializer(serializers.Serializer):
    """Serializer whose validated data builds a frozen domain object."""

    domain_class: type

    def create(self, validated_data):
        return self.build(validated_data)

    def build(self, data: Mapping[str, Any]) -> Any:
        values = {}
        for field in self.fields.values():
            if field.read_only or field.source not in data:
                continue
            value = data[field.source]
            if value is not None:
                value = self._build_value(field, value)
            values[field.source] = value
        return self.domain_class(**values)

    @staticmethod
    def _build_value(field, value):
        if isinstance(field, DomainSerializer):
            return field.build(value)
        if isinstance(field, serializers.ListSerializer):
            if isinstance(field.child, DomainSerializer):
                return tuple(field.child.build(item) for item in value)
            return tuple(value)
        if isinstance(field, serializers.ListField):
            return tuple(value)
        return value


class CostsSerializer(DomainSerializer):
    domain_class = Costs

    ticketing = MoneyField(min_value=ZERO, default=ZERO)
    accommodation = MoneyField(min_value=ZERO, default=ZERO)
    fuel = MoneyField(min_value=ZERO, default=ZERO)
    accessControl = MoneyField(source="access_control", min_value=ZERO, default=ZERO)


class SalesProjectionSerializer(DomainSerializer):
    domain_class = SalesProjection

    estimatedTickets = CountField(source="estimated_tickets", min_value=0, default=0)
    averageTicketPrice = MoneyField(source="average_ticket_price", min_value=ZERO, default=ZERO)
    costs = CostsSerializer(required=False)
    totalRevenue = MoneyField(source="total_revenue", read_only=True)
    totalCosts = MoneyField(source="total_costs", read_only=True)
    projectedProfit = MoneyField(source="projected_profit", read_only=True)

    def build(self, data: Mapping[str, Any]) -> SalesProjection:
        return super().build(data).with_totals()


class OperatingHoursSerializer(DomainSerializer):
    domain_class = OperatingHours

    start = serializers.TimeField(format="%H:%M", allow_null=True, required=False)
    end = serializers.TimeField(format="%H:%M", allow_null=True, required=False)


class BoxOfficeScheduleSerializer(DomainSerializer):
    domain_class = BoxOfficeSchedule

    startDate = serializers.DateField(source="start_date", allow_null=True, required=False)
    endDate = serializers.DateField(source="end_date", allow_null=True, required=False)
    operatingHours = OperatingHoursSerializer(source="operating_hours", required=False)


class BoxOfficeStaffSerializer(DomainSerializer):
    domain_class = BoxOfficeStaff

    ticketSellers = CountField(source="ticket_sellers", min_value=0, default=0)
    supervisors = CountField(min_value=0, default=0)


class BoxOfficeSerializer(DomainSerializer):
    domain_class = BoxOffice

    id = serializers.CharField(required=False)
    name = serializers.CharField(allow_blank=True)
    location = serializers.CharField(allow_blank=True, default="")
    schedule = BoxOfficeScheduleSerializer(required=False)
    staff = BoxOfficeStaffSerializer(required=False)


class TicketingSerializer(DomainSerializer):
    domain_class = Ticketing

    saleMode = EnumField(SaleMode, source="sale_mode", default=SaleMode.ONLINE)
    boxOffices = BoxOfficeSerializer(source="box_offices", many=True, required=False)


class AccessEquipmentSerializer(DomainSerializer):
    domain_class = AccessEquipment

    quantity = CountField(min_value=0, default=0)
    type = EnumField(EquipmentType, default=EquipmentType.WE_RENT)
    quoted = serializers.BooleanField(default=False)
    # null means not quoted yet, which is not the same as free
    cost = AmountField(min_value=ZERO, allow_null=True, required=False)


class StaffMemberSerializer(DomainSerializer):
    domain_class = StaffMember

    id = serializers.CharField(required=False)
    name = serializers.CharField(allow_blank=True)
    role = serializers.CharField(allow_blank=True, default="")
    email = serializers.CharField(allow_blank=True, default="")


class AccessStaffSerializer(DomainSerializer):
    domain_class = AccessStaff

    quantity = CountField(min_value=0, default=0)
    assigned = StaffMemberSerializer(many=True, required=False)


class AccessControlSerializer(DomainSerializer):
    domain_class = AccessControl

    method = EnumField(AccessMethod, default=AccessMethod.APP)
    equipment = AccessEquipmentSerializer(required=False)
    staff = AccessStaffSerializer(required=False)
    internet = EnumField(InternetSource, default=InternetSource.ORGANIZER)


class ContactSerializer(DomainSerializer):
    domain_class = Contact

    id = serializers.CharField(allow_blank=True, default="")
    name = serializers.CharField(allow_blank=True, default="")
    email = serializers.CharField(allow_blank=True, default="")
    phone = serializers.CharField(allow_blank=True, default="")
    role = serializers.CharField(allow_blank=True, default="")


class ContractSerializer(DomainSerializer):
    domain_class = Contract

    signed = serializers.BooleanField(default=False)
    signedAt = serializers.DateTimeField(source="signed_at", allow_null=True, required=False)
    documentUrl = serializers.CharField(source="document_url", allow_null=True, allow_blank=True, required=False)
    documentName = serializers.CharField(source="document_name", allow_null=True, allow_blank=True, required=False)
    uploadedAt = serializers.DateTimeField(source="uploaded_at", allow_null=True, required=False)


class ContractDocumentSerializer(DomainSerializer):
    domain_class = ContractDocument

    documentUrl = serializers.CharField(source="document_url")
    documentName = serializers.CharField(source="document_name")


class ExperienceDetailsSerializer(DomainSerializer):
    domain_class = ExperienceDetails

    ticketing = serializers.CharField(allow_null=True, allow_blank=True, required=False)
    accessControl = serializers.CharField(source="access_control", allow_null=True, allow_blank=True, required=False)
    general = serializers.CharField(allow_null=True, allow_blank=True, required=False)


class PreviousExperienceSerializer(DomainSerializer):
    domain_class = PreviousExperience

    exists = serializers.BooleanField(default=False)
    details = ExperienceDetailsSerializer(allow_null=True, required=False)


class ChangeLogEntrySerializer(DomainSerializer):
    domain_class = ChangeLogEntry

    id = serializers.CharField(required=False)
    eventId = serializers.CharField(source="event_id")
    action = EnumField(ChangeLogAction)
    field = serializers.CharField(source="field_name", allow_null=True, required=False)
    oldValue = serializers.JSONField(source="old_value", allow_null=True, required=False)
    newValue = serializers.JSONField(source="new_value", allow_null=True, required=False)
    timestamp = serializers.DateTimeField()
    userId = serializers.CharField(source="user_id", allow_blank=True)
    userName = serializers.CharField(source="user_name", allow_blank=True)


class RecurrenceConfigSerializer(DomainSerializer):
    domain_class = RecurrenceConfig

    frequency = EnumField(RecurrenceFrequency)
    interval = serializers.IntegerField(min_value=1, default=1)
    endDate = serializers.DateField(source="end_date", allow_null=True, required=False)
    daysOfWeek = serializers.ListField(
        source="days_of_week",
        child=serializers.IntegerField(min_value=0, max_value=6),
        required=False,
    )


class CalendarIntegrationsSerializer(DomainSerializer):
    domain_class = CalendarIntegrations

    googleCalendarEventId = serializers.CharField(source="google_event_id", allow_null=True, required=False)
    outlookCalendarEventId = serializers.CharField(source="outlook_event_id", allow_null=True, required=False)
    syncEnabled = serializers.BooleanField(source="sync_enabled", default=False)


class EventDraftSerializer(DomainSerializer):
    """Serializer for the client-owned fields of an event."""

    domain_class = EventDraft

    name = serializers.CharField(allow_blank=True)
    type = EnumField(EventType)
    date = serializers.DateField()
    venue = serializers.CharField(allow_blank=True, default="")
    salesProjection = SalesProjectionSerializer(source="sales_projection", allow_null=True, required=False)
    ticketing = TicketingSerializer(allow_null=True, required=False)
    accessControl = AccessControlSerializer(source="access_control", allow_null=True, required=False)
    mainContact = ContactSerializer(source="main_contact", allow_null=True, required=False)
    contract = ContractSerializer(allow_null=True, required=False)
    previousExperience = PreviousExperienceSerializer(source="previous_experience", allow_null=True, required=False)
    status = EnumField(EventStatus, default=EventStatus.DRAFT)
    progress = CountField(min_value=0, max_value=100, default=0)
    changeLogs = ChangeLogEntrySerializer(source="change_logs", many=True, required=False)
    isRecurring = serializers.BooleanField(source="is_recurring", default=False)
    recurringConfig = RecurrenceConfigSerializer(source="recurring_config", allow_null=True, required=False)
    originalEventId = serializers.CharField(source="original_event_id", allow_null=True, required=False)


class EventSerializer(EventDraftSerializer):
    """Serializer for Event domain model."""

    domain_class = Event

    id = serializers.CharField()
    calendarIntegrations = CalendarIntegrationsSerializer(
        source="calendar_integrations", allow_null=True, required=False
    )
    createdAt = serializers.DateTimeField(source="created_at", allow_null=True, required=False)
    updatedAt = serializers.DateTimeField(source="updated_at", allow_null=True, required=False)


def parse_event(payload: Any) -> Event:
    """Build an Event from a response payload.

    Raises:
        rest_framework.exceptions.ValidationError: If the payload is not a valid event.
    """
    serializer = EventSerializer(data=payload)
    serializer.is_valid(raise_exception=True)
    return serializer.save()


def parse_events(payload: Any) -> list[Event]:
    serializer = EventSerializer(data=payload, many=True)
    serializer.is_valid(raise_exception=True)
    return serializer.save()


def parse_contract_document(payload: Any) -> ContractDocument:
    serializer = ContractDocumentSerializer(data=payload)
    serializer.is_valid(raise_exception=True)
    return serializer.save()


def render_draft(draft: EventDraft) -> dict[str, Any]:
    return dict(EventDraftSerializer(draft).data)


def render_event(event: Event) -> dict[str, Any]:
    return dict(EventSerializer(event).data)


def render_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Render top-level Event field changes as a PATCH body.

    Raises:
        ValueError: If a change names a field the wire format does not carry.
    """
    fields = {field.source: (name, field) for name, field in EventSerializer().fields.items()}
    payload = {}
    for source, value in changes.items():
        if source not in fields or fields[source][1].read_only:
            raise ValueError(f"Unknown event field: {source}")
        name, field = fields[source]
        payload[name] = None if value is None else field.to_representation(value)
    return payload
