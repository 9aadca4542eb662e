"""Domain models representing the event planning document.

These are pure domain objects with no wire format rules.
JSON payload conversion lives in handlers/serializers.py.

Every model is frozen: state changes produce new instances through
dataclasses.replace (see domain/patches.py).
"""

from dataclasses import dataclass, field, fields
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import uuid4

from planner.domain.value_objects import (
    AccessMethod,
    ChangeLogAction,
    EquipmentType,
    EventId,
    EventStatus,
    EventType,
    InternetSource,
    RecurrenceFrequency,
    SaleMode,
)

ZERO = Decimal("0")


def new_item_id() -> str:
    return str(uuid4())


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _coerce(instance: Any, name: str, converter: Any) -> None:
    """Normalise a field value in place on a frozen instance."""
    value = getattr(instance, name)
    if value is None:
        return
    if isinstance(converter, type) and issubclass(converter, Enum):
        if isinstance(value, converter):
            return
        value = converter(value)
    else:
        value = converter(value)
    object.__setattr__(instance, name, value)


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _to_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(value)


@dataclass(frozen=True)
class Costs:
    """Projected cost categories of an event."""

    ticketing: Decimal = ZERO
    accommodation: Decimal = ZERO
    fuel: Decimal = ZERO
    access_control: Decimal = ZERO

    def __post_init__(self) -> None:
        for item in fields(self):
            _coerce(self, item.name, _to_decimal)
            if getattr(self, item.name) < 0:
                raise ValueError(f"Cost '{item.name}' cannot be negative")

    @property
    def total(self) -> Decimal:
        return self.ticketing + self.accommodation + self.fuel + self.access_control


@dataclass(frozen=True)
class SalesProjection:
    """Financial estimate of an event.

    The three totals are derived from the inputs. Use with_totals() after
    changing any input; apply_patch does this automatically.
    """

    estimated_tickets: int = 0
    average_ticket_price: Decimal = ZERO
    costs: Costs = field(default_factory=Costs)
    total_revenue: Decimal = ZERO
    total_costs: Decimal = ZERO
    projected_profit: Decimal = ZERO

    def __post_init__(self) -> None:
        if self.estimated_tickets < 0:
            raise ValueError("Estimated tickets cannot be negative")
        for name in ("average_ticket_price", "total_revenue", "total_costs", "projected_profit"):
            _coerce(self, name, _to_decimal)
        if self.average_ticket_price < 0:
            raise ValueError("Average ticket price cannot be negative")
        if self.costs is None:
            object.__setattr__(self, "costs", Costs())

    def with_totals(self) -> "SalesProjection":
        """Return a copy whose derived totals match its inputs."""
        revenue = self.estimated_tickets * self.average_ticket_price
        total_costs = self.costs.total
        return SalesProjection(
            estimated_tickets=self.estimated_tickets,
            average_ticket_price=self.average_ticket_price,
            costs=self.costs,
            total_revenue=revenue,
            total_costs=total_costs,
            projected_profit=revenue - total_costs,
        )


@dataclass(frozen=True)
class BoxOfficeStaff:
    ticket_sellers: int = 0
    supervisors: int = 0


@dataclass(frozen=True)
class OperatingHours:
    start: time | None = None
    end: time | None = None

    def __post_init__(self) -> None:
        _coerce(self, "start", _to_time)
        _coerce(self, "end", _to_time)


@dataclass(frozen=True)
class BoxOfficeSchedule:
    start_date: date | None = None
    end_date: date | None = None
    operating_hours: OperatingHours = field(default_factory=OperatingHours)

    def __post_init__(self) -> None:
        _coerce(self, "start_date", _to_date)
        _coerce(self, "end_date", _to_date)


@dataclass(frozen=True)
class BoxOffice:
    """A physical ticket sales point. The id is stable across reordering."""

    name: str
    location: str = ""
    schedule: BoxOfficeSchedule = field(default_factory=BoxOfficeSchedule)
    staff: BoxOfficeStaff = field(default_factory=BoxOfficeStaff)
    id: str = field(default_factory=new_item_id)


@dataclass(frozen=True)
class Ticketing:
    sale_mode: SaleMode = SaleMode.ONLINE
    box_offices: tuple[BoxOffice, ...] = ()

    def __post_init__(self) -> None:
        _coerce(self, "sale_mode", SaleMode)
        _coerce(self, "box_offices", tuple)


@dataclass(frozen=True)
class AccessEquipment:
    quantity: int = 0
    type: EquipmentType = EquipmentType.WE_RENT
    quoted: bool = False
    cost: Decimal | None = None

    def __post_init__(self) -> None:
        _coerce(self, "type", EquipmentType)
        _coerce(self, "cost", _to_decimal)


@dataclass(frozen=True)
class StaffMember:
    """An assigned access-control worker. The id is stable across reordering."""

    name: str
    role: str = ""
    email: str = ""
    id: str = field(default_factory=new_item_id)


@dataclass(frozen=True)
class AccessStaff:
    quantity: int = 0
    assigned: tuple[StaffMember, ...] = ()

    def __post_init__(self) -> None:
        _coerce(self, "assigned", tuple)


@dataclass(frozen=True)
class AccessControl:
    method: AccessMethod = AccessMethod.APP
    equipment: AccessEquipment = field(default_factory=AccessEquipment)
    staff: AccessStaff = field(default_factory=AccessStaff)
    internet: InternetSource = InternetSource.ORGANIZER

    def __post_init__(self) -> None:
        _coerce(self, "method", AccessMethod)
        _coerce(self, "internet", InternetSource)


@dataclass(frozen=True)
class Contact:
    id: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    role: str = ""


@dataclass(frozen=True)
class ContractDocument:
    """Reference to an uploaded contract file, as returned by the server."""

    document_url: str
    document_name: str


@dataclass(frozen=True)
class Contract:
    signed: bool = False
    signed_at: datetime | None = None
    document_url: str | None = None
    document_name: str | None = None
    uploaded_at: datetime | None = None


@dataclass(frozen=True)
class ExperienceDetails:
    ticketing: str | None = None
    access_control: str | None = None
    general: str | None = None


@dataclass(frozen=True)
class PreviousExperience:
    exists: bool = False
    details: ExperienceDetails | None = None


@dataclass(frozen=True)
class ChangeLogEntry:
    """Append-only audit record. Entries are never mutated once written."""

    event_id: str
    action: ChangeLogAction
    timestamp: datetime
    user_id: str
    user_name: str
    field_name: str | None = None
    old_value: Any = None
    new_value: Any = None
    id: str = field(default_factory=new_item_id)

    def __post_init__(self) -> None:
        _coerce(self, "action", ChangeLogAction)


@dataclass(frozen=True)
class RecurrenceConfig:
    """How an event repeats. days_of_week uses 0=Sunday .. 6=Saturday."""

    frequency: RecurrenceFrequency
    interval: int = 1
    end_date: date | None = None
    days_of_week: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        _coerce(self, "frequency", RecurrenceFrequency)
        _coerce(self, "end_date", _to_date)
        _coerce(self, "days_of_week", tuple)
        if self.interval < 1:
            raise ValueError("Recurrence interval must be at least 1")
        if any(day < 0 or day > 6 for day in self.days_of_week):
            raise ValueError("Days of week must be between 0 (Sunday) and 6 (Saturday)")


@dataclass(frozen=True)
class CalendarIntegrations:
    google_event_id: str | None = None
    outlook_event_id: str | None = None
    sync_enabled: bool = False


@dataclass(frozen=True, kw_only=True)
class EventDraft:
    """Event fields a client may send on create, before the server assigns an id."""

    name: str
    type: EventType
    date: date
    venue: str = ""
    sales_projection: SalesProjection | None = None
    ticketing: Ticketing | None = None
    access_control: AccessControl | None = None
    main_contact: Contact | None = None
    contract: Contract | None = None
    previous_experience: PreviousExperience | None = None
    status: EventStatus = EventStatus.DRAFT
    progress: int = 0
    change_logs: tuple[ChangeLogEntry, ...] = ()
    is_recurring: bool = False
    recurring_config: RecurrenceConfig | None = None
    original_event_id: str | None = None

    def __post_init__(self) -> None:
        _coerce(self, "type", EventType)
        _coerce(self, "status", EventStatus)
        _coerce(self, "date", _to_date)
        _coerce(self, "change_logs", tuple)
        if not 0 <= self.progress <= 100:
            raise ValueError("Progress must be between 0 and 100")


@dataclass(frozen=True, kw_only=True)
class Event(EventDraft):
    """Domain representation of a persisted Event."""

    id: EventId
    calendar_integrations: CalendarIntegrations | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if isinstance(self.id, str):
            object.__setattr__(self, "id", EventId.from_string(self.id))

    def to_draft(self) -> EventDraft:
        """Return the client-owned part of this event."""
        return EventDraft(**{item.name: getattr(self, item.name) for item in fields(EventDraft)})
