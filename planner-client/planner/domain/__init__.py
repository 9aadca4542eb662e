from planner.domain.models import (
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
    Actor,
    ChangeLogAction,
    EquipmentType,
    EventId,
    EventStatus,
    EventType,
    InternetSource,
    RecurrenceFrequency,
    SaleMode,
)

__all__ = [
    "Event",
    "EventDraft",
    "SalesProjection",
    "Costs",
    "Ticketing",
    "BoxOffice",
    "BoxOfficeSchedule",
    "BoxOfficeStaff",
    "AccessControl",
    "AccessEquipment",
    "AccessStaff",
    "StaffMember",
    "Contact",
    "Contract",
    "ContractDocument",
    "PreviousExperience",
    "ExperienceDetails",
    "OperatingHours",
    "ChangeLogEntry",
    "RecurrenceConfig",
    "CalendarIntegrations",
    "EventId",
    "Actor",
    "EventType",
    "EventStatus",
    "SaleMode",
    "AccessMethod",
    "EquipmentType",
    "InternetSource",
    "ChangeLogAction",
    "RecurrenceFrequency",
]
