"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import Self


@dataclass(frozen=True)
class EventId:
    """Opaque identifier for an Event, assigned by the server."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("Event ID cannot be blank")
        if "/" in self.value:
            raise ValueError("Event ID cannot contain '/'")
        if not self.value.isprintable():
            raise ValueError("Event ID cannot contain control characters")

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=value.strip())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Actor:
    """The user on whose behalf change-log entries are written."""

    user_id: str
    user_name: str


class EventType(Enum):
    FESTIVAL = "festival"
    SPORTS = "sports"
    CONFERENCE = "conference"
    PARTY = "party"
    OTHER = "other"


class EventStatus(Enum):
    DRAFT = "draft"
    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"


class SaleMode(Enum):
    ONLINE = "online"
    HYBRID = "hybrid"
    PHYSICAL = "physical"


class AccessMethod(Enum):
    APP = "app"
    EXTERNAL = "external"


class EquipmentType(Enum):
    WE_RENT = "we_rent"
    WE_RENT_OUT = "we_rent_out"
    OWNED = "owned"


class InternetSource(Enum):
    ORGANIZER = "organizer"
    OWN = "own"


class ChangeLogAction(Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    DUPLICATE = "duplicate"


class RecurrenceFrequency(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
