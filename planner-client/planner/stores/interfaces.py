"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. The state store and the
event service depend on EventStore only, never on a concrete transport.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from planner.domain import ContractDocument, Event, EventDraft, EventId


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    async def list_events(self) -> list[Event]:
        """Return all events."""
        ...

    @abstractmethod
    async def get_event(self, event_id: EventId | str) -> Event:
        """Return an event by ID.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        ...

    @abstractmethod
    async def create_event(self, draft: EventDraft) -> Event:
        """Persist a new event and return it with its server-assigned id."""
        ...

    @abstractmethod
    async def update_event(self, event_id: EventId | str, changes: Mapping[str, Any]) -> Event:
        """Apply top-level field changes and return the updated event.

        `changes` maps Event attribute names to complete domain values; the
        store replaces each named field wholesale.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        ...

    @abstractmethod
    async def delete_event(self, event_id: EventId | str) -> None:
        """Delete an event permanently.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        ...

    @abstractmethod
    async def upload_contract(
        self,
        event_id: EventId | str,
        filename: str,
        content: bytes,
        content_type: str = "application/pdf",
    ) -> ContractDocument:
        """Attach a contract file to an event and return its document reference."""
        ...
