"""Event service - catalog operations on top of an EventStore.

Services:
- Depend only on interfaces (stores)
- Validate drafts before they reach the server
- Derive copies and recurrences from existing events
- Return domain models or domain errors
"""

import logging

from planner.conf import planner_settings
from planner.domain import Actor, ChangeLogAction, Event, EventDraft, EventId
from planner.domain.errors import DomainError, InvalidEventError
from planner.domain.operations import duplicate_event, new_change_log, recurring_drafts
from planner.stores.interfaces import EventStore

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = Actor(user_id="system", user_name="System")


class EventService:
    """Service for event catalog operations."""

    def __init__(self, store: EventStore, actor: Actor | None = None) -> None:
        self._store = store
        self._actor = actor

    async def list_events(self) -> list[Event]:
        """Return all events."""
        return await self._store.list_events()

    async def get_event(self, event_id: EventId | str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is blank or malformed.
            EventNotFoundError: If the event does not exist.
        """
        return await self._store.get_event(event_id)

    async def create_event(self, draft: EventDraft) -> Event:
        """Create an event from a draft.

        With an actor, a create entry is then written to the event's change
        log. The event already exists once the first request succeeds, so a
        failed log write is logged and the event is returned without it.

        Raises:
            InvalidEventError: If the name or venue is blank.
        """
        missing = [name for name in ("name", "venue") if not getattr(draft, name).strip()]
        if missing:
            raise InvalidEventError(missing)
        event = await self._store.create_event(draft)
        if self._actor is None:
            return event

        entry = new_change_log(event.id, ChangeLogAction.CREATE, self._actor)
        try:
            return await self._store.update_event(event.id, {"change_logs": event.change_logs + (entry,)})
        except DomainError as exc:
            logger.warning(f"Created event {event.id} but could not record its change log: {exc}")
            return event

    async def duplicate_event(self, event_id: EventId | str) -> Event:
        """Create a draft copy of an event, named "<name> (Copy)"."""
        source = await self._store.get_event(event_id)
        copy = await self._store.create_event(duplicate_event(source, self._actor or SYSTEM_ACTOR))
        logger.info(f"Duplicated event {source.id} as {copy.id}")
        return copy

    async def schedule_recurrences(self, event_id: EventId | str) -> list[Event]:
        """Create one event per future occurrence of a recurring event.

        Returns the created events, oldest first; an event without a
        recurrence rule yields none.
        """
        source = await self._store.get_event(event_id)
        if not source.is_recurring or source.recurring_config is None:
            return []
        drafts = recurring_drafts(
            source, self._actor or SYSTEM_ACTOR, planner_settings.MAX_RECURRENCES
        )
        created = [await self._store.create_event(draft) for draft in drafts]
        logger.info(f"Scheduled {len(created)} occurrences of event {source.id}")
        return created

    async def delete_event(self, event_id: EventId | str) -> None:
        """Delete an event.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        await self._store.delete_event(event_id)
