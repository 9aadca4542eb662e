"""In-memory state of the event being edited, kept in sync with the server.

EventState is immutable. Each named transition below returns a new state;
EventStateStore applies them one at a time and sends state_changed after
each, so UI collaborators can re-render from the latest snapshot.

Updates are optimistic: the patch is merged locally first, then sent to
the store. If the store rejects it, the local changes stay in place and a
SyncError is raised (and sync_failed sent) so the caller can tell the user.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from planner.domain import Actor, ChangeLogAction, Contract, ContractDocument, Event, EventId
from planner.domain.errors import DomainError, ErrorCode, NoActiveEventError, SyncError
from planner.domain.operations import new_change_log
from planner.domain.patches import apply_patch, resolve_patch
from planner.signals import state_changed, sync_failed
from planner.stores.interfaces import EventStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventState:
    event: Event | None = None
    loading: bool = True
    error: str | None = None
    error_code: ErrorCode | None = None


def start_loading(state: EventState) -> EventState:
    return replace(state, loading=True, error=None, error_code=None)


def load_succeeded(state: EventState, event: Event) -> EventState:
    return replace(state, event=event, error=None, error_code=None)


def load_failed(state: EventState, error: DomainError) -> EventState:
    return replace(state, event=None, error=error.message, error_code=error.code)


def finish_loading(state: EventState) -> EventState:
    return replace(state, loading=False)


def patch_event(state: EventState, patch: Mapping[str, Any]) -> EventState:
    """Merge a patch into the loaded event; a state with no event is returned as is."""
    if state.event is None:
        return state
    return replace(state, event=apply_patch(state.event, patch))


def set_event(state: EventState, event: Event) -> EventState:
    return replace(state, event=event)


def _loggable(value: Any) -> Any:
    """Return a JSON-friendly form of a changed value, or None for documents."""
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (str, int, float, Decimal, date, datetime)):
        return value
    return None


class EventStateStore:
    """Holds the event being edited and reconciles it with an EventStore."""

    def __init__(self, store: EventStore, actor: Actor | None = None) -> None:
        self._store = store
        self._actor = actor
        self._state = EventState()
        self._requested_id: str | None = None
        self._ensured_id: str | None = None
        self._loads_in_flight = 0

    @property
    def state(self) -> EventState:
        return self._state

    @property
    def event(self) -> Event | None:
        return self._state.event

    def _transition(self, state: EventState) -> None:
        self._state = state
        state_changed.send(sender=self.__class__, state=state)

    async def load(self, event_id: EventId | str) -> None:
        """Fetch an event into the state.

        Failures are recorded in `error` / `error_code` instead of raised.
        A response for an id that is no longer the most recently requested
        one is dropped.
        """
        requested = str(event_id)
        self._requested_id = requested
        self._loads_in_flight += 1
        self._transition(start_loading(self._state))
        try:
            event = await self._store.get_event(event_id)
        except DomainError as exc:
            if requested == self._requested_id:
                logger.warning(f"Could not load event {requested}: {exc}")
                self._transition(load_failed(self._state, exc))
        else:
            if requested == self._requested_id:
                self._transition(load_succeeded(self._state, event))
        finally:
            self._loads_in_flight -= 1
            if self._loads_in_flight == 0:
                self._transition(finish_loading(self._state))

    async def ensure_loaded(self, event_id: EventId | str) -> bool:
        """Load the event unless it is the one already requested here.

        Returns True when a load ran.
        """
        if str(event_id) == self._ensured_id:
            return False
        self._ensured_id = str(event_id)
        await self.load(event_id)
        return True

    def apply_patch(self, patch: Mapping[str, Any]) -> None:
        """Merge a patch locally without contacting the server."""
        if self._state.event is None:
            return
        self._transition(patch_event(self._state, patch))

    async def update_and_sync(self, patch: Mapping[str, Any]) -> Event:
        """Apply a patch locally, then persist it.

        Returns the event as confirmed by the server.

        Raises:
            NoActiveEventError: If no event is loaded.
            SyncError: If the store rejected the update; local changes are kept.
        """
        current = self._state.event
        if current is None:
            raise NoActiveEventError()
        if self._actor is not None:
            patch = self._with_change_log(current, patch)

        self._transition(patch_event(self._state, patch))
        patched = self._state.event
        changes = resolve_patch(patched, patch)
        try:
            confirmed = await self._store.update_event(patched.id, changes)
        except DomainError as exc:
            logger.warning(f"Could not sync event {patched.id}: {exc}")
            sync_failed.send(sender=self.__class__, event_id=str(patched.id), error=exc)
            raise SyncError(str(patched.id), exc) from exc

        if self._state.event is not None and self._state.event.id == patched.id:
            self._transition(set_event(self._state, confirmed))
        return confirmed

    async def attach_contract(
        self, filename: str, content: bytes, content_type: str = "application/pdf"
    ) -> ContractDocument:
        """Upload a contract for the loaded event and record it locally.

        Raises:
            NoActiveEventError: If no event is loaded.
        """
        current = self._state.event
        if current is None:
            raise NoActiveEventError()

        document = await self._store.upload_contract(current.id, filename, content, content_type)
        event = self._state.event
        if event is not None and event.id == current.id:
            contract = replace(
                event.contract or Contract(),
                document_url=document.document_url,
                document_name=document.document_name,
                uploaded_at=datetime.now(timezone.utc),
            )
            self._transition(set_event(self._state, replace(event, contract=contract)))
        return document

    def _with_change_log(self, event: Event, patch: Mapping[str, Any]) -> dict[str, Any]:
        changed = [name for name in patch if name not in ("id", "change_logs")]
        old_value = new_value = None
        if len(changed) == 1:
            name = changed[0]
            old_value = _loggable(getattr(event, name, None))
            new_value = _loggable(patch[name])
        entry = new_change_log(
            event.id,
            ChangeLogAction.UPDATE,
            self._actor,
            field_name=", ".join(changed) or None,
            old_value=old_value,
            new_value=new_value,
        )
        logs = tuple(patch.get("change_logs", event.change_logs))
        return {**patch, "change_logs": logs + (entry,)}
