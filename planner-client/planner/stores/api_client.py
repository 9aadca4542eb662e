"""HTTP implementation of EventStore for the events REST API.

Reads go through the TTL cache: a fresh entry is returned without a
request, a miss fetches and caches the result. Writes always reach the
server and, once it confirms them, send event_saved / event_deleted so the
signal receivers drop stale cache entries.

Error mapping:
- transport failure, non-2xx status, unreadable body -> RequestFailedError
- 404 for a single event -> EventNotFoundError
- blank or malformed id -> InvalidEventIdError, before any request

Ids are percent-encoded into a single path segment, so `?` or `#` in an id
never reaches the query string.
"""

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx
from rest_framework.exceptions import ValidationError
from rest_framework.renderers import JSONRenderer

from planner.conf import planner_settings
from planner.domain import ContractDocument, Event, EventDraft, EventId
from planner.domain.errors import DomainError, EventNotFoundError, InvalidEventIdError, RequestFailedError
from planner.handlers.serializers import (
    parse_contract_document,
    parse_event,
    parse_events,
    render_changes,
    render_draft,
)
from planner.signals import event_deleted, event_saved
from planner.stores.cache import EVENT_LIST_KEY, MISS, TTLCache, event_key, get_default_cache
from planner.stores.interfaces import EventStore

logger = logging.getLogger(__name__)

ERROR_KEYS = ("error", "message", "detail")


def to_event_id(event_id: EventId | str) -> EventId:
    """Validate an id before it is put into a URL.

    Raises:
        InvalidEventIdError: If the id is blank or cannot form a URL path segment.
    """
    if isinstance(event_id, EventId):
        return event_id
    if not isinstance(event_id, str):
        raise InvalidEventIdError()
    try:
        return EventId.from_string(event_id)
    except ValueError as exc:
        raise InvalidEventIdError() from exc


def event_path(event_id: EventId) -> str:
    segment = quote(str(event_id), safe="")
    return f"/events/{segment}"


def error_message(response: httpx.Response) -> str | None:
    """Return the server's explanation of a failed request, if it sent one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, Mapping):
        return None
    for key in ERROR_KEYS:
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


class EventApiClient(EventStore):
    """EventStore backed by the events REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        cache: TTLCache | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or planner_settings.API_URL).rstrip("/")
        self.cache = cache if cache is not None else get_default_cache()
        self._owns_http_client = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(
                timeout=planner_settings.HTTP_TIMEOUT if timeout is None else timeout
            )
        self._http = http_client
        self._renderer = JSONRenderer()

    async def __aenter__(self) -> "EventApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def list_events(self) -> list[Event]:
        cached = self.cache.get(EVENT_LIST_KEY)
        if cached is not MISS:
            return list(cached)

        logger.debug("Fetching event list")
        payload = await self._request("GET", "/events", fallback="Could not load events")
        events = self._parse(parse_events, payload)
        self.cache.set(EVENT_LIST_KEY, events)
        return events

    async def get_event(self, event_id: EventId | str) -> Event:
        event_id = to_event_id(event_id)
        cached = self.cache.get(event_key(event_id))
        if cached is not MISS:
            return cached

        logger.debug(f"Fetching event {event_id}")
        payload = await self._request(
            "GET", event_path(event_id), fallback="Could not load the event", event_id=event_id
        )
        event = self._parse(parse_event, payload)
        self.cache.set(event_key(event_id), event)
        return event

    async def create_event(self, draft: EventDraft) -> Event:
        payload = await self._request(
            "POST",
            "/events",
            fallback="Could not create the event",
            content=self._render(render_draft(draft)),
        )
        event = self._parse(parse_event, payload)
        event_saved.send(sender=self.__class__, cache=self.cache, event_id=event.id, created=True)
        logger.info(f"Created event {event.id}")
        return event

    async def update_event(self, event_id: EventId | str, changes: Mapping[str, Any]) -> Event:
        event_id = to_event_id(event_id)
        payload = await self._request(
            "PATCH",
            event_path(event_id),
            fallback="Could not update the event",
            event_id=event_id,
            content=self._render(render_changes(changes)),
        )
        event = self._parse(parse_event, payload)
        event_saved.send(sender=self.__class__, cache=self.cache, event_id=event_id, created=False)
        return event

    async def delete_event(self, event_id: EventId | str) -> None:
        event_id = to_event_id(event_id)
        await self._request(
            "DELETE",
            event_path(event_id),
            fallback="Could not delete the event",
            event_id=event_id,
            expect_body=False,
        )
        event_deleted.send(sender=self.__class__, cache=self.cache, event_id=event_id)
        logger.info(f"Deleted event {event_id}")

    async def upload_contract(
        self,
        event_id: EventId | str,
        filename: str,
        content: bytes,
        content_type: str = "application/pdf",
    ) -> ContractDocument:
        event_id = to_event_id(event_id)
        payload = await self._request(
            "POST",
            f"{event_path(event_id)}/contract",
            fallback="Could not upload the contract",
            event_id=event_id,
            files={"file": (filename, content, content_type)},
        )
        document = self._parse(parse_contract_document, payload)
        event_saved.send(sender=self.__class__, cache=self.cache, event_id=event_id, created=False)
        return document

    async def preload_event(self, event_id: EventId | str) -> None:
        """Warm the cache for one event. Failures are logged, not raised."""
        try:
            await self.get_event(event_id)
        except DomainError:
            logger.warning(f"Could not preload event {event_id}", exc_info=True)

    async def preload_event_list(self) -> None:
        """Warm the cache for the event list. Failures are logged, not raised."""
        try:
            await self.list_events()
        except DomainError:
            logger.warning("Could not preload the event list", exc_info=True)

    async def _request(
        self,
        method: str,
        path: str,
        fallback: str,
        event_id: EventId | None = None,
        expect_body: bool = True,
        **kwargs,
    ) -> Any:
        url = f"{self.base_url}{path}"
        if "content" in kwargs:
            kwargs["headers"] = {"Content-Type": "application/json"}
        try:
            response = await self._http.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error(f"{method} {url} failed: {exc}")
            raise RequestFailedError(fallback) from exc

        if response.status_code == 404 and event_id is not None:
            raise EventNotFoundError(str(event_id))
        if not response.is_success:
            message = error_message(response) or fallback
            logger.error(f"{method} {url} returned {response.status_code}: {message}")
            raise RequestFailedError(message, status_code=response.status_code)
        if not expect_body:
            return None

        try:
            return response.json()
        except ValueError as exc:
            logger.error(f"{method} {url} returned a body that is not JSON")
            raise RequestFailedError(
                "The server sent an unreadable response", status_code=response.status_code
            ) from exc

    def _render(self, data: Any) -> bytes:
        return self._renderer.render(data)

    @staticmethod
    def _parse(parser, payload: Any) -> Any:
        try:
            return parser(payload)
        except (ValidationError, ValueError) as exc:
            logger.error(f"Received an invalid event payload: {exc}")
            raise RequestFailedError("The server sent an invalid event") from exc
