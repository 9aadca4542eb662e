"""Pytest configuration and shared fixtures.

The events REST API is replaced by FakeEventsApi, an in-memory server
mounted on httpx.MockTransport. It applies PATCH bodies as top-level
$set merges and records every request so tests can count fetches.
"""

import copy
import json
import re
from datetime import datetime, timezone

import httpx
import pytest

from planner.stores.api_client import EventApiClient
from planner.stores.cache import TTLCache, get_default_cache

BASE_URL = "http://testserver/api"


class FakeClock:
    """Manually advanced clock for TTL checks."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeEventsApi:
    """In-memory events API served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.events: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.failures: dict[str, dict] = {}
        self.transport_error: httpx.HTTPError | None = None
        self._next_id = 1

    def add(self, payload: dict) -> dict:
        event = copy.deepcopy(payload)
        event.setdefault("id", self._new_id())
        self.events[event["id"]] = event
        return event

    def count(self, method: str, path: str = "") -> int:
        return sum(
            1
            for request in self.requests
            if request.method == method and request.url.path == f"/api{path}"
        )

    def last_json(self, method: str) -> dict:
        request = [request for request in self.requests if request.method == method][-1]
        return json.loads(request.content)

    def fail(self, method: str, status: int, body: dict | None = None, content: bytes | None = None) -> None:
        """Answer every request with the given method with an error response."""
        if content is not None:
            self.failures[method] = {"status_code": status, "content": content}
        else:
            self.failures[method] = {"status_code": status, "json": body}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.transport_error is not None:
            raise self.transport_error
        if request.method in self.failures:
            return httpx.Response(**self.failures[request.method])

        segments = [part for part in request.url.path.removeprefix("/api").split("/") if part]
        if segments == ["events"]:
            if request.method == "GET":
                return httpx.Response(200, json=list(self.events.values()))
            if request.method == "POST":
                return self._create(json.loads(request.content))
        if len(segments) == 2 and segments[0] == "events":
            return self._detail(request, segments[1])
        if len(segments) == 3 and segments[2] == "contract" and request.method == "POST":
            return self._contract(request, segments[1])
        return httpx.Response(405, json={"error": "Method not allowed"})

    def _create(self, body: dict) -> httpx.Response:
        if not all(body.get(key) for key in ("name", "type", "date", "venue")):
            return httpx.Response(400, json={"error": "Missing required fields"})
        now = _now()
        event = {
            **body,
            "id": self._new_id(),
            "createdAt": now,
            "updatedAt": now,
            "accessControl": body.get("accessControl")
            or {
                "method": "app",
                "equipment": {"quantity": 0, "type": "we_rent", "quoted": False, "cost": 0},
                "staff": {"quantity": 0},
                "internet": "organizer",
            },
            "salesProjection": body.get("salesProjection") or {"estimatedTickets": 0},
        }
        self.events[event["id"]] = event
        return httpx.Response(201, json=event)

    def _detail(self, request: httpx.Request, event_id: str) -> httpx.Response:
        event = self.events.get(event_id)
        if event is None:
            return httpx.Response(404, json={"error": "Event not found"})
        if request.method == "GET":
            return httpx.Response(200, json=event)
        if request.method == "PATCH":
            event.update(json.loads(request.content))
            event["updatedAt"] = _now()
            return httpx.Response(200, json=event)
        if request.method == "DELETE":
            del self.events[event_id]
            return httpx.Response(200, json={"success": True})
        return httpx.Response(405, json={"error": "Method not allowed"})

    def _contract(self, request: httpx.Request, event_id: str) -> httpx.Response:
        event = self.events.get(event_id)
        if event is None:
            return httpx.Response(404, json={"error": "Event not found"})
        match = re.search(rb'filename="([^"]+)"', request.content)
        if match is None:
            return httpx.Response(400, json={"error": "No file was provided"})
        name = match.group(1).decode()
        url = f"/uploads/contracts/{event_id}-{name}"
        contract = event.setdefault("contract", {}) or {}
        contract.update({"documentUrl": url, "documentName": name, "uploadedAt": _now()})
        event["contract"] = contract
        return httpx.Response(
            200,
            json={"message": "File uploaded", "documentUrl": url, "documentName": name},
        )

    def _new_id(self) -> str:
        event_id = f"evt-{self._next_id}"
        self._next_id += 1
        return event_id


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@pytest.fixture(autouse=True)
def clear_cache():
    get_default_cache().clear()
    yield
    get_default_cache().clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def event_cache(clock: FakeClock) -> TTLCache:
    return TTLCache(ttl=30, clock=clock)


@pytest.fixture
def fake_api() -> FakeEventsApi:
    return FakeEventsApi()


@pytest.fixture
def api_client(fake_api: FakeEventsApi, event_cache: TTLCache) -> EventApiClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))
    return EventApiClient(base_url=BASE_URL, cache=event_cache, http_client=http_client)


@pytest.fixture
def event_payload():
    """Factory for a complete event payload in wire format."""

    def make(**overrides) -> dict:
        payload = {
            "id": "evt-100",
            "name": "Summer Fest",
            "type": "festival",
            "date": "2025-07-07",
            "venue": "Riverside Park",
            "salesProjection": {
                "estimatedTickets": 100,
                "averageTicketPrice": 50,
                "costs": {"ticketing": 500, "accommodation": 300, "fuel": 200, "accessControl": 400},
                "totalRevenue": 5000,
                "totalCosts": 1400,
                "projectedProfit": 3600,
            },
            "ticketing": {
                "saleMode": "hybrid",
                "boxOffices": [
                    {
                        "id": "bo-1",
                        "name": "Main gate",
                        "location": "North entrance",
                        "schedule": {
                            "startDate": "2025-07-05",
                            "endDate": "2025-07-07",
                            "operatingHours": {"start": "09:00", "end": "18:00"},
                        },
                        "staff": {"ticketSellers": 3, "supervisors": 1},
                    }
                ],
            },
            "accessControl": {
                "method": "app",
                "equipment": {"quantity": 4, "type": "we_rent", "quoted": True, "cost": 250},
                "staff": {
                    "quantity": 2,
                    "assigned": [
                        {"id": "st-1", "name": "Ana Ruiz", "role": "Scanner", "email": "ana@example.com"}
                    ],
                },
                "internet": "organizer",
            },
            "mainContact": {"id": "c-1", "name": "Leo Park", "email": "leo@example.com", "phone": "555-0100"},
            "status": "planning",
            "progress": 40,
            "changeLogs": [],
            "createdAt": "2025-01-10T12:00:00Z",
            "updatedAt": "2025-01-10T12:00:00Z",
        }
        payload.update(overrides)
        return payload

    return make
