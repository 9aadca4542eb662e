"""Event-level operations that derive new documents from existing ones."""

from dataclasses import replace
from datetime import date, datetime, time, timezone
from itertools import islice
from typing import Any

from dateutil import rrule

from planner.domain.models import ChangeLogEntry, Event, EventDraft, RecurrenceConfig
from planner.domain.value_objects import Actor, ChangeLogAction, EventStatus, RecurrenceFrequency

COPY_SUFFIX = " (Copy)"

_FREQUENCIES = {
    RecurrenceFrequency.DAILY: rrule.DAILY,
    RecurrenceFrequency.WEEKLY: rrule.WEEKLY,
    RecurrenceFrequency.MONTHLY: rrule.MONTHLY,
    RecurrenceFrequency.YEARLY: rrule.YEARLY,
}


def new_change_log(
    event_id: str,
    action: ChangeLogAction,
    actor: Actor,
    field_name: str | None = None,
    old_value: Any = None,
    new_value: Any = None,
) -> ChangeLogEntry:
    return ChangeLogEntry(
        event_id=str(event_id),
        action=action,
        timestamp=datetime.now(timezone.utc),
        user_id=actor.user_id,
        user_name=actor.user_name,
        field_name=field_name,
        old_value=old_value,
        new_value=new_value,
    )


def duplicate_event(event: Event, actor: Actor) -> EventDraft:
    """Build a draft copy of an event.

    The copy starts over as a draft with no progress, points back to the
    source through original_event_id, and its change log holds a single
    duplicate entry. Calendar integrations are not copied.
    """
    draft = event.to_draft()
    return replace(
        draft,
        name=f"{event.name}{COPY_SUFFIX}",
        original_event_id=str(event.id),
        status=EventStatus.DRAFT,
        progress=0,
        change_logs=(new_change_log(event.id, ChangeLogAction.DUPLICATE, actor),),
    )


def recurrence_dates(start: date, config: RecurrenceConfig, limit: int) -> list[date]:
    """Expand a recurrence rule into occurrence dates, starting with `start` when it matches.

    Weekly rules with days_of_week only produce those weekdays. Expansion
    stops at end_date (inclusive) or after `limit` occurrences.
    """
    weekdays = None
    if config.frequency is RecurrenceFrequency.WEEKLY and config.days_of_week:
        # 0=Sunday on the wire, 0=Monday in dateutil
        weekdays = sorted({(day - 1) % 7 for day in config.days_of_week})
    until = datetime.combine(config.end_date, time.max) if config.end_date else None
    rule = rrule.rrule(
        _FREQUENCIES[config.frequency],
        dtstart=datetime.combine(start, time.min),
        interval=config.interval,
        until=until,
        byweekday=weekdays,
    )
    return [occurrence.date() for occurrence in islice(rule, limit)]


def recurring_drafts(event: Event, actor: Actor, limit: int) -> list[EventDraft]:
    """Return one duplicate draft per future occurrence of a recurring event.

    The base event's own date is not repeated, and occurrences do not
    carry the recurrence rule themselves.
    """
    if event.recurring_config is None:
        return []
    copy = replace(duplicate_event(event, actor), is_recurring=False, recurring_config=None)
    return [
        replace(copy, date=occurrence)
        for occurrence in recurrence_dates(event.date, event.recurring_config, limit)
        if occurrence != event.date
    ]
