"""Django signals for cache invalidation and state notifications.

The API client sends event_saved / event_deleted after every successful
write; the receivers below drop the cache entries the write made stale.
sync_failed and state_changed are for UI collaborators.

Signal arguments:
- event_saved: cache, event_id, created
- event_deleted: cache, event_id
- sync_failed: event_id, error
- state_changed: state
"""

import logging

from django.dispatch import Signal, receiver

from planner.stores.cache import EVENT_LIST_KEY, event_key

logger = logging.getLogger(__name__)

event_saved = Signal()
event_deleted = Signal()
sync_failed = Signal()
state_changed = Signal()


@receiver(event_saved)
def invalidate_saved_event(sender, cache, event_id, created=False, **kwargs):
    """Invalidate the list, and the event itself unless it was just created."""
    cache.invalidate(EVENT_LIST_KEY)
    if not created:
        cache.invalidate(event_key(event_id))
    logger.debug(f"Invalidated cache for saved event {event_id}")


@receiver(event_deleted)
def invalidate_deleted_event(sender, cache, event_id, **kwargs):
    """Invalidate caches when an event is deleted."""
    cache.invalidate(event_key(event_id))
    cache.invalidate(EVENT_LIST_KEY)
    logger.debug(f"Invalidated cache for deleted event {event_id}")
