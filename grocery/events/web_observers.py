"""Web-facing observers for grocery list events.

This module subscribes to the GLOBAL_EVENT_BUS for every grocery.* event and
stores a lightweight in-memory ring buffer of recent events that the web
layer polls (GET /api/grocery-list/events?since=<cursor>) so other open
pages can refresh after a change or show a sync failure notice.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    request only newer events.
  * A simple Lock guards the buffer; per-process only.
  * MAX_EVENTS caps memory.
"""
from __future__ import annotations
import logging
from typing import List, Dict, Any, Optional
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import (
    GLOBAL_EVENT_BUS, GROCERY_LIST_REPLACED, GROCERY_ITEM_UPSERTED, GROCERY_ITEM_REMOVED,
    GROCERY_MEAL_EMPTY, GROCERY_SYNC_FAILED
)

logger = logging.getLogger(__name__)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = 300  # keep a few hundred recent events
_started = False

_OBSERVED = (
    GROCERY_LIST_REPLACED, GROCERY_ITEM_UPSERTED, GROCERY_ITEM_REMOVED,
    GROCERY_MEAL_EMPTY, GROCERY_SYNC_FAILED,
)


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
        }
        # Normalize payload fields we care about for UI
        if isinstance(payload, dict):
            item = payload.get('item')
            if item is not None and hasattr(item, 'name'):
                evt['item_id'] = getattr(item, 'id', None)
                evt['name'] = getattr(item, 'name', '')
                evt['department'] = getattr(item, 'department', None)
                evt['is_checked'] = getattr(item, 'is_checked', False)
            for k in ('plan_id', 'reason', 'action', 'meal', 'command', 'error', 'sections', 'items'):
                if k in payload:
                    evt[k] = payload[k]
        _events.append(evt)
        _next_id += 1
        # Trim buffer
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    for name in _OBSERVED:
        GLOBAL_EVENT_BUS.subscribe(name, _record)
    _started = True
    logger.debug("Web observers subscribed to %d grocery events", len(_OBSERVED))


def get_events(since: Optional[int] = None, plan_id: Optional[str] = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive), optionally for one plan.

    If since is None, returns the last N (up to MAX_EVENTS) events.
    Response includes next_cursor (largest id) so client can poll with since=next_cursor.
    """
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    if plan_id is not None:
        data = [e for e in data if e.get('plan_id') in (None, plan_id)]
    return {'events': data, 'next_cursor': next_cursor}


__all__ = ['start', 'get_events']
