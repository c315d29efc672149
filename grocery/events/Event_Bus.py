"""In-process event bus for grocery list changes.

The sync engine publishes once the store has accepted a command (or, for
grocery.sync_failed, after it rolled one back); list_builder and add_meal
report meals that contributed no items. web_observers subscribes to every
event and keeps the recent ones for the UI to poll, so a client can refresh
one plan's list without reloading it after each change.

Events:
  grocery.list_replaced  -> payload {"plan_id": str, "reason": str, "sections": int, "items": int}
  grocery.item_upserted  -> payload {"plan_id": str, "item": GroceryItem, "action": str}
  grocery.item_removed   -> payload {"plan_id": str, "item": GroceryItem}
  grocery.meal_empty     -> payload {"plan_id": str | None, "meal": str}
  grocery.sync_failed    -> payload {"plan_id": str, "command": str, "error": str}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
GROCERY_LIST_REPLACED = "grocery.list_replaced"
GROCERY_ITEM_UPSERTED = "grocery.item_upserted"
GROCERY_ITEM_REMOVED = "grocery.item_removed"
GROCERY_MEAL_EMPTY = "grocery.meal_empty"
GROCERY_SYNC_FAILED = "grocery.sync_failed"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		# A failing subscriber must not break the command that published
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


def publish_event(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus (sugar function)."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'publish_event',
	'GROCERY_LIST_REPLACED', 'GROCERY_ITEM_UPSERTED', 'GROCERY_ITEM_REMOVED',
	'GROCERY_MEAL_EMPTY', 'GROCERY_SYNC_FAILED'
]
