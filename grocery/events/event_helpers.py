"""Event helper utilities.

This module provides helper functions for publishing grocery list events
using the global event bus.

Quick import:
    from grocery.events.event_helpers import (
        publish_list_replaced, publish_item_upserted, publish_item_removed,
        publish_meal_empty, publish_sync_failed
    )

"""
from __future__ import annotations
from typing import Any, Optional
from .Event_Bus import (
    publish_event,
    GROCERY_LIST_REPLACED, GROCERY_ITEM_UPSERTED, GROCERY_ITEM_REMOVED,
    GROCERY_MEAL_EMPTY, GROCERY_SYNC_FAILED,
)

__all__ = [
    'publish_list_replaced', 'publish_item_upserted', 'publish_item_removed',
    'publish_meal_empty', 'publish_sync_failed',
    'GROCERY_LIST_REPLACED', 'GROCERY_ITEM_UPSERTED', 'GROCERY_ITEM_REMOVED',
    'GROCERY_MEAL_EMPTY', 'GROCERY_SYNC_FAILED'
]

def publish_list_replaced(plan_id: Optional[str], grocery_list: Any, reason: str):
    """Publish a grocery.list_replaced event (regenerate, clear, reorganize, add-meal)."""
    publish_event(GROCERY_LIST_REPLACED, {
        'plan_id': plan_id,
        'reason': reason,
        'sections': len(getattr(grocery_list, 'sections', []) or []),
        'items': len(grocery_list) if grocery_list is not None else 0
    })

def publish_item_upserted(plan_id: Optional[str], item: Any, action: str):
    """Publish a grocery.item_upserted event; action is added/checked/unchecked."""
    publish_event(GROCERY_ITEM_UPSERTED, {
        'plan_id': plan_id,
        'item': item,
        'action': action
    })

def publish_item_removed(plan_id: Optional[str], item: Any):
    publish_event(GROCERY_ITEM_REMOVED, {
        'plan_id': plan_id,
        'item': item
    })

def publish_meal_empty(plan_id: Optional[str], meal: str):
    """Publish that a meal contributed 0 items to a build."""
    publish_event(GROCERY_MEAL_EMPTY, {
        'plan_id': plan_id,
        'meal': meal
    })

def publish_sync_failed(plan_id: Optional[str], command: str, error: Exception):
    """Publish a store failure after the local change was rolled back."""
    publish_event(GROCERY_SYNC_FAILED, {
        'plan_id': plan_id,
        'command': command,
        'error': str(error)
    })
