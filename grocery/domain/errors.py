"""Typed failures raised by the grocery list core.

Classification never fails: ambiguous names resolve to the first matching
department in the taxonomy, so there is no error type for it.
"""
from typing import Optional


class GroceryError(Exception):
    """Base class for grocery list errors."""


class ValidationError(GroceryError, ValueError):
    """Rejected input: empty item name, empty meal set, malformed meal."""


class NotFoundError(GroceryError, KeyError):
    """A mutation targeted an item id that is not on the list."""

    def __init__(self, item_id: str):
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"Item '{self.item_id}' not found"


class PersistenceError(GroceryError):
    """The store was unreachable or rejected the write.

    stale_list holds the list the caller should keep showing, when known.
    """

    def __init__(self, message: str, stale_list: Optional[object] = None):
        super().__init__(message)
        self.stale_list = stale_list


__all__ = ['GroceryError', 'ValidationError', 'NotFoundError', 'PersistenceError']
