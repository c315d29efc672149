"""Persisted grocery lists.

GroceryListStore is the interface the sync engine talks to; every operation
returns the resulting canonical list. JsonFileGroceryListStore keeps all
lists in one JSON document keyed by plan id:

    { "<plan_id>": { "id": ..., "sections": [ { "name": ..., "items": [...] } ] } }
"""
import asyncio
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional, Union

from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.GroceryList import GroceryList
from grocery.domain.errors import PersistenceError
from grocery.infra.paths import GROCERY_LISTS_FILE

logger = logging.getLogger(__name__)


class GroceryListStore:
    """Async keyed store of grocery list documents."""

    async def current(self, plan_id: str) -> Optional[GroceryList]:
        raise NotImplementedError

    async def replace(self, plan_id: str, grocery_list: GroceryList) -> GroceryList:
        raise NotImplementedError

    async def upsert_item(self, plan_id: str, item: GroceryItem) -> GroceryList:
        raise NotImplementedError

    async def delete_item(self, plan_id: str, item_id: str) -> GroceryList:
        raise NotImplementedError


class JsonFileGroceryListStore(GroceryListStore):
    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path) if path is not None else GROCERY_LISTS_FILE
        # Read-modify-write of the shared document must not interleave
        self._lock = Lock()

    # --- file helpers ---
    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                store = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read grocery lists from {self.path}: {e}") from e
        return store if isinstance(store, dict) else {}

    def _atomic_write(self, store: Dict[str, Any]):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".grocery_", suffix=".json")
        except OSError as e:
            raise PersistenceError(f"Cannot write grocery lists to {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(store, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, str(self.path))
        except OSError as e:
            raise PersistenceError(f"Cannot write grocery lists to {self.path}: {e}") from e
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _mutate(self, plan_id: str, change) -> GroceryList:
        with self._lock:
            store = self._load()
            grocery_list = GroceryList.from_dict(store.get(plan_id) or {"id": plan_id})
            grocery_list.id = plan_id
            replacement = change(grocery_list)
            if replacement is not None:
                grocery_list = replacement
            store[plan_id] = grocery_list.to_dict()
            self._atomic_write(store)
        return grocery_list

    # --- synchronous API (used by the store HTTP routes) ---
    def get(self, plan_id: str) -> Optional[GroceryList]:
        with self._lock:
            doc = self._load().get(plan_id)
        if doc is None:
            return None
        grocery_list = GroceryList.from_dict(doc)
        grocery_list.id = plan_id
        return grocery_list

    def put(self, plan_id: str, grocery_list: GroceryList) -> GroceryList:
        def change(_current):
            fresh = grocery_list.copy()
            fresh.id = plan_id
            return fresh
        return self._mutate(plan_id, change)

    def patch_item(self, plan_id: str, item: GroceryItem) -> GroceryList:
        def change(current: GroceryList):
            current.upsert_item(item.copy())
        return self._mutate(plan_id, change)

    def remove(self, plan_id: str, item_id: str) -> GroceryList:
        def change(current: GroceryList):
            if current.has_item(item_id):
                current.remove_item(item_id)
            else:
                logger.debug("Delete of unknown item %s on list %s ignored", item_id, plan_id)
        return self._mutate(plan_id, change)

    def list_ids(self):
        with self._lock:
            return sorted(self._load().keys())

    # --- GroceryListStore ---
    async def current(self, plan_id: str) -> Optional[GroceryList]:
        return await asyncio.to_thread(self.get, plan_id)

    async def replace(self, plan_id: str, grocery_list: GroceryList) -> GroceryList:
        return await asyncio.to_thread(self.put, plan_id, grocery_list)

    async def upsert_item(self, plan_id: str, item: GroceryItem) -> GroceryList:
        return await asyncio.to_thread(self.patch_item, plan_id, item)

    async def delete_item(self, plan_id: str, item_id: str) -> GroceryList:
        return await asyncio.to_thread(self.remove, plan_id, item_id)


__all__ = ['GroceryListStore', 'JsonFileGroceryListStore']
