"""Sync/mutation engine for grocery lists.

One GrocerySyncEngine owns the local view of one plan's list. Every command
runs under that engine's asyncio.Lock, so commands against the same list are
applied one at a time, store round trip included. Lists of different plans
have separate engines and never wait on each other.

Commands apply their change to the local view first, then await the store,
and finally adopt the canonical list the store returns. If the store call
fails the local change is undone and a PersistenceError is raised; any other
store exception is converted to PersistenceError so callers only ever see the
grocery error types. regenerate is the exception to optimistic apply: the new
list is only shown once the store has accepted it, and a slow store leaves
the previous list in place.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.GroceryList import GroceryList
from grocery.domain.errors import NotFoundError, PersistenceError, ValidationError
from grocery.events.event_helpers import (
    publish_item_removed, publish_item_upserted, publish_list_replaced,
    publish_meal_empty, publish_sync_failed,
)
from grocery.infra.GroceryList_Repository import GroceryListStore
from grocery.logic.shopping.department_classifier import classify_department, known_departments
from grocery.logic.shopping.item_extractor import extract_items
from grocery.logic.shopping.list_builder import build_grocery_list, merge_meal_items, reorganize_list
from grocery.utilities.config import REGENERATE_TIMEOUT_SECONDS
from grocery.utilities.constants import COMPLETED_DEPARTMENT

logger = logging.getLogger(__name__)


class GrocerySyncEngine:
    def __init__(self, plan_id: str, store: GroceryListStore, *,
                 regenerate_timeout: float = REGENERATE_TIMEOUT_SECONDS,
                 classify: Callable[[str], str] = classify_department):
        self.plan_id = plan_id
        self.store = store
        self.regenerate_timeout = regenerate_timeout
        self._classify = classify
        self._view = GroceryList(plan_id)
        self._loaded = False
        self._lock = asyncio.Lock()

    # --- read model ---
    @property
    def grocery_list(self) -> GroceryList:
        return self._view

    @property
    def sections(self):
        return self._view.sections

    def find(self, item_id: str) -> Optional[GroceryItem]:
        try:
            return self._view.find_item(item_id)[1]
        except NotFoundError:
            return None

    # --- loading ---
    async def load(self) -> GroceryList:
        """(Re)read the canonical list from the store."""
        async with self._lock:
            return await self._load()

    async def ensure_loaded(self) -> GroceryList:
        if not self._loaded:
            async with self._lock:
                if not self._loaded:
                    await self._load()
        return self._view

    async def _load(self) -> GroceryList:
        try:
            current = await self.store.current(self.plan_id)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Cannot load grocery list {self.plan_id}: {e}") from e
        self._view = current if current is not None else GroceryList(self.plan_id)
        self._view.id = self.plan_id
        self._loaded = True
        return self._view

    # --- persistence discipline ---
    def _failure(self, command: str, error: Exception, stale: Optional[GroceryList]) -> PersistenceError:
        if isinstance(error, PersistenceError):
            failure = error
            if stale is not None:
                failure.stale_list = stale
        elif isinstance(error, asyncio.TimeoutError):
            failure = PersistenceError(f"{command} timed out after {self.regenerate_timeout}s", stale)
        else:
            failure = PersistenceError(f"{command} failed: {error}", stale)
        logger.warning("Grocery list %s: %s rolled back (%s)", self.plan_id, command, failure)
        publish_sync_failed(self.plan_id, command, failure)
        return failure

    async def _persist(self, command: str, call: Awaitable[GroceryList],
                       rollback: Callable[[], None]) -> GroceryList:
        try:
            canonical = await call
        except Exception as e:
            rollback()
            raise self._failure(command, e, self._view) from e
        canonical.id = self.plan_id
        self._view = canonical
        return canonical

    def _restore(self, snapshot: GroceryList) -> Callable[[], None]:
        def rollback():
            self._view = snapshot
        return rollback

    # --- commands ---
    async def regenerate(self, meals: List[Dict[str, Any]]) -> GroceryList:
        """Replace the whole list with one built from meals."""
        meals = list(meals or [])
        if not meals:
            raise ValidationError("At least one meal is needed to generate a grocery list")
        async with self._lock:
            await self._ensure_loaded_locked()
            built = build_grocery_list(meals, plan_id=self.plan_id, classify=self._classify)
            previous = self._view
            try:
                canonical = await asyncio.wait_for(self.store.replace(self.plan_id, built),
                                                   timeout=self.regenerate_timeout)
            except Exception as e:
                raise self._failure("regenerate", e, previous) from e
            canonical.id = self.plan_id
            self._view = canonical
        publish_list_replaced(self.plan_id, canonical, "regenerate")
        return canonical

    async def add_item(self, name: str, quantity: Optional[str] = None,
                       section: Optional[str] = None) -> GroceryList:
        """Add a manual item, classified unless a section is given."""
        clean = name.strip() if isinstance(name, str) else ""
        if not clean:
            raise ValidationError("Item name cannot be empty")
        qty = str(quantity).strip() if quantity is not None else ""
        async with self._lock:
            await self._ensure_loaded_locked()
            item = GroceryItem(name=clean, quantity=qty or None,
                               department=self._department_for(clean, section), manual=True)
            self._view.add_item(item)

            def rollback():
                if self._view.has_item(item.id):
                    self._view.remove_item(item.id)

            canonical = await self._persist("add_item", self.store.upsert_item(self.plan_id, item.copy()), rollback)
        publish_item_upserted(self.plan_id, item, "added")
        return canonical

    def _department_for(self, name: str, section: Optional[str]) -> str:
        '''Department for a manual item: the requested one, matched case-insensitively
        against existing and known departments, else the classifier's choice.'''
        wanted = section.strip() if isinstance(section, str) else ""
        if not wanted or wanted.lower() == COMPLETED_DEPARTMENT.lower():
            # Completed Items only ever holds checked items
            return self._classify(name)
        for dept in [s.name for s in self._view.sections] + known_departments():
            if dept.lower() == wanted.lower():
                return dept
        return wanted

    async def remove_item(self, item_id: str) -> GroceryList:
        """Delete an item; unknown ids are a no-op."""
        async with self._lock:
            await self._ensure_loaded_locked()
            snapshot = self._view.copy()
            try:
                removed = self._view.remove_item(item_id)
            except NotFoundError as e:
                logger.debug("remove_item on list %s ignored: %s", self.plan_id, e)
                return self._view
            canonical = await self._persist("remove_item", self.store.delete_item(self.plan_id, item_id),
                                            self._restore(snapshot))
        publish_item_removed(self.plan_id, removed)
        return canonical

    async def check(self, item_id: str) -> GroceryList:
        return await self._set_checked(item_id, True)

    async def uncheck(self, item_id: str) -> GroceryList:
        return await self._set_checked(item_id, False)

    async def _set_checked(self, item_id: str, checked: bool) -> GroceryList:
        command = "check" if checked else "uncheck"
        async with self._lock:
            await self._ensure_loaded_locked()
            try:
                section, item = self._view.find_item(item_id)
            except NotFoundError as e:
                logger.debug("%s on list %s ignored: %s", command, self.plan_id, e)
                return self._view
            if item.is_checked == checked:
                return self._view
            snapshot = self._view.copy()
            updated = item.copy()
            updated.is_checked = checked
            if not checked and section.name == COMPLETED_DEPARTMENT:
                # Back from the reorganize "Completed Items" group into a real department
                updated.department = self._classify(updated.name)
            self._view.upsert_item(updated)
            canonical = await self._persist(command, self.store.upsert_item(self.plan_id, updated.copy()),
                                            self._restore(snapshot))
        publish_item_upserted(self.plan_id, updated, "checked" if checked else "unchecked")
        return canonical

    async def clear_all(self) -> GroceryList:
        """Replace the list with an empty one."""
        async with self._lock:
            await self._ensure_loaded_locked()
            snapshot = self._view
            self._view = GroceryList(self.plan_id)
            canonical = await self._persist("clear_all", self.store.replace(self.plan_id, GroceryList(self.plan_id)),
                                            self._restore(snapshot))
        publish_list_replaced(self.plan_id, canonical, "clear")
        return canonical

    async def reorganize(self) -> GroceryList:
        """Reclassify unchecked items and group checked ones under Completed Items.

        A list without unchecked items is returned unchanged.
        """
        async with self._lock:
            await self._ensure_loaded_locked()
            if not self._view.unchecked_items():
                logger.debug("reorganize on list %s skipped: no unchecked items", self.plan_id)
                return self._view
            snapshot = self._view
            self._view = reorganize_list(snapshot, self._classify)
            canonical = await self._persist("reorganize", self.store.replace(self.plan_id, self._view.copy()),
                                            self._restore(snapshot))
        publish_list_replaced(self.plan_id, canonical, "reorganize")
        return canonical

    async def add_meal(self, meal: Dict[str, Any]) -> GroceryList:
        """Add one meal's ingredients unless the meal is already on the list."""
        if not isinstance(meal, dict):
            raise ValidationError("A meal must be an object with a name and an ingredient list")
        async with self._lock:
            await self._ensure_loaded_locked()
            if self._has_meal(meal):
                logger.debug("Meal %r already on list %s", meal.get('name'), self.plan_id)
                return self._view
            candidates = extract_items(meal)
            if not candidates:
                label = meal.get('name') or meal.get('id') or 'meal'
                logger.warning("Meal %r contributed 0 items to the grocery list", label)
                publish_meal_empty(self.plan_id, str(label))
                return self._view
            snapshot = self._view
            self._view = snapshot.copy()
            added = merge_meal_items(self._view, candidates, self._classify)
            if self._view.to_dict() == snapshot.to_dict():
                logger.debug("Meal %r changed nothing on list %s", meal.get('name'), self.plan_id)
                self._view = snapshot
                return snapshot
            canonical = await self._persist("add_meal", self.store.replace(self.plan_id, self._view.copy()),
                                            self._restore(snapshot))
        logger.info("Added meal %r to list %s (%d new items)", meal.get('name'), self.plan_id, added)
        publish_list_replaced(self.plan_id, canonical, "add_meal")
        return canonical

    def _has_meal(self, meal: Dict[str, Any]) -> bool:
        meal_id = meal.get('id')
        if meal_id not in (None, ''):
            return any(str(meal_id) in i.related_meal_ids for i in self._view.iter_items())
        name = meal.get('name')
        if isinstance(name, str) and name.strip():
            return any(name.strip() in i.related_meal_names for i in self._view.iter_items())
        return False

    async def _ensure_loaded_locked(self):
        if not self._loaded:
            await self._load()


class GroceryEngineRegistry:
    """One engine per plan id, all sharing a store."""

    def __init__(self, store: GroceryListStore, **engine_options):
        self.store = store
        self._engine_options = engine_options
        self._engines: Dict[str, GrocerySyncEngine] = {}

    async def get(self, plan_id: str) -> GrocerySyncEngine:
        engine = self._engines.get(plan_id)
        if engine is None:
            engine = GrocerySyncEngine(plan_id, self.store, **self._engine_options)
            self._engines[plan_id] = engine
        await engine.ensure_loaded()
        return engine


__all__ = ['GrocerySyncEngine', 'GroceryEngineRegistry']
