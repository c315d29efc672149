"""Grocery list builder.

Provides build_grocery_list(meals, plan_id=None): extract -> classify ->
dedupe by name -> partition by department -> prune -> assign fresh ids.
Also the in-place variants used by the sync engine: reorganize_list and
merge_meal_items.
"""
import logging
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional

from grocery.domain.GroceryItem import GroceryItem, new_item_id
from grocery.domain.GroceryList import GroceryList
from grocery.events.event_helpers import publish_meal_empty
from grocery.logic.shopping.department_classifier import classify_department
from grocery.logic.shopping.item_extractor import extract_all
from grocery.utilities.constants import COMPLETED_DEPARTMENT

logger = logging.getLogger(__name__)


def dedupe_items(items: List[GroceryItem]) -> List[GroceryItem]:
    """Keep the first item per case-insensitive name, in input order.

    Later duplicates only add their meal name and id to the survivor's
    related_meal_names and related_meal_ids.
    """
    unique: "OrderedDict[str, GroceryItem]" = OrderedDict()
    for item in items:
        kept = unique.get(item.key)
        if kept is None:
            unique[item.key] = item
        else:
            kept.add_related_meal(item.related_meal_name, item.related_meal_id)
    return list(unique.values())


def build_grocery_list(meals: List[Dict[str, Any]], *, plan_id: Optional[str] = None,
                       classify: Callable[[str], str] = classify_department) -> GroceryList:
    """Build a sectioned grocery list from a set of meals.

    Args:
        meals: Meal records ({id?, name, ingredients | mainIngredients | main_ingredients}).
        plan_id: Identifier of the owning meal plan, used as the list id.
        classify: Department classifier; defaults to the keyword taxonomy.

    Returns:
        GroceryList with departments sorted alphabetically, items in extraction
        order, no empty departments and a fresh id on every item. Calling it
        twice on the same meals gives the same lists up to item ids.
    """
    candidates, contributions = extract_all(meals)
    for contribution in contributions:
        if contribution['count'] == 0:
            logger.warning("Meal %r contributed 0 items to the grocery list", contribution['meal'])
            publish_meal_empty(plan_id, contribution['meal'])

    for item in candidates:
        item.department = classify(item.name)

    grocery_list = GroceryList(plan_id)
    for item in dedupe_items(candidates):
        item.id = new_item_id()
        grocery_list.add_item(item)
    grocery_list.prune_empty()
    grocery_list.sort_sections()
    logger.info("Built grocery list %s: %d items in %d departments from %d meals",
                plan_id, len(grocery_list), len(grocery_list.sections), len(contributions))
    return grocery_list


def reorganize_list(grocery_list: GroceryList,
                    classify: Callable[[str], str] = classify_department) -> GroceryList:
    """Return a reclassified copy of the list.

    Every unchecked item is classified again from its current name; checked
    items keep their state and are grouped under COMPLETED_DEPARTMENT. Item
    ids and relative order are preserved, empty departments are dropped.
    """
    result = GroceryList(grocery_list.id)
    completed: List[GroceryItem] = []
    for item in grocery_list.iter_items():
        moved = item.copy()
        if moved.is_checked:
            completed.append(moved)
        else:
            result.add_item(moved, classify(moved.name))
    for item in completed:
        result.add_item(item, COMPLETED_DEPARTMENT)
    result.prune_empty()
    result.sort_sections()
    return result


def merge_meal_items(grocery_list: GroceryList, candidates: List[GroceryItem],
                     classify: Callable[[str], str] = classify_department) -> int:
    """Add one meal's candidates to an existing list in place.

    Names already present as generated items only gain the meal as a related
    meal; manual items are never merged with. Returns the number of new items.
    """
    generated = {i.key: i for i in grocery_list.iter_items() if not i.manual}
    added = 0
    for item in dedupe_items(candidates):
        existing = generated.get(item.key)
        if existing is not None:
            existing.add_related_meal(item.related_meal_name, item.related_meal_id)
            continue
        item.id = new_item_id()
        grocery_list.add_item(item, classify(item.name))
        generated[item.key] = item
        added += 1
    grocery_list.sort_sections()
    return added


__all__ = ['build_grocery_list', 'dedupe_items', 'reorganize_list', 'merge_meal_items']
