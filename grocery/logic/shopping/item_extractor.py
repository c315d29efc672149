"""Item extractor.

Turns a meal record from the meal-plan generator into grocery item candidates.
Meals are plain mappings: {id?, name, ingredients | mainIngredients | main_ingredients}.
Ingredient entries are free-text strings; {name, quantity?} mappings are also
accepted. Candidates carry no department yet.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from grocery.domain.GroceryItem import GroceryItem
from grocery.utilities.constants import INGREDIENT_FIELDS

logger = logging.getLogger(__name__)


def _meal_identity(meal: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    meal_id = meal.get('id')
    name = meal.get('name')
    return (
        str(meal_id) if meal_id not in (None, '') else None,
        name.strip() if isinstance(name, str) and name.strip() else None,
    )


def _ingredient_entries(meal: Dict[str, Any]) -> Optional[List[Any]]:
    for field in INGREDIENT_FIELDS:
        value = meal.get(field)
        if isinstance(value, (list, tuple)):
            return list(value)
    return None


def _candidate(entry: Any, meal_id: Optional[str], meal_name: Optional[str]) -> Optional[GroceryItem]:
    quantity = None
    if isinstance(entry, str):
        name = entry
    elif isinstance(entry, dict) and isinstance(entry.get('name'), str):
        name = entry['name']
        qty = entry.get('quantity')
        quantity = str(qty).strip() if qty not in (None, '') else None
    else:
        return None
    name = name.strip()
    if not name:
        return None
    return GroceryItem(name=name, quantity=quantity or None,
                       related_meal_id=meal_id, related_meal_name=meal_name)


def extract_items(meal: Any) -> List[GroceryItem]:
    """Extract grocery item candidates from one meal.

    A meal that is not a mapping, or has no recognized ingredient field,
    contributes zero candidates; this is logged, never raised.
    """
    if not isinstance(meal, dict):
        logger.warning("Skipping malformed meal of type %s", type(meal).__name__)
        return []
    meal_id, meal_name = _meal_identity(meal)
    entries = _ingredient_entries(meal)
    if entries is None:
        logger.warning("Meal %r has no ingredient list (expected one of %s)",
                       meal_name or meal_id, ", ".join(INGREDIENT_FIELDS))
        return []
    items = []
    for entry in entries:
        candidate = _candidate(entry, meal_id, meal_name)
        if candidate is not None:
            items.append(candidate)
    return items


def extract_all(meals: List[Any]) -> Tuple[List[GroceryItem], List[Dict[str, Any]]]:
    """Run extract_items over every meal.

    Returns:
        (candidates, contributions) where contributions holds one
        {"meal": <name or id>, "count": <int>} entry per meal, in input order.
    """
    candidates: List[GroceryItem] = []
    contributions: List[Dict[str, Any]] = []
    for idx, meal in enumerate(meals or []):
        items = extract_items(meal)
        label = None
        if isinstance(meal, dict):
            meal_id, meal_name = _meal_identity(meal)
            label = meal_name or meal_id
        contributions.append({'meal': label or f"meal #{idx + 1}", 'count': len(items)})
        candidates.extend(items)
    return candidates, contributions


__all__ = ['extract_items', 'extract_all']
