"""Read-model projections for the grocery list page.

None of these mutate the list: the "completed" group is computed from
is_checked, not stored separately.
"""
from typing import Any, Dict, List, Optional

from grocery.domain.GroceryList import GroceryList
from grocery.utilities.constants import COMPLETED_DEPARTMENT


def progress(grocery_list: GroceryList) -> Dict[str, int]:
    checked = len(grocery_list.checked_items())
    return {'checked': checked, 'total': len(grocery_list)}


def split_completed(grocery_list: GroceryList) -> Dict[str, Any]:
    """Active departments (unchecked items only) plus a flat completed group.

    A department whose items are all checked is kept with an empty item list
    so the page layout does not jump while shopping.
    """
    sections: List[Dict[str, Any]] = []
    completed: List[Dict[str, Any]] = []
    for section in grocery_list.sections:
        active = []
        for item in section.items:
            if item.is_checked:
                completed.append(item.to_dict())
            else:
                active.append(item.to_dict())
        if section.name != COMPLETED_DEPARTMENT:
            sections.append({'name': section.name, 'items': active})
    return {'id': grocery_list.id, 'sections': sections, 'completed': completed,
            'progress': progress(grocery_list)}


def filter_sections(grocery_list: GroceryList, search: Optional[str] = None,
                    department: Optional[str] = None) -> List[Dict[str, Any]]:
    """Sections whose items match a case-insensitive name search and/or department."""
    term = (search or '').strip().lower()
    dept = (department or '').strip()
    result = []
    for section in grocery_list.sections:
        if dept and dept.lower() not in ('all', section.name.lower()):
            continue
        items = [i.to_dict() for i in section.items if not term or term in i.name.lower()]
        if items:
            result.append({'name': section.name, 'items': items})
    return result


__all__ = ['progress', 'split_completed', 'filter_sections']
