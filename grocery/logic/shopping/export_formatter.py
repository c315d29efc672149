"""Plain-text export of the unchecked part of a grocery list.

Output depends only on the list's state (section order, item order, names,
quantities), so repeated calls on an unchanged list are byte-identical.
"""
from typing import List, Optional

from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.GroceryList import GroceryList
from grocery.utilities.config import EXPORT_INCLUDE_HEADERS, EXPORT_INCLUDE_QUANTITIES
from grocery.utilities.constants import BULLET, COMPLETED_DEPARTMENT, PLAIN_TEXT_TITLE


def _item_line(item: GroceryItem, include_quantities: bool) -> str:
    if include_quantities and item.quantity:
        return f"{item.name} ({item.quantity})"
    return item.name


def to_plain_text(grocery_list: GroceryList, *, include_headers: Optional[bool] = None,
                  include_quantities: Optional[bool] = None) -> str:
    """Render unchecked items as a shopping list string.

    Args:
        grocery_list: List to export.
        include_headers: Title plus "Department:" headers and bullets; defaults
            to EXPORT_INCLUDE_HEADERS.
        include_quantities: Append " (quantity)" when an item has one; defaults
            to EXPORT_INCLUDE_QUANTITIES.

    Returns:
        Without headers: one line per unchecked item, nothing else.
        With headers:

            MY GROCERY LIST

            Produce:
            • Onion

            Spices & Herbs:
            • Salt
    """
    if include_headers is None:
        include_headers = EXPORT_INCLUDE_HEADERS
    if include_quantities is None:
        include_quantities = EXPORT_INCLUDE_QUANTITIES

    blocks: List[List[str]] = []
    for section in grocery_list.sections:
        if section.name == COMPLETED_DEPARTMENT:
            continue
        lines = [_item_line(i, include_quantities) for i in section.items if not i.is_checked]
        if not lines:
            continue
        if include_headers:
            lines = [f"{section.name}:"] + [f"{BULLET} {line}" for line in lines]
        blocks.append(lines)

    if not include_headers:
        return "\n".join(line for block in blocks for line in block)
    parts = [PLAIN_TEXT_TITLE] + ["\n".join(block) for block in blocks]
    return "\n\n".join(parts)


__all__ = ['to_plain_text']
