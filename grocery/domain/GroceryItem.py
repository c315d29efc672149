"""GroceryItem domain entity: one line of the shopping list, owned by a department."""
from typing import List, Optional
from uuid import uuid4


def new_item_id() -> str:
    return str(uuid4())


class GroceryItem:
    def __init__(self, name: str = "", quantity: Optional[str] = None, department: Optional[str] = None,
                 is_checked: bool = False, item_id: Optional[str] = None,
                 related_meal_id: Optional[str] = None, related_meal_name: Optional[str] = None,
                 related_meal_names: Optional[List[str]] = None, manual: bool = False,
                 related_meal_ids: Optional[List[str]] = None):
        self.id = item_id or new_item_id()
        self.name = (name or "").strip()
        self.quantity = quantity
        self.department = department
        self.is_checked = bool(is_checked)
        self.related_meal_id = related_meal_id
        self.related_meal_name = related_meal_name
        # Avoid mutable default arguments
        if related_meal_names is not None:
            self.related_meal_names = related_meal_names[:]
        else:
            self.related_meal_names = [related_meal_name] if related_meal_name else []
        if related_meal_ids is not None:
            self.related_meal_ids = [str(m) for m in related_meal_ids]
        else:
            self.related_meal_ids = [related_meal_id] if related_meal_id else []
        self.manual = bool(manual)

    @property
    def key(self) -> str:
        '''Case-insensitive name used for deduplication.'''
        return self.name.lower()

    def add_related_meal(self, meal_name: Optional[str], meal_id: Optional[str] = None):
        '''Records another meal that needs this item (lookup only).'''
        if meal_name and meal_name not in self.related_meal_names:
            self.related_meal_names.append(meal_name)
        if meal_id and meal_id not in self.related_meal_ids:
            self.related_meal_ids.append(meal_id)

    def copy(self) -> "GroceryItem":
        return GroceryItem.from_dict(self.to_dict())

    def __str__(self) -> str:
        parts = [self.name]
        if self.quantity:
            parts.append(f"({self.quantity})")
        if self.is_checked:
            parts.append("[x]")
        return " ".join(parts)

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a GroceryItem from its persisted dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        meal_id = d.get("relatedMealId", d.get("mealId"))
        quantity = d.get("quantity")
        return GroceryItem(
            name=str(d.get("name") or ""),
            quantity=str(quantity) if quantity not in (None, "") else None,
            department=d.get("department"),
            is_checked=bool(d.get("isChecked", False)),
            item_id=d.get("id"),
            related_meal_id=str(meal_id) if meal_id is not None else None,
            related_meal_name=d.get("relatedMealName"),
            related_meal_names=d.get("relatedMealNames"),
            manual=bool(d.get("manual", False)),
            related_meal_ids=d.get("relatedMealIds"),
        )

    def to_dict(self):
        '''Converts the GroceryItem to a dictionary for JSON persistence.'''
        data = {
            "id": self.id,
            "name": self.name,
            "department": self.department,
            "isChecked": self.is_checked,
            "relatedMealNames": self.related_meal_names[:],
            "relatedMealIds": self.related_meal_ids[:],
            "manual": self.manual,
        }
        if self.quantity is not None:
            data["quantity"] = self.quantity
        if self.related_meal_id is not None:
            data["relatedMealId"] = self.related_meal_id
        if self.related_meal_name is not None:
            data["relatedMealName"] = self.related_meal_name
        return data
