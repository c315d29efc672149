"""GroceryDepartment: a named shopping section holding an ordered list of items."""
from typing import List, Optional

from grocery.domain.GroceryItem import GroceryItem


class GroceryDepartment:
    def __init__(self, name: str, items: Optional[List[GroceryItem]] = None):
        self.name = name
        self.items: List[GroceryItem] = list(items) if items else []

    def add_item(self, item: GroceryItem):
        '''
        Appends an item and stamps it with this department's name.
        '''
        item.department = self.name
        self.items.append(item)

    def remove_item(self, item_id: str) -> Optional[GroceryItem]:
        '''
        Removes the item with the given id and returns it (None if absent).
        '''
        for idx, item in enumerate(self.items):
            if item.id == item_id:
                return self.items.pop(idx)
        return None

    def get_item(self, item_id: str) -> Optional[GroceryItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def is_empty(self) -> bool:
        return not self.items

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        return f"{self.name}: " + ", ".join(str(i) for i in self.items)

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        name = str(d.get("name") or "")
        dept = GroceryDepartment(name)
        for raw in d.get("items") or []:
            item = GroceryItem.from_dict(raw)
            if item.name:
                dept.add_item(item)
        return dept

    def to_dict(self):
        return {"name": self.name, "items": [i.to_dict() for i in self.items]}
