"""GroceryList aggregate: the sectioned shopping list of one meal plan."""
from typing import Iterator, List, Optional, Tuple

from grocery.domain.GroceryDepartment import GroceryDepartment
from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.errors import NotFoundError
from grocery.utilities.constants import COMPLETED_DEPARTMENT, DEFAULT_DEPARTMENT


def _section_sort_key(section: GroceryDepartment):
    # Completed Items always renders after the real departments
    return (section.name == COMPLETED_DEPARTMENT, section.name.lower())


class GroceryList:
    def __init__(self, list_id: Optional[str] = None, sections: Optional[List[GroceryDepartment]] = None):
        self.id = list_id
        self.sections: List[GroceryDepartment] = []
        for section in sections or []:
            existing = self.get_section(section.name)
            if existing is None:
                self.sections.append(section)
            else:
                for item in section.items:
                    existing.add_item(item)

    def get_section(self, name: str) -> Optional[GroceryDepartment]:
        for section in self.sections:
            if section.name == name:
                return section
        return None

    def get_or_create_section(self, name: str) -> GroceryDepartment:
        '''
        Returns the department with this name, appending an empty one if missing.
        '''
        section = self.get_section(name)
        if section is None:
            section = GroceryDepartment(name)
            self.sections.append(section)
        return section

    def add_item(self, item: GroceryItem, department: Optional[str] = None) -> GroceryItem:
        self.get_or_create_section(department or item.department or DEFAULT_DEPARTMENT).add_item(item)
        return item

    def find_item(self, item_id: str) -> Tuple[GroceryDepartment, GroceryItem]:
        '''
        Returns (department, item) for the id or raises NotFoundError.
        '''
        for section in self.sections:
            item = section.get_item(item_id)
            if item is not None:
                return section, item
        raise NotFoundError(item_id)

    def has_item(self, item_id: str) -> bool:
        return any(s.get_item(item_id) is not None for s in self.sections)

    def remove_item(self, item_id: str) -> GroceryItem:
        '''
        Deletes the item and prunes its department if that left it empty.
        '''
        section, _ = self.find_item(item_id)
        item = section.remove_item(item_id)
        if section.is_empty():
            self.sections.remove(section)
        return item

    def upsert_item(self, item: GroceryItem) -> GroceryItem:
        '''
        Replaces the item with the same id in place, or moves it when its
        department changed. Unknown ids are appended to their department.
        '''
        for section in self.sections:
            for idx, current in enumerate(section.items):
                if current.id != item.id:
                    continue
                if item.department in (None, section.name):
                    item.department = section.name
                    section.items[idx] = item
                    return item
                section.items.pop(idx)
                if section.is_empty():
                    self.sections.remove(section)
                return self.add_item(item)
        return self.add_item(item)

    def prune_empty(self):
        self.sections = [s for s in self.sections if not s.is_empty()]

    def sort_sections(self):
        self.sections.sort(key=_section_sort_key)

    def iter_items(self) -> Iterator[GroceryItem]:
        for section in self.sections:
            yield from section.items

    def unchecked_items(self) -> List[GroceryItem]:
        return [i for i in self.iter_items() if not i.is_checked]

    def checked_items(self) -> List[GroceryItem]:
        return [i for i in self.iter_items() if i.is_checked]

    def copy(self) -> "GroceryList":
        return GroceryList.from_dict(self.to_dict())

    def __len__(self) -> int:
        return sum(len(s) for s in self.sections)

    def __str__(self) -> str:
        return f"Grocery List {self.id}: " + "; ".join(str(s) for s in self.sections)

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a GroceryList from its persisted document. Sections without a name are dropped.'''
        d = dict(data) if isinstance(data, dict) else {}
        sections = [GroceryDepartment.from_dict(s) for s in d.get("sections") or []]
        return GroceryList(d.get("id"), [s for s in sections if s.name])

    def to_dict(self):
        '''Converts the GroceryList to its persisted document shape.'''
        return {"id": self.id, "sections": [s.to_dict() for s in self.sections]}
