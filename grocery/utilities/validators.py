"""
Input validation schemas using Pydantic for the grocery list API.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional


class AddItemInput(BaseModel):
    """Schema for a manually added item."""
    name: str = Field(..., max_length=200)
    quantity: Optional[str] = Field(None, max_length=100)
    section: Optional[str] = Field(None, max_length=100)

    @field_validator('name', 'quantity', 'section')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator('quantity', mode='before')
    @classmethod
    def quantity_as_text(cls, v):
        """Quantities are free text; accept numbers too."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class RegenerateInput(BaseModel):
    """Schema for a regenerate request.

    Meals stay raw dicts: a malformed meal must only drop its own items,
    never reject the whole request.
    """
    meals: List[Any] = Field(default_factory=list)


class AddMealInput(BaseModel):
    """Schema for adding a single meal's ingredients."""
    meal: Dict[str, Any]


class GroceryItemDocument(BaseModel):
    """Persisted item shape (camelCase keys)."""
    model_config = ConfigDict(extra='ignore')

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    quantity: Optional[str] = None
    department: Optional[str] = None
    isChecked: bool = False
    relatedMealId: Optional[str] = None
    relatedMealName: Optional[str] = None
    relatedMealNames: List[str] = Field(default_factory=list)
    relatedMealIds: Optional[List[str]] = None
    manual: bool = False

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Item names cannot be blank."""
        if not v.strip():
            raise ValueError('Item name cannot be empty')
        return v.strip()

    @field_validator('relatedMealId', 'quantity', mode='before')
    @classmethod
    def as_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('relatedMealIds', mode='before')
    @classmethod
    def ids_as_text(cls, v):
        if isinstance(v, list):
            return [str(m) for m in v]
        return v


class GroceryDepartmentDocument(BaseModel):
    name: str = Field(..., min_length=1)
    items: List[GroceryItemDocument] = Field(default_factory=list)


class GroceryListDocument(BaseModel):
    """Persisted list shape: {id, sections: [{name, items: [...]}]}."""
    id: Optional[str] = None
    sections: List[GroceryDepartmentDocument] = Field(default_factory=list)

    @field_validator('sections')
    @classmethod
    def unique_sections(cls, v):
        """Department names are keys: no duplicates."""
        names = [s.name for s in v]
        if len(names) != len(set(names)):
            raise ValueError('Duplicate department names')
        return v
