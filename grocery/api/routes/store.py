"""Persisted grocery list store over HTTP.

These routes are the "remote store" side of RemoteGroceryListStore: plain
keyed get/replace/upsert/delete on the JSON file store, each answering with
the resulting canonical list.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.GroceryList import GroceryList
from grocery.infra.GroceryList_Repository import JsonFileGroceryListStore
from grocery.utilities.validators import GroceryItemDocument, GroceryListDocument

router = APIRouter(prefix="/store/grocery-lists", tags=["store"])
logger = logging.getLogger(__name__)

_file_store: Optional[JsonFileGroceryListStore] = None


def get_file_store() -> JsonFileGroceryListStore:
    global _file_store
    if _file_store is None:
        _file_store = JsonFileGroceryListStore()
    return _file_store


@router.get("/{plan_id}")
def store_current(plan_id: str, store: JsonFileGroceryListStore = Depends(get_file_store)):
    grocery_list = store.get(plan_id)
    if grocery_list is None:
        return JSONResponse(status_code=404, content={"error": f"No grocery list for plan '{plan_id}'"})
    return grocery_list.to_dict()


@router.put("/{plan_id}")
def store_replace(plan_id: str, payload: GroceryListDocument,
                  store: JsonFileGroceryListStore = Depends(get_file_store)):
    grocery_list = GroceryList.from_dict(payload.model_dump())
    logger.info("Store replace %s: %d items", plan_id, len(grocery_list))
    return store.put(plan_id, grocery_list).to_dict()


@router.patch("/{plan_id}/items")
def store_upsert_item(plan_id: str, payload: GroceryItemDocument,
                      store: JsonFileGroceryListStore = Depends(get_file_store)):
    item = GroceryItem.from_dict(payload.model_dump(exclude_none=True))
    return store.patch_item(plan_id, item).to_dict()


@router.delete("/{plan_id}/items/{item_id}")
def store_delete_item(plan_id: str, item_id: str,
                      store: JsonFileGroceryListStore = Depends(get_file_store)):
    return store.remove(plan_id, item_id).to_dict()
