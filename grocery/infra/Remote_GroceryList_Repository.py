"""HTTP client for a remote grocery list store.

Talks to the /store/grocery-lists routes (see grocery.api.routes.store):

    GET    /store/grocery-lists/{plan_id}                 -> list | 404
    PUT    /store/grocery-lists/{plan_id}                 -> list
    PATCH  /store/grocery-lists/{plan_id}/items           -> list
    DELETE /store/grocery-lists/{plan_id}/items/{item_id} -> list

Transport errors and non-2xx answers surface as PersistenceError.
"""
import logging
from typing import Optional

import httpx

from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.GroceryList import GroceryList
from grocery.domain.errors import PersistenceError
from grocery.infra.GroceryList_Repository import GroceryListStore
from grocery.utilities.config import GROCERY_STORE_URL, STORE_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

STORE_PREFIX = "/store/grocery-lists"


class RemoteGroceryListStore(GroceryListStore):
    def __init__(self, base_url: Optional[str] = None, client: Optional[httpx.AsyncClient] = None,
                 timeout: float = STORE_TIMEOUT_SECONDS):
        if client is None:
            client = httpx.AsyncClient(base_url=base_url or GROCERY_STORE_URL, timeout=timeout)
        self._client = client

    async def aclose(self):
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{STORE_PREFIX}{path}"
        try:
            resp = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Grocery store %s %s failed: %s", method, url, e)
            raise PersistenceError(f"Grocery store unreachable: {e}") from e
        return resp

    @staticmethod
    def _as_list(resp: httpx.Response, plan_id: str) -> GroceryList:
        if resp.status_code >= 400:
            raise PersistenceError(f"Grocery store rejected the request ({resp.status_code}): {resp.text}")
        try:
            grocery_list = GroceryList.from_dict(resp.json())
        except ValueError as e:
            raise PersistenceError(f"Grocery store returned invalid JSON: {e}") from e
        grocery_list.id = plan_id
        return grocery_list

    async def current(self, plan_id: str) -> Optional[GroceryList]:
        resp = await self._request("GET", f"/{plan_id}")
        if resp.status_code == 404:
            return None
        return self._as_list(resp, plan_id)

    async def replace(self, plan_id: str, grocery_list: GroceryList) -> GroceryList:
        resp = await self._request("PUT", f"/{plan_id}", json=grocery_list.to_dict())
        return self._as_list(resp, plan_id)

    async def upsert_item(self, plan_id: str, item: GroceryItem) -> GroceryList:
        resp = await self._request("PATCH", f"/{plan_id}/items", json=item.to_dict())
        return self._as_list(resp, plan_id)

    async def delete_item(self, plan_id: str, item_id: str) -> GroceryList:
        resp = await self._request("DELETE", f"/{plan_id}/items/{item_id}")
        return self._as_list(resp, plan_id)


__all__ = ['RemoteGroceryListStore']
