import httpx
import pytest
from grocery.api.api_run import app
from grocery.api.routes import store as store_routes
from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.errors import PersistenceError
from grocery.infra.GroceryList_Repository import JsonFileGroceryListStore
from grocery.infra.Remote_GroceryList_Repository import RemoteGroceryListStore
from grocery.logic.shopping.list_builder import build_grocery_list
from grocery.logic.shopping.sync_engine import GrocerySyncEngine


@pytest.fixture
def file_store(tmp_path):
    """Point the store routes at a temporary JSON file (don't alter the real one)."""
    fs = JsonFileGroceryListStore(tmp_path / "grocery_lists.json")
    app.dependency_overrides[store_routes.get_file_store] = lambda: fs
    yield fs
    app.dependency_overrides.pop(store_routes.get_file_store, None)


def _client(**kwargs):
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test", **kwargs)


@pytest.mark.asyncio
async def test_remote_store_round_trip(file_store):
    async with _client() as ac:
        remote = RemoteGroceryListStore(client=ac)

        # === 1. Unknown plan ===
        assert await remote.current("plan-7") is None

        # === 2. Replace, then read back ===
        built = build_grocery_list([{"id": "1", "name": "Tacos", "ingredients": ["Ground beef", "Salt"]}])
        saved = await remote.replace("plan-7", built)
        assert saved.id == "plan-7"
        assert [s.name for s in saved.sections] == ["Meat & Seafood", "Spices & Herbs"]
        assert file_store.get("plan-7").to_dict() == saved.to_dict()

        # === 3. Item upsert and delete answer with the whole list ===
        milk = GroceryItem("Milk", "1 gallon", "Dairy & Eggs")
        result = await remote.upsert_item("plan-7", milk)
        assert len(result) == 3
        result = await remote.delete_item("plan-7", milk.id)
        assert result.get_section("Dairy & Eggs") is None


@pytest.mark.asyncio
async def test_sync_engine_over_http(file_store):
    async with _client() as ac:
        engine = GrocerySyncEngine("plan-8", RemoteGroceryListStore(client=ac))
        result = await engine.add_item("Milk", "1 gallon")
        milk = result.sections[0].items[0]
        await engine.check(milk.id)
        stored = file_store.get("plan-8")
        assert stored.find_item(milk.id)[1].is_checked is True


@pytest.mark.asyncio
async def test_rejected_write_is_persistence_error():
    def handler(request: httpx.Request):
        return httpx.Response(500, text="disk full")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://store") as ac:
        remote = RemoteGroceryListStore(client=ac)
        with pytest.raises(PersistenceError):
            await remote.replace("plan", build_grocery_list([]))


@pytest.mark.asyncio
async def test_unreachable_store_rolls_back_engine():
    def handler(request: httpx.Request):
        if request.method == "GET":
            return httpx.Response(404, json={"error": "No grocery list"})
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://store") as ac:
        engine = GrocerySyncEngine("plan", RemoteGroceryListStore(client=ac))
        with pytest.raises(PersistenceError):
            await engine.add_item("Milk")
        assert engine.grocery_list.sections == []
