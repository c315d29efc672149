from fastapi import (
    FastAPI,
    Request,
    Query,
    Depends,
    Response
)
from fastapi.responses import JSONResponse, PlainTextResponse

from typing import Optional
import logging

from grocery.domain.GroceryList import GroceryList
from grocery.domain.errors import PersistenceError, ValidationError
from grocery.infra.GroceryList_Repository import JsonFileGroceryListStore
from grocery.infra.Remote_GroceryList_Repository import RemoteGroceryListStore
from grocery.infra.pdf_utils import generate_pdf_for_list
from grocery.logic.shopping.department_classifier import known_departments
from grocery.logic.shopping.export_formatter import to_plain_text
from grocery.logic.shopping.presentation import filter_sections, progress, split_completed
from grocery.logic.shopping.sync_engine import GroceryEngineRegistry, GrocerySyncEngine
from grocery.utilities.config import GROCERY_STORE_URL
from grocery.utilities.validators import AddItemInput, AddMealInput, RegenerateInput
from grocery.events.web_observers import start as start_event_observers, get_events as get_web_events

# Routers
from grocery.api.routes import store

# Logging
logger = logging.getLogger("grocery_app")

# Initialize FastAPI app
app = FastAPI(title="Meal Planner Grocery List API")

# Include routers
app.include_router(store.router)

_registry: Optional[GroceryEngineRegistry] = None


def get_registry() -> GroceryEngineRegistry:
    """Process-wide engine registry; the store comes from configuration."""
    global _registry
    if _registry is None:
        if GROCERY_STORE_URL:
            logger.info("Using remote grocery store at %s", GROCERY_STORE_URL)
            _registry = GroceryEngineRegistry(RemoteGroceryListStore(GROCERY_STORE_URL))
        else:
            _registry = GroceryEngineRegistry(JsonFileGroceryListStore())
    return _registry


async def _engine(plan_id: str, registry: GroceryEngineRegistry) -> GrocerySyncEngine:
    return await registry.get(plan_id)


def _payload(grocery_list: GroceryList) -> dict:
    data = grocery_list.to_dict()
    data["progress"] = progress(grocery_list)
    return data


@app.on_event("startup")
def _startup_web_observers():
    """Register event bus subscribers for web alerts when the app starts."""
    start_event_observers()
    logger.info("Web observers for grocery events started")


# -------------------- Error mapping --------------------
@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(PersistenceError)
async def _persistence_error(request: Request, exc: PersistenceError):
    logger.error("Grocery store failure on %s %s: %s", request.method, request.url.path, exc)
    content = {"error": str(exc)}
    if isinstance(exc.stale_list, GroceryList):
        content["list"] = _payload(exc.stale_list)
    return JSONResponse(status_code=503, content=content)


# -------------------- API: Departments & events --------------------
@app.get('/api/departments')
def api_departments():
    return {"departments": known_departments()}


@app.get('/api/grocery-list/events')
def api_grocery_events(since: Optional[int] = Query(default=None),
                       plan_id: Optional[str] = Query(default=None)):
    return get_web_events(since, plan_id)


# -------------------- API: Grocery list read model --------------------
@app.get('/api/grocery-list/{plan_id}')
async def api_grocery_list(plan_id: str, registry: GroceryEngineRegistry = Depends(get_registry)):
    engine = await _engine(plan_id, registry)
    return _payload(engine.grocery_list)


@app.get('/api/grocery-list/{plan_id}/view')
async def api_grocery_list_view(plan_id: str,
                                search: Optional[str] = Query(default=None),
                                department: Optional[str] = Query(default=None),
                                registry: GroceryEngineRegistry = Depends(get_registry)):
    engine = await _engine(plan_id, registry)
    view = split_completed(engine.grocery_list)
    if search or department:
        view["sections"] = filter_sections(engine.grocery_list, search, department)
    return view


# -------------------- API: Grocery list commands --------------------
@app.post('/api/grocery-list/{plan_id}/regenerate')
async def api_regenerate(plan_id: str, payload: RegenerateInput,
                         registry: GroceryEngineRegistry = Depends(get_registry)):
    engine = await _engine(plan_id, registry)
    logger.info("Regenerate grocery list %s from %d meals", plan_id, len(payload.meals))
    return _payload(await engine.regenerate(payload.meals))


@app.post('/api/grocery-list/{plan_id}/add-meal')
async def api_add_meal(plan_id: str, payload: AddMealInput,
                       registry: GroceryEngineRegistry = Depends(get_registry)):
    engine = await _engine(plan_id, registry)
    return _payload(await engine.add_meal(payload.meal))


@app.post('/api/grocery-list/{plan_id}/items')
async def api_add_item(plan_id: str, payload: AddItemInput,
                       registry: GroceryEngineRegistry = Depends(get_registry)):
    engine = await _engine(plan_id, registry)
    return _payload(await engine.add_item(payload.name, payload.quantity, payload.section))


@app.delete('/api/grocery-list/{plan_id}/items/{item_id}')
async def api_remove_item(plan_id: str, item_id: str,
                          registry: GroceryEngineRegistry = Depends(get_registry)):
    engine = await _engine(plan_id, registry)
    return _payload(await engine.remove_item(item_id))


@app.post('/api/grocery-list/{plan_id}/items/{item_id}/check')
async def api_check_item(plan_id: str, item_id: str,
                         registry: GroceryEngineRegistry = Depends(get_registry)):
    engine = await _engine(plan_id, registry)
    return _payload(await engine.check(item_id))


@app.post('/api/grocery-list/{plan_id}/items/{item_id}/uncheck')
async def api_uncheck_item(plan_id: str, item_id: str,
                           registry: GroceryEngineRegistry = Depends(get_registry)):
    engine = await _engine(plan_id, registry)
    return _payload(await engine.uncheck(item_id))


@app.post('/api/grocery-list/{plan_id}/clear')
async def api_clear(plan_id: str, registry: GroceryEngineRegistry = Depends(get_registry)):
    engine = await _engine(plan_id, registry)
    return _payload(await engine.clear_all())


@app.post('/api/grocery-list/{plan_id}/reorganize')
async def api_reorganize(plan_id: str, registry: GroceryEngineRegistry = Depends(get_registry)):
    engine = await _engine(plan_id, registry)
    return _payload(await engine.reorganize())


# -------------------- API: Export --------------------
@app.get('/api/grocery-list/{plan_id}/export.txt', response_class=PlainTextResponse)
async def api_export_text(plan_id: str,
                          headers: Optional[bool] = Query(default=None),
                          quantities: Optional[bool] = Query(default=None),
                          registry: GroceryEngineRegistry = Depends(get_registry)):
    engine = await _engine(plan_id, registry)
    return PlainTextResponse(to_plain_text(engine.grocery_list, include_headers=headers,
                                           include_quantities=quantities))


@app.get('/api/grocery-list/{plan_id}/export.pdf')
async def api_export_pdf(plan_id: str, registry: GroceryEngineRegistry = Depends(get_registry)):
    engine = await _engine(plan_id, registry)
    pdf_bytes = generate_pdf_for_list(engine.grocery_list)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=grocery_list_{plan_id}.pdf"
        }
    )
