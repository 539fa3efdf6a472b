"""
Catalog API Endpoint
FastAPI router exposing catalog engine sessions to a host page

A host creates one session per page view, forwards user intents and delegated
UI events, and renders the returned view snapshot.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...database.settings_storage import SettingsStorage
from ...exceptions import CatalogError, InvalidPageSizeError, SessionNotFoundError
from ...models.catalog import ViewMode
from ...models.view import RenderedView
from ...services.catalog.session import CatalogSession, CatalogSessionRegistry, build_catalog_session
from ...services.clients.availability_client import AvailabilityService
from ...services.clients.cart_client import CartService
from ...services.clients.search_client import SearchService
from ...services.config.configuration_service import ConfigurationService
from ...services.notifications.channels import Notification
from ...services.render.actions import RenderAction
from ...utils.logging_context import bind_catalog_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/catalog", tags=["catalog"])


class CatalogDependencies:
    """Collaborators shared by every session created through the API"""

    def __init__(
        self,
        search: SearchService,
        storage: SettingsStorage,
        registry: CatalogSessionRegistry,
        config_service: ConfigurationService,
        cart: Optional[CartService] = None,
        availability: Optional[AvailabilityService] = None,
    ):
        self.search = search
        self.storage = storage
        self.registry = registry
        self.config_service = config_service
        self.cart = cart
        self.availability = availability


# Dependency injection placeholder (overridden in main.py)
def get_catalog_dependencies_dep() -> CatalogDependencies:
    """Dependency injection placeholder for catalog collaborators - overridden in main.py"""
    raise RuntimeError("Catalog dependencies not initialized")


class IntentName(str, Enum):
    SET_QUERY = "set_query"
    INPUT_QUERY = "input_query"
    SET_PAGE = "set_page"
    NEXT_PAGE = "next_page"
    PREV_PAGE = "prev_page"
    SET_PAGE_SIZE = "set_page_size"
    SET_SORT = "set_sort"
    SORT_BY_COLUMN = "sort_by_column"
    SET_FILTER = "set_filter"
    REMOVE_FILTER = "remove_filter"
    CLEAR_ALL_FILTERS = "clear_all_filters"
    SET_DISPLAY_DENSITY = "set_display_density"
    TOGGLE_SELECTION = "toggle_selection"
    SELECT_ALL = "select_all"
    CHANGE_CITY = "change_city"
    RELOAD = "reload"


class CreateSessionRequest(BaseModel):
    """
    Request model for opening a catalog page

    `browser_session_id` scopes the session filters. Hosts send the value
    returned by the previous page view so filters carry across navigation.
    """

    client_id: str
    browser_session_id: Optional[str] = Field(default=None, pattern=r"^[a-zA-Z0-9_-]{1,100}$")
    view_mode: ViewMode = ViewMode.GRID
    url: str = "/shop"


class IntentRequest(BaseModel):
    """
    Request model for one user intent

    `key` is used by set_filter/remove_filter; `value` carries the intent's
    argument (query text, page number, sort key, city id...).
    """

    intent: IntentName
    key: Optional[str] = None
    value: Optional[Any] = None


class ActionRequest(BaseModel):
    """Delegated UI event: element descriptors from the target up to the container"""

    path: List[Dict[str, Any]] = Field(default_factory=list)


class SessionResponse(BaseModel):
    """Response model for every session endpoint"""

    session_id: str
    browser_session_id: str
    view: RenderedView
    notifications: List[Notification] = Field(default_factory=list)
    copied: List[str] = Field(default_factory=list)
    action: Optional[RenderAction] = None


def _session_response(session: CatalogSession, action: Optional[RenderAction] = None) -> SessionResponse:
    copied, session.clipboard.copied = session.clipboard.copied, []
    return SessionResponse(
        session_id=session.session_id,
        browser_session_id=session.browser_session_id,
        view=session.view(),
        notifications=session.notifier.drain(),
        copied=copied,
        action=action,
    )


def _get_session(deps: CatalogDependencies, session_id: str) -> CatalogSession:
    try:
        session = deps.registry.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Catalog session '{session_id}' not found")

    bind_catalog_context(
        catalog_session_id=session.session_id,
        view_mode=session.view_mode.value,
        client_id=session.client_id,
    )
    return session


def _as_int(value: Any, intent: IntentName) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=422, detail=f"Intent '{intent.value}' requires an integer value")


def _as_str(value: Any, intent: IntentName) -> str:
    if value is None:
        raise HTTPException(status_code=422, detail=f"Intent '{intent.value}' requires a value")
    return str(value)


async def _apply_intent(session: CatalogSession, request: IntentRequest) -> None:
    store = session.store
    intent = request.intent

    if intent == IntentName.SET_QUERY:
        await store.set_query("" if request.value is None else str(request.value))
    elif intent == IntentName.INPUT_QUERY:
        store.input_query("" if request.value is None else str(request.value))
        await store.wait_for_input()
    elif intent == IntentName.SET_PAGE:
        await store.set_page(_as_int(request.value, intent))
    elif intent == IntentName.NEXT_PAGE:
        await store.go_to_next_page()
    elif intent == IntentName.PREV_PAGE:
        await store.go_to_prev_page()
    elif intent == IntentName.SET_PAGE_SIZE:
        await store.set_page_size(_as_int(request.value, intent))
    elif intent == IntentName.SET_SORT:
        await store.set_sort(_as_str(request.value, intent))
    elif intent == IntentName.SORT_BY_COLUMN:
        await store.sort_by_column(_as_str(request.value, intent))
    elif intent == IntentName.SET_FILTER:
        if not request.key:
            raise HTTPException(status_code=422, detail="Intent 'set_filter' requires a key")
        value = None if request.value is None else str(request.value)
        await store.set_filter(request.key, value)
    elif intent == IntentName.REMOVE_FILTER:
        await store.remove_filter(request.key)
    elif intent == IntentName.CLEAR_ALL_FILTERS:
        await store.clear_all_filters()
    elif intent == IntentName.SET_DISPLAY_DENSITY:
        await store.set_display_density(_as_str(request.value, intent))
    elif intent == IntentName.TOGGLE_SELECTION:
        store.toggle_selection(_as_str(request.value, intent))
    elif intent == IntentName.SELECT_ALL:
        store.select_all(bool(request.value) if request.value is not None else True)
    elif intent == IntentName.CHANGE_CITY:
        await session.location.change_city(_as_int(request.value, intent))
    elif intent == IntentName.RELOAD:
        await store.reload()


@router.post("/sessions", response_model=SessionResponse)
async def create_session(
    request: CreateSessionRequest,
    deps: CatalogDependencies = Depends(get_catalog_dependencies_dep),
):
    """
    Open a catalog page: restore settings and URL state, then run the first load

    Example:
        POST /api/v1/catalog/sessions
        {"client_id": "visitor-42", "browser_session_id": "tab-7f3a", "view_mode": "table", "url": "/shop?search=drill&page=2"}
    """
    try:
        session = build_catalog_session(
            request.view_mode,
            request.client_id,
            deps.storage,
            deps.search,
            cart=deps.cart,
            availability=deps.availability,
            url=request.url,
            config_service=deps.config_service,
            browser_session_id=request.browser_session_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    bind_catalog_context(
        catalog_session_id=session.session_id,
        view_mode=session.view_mode.value,
        client_id=session.client_id,
    )

    deps.registry.register(session)
    await session.store.initialize()

    logger.info(f"Catalog session {session.session_id} opened at {session.address_bar.url}")
    return _session_response(session)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    deps: CatalogDependencies = Depends(get_catalog_dependencies_dep),
):
    """Current rendered view of a session"""
    session = _get_session(deps, session_id)
    return _session_response(session)


@router.post("/sessions/{session_id}/intents", response_model=SessionResponse)
async def apply_intent(
    session_id: str,
    request: IntentRequest,
    deps: CatalogDependencies = Depends(get_catalog_dependencies_dep),
):
    """
    Apply one intent and return the settled view

    Example:
        POST /api/v1/catalog/sessions/{id}/intents
        {"intent": "set_filter", "key": "brand_name", "value": "Acme"}
    """
    session = _get_session(deps, session_id)

    try:
        await _apply_intent(session, request)
    except InvalidPageSizeError as e:
        logger.warning(f"Rejected page size {e.page_size} (allowed: {e.allowed})")
        raise HTTPException(status_code=422, detail=str(e))
    except (CatalogError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))

    return _session_response(session)


@router.post("/sessions/{session_id}/actions", response_model=SessionResponse)
async def dispatch_action(
    session_id: str,
    request: ActionRequest,
    deps: CatalogDependencies = Depends(get_catalog_dependencies_dep),
):
    """
    Dispatch a delegated UI event

    Example:
        POST /api/v1/catalog/sessions/{id}/actions
        {"path": [{"tag": "svg"}, {"action": "add-to-cart", "product_id": "17"}, {"role": "container"}]}
    """
    session = _get_session(deps, session_id)
    action = await session.store.coordinator.handle_event(request.path)
    return _session_response(session, action=action)


@router.delete("/sessions/{session_id}")
async def close_session(
    session_id: str,
    deps: CatalogDependencies = Depends(get_catalog_dependencies_dep),
):
    """Discard a session when the host navigates away"""
    _get_session(deps, session_id)
    await deps.registry.remove(session_id)
    return {"session_id": session_id, "closed": True}
