"""
Catalog Sessions

Wires one engine (store, loader, coordinator, address bar, location) per page
view and keeps live engines addressable by id for the HTTP layer.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ...database.persistence_adapter import PersistenceAdapter
from ...database.settings_storage import SettingsStorage
from ...exceptions import SessionNotFoundError
from ...models.catalog import LoadPolicy, ViewMode
from ...models.view import RenderedView
from ..clients.availability_client import AvailabilityService
from ..clients.cart_client import CartService
from ..clients.search_client import SearchService
from ..config.configuration_service import ConfigurationService, get_config_service
from ..location.location_context import LocationContext
from ..notifications.channels import QueuedClipboard, QueuedNotifier
from ..render.coordinator import RenderCoordinator
from ..render.formatters import ProductFormatter
from ..render.target import SnapshotRenderTarget
from ..render.variants import GridVariant, RenderVariant, TableVariant
from ..url.url_sync import AddressBar, UrlSync
from .loader import Loader
from .store import CatalogStore

logger = logging.getLogger(__name__)


class CatalogSession:
    """One live catalog engine and the host-side channels it renders into"""

    def __init__(
        self,
        session_id: str,
        client_id: str,
        store: CatalogStore,
        target: SnapshotRenderTarget,
        address_bar: AddressBar,
        notifier: QueuedNotifier,
        clipboard: QueuedClipboard,
        location: LocationContext,
    ):
        self.session_id = session_id
        self.client_id = client_id
        self.store = store
        self.target = target
        self.address_bar = address_bar
        self.notifier = notifier
        self.clipboard = clipboard
        self.location = location

    @property
    def browser_session_id(self) -> str:
        """Scope under which this page view reads and writes its filters"""
        return self.store.persistence.session_id

    @property
    def view_mode(self) -> ViewMode:
        return self.store.state.view_mode

    def view(self) -> RenderedView:
        """Snapshot of the rendered view plus the host-visible state around it"""
        state = self.store.state
        view = self.target.snapshot()
        view.loading = state.is_loading
        view.display_density = state.display_density.value if state.view_mode == ViewMode.GRID else None
        view.selected_ids = sorted(state.selected_ids)
        view.url = self.address_bar.url
        return view

    async def close(self) -> None:
        # Session filters outlive the page view; storage TTL expires them
        await self.store.close()
        logger.info(f"Catalog session {self.session_id} closed")


def build_variant(view_mode: ViewMode, config_service: ConfigurationService) -> RenderVariant:
    formatter = ProductFormatter(config_service.get_display_settings())

    if view_mode == ViewMode.TABLE:
        return TableVariant(
            formatter=formatter,
            sort_map=config_service.get_table_sort_map(),
            price_column=config_service.get_price_column(),
        )

    return GridVariant(
        formatter=formatter,
        stagger_ms=int(config_service.get_display_settings().get("entrance_stagger_ms", 50)),
    )


def build_catalog_session(
    view_mode: ViewMode,
    client_id: str,
    storage: SettingsStorage,
    search: SearchService,
    cart: Optional[CartService] = None,
    availability: Optional[AvailabilityService] = None,
    url: str = "/shop",
    config_service: Optional[ConfigurationService] = None,
    session_id: Optional[str] = None,
    policy: Optional[LoadPolicy] = None,
    browser_session_id: Optional[str] = None,
) -> CatalogSession:
    """
    Assemble an engine for one page view.

    Args:
        session_id: Engine id for this page view; generated when omitted
        browser_session_id: Scope of the session-scoped filters. Page views
            of one browser session share it, so filters carry across
            navigation. Defaults to the engine id.

    The engine is not loaded yet; call session.store.initialize().
    """
    config_service = config_service or get_config_service()
    session_id = session_id or str(uuid.uuid4())
    browser_session_id = browser_session_id or session_id
    view_mode = ViewMode(view_mode)

    persistence = PersistenceAdapter(storage, client_id=client_id, session_id=browser_session_id)
    location = LocationContext(
        persistence,
        availability=availability,
        default_city_id=config_service.get_default_city_id(),
    )

    target = SnapshotRenderTarget(view_mode.value)
    notifier = QueuedNotifier()
    clipboard = QueuedClipboard()
    coordinator = RenderCoordinator(
        build_variant(view_mode, config_service),
        target,
        cart=cart,
        notifier=notifier,
        clipboard=clipboard,
        config_service=config_service,
    )

    loader = Loader(
        search,
        availability=availability,
        location=location,
        policy=policy or LoadPolicy(config_service.get_load_policy()),
    )

    address_bar = AddressBar(url)
    store = CatalogStore(
        persistence,
        loader,
        coordinator,
        url_sync=UrlSync(address_bar, default_sort=config_service.get_default_sort()),
        location=location,
        config_service=config_service,
    )

    return CatalogSession(
        session_id=session_id,
        client_id=client_id,
        store=store,
        target=target,
        address_bar=address_bar,
        notifier=notifier,
        clipboard=clipboard,
        location=location,
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CatalogSessionRegistry:
    """
    Registry of live catalog sessions.

    Manages:
    - Session registration by id
    - Lookup for the HTTP layer (each lookup counts as activity)
    - Teardown on navigation away, after idle_ttl seconds without activity,
      and at shutdown
    """

    def __init__(self, idle_ttl: int = 0):
        self._sessions: Dict[str, CatalogSession] = {}
        self._last_access: Dict[str, datetime] = {}
        self.idle_ttl = idle_ttl
        self._cleanup_task: Optional[asyncio.Task] = None
        logger.info(f"CatalogSessionRegistry initialized (idle TTL: {idle_ttl}s)")

    def register(self, session: CatalogSession) -> None:
        if session.session_id in self._sessions:
            logger.warning(f"Overwriting existing catalog session: {session.session_id}")

        self._sessions[session.session_id] = session
        self._last_access[session.session_id] = _utc_now()
        logger.info(f"Registered catalog session '{session.session_id}' ({session.view_mode.value})")

    def get(self, session_id: str) -> CatalogSession:
        """
        Get session by id and mark it active.

        Raises:
            SessionNotFoundError: If no session is registered under session_id
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        self._last_access[session_id] = _utc_now()
        return session

    def get_all(self) -> List[CatalogSession]:
        return list(self._sessions.values())

    async def remove(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        self._last_access.pop(session_id, None)
        await session.close()

    async def cleanup_idle_sessions(self) -> List[str]:
        """Close sessions with no activity for longer than idle_ttl"""
        if self.idle_ttl <= 0:
            return []

        now = _utc_now()
        expired = [
            session_id
            for session_id, last_access in self._last_access.items()
            if (now - last_access).total_seconds() > self.idle_ttl
        ]

        if expired:
            logger.info(f"Closing {len(expired)} idle catalog sessions")
            for session_id in expired:
                if session_id in self._sessions:
                    await self.remove(session_id)
            logger.debug(f"Removed idle sessions: {expired}")

        return expired

    def start_cleanup_loop(self, interval: float = 60) -> None:
        """Start the periodic idle sweep; requires a running event loop"""
        if self.idle_ttl <= 0 or (self._cleanup_task and not self._cleanup_task.done()):
            return
        self._cleanup_task = asyncio.create_task(self._cleanup_loop(interval))

    async def _cleanup_loop(self, interval: float):
        logger.info("Catalog session cleanup loop started")
        try:
            while True:
                await asyncio.sleep(interval)
                await self.cleanup_idle_sessions()
        except asyncio.CancelledError:
            logger.info("Catalog session cleanup loop cancelled")
        except Exception as e:
            logger.error(f"Error in catalog session cleanup loop: {e}", exc_info=True)

    async def stop_cleanup_loop(self) -> None:
        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
        self._cleanup_task = None

    async def close_all(self) -> None:
        await self.stop_cleanup_loop()
        for session_id in list(self._sessions):
            await self.remove(session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions


_registry: Optional[CatalogSessionRegistry] = None


def get_session_registry() -> CatalogSessionRegistry:
    global _registry
    if _registry is None:
        _registry = CatalogSessionRegistry()
    return _registry


def init_session_registry(idle_ttl: int = 0) -> CatalogSessionRegistry:
    """Initialize the global registry with an idle timeout (0 disables eviction)"""
    global _registry
    _registry = CatalogSessionRegistry(idle_ttl=idle_ttl)
    return _registry
