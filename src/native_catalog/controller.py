"""
Selection and view orchestration for the native catalog.

``SelectionController`` owns the application state and is the only thing
that mutates it. It drives the catalog list through ``CatalogIndex`` and
``IncrementalRenderer``, synthesizes signatures for the detail panel, and
enriches the selected native from the backend.

Everything runs on one asyncio loop. Detail fetches cannot be cancelled at
the transport level, so a response for a native that is no longer selected
is discarded when it arrives.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Protocol

from .catalog import ALL, CatalogIndex
from .client import NativesClient, NativesClientError
from .models import DisplaySettings, Native, NativeParam
from .presentation import access_tier_color, type_color_class
from .renderer import EMPTY_PLACEHOLDER, IncrementalRenderer, RenderedRow, near_bottom
from .settings import SettingsStore
from .signatures import Signature, SignatureSynthesizer

logger = logging.getLogger("native-catalog")

SEARCH_DEBOUNCE = 0.3  # seconds of quiet before a search runs
LOADING_PLACEHOLDER = "Loading..."
NO_DESCRIPTION = "No description available."
NO_PARAMETERS = "This native has no parameters."


# ---------------------------------------------------------------------------
# State and view contracts
# ---------------------------------------------------------------------------


@dataclass
class AppState:
    """Process-wide state of one catalog session.

    Attributes:
        catalog: Every native known to the session.
        settings: Display settings currently in effect.
        current_id: Id of the selected native, if any.
        query: Last search text.
        access_filter: Access tier filter value or ``"all"``.
        namespace_filter: Namespace filter value or ``"all"``.
    """
    catalog: CatalogIndex = field(default_factory=CatalogIndex)
    settings: DisplaySettings = field(default_factory=DisplaySettings)
    current_id: str | None = None
    query: str = ""
    access_filter: str = ALL
    namespace_filter: str = ALL


@dataclass(frozen=True)
class ParamDoc:
    """Parameter line of the detail panel."""
    type: str
    name: str
    doc: str
    color_class: str = ""


@dataclass(frozen=True)
class DetailPanel:
    """Everything the presentation layer paints for the selected native."""
    native: Native
    signature: Signature
    parameters: tuple[ParamDoc, ...]
    description: str
    original_description: str
    source_available: bool
    loading: bool = False
    tier_color: str = ""

    @property
    def parameters_placeholder(self) -> str | None:
        return None if self.parameters else NO_PARAMETERS


class CatalogView(Protocol):
    """Presentation layer painting what the controller produces."""

    def show_status(self, text: str) -> None:
        ...

    def show_rows(self, rows: list[RenderedRow], replace: bool) -> None:
        ...

    def show_placeholder(self, text: str) -> None:
        ...

    def mark_active(self, native_id: str | None) -> None:
        ...

    def show_detail(self, panel: DetailPanel) -> None:
        ...

    def clear_detail(self) -> None:
        ...

    def show_error(self, message: str) -> None:
        ...


# ---------------------------------------------------------------------------
# Debounce
# ---------------------------------------------------------------------------


class SearchDebouncer:
    """Runs a callback once input has been quiet for ``delay`` seconds.

    Each ``trigger`` cancels the pending run and schedules a new one, so a
    burst of keystrokes results in a single call.
    """

    def __init__(self, callback: Callable[[], object], delay: float = SEARCH_DEBOUNCE) -> None:
        self.callback = callback
        self.delay = delay
        self._task: asyncio.Task | None = None

    def trigger(self) -> None:
        """Restart the quiet period. Must be called from the event loop."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        await asyncio.sleep(self.delay)
        self._task = None
        self.callback()

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    async def wait(self) -> None:
        """Wait for the pending run, if any, to finish."""
        task = self._task
        if task is not None:
            await task


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


class SelectionController:
    """Orchestrates the catalog list, the selection and settings changes.

    Usage:
        controller = SelectionController(state, client, view, settings_store=store)
        await controller.load_catalog()
        controller.search("player")
        await controller.select("0x43A66C31C68491C0")
        controller.on_settings_committed(new_settings)
    """

    def __init__(
        self,
        state: AppState,
        client: NativesClient,
        view: CatalogView,
        settings_store: SettingsStore | None = None,
        synthesizer: SignatureSynthesizer | None = None,
        debounce_delay: float = SEARCH_DEBOUNCE,
    ) -> None:
        self.state = state
        self.client = client
        self.view = view
        self.settings_store = settings_store
        self.synthesizer = synthesizer or SignatureSynthesizer()
        self.renderer = IncrementalRenderer(
            row_formatter=lambda native: self.synthesizer.row_signature(native, self.state.settings),
            is_active=lambda native_id: native_id == self.state.current_id,
        )
        self.debouncer = SearchDebouncer(self.refresh, delay=debounce_delay)
        self._in_flight_id: str | None = None
        self.location_fragment = ""

    # =========================================================================
    # Catalog list
    # =========================================================================

    async def load_catalog(self) -> bool:
        """Fetch every native and render the first batch.

        Returns:
            True on success. On failure the error is shown inline and the
            current state is kept.
        """
        try:
            natives = await self.client.list_natives()
        except NativesClientError as e:
            logger.error(f"❌ Failed to load natives: {e}")
            self.view.show_error(f"Failed to load natives: {e}")
            return False

        self.state.catalog.load(natives)
        self.view.show_status(f"Loaded {len(self.state.catalog)} natives")
        self.refresh()
        return True

    def namespaces(self) -> list[str]:
        return self.state.catalog.namespaces()

    def search(self, query: str) -> None:
        """Record the search text and refresh after the debounce delay."""
        self.state.query = query
        self.debouncer.trigger()

    def set_filters(self, access_filter: str | None = None, namespace_filter: str | None = None) -> list[RenderedRow]:
        """Change the attribute filters and refresh immediately."""
        if access_filter is not None:
            self.state.access_filter = access_filter
        if namespace_filter is not None:
            self.state.namespace_filter = namespace_filter
        return self.refresh()

    def refresh(self) -> list[RenderedRow]:
        """Re-filter the catalog and render its first batch."""
        groups = self.state.catalog.filter(
            self.state.query,
            access_filter=self.state.access_filter,
            namespace_filter=self.state.namespace_filter,
        )
        self.renderer.reset(groups)
        if self.renderer.is_empty:
            self.view.show_placeholder(EMPTY_PLACEHOLDER)
            return []

        rows = self.renderer.render_next_batch()
        self.view.show_rows(rows, replace=True)
        return rows

    def load_more(self) -> list[RenderedRow]:
        """Render the next batch of the current list, if any is left."""
        rows = self.renderer.render_next_batch()
        if rows:
            self.view.show_rows(rows, replace=False)
        return rows

    def on_scroll(self, scroll_top: float, viewport_height: float, content_height: float) -> list[RenderedRow]:
        """Load more rows when the viewport nears the bottom of the list."""
        if near_bottom(scroll_top, viewport_height, content_height):
            return self.load_more()
        return []

    # =========================================================================
    # Selection
    # =========================================================================

    async def select(self, native_id: str) -> None:
        """Make ``native_id`` current, render it, then enrich it.

        Basic information already in the catalog is painted straight away.
        The detail response is applied only if ``native_id`` is still the
        selection when it arrives.
        """
        self.state.current_id = native_id
        self._in_flight_id = native_id
        self._mark_active()

        native = self.state.catalog.get(native_id)
        if native is not None:
            self.view.show_detail(self._build_panel(native, native.has_attached_source, loading=True))

        try:
            detail = await self.client.get_detail(native_id)
        except NativesClientError as e:
            if self._is_stale(native_id):
                logger.debug(f"Discarding failed detail fetch for deselected native {native_id}")
                return
            logger.error(f"❌ Failed to fetch detail for {native_id}: {e}")
            self.view.show_error(f"Failed to load details for {native_id}: {e}")
            return

        if self._is_stale(native_id):
            logger.debug(f"Discarding stale detail response for {native_id}")
            return

        if native is not None:
            native.merge_detail(detail)
        else:
            native = detail.data
        self.location_fragment = f"_{native_id}"
        self.view.show_detail(self._build_panel(native, detail.source_available))

    async def select_from_fragment(self, fragment: str) -> None:
        """Restore a selection from a ``#_<id>`` navigation fragment."""
        native_id = fragment.lstrip("#")
        if native_id.startswith("_"):
            native_id = native_id[1:]
        if native_id:
            await self.select(native_id)

    def clear_selection(self) -> None:
        """Drop the selection; any outstanding fetch becomes stale."""
        self.state.current_id = None
        self._in_flight_id = None
        self.location_fragment = ""
        self.view.clear_detail()
        self._mark_active()

    def current_native(self) -> Native | None:
        if self.state.current_id is None:
            return None
        return self.state.catalog.get(self.state.current_id)

    def _mark_active(self) -> None:
        self.renderer.mark_active()
        self.view.mark_active(self.state.current_id)

    def _is_stale(self, native_id: str) -> bool:
        return self.state.current_id != native_id or self._in_flight_id != native_id

    # =========================================================================
    # Settings and edits
    # =========================================================================

    def on_settings_committed(self, settings: DisplaySettings) -> None:
        """Apply a complete settings record and re-derive every view.

        The selected native's signature is re-synthesized from what is
        already in memory and the catalog list is rebuilt from its first
        batch. Nothing is re-fetched. A failure to persist is shown inline;
        the new settings stay in effect for the session.
        """
        self.state.settings = settings
        logger.debug(f"⚙️ Display settings committed: {settings.model_dump(mode='json')}")

        native = self.current_native()
        if native is not None:
            self.view.show_detail(self._build_panel(native, native.has_attached_source))
        self.refresh()

        if self.settings_store is not None:
            try:
                self.settings_store.commit(settings)
            except OSError as e:
                logger.error(f"❌ Failed to save display settings: {e}")
                self.view.show_error(f"Failed to save display settings: {e}")

    def record_translation(self, native_id: str, text: str) -> None:
        """Reflect a saved description translation in memory."""
        native = self.state.catalog.get(native_id)
        if native is None:
            return
        native.apply_translation(text)
        if native_id == self.state.current_id:
            self.view.show_detail(self._build_panel(native, native.has_attached_source))

    def record_param_translations(self, native_id: str, updates: list[NativeParam]) -> None:
        """Reflect saved parameter translations in memory."""
        native = self.state.catalog.get(native_id)
        if native is None:
            return
        native.apply_param_translations(updates)
        if native_id == self.state.current_id:
            self.view.show_detail(self._build_panel(native, native.has_attached_source))

    def signature_for(self, native: Native) -> Signature:
        return self.synthesizer.synthesize(native, self.state.settings)

    def _build_panel(self, native: Native, source_available: bool, loading: bool = False) -> DetailPanel:
        if loading:
            description = LOADING_PLACEHOLDER
        else:
            description = native.translated_description.strip() or native.original_description or NO_DESCRIPTION

        return DetailPanel(
            native=native,
            signature=self.signature_for(native),
            parameters=tuple(
                ParamDoc(
                    type=param.type,
                    name=param.name,
                    doc=param.doc,
                    color_class=type_color_class(param.type),
                )
                for param in native.parameters
            ),
            description=description,
            original_description=native.original_description,
            source_available=source_available,
            loading=loading,
            tier_color=access_tier_color(native.access_tier),
        )

    async def close(self) -> None:
        """Tear down the session: cancel pending work and close the client."""
        self.debouncer.cancel()
        self._in_flight_id = None
        await self.client.close()


__all__ = [
    "AppState",
    "CatalogView",
    "DetailPanel",
    "ParamDoc",
    "SearchDebouncer",
    "SelectionController",
    "SEARCH_DEBOUNCE",
]
