"""
Native Catalog MCP Server
Browse, search and render signatures for documented game natives, built on FastMCP.
"""

import dataclasses
import locale
import logging
import os
from pathlib import Path
from typing import Annotated, Literal

from dotenv import load_dotenv
from fastmcp import FastMCP
from pydantic import Field

from .catalog import ALL
from .client import DEFAULT_API_BASE, NativesClient, NativesClientError
from .controller import AppState, SelectionController
from .models import DisplaySettings
from .presentation import cleanup_code, resolve_theme
from .settings import SettingsStore, merge_settings
from .view import TextCatalogView, format_detail

logger = logging.getLogger("native-catalog")

logging.basicConfig(
    level=logging.DEBUG,
    )

if not load_dotenv():
    logger.warning("❌ .env file invalid or not found! Using defaults for the API base and data directory.")

try:
    locale.setlocale(locale.LC_COLLATE, "")
except locale.Error as e:
    logger.warning(f"❌ Could not apply the environment collation locale, using code point order: {e}")

api_base = os.getenv("NATIVE_CATALOG_API_BASE", DEFAULT_API_BASE)
data_path = Path(os.getenv("NATIVE_CATALOG_DATA_DIR", "")).resolve()
logger.debug(f"📂 Data path: {data_path}")
logger.debug(f"🌐 API base: {api_base}")

settings_store = SettingsStore(data_path)
state = AppState(settings=settings_store.load())
logger.debug("✅ Display settings loaded")

view = TextCatalogView()
controller = SelectionController(
    state,
    NativesClient(api_base),
    view,
    settings_store=settings_store,
)

mcp = FastMCP(
    name="native-catalog"
)

logger.debug("✅ Server initialized, registering tools")


async def _ensure_catalog() -> str | None:
    """Load the catalog on first use. Returns an error message on failure."""
    if len(state.catalog):
        return None
    if not await controller.load_catalog():
        return view.flush()
    logger.debug(f"📚 {view.status}")
    return None


# ----------------------------------------------------------------------
# Tools
# ----------------------------------------------------------------------

@mcp.tool
async def search_natives(
    query: Annotated[str, Field(description="Text to search in hashes and names; underscores are optional")] = "",
    apiset: Annotated[
        Literal["all", "client", "server", "shared"],
        Field(description="Restrict to natives callable from this side")
    ] = ALL,
    namespace: Annotated[str, Field(description="Restrict to one namespace, or 'all'")] = ALL,
) -> str:
    """Search the native catalog and show the first page of matches, grouped by namespace."""
    error = await _ensure_catalog()
    if error:
        return error

    view.flush()
    state.query = query
    controller.set_filters(access_filter=apiset, namespace_filter=namespace)
    shown = controller.renderer.cursor
    total = controller.renderer.total
    footer = f"\n\nShowing {shown} of {total} entries." if total else ""
    if shown < total:
        footer += " Use `load_more_natives` for the next page."
    return view.flush() + footer


@mcp.tool
async def load_more_natives() -> str:
    """Show the next page of the current search results."""
    view.flush()
    rows = controller.load_more()
    if not rows:
        return "No more entries."
    return view.flush() + f"\n\nShowing {controller.renderer.cursor} of {controller.renderer.total} entries."


@mcp.tool
async def list_namespaces() -> str:
    """List every namespace in the catalog."""
    error = await _ensure_catalog()
    if error:
        return error
    return "\n".join(controller.namespaces())


@mcp.tool
async def select_native(
    native_id: Annotated[str, Field(description="Native hash, e.g. '0x43A66C31C68491C0'")],
) -> str:
    """Select a native and show its details, parameters and signature."""
    error = await _ensure_catalog()
    if error:
        return error

    view.flush()
    errors_before = len(view.errors)
    await controller.select(native_id)
    transcript = view.flush()
    if len(view.errors) > errors_before:
        return transcript
    if view.detail is None or view.detail.native.id != native_id:
        return f"❌ Native '{native_id}' not found."
    return format_detail(view.detail)


@mcp.tool
def clear_selection() -> str:
    """Clear the currently selected native."""
    controller.clear_selection()
    view.flush()
    return "Selection cleared."


@mcp.tool
async def get_native_signature(
    native_id: Annotated[str, Field(description="Native hash")],
    dialect: Annotated[
        Literal["raw", "lua", "ts", "cs"] | None,
        Field(description="Dialect to render; defaults to the current display setting")
    ] = None,
) -> str:
    """Render the call signature of a native."""
    error = await _ensure_catalog()
    if error:
        return error

    native = state.catalog.get(native_id)
    if native is None:
        return f"❌ Native '{native_id}' not found."

    settings = state.settings
    if dialect is not None:
        settings = merge_settings(settings, {"dialect": dialect})
    signature = controller.synthesizer.synthesize(native, settings)
    return f"```{signature.highlight}\n{signature.definition_text}\n```"


@mcp.tool
def get_display_settings() -> dict:
    """Get the current display settings and the theme they resolve to."""
    settings = state.settings.model_dump(mode="json")
    settings["theme"] = dataclasses.asdict(
        resolve_theme(state.settings.color_scheme, state.settings.code_theme)
    )
    return settings


@mcp.tool
def update_display_settings(
    naming_convention: Annotated[
        Literal["raw", "alternate"] | None,
        Field(description="'raw' for canonical names, 'alternate' to prefer alternate names")
    ] = None,
    dialect: Annotated[
        Literal["raw", "lua", "ts", "cs"] | None,
        Field(description="Signature dialect: raw declaration, Lua, TypeScript or C#")
    ] = None,
    color_scheme: Annotated[str | None, Field(description="Colour scheme name")] = None,
    code_theme: Annotated[str | None, Field(description="Code highlighting theme name")] = None,
) -> str:
    """Update and persist the display settings, then re-render the catalog."""
    changes = {
        key: value for key, value in {
            "naming_convention": naming_convention,
            "dialect": dialect,
            "color_scheme": color_scheme,
            "code_theme": code_theme,
        }.items()
        if value is not None
    }
    new_settings: DisplaySettings = merge_settings(state.settings, changes)
    view.flush()
    controller.on_settings_committed(new_settings)
    view.flush()
    return f"⚙️ Display settings updated: {new_settings.model_dump(mode='json')}"


@mcp.tool
async def get_native_source(
    native_id: Annotated[str, Field(description="Native hash")],
) -> str:
    """Get the decompiled implementation of a native."""
    try:
        source = await controller.client.get_source(native_id)
    except NativesClientError as e:
        logger.error(f"❌ Failed to load source for {native_id}: {e}")
        return f"❌ Failed to load source: {e}"
    if source is None:
        return "No source in the database for this native."
    return f"```{source.language}\n{cleanup_code(source.content)}\n```"


@mcp.tool
async def get_native_examples(
    native_id: Annotated[str, Field(description="Native hash")],
) -> str:
    """Get the usage examples submitted for a native."""
    try:
        examples = await controller.client.get_examples(native_id)
    except NativesClientError as e:
        logger.error(f"❌ Failed to load examples for {native_id}: {e}")
        return f"❌ Failed to load examples: {e}"
    if not examples:
        return "No examples in the database for this native."

    by_language = {example.language.lower(): example.code for example in examples}
    return "\n\n".join(f"```{language}\n{code}\n```" for language, code in by_language.items())


def main() -> None:
    """Main entry point for the native catalog server."""
    mcp.run()

if __name__ == "__main__":
    main()
