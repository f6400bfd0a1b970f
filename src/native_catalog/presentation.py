"""
Pure style and text helpers for the presentation layer.

Nothing here touches catalog state: each function maps a value (a type
token, an access tier, a theme name) to the class names or labels the
presentation layer paints with. Unknown inputs fall back to neutral values.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import AccessTier

ENTITY_TYPES = frozenset({"ped", "vehicle", "entity", "object"})

ACCESS_TIER_LABELS: dict[AccessTier, str] = {
    AccessTier.CLIENT: "Client",
    AccessTier.SERVER: "Server",
    AccessTier.SHARED: "Shared",
    AccessTier.UNKNOWN: "Unknown",
}

ACCESS_TIER_COLORS: dict[AccessTier, str] = {
    AccessTier.CLIENT: "bg-purple-900/50 text-purple-200 border-purple-700/50",
    AccessTier.SERVER: "bg-orange-900/50 text-orange-200 border-orange-700/50",
    AccessTier.SHARED: "bg-blue-900/50 text-blue-200 border-blue-700/50",
    AccessTier.UNKNOWN: "bg-gray-700 text-gray-300",
}


@dataclass(frozen=True)
class ThemeStyle:
    """Resolved classes and stylesheet for a colour scheme and code theme."""
    name: str
    background: str
    foreground: str
    border: str
    code_stylesheet: str


COLOR_SCHEMES: dict[str, tuple[str, str, str]] = {
    "dark": ("bg-gray-900", "text-gray-100", "border-gray-700"),
    "light": ("bg-white", "text-gray-900", "border-gray-200"),
    "midnight": ("bg-slate-950", "text-slate-200", "border-slate-800"),
}

CODE_THEMES: dict[str, str] = {
    "tomorrow": "prism-tomorrow.css",
    "okaidia": "prism-okaidia.css",
    "twilight": "prism-twilight.css",
    "default": "prism.css",
}

DEFAULT_COLOR_SCHEME = "dark"
DEFAULT_CODE_THEME = "tomorrow"


def type_color_class(type_token: str | None) -> str:
    """CSS class used to colour a canonical type token."""
    if not type_token:
        return "text-gray-400"
    token = type_token.replace("*", "").strip().lower()
    if token == "void":
        return "type-void"
    if token in ("int", "hash"):
        return "type-int"
    if token == "float":
        return "type-float"
    if token in ("bool", "boolean"):
        return "type-bool"
    if token == "vector3":
        return "type-vector3"
    if token in ENTITY_TYPES:
        return "type-entity"
    return "text-gray-400"


def access_tier_label(tier: AccessTier | str) -> str:
    return ACCESS_TIER_LABELS[_as_tier(tier)]


def access_tier_color(tier: AccessTier | str) -> str:
    return ACCESS_TIER_COLORS[_as_tier(tier)]


def _as_tier(tier: AccessTier | str) -> AccessTier:
    if isinstance(tier, AccessTier):
        return tier
    try:
        return AccessTier(tier)
    except ValueError:
        return AccessTier.UNKNOWN


def resolve_theme(color_scheme: str, code_theme: str = DEFAULT_CODE_THEME) -> ThemeStyle:
    """Resolve theme names to concrete classes, falling back to defaults."""
    scheme = color_scheme if color_scheme in COLOR_SCHEMES else DEFAULT_COLOR_SCHEME
    background, foreground, border = COLOR_SCHEMES[scheme]
    stylesheet = CODE_THEMES.get(code_theme, CODE_THEMES[DEFAULT_CODE_THEME])
    return ThemeStyle(
        name=scheme,
        background=background,
        foreground=foreground,
        border=border,
        code_stylesheet=stylesheet,
    )


def cleanup_code(source: str) -> str:
    """Trim every line of decompiled source and repair split arrows."""
    cleaned = "\n".join(line.strip() for line in source.split("\n"))
    return cleaned.replace(" - > ", "->")


__all__ = [
    "ThemeStyle",
    "type_color_class",
    "access_tier_label",
    "access_tier_color",
    "resolve_theme",
    "cleanup_code",
]
