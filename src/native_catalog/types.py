"""
Canonical type mapping for synthesized signatures.

Natives describe their types with a small C-like vocabulary (``int``,
``float``, ``BOOL``, ``char*``, ``Vector3``, entity handles, ``Hash``,
``Any``), optionally pointer-qualified. This module maps those tokens to
the type names of each target dialect.

Pointer-qualified types other than ``char*`` are out-parameters: the callee
writes through the reference. Dialects without by-reference parameters
cannot show them in the argument list, which ``map_type`` reports with the
``UNREPRESENTABLE`` sentinel.
"""

from __future__ import annotations

from .models import Dialect


class _Unrepresentable:
    """Sentinel for a type that cannot appear in a dialect's argument list."""

    def __repr__(self) -> str:
        return "UNREPRESENTABLE"

    def __bool__(self) -> bool:
        return False


UNREPRESENTABLE = _Unrepresentable()

STRING_TOKEN = "char*"

# Keys are lower-cased canonical tokens without pointer qualification.
DIALECT_TYPE_MAP: dict[Dialect, dict[str, str]] = {
    Dialect.LUA: {
        "void": "void",
        "int": "number",
        "long": "number",
        "uint": "number",
        "float": "number",
        "hash": "number",
        "bool": "boolean",
        "char*": "string",
        "vector3": "vector3",
        "entity": "entity",
        "ped": "ped",
        "vehicle": "vehicle",
        "object": "object",
        "player": "player",
        "cam": "cam",
        "blip": "blip",
        "pickup": "pickup",
        "interior": "interior",
        "fireid": "number",
        "scrhandle": "number",
        "any": "any",
    },
    Dialect.TYPESCRIPT: {
        "void": "void",
        "int": "number",
        "long": "number",
        "uint": "number",
        "float": "number",
        "hash": "number",
        "bool": "boolean",
        "char*": "string",
        "vector3": "Vector3",
        "entity": "number",
        "ped": "number",
        "vehicle": "number",
        "object": "number",
        "player": "number",
        "cam": "number",
        "blip": "number",
        "pickup": "number",
        "interior": "number",
        "fireid": "number",
        "scrhandle": "number",
        "any": "any",
    },
    Dialect.CSHARP: {
        "void": "void",
        "int": "int",
        "long": "long",
        "uint": "uint",
        "float": "float",
        "hash": "uint",
        "bool": "bool",
        "char*": "string",
        "vector3": "Vector3",
        "entity": "Entity",
        "ped": "Ped",
        "vehicle": "Vehicle",
        "object": "Prop",
        "player": "Player",
        "cam": "Camera",
        "blip": "Blip",
        "pickup": "Pickup",
        "interior": "int",
        "fireid": "int",
        "scrhandle": "int",
        "any": "object",
    },
}

UNTYPED_MARKER: dict[Dialect, str] = {
    Dialect.RAW: "Any",
    Dialect.LUA: "any",
    Dialect.TYPESCRIPT: "any",
    Dialect.CSHARP: "object",
}

# Dialects that can declare a parameter the callee writes back through.
BY_REFERENCE_DIALECTS = frozenset({Dialect.RAW, Dialect.CSHARP})


def normalize_type(token: str | None) -> str:
    """Canonical spelling of a type token: no ``const``, no inner spaces."""
    if not token:
        return "Any"
    token = token.strip()
    if token.startswith("const "):
        token = token[len("const "):]
    return token.replace(" ", "") or "Any"


def pointer_depth(token: str | None) -> int:
    """Number of trailing pointer qualifiers on a type token."""
    token = normalize_type(token)
    return len(token) - len(token.rstrip("*"))


def is_string_type(token: str | None) -> bool:
    return normalize_type(token).lower() == STRING_TOKEN


def is_out_param(token: str | None) -> bool:
    """Whether a parameter of this type is written by the callee."""
    return pointer_depth(token) > 0 and not is_string_type(token)


def is_void(token: str | None) -> bool:
    return normalize_type(token).lower() == "void"


def supports_by_reference(dialect: Dialect) -> bool:
    return dialect in BY_REFERENCE_DIALECTS


def untyped_marker(dialect: Dialect) -> str:
    return UNTYPED_MARKER[dialect]


def map_type(
    canonical_type: str | None,
    dialect: Dialect,
    for_display_only: bool = True,
) -> str | _Unrepresentable:
    """Map a canonical type token to its name in ``dialect``.

    Args:
        canonical_type: Token as stored on the native, e.g. ``"Vector3*"``.
        dialect: Target presentation dialect.
        for_display_only: When False, the result is for an argument list
            position, and out-parameters in dialects without by-reference
            parameters yield ``UNREPRESENTABLE``.

    Returns:
        The dialect's type name, the dialect's untyped marker for unknown
        tokens, or ``UNREPRESENTABLE``.
    """
    if dialect is Dialect.RAW:
        return canonical_type.strip() if canonical_type and canonical_type.strip() else UNTYPED_MARKER[dialect]

    token = normalize_type(canonical_type)
    if is_out_param(token):
        if not for_display_only and not supports_by_reference(dialect):
            return UNREPRESENTABLE
        # Out-parameters display as the type they point to.
        token = token[:-1]

    table = DIALECT_TYPE_MAP[dialect]
    return table.get(token.lower(), UNTYPED_MARKER[dialect])


__all__ = [
    "UNREPRESENTABLE",
    "DIALECT_TYPE_MAP",
    "UNTYPED_MARKER",
    "normalize_type",
    "pointer_depth",
    "is_string_type",
    "is_out_param",
    "is_void",
    "supports_by_reference",
    "untyped_marker",
    "map_type",
]
