"""
Signature synthesis for natives.

Builds the call-site or declaration text for one native in one dialect:

- raw: the canonical C-like declaration, pointers left as pointers
- lua: a script call; out-parameters come back as extra return values
- ts: typed call; several results destructure into a tuple
- cs: managed declaration; out-parameters are ``ref`` parameters

Parameters are always emitted in the native's own order. Nothing here
raises for unknown types: they render as the dialect's untyped marker.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from .models import Dialect, DisplaySettings, NamingConvention, Native, NativeParam
from .types import UNREPRESENTABLE, is_out_param, is_void, map_type

HEX_ID_PATTERN = re.compile(r"^0x[0-9a-fA-F]+$")
RETVAL_NAME = "retval"

HIGHLIGHT_LANGUAGE: dict[Dialect, str] = {
    Dialect.RAW: "c",
    Dialect.LUA: "lua",
    Dialect.TYPESCRIPT: "typescript",
    Dialect.CSHARP: "csharp",
}

COMMENT_PREFIX: dict[Dialect, str] = {
    Dialect.RAW: "//",
    Dialect.LUA: "--",
    Dialect.TYPESCRIPT: "//",
    Dialect.CSHARP: "//",
}


@dataclass(frozen=True)
class Signature:
    """Synthesized signature text and the highlighter language for it."""
    definition_text: str
    highlight: str


@dataclass(frozen=True)
class RowSignature:
    """Compact signature parts shown on a catalog row.

    Attributes:
        return_type: Return type in the row's dialect.
        name: Display name of the native.
        parameters: ``(type, name)`` pairs in call order; parameters that
            cannot appear in the dialect's argument list are left out.
    """
    return_type: str
    name: str
    parameters: tuple[tuple[str, str], ...]


def is_hex_identifier(value: str) -> bool:
    return bool(HEX_ID_PATTERN.match(value or ""))


def to_pascal_case(name: str) -> str:
    """``GET_PLAYER_PED`` -> ``GetPlayerPed``."""
    return "".join(
        word[:1].upper() + word[1:]
        for word in name.lower().split("_")
    )


def chosen_name(native: Native, settings: DisplaySettings) -> str:
    """Name picked by the naming convention, before any case conversion."""
    if settings.naming_convention is NamingConvention.ALTERNATE and native.alternate_name:
        return native.alternate_name
    return native.name


def display_name(native: Native, settings: DisplaySettings) -> str:
    """Name used in synthesized text and on catalog rows.

    The raw dialect under the raw naming convention keeps the canonical
    name. Every other combination uses the capitalized-word form, and names
    that are bare hex hashes become ``N_0x<HEX>`` so they stay valid
    identifiers.
    """
    name = chosen_name(native, settings)
    if settings.dialect is Dialect.RAW and settings.naming_convention is NamingConvention.RAW:
        return name

    converted = to_pascal_case(name)
    if converted.lower().startswith("0x"):
        return f"N_0x{converted[2:].upper()}"
    return converted


def param_name(param: NativeParam, index: int) -> str:
    return param.name or f"p{index}"


def partition_parameters(
    parameters: list[NativeParam],
) -> tuple[list[tuple[int, NativeParam]], list[tuple[int, NativeParam]]]:
    """Split parameters into inputs and out-parameters, keeping positions."""
    inputs: list[tuple[int, NativeParam]] = []
    outputs: list[tuple[int, NativeParam]] = []
    for index, param in enumerate(parameters):
        if is_out_param(param.type):
            outputs.append((index, param))
        else:
            inputs.append((index, param))
    return inputs, outputs


class SignatureSynthesizer:
    """Turns a native into definition text for the configured dialect.

    One handler per ``Dialect`` member; ``synthesize`` dispatches on the
    settings' dialect.

    Usage:
        synthesizer = SignatureSynthesizer()
        signature = synthesizer.synthesize(native, settings)
        print(signature.definition_text)
    """

    def __init__(self) -> None:
        self._handlers: dict[Dialect, Callable[[Native, DisplaySettings], str]] = {
            Dialect.RAW: self._synthesize_raw,
            Dialect.LUA: self._synthesize_lua,
            Dialect.TYPESCRIPT: self._synthesize_typescript,
            Dialect.CSHARP: self._synthesize_csharp,
        }

    def synthesize(self, native: Native, settings: DisplaySettings) -> Signature:
        """Build the signature for ``native`` under ``settings``.

        Args:
            native: Descriptor to render.
            settings: Current display settings; only the naming convention
                and dialect are read.

        Returns:
            Signature with the text and the highlighter language id.
        """
        handler = self._handlers[settings.dialect]
        text = handler(native, settings)
        return Signature(definition_text=text, highlight=HIGHLIGHT_LANGUAGE[settings.dialect])

    def row_signature(self, native: Native, settings: DisplaySettings) -> RowSignature:
        """Compact signature parts for a catalog row."""
        dialect = settings.dialect
        parameters: list[tuple[str, str]] = []
        for index, param in enumerate(native.parameters):
            mapped = map_type(param.type, dialect, for_display_only=False)
            if mapped is UNREPRESENTABLE:
                continue
            if dialect is Dialect.CSHARP and is_out_param(param.type):
                mapped = f"ref {mapped}"
            parameters.append((mapped, param_name(param, index)))

        return RowSignature(
            return_type=map_type(native.return_type, dialect),
            name=display_name(native, settings),
            parameters=tuple(parameters),
        )

    # =========================================================================
    # Dialect handlers
    # =========================================================================

    def _header(self, native: Native, dialect: Dialect) -> str:
        return f"{COMMENT_PREFIX[dialect]} {native.name}"

    def _synthesize_raw(self, native: Native, settings: DisplaySettings) -> str:
        params = ", ".join(
            f"{map_type(param.type, Dialect.RAW)} {param_name(param, index)}"
            for index, param in enumerate(native.parameters)
        )
        signature = f"{map_type(native.return_type, Dialect.RAW)} {display_name(native, settings)} ({params})"
        if is_hex_identifier(native.id):
            return f"{COMMENT_PREFIX[Dialect.RAW]} {native.id}\n{signature}"
        return signature

    def _synthesize_lua(self, native: Native, settings: DisplaySettings) -> str:
        inputs, outputs = partition_parameters(native.parameters)
        args = ", ".join(
            f"{param_name(param, index)} --[[ {map_type(param.type, Dialect.LUA)} ]]"
            for index, param in inputs
        )
        call = f"{display_name(native, settings)}({args})"

        results = [
            f"{name} --[[ {type_name} ]]"
            for name, type_name in self._results(native, outputs, Dialect.LUA)
        ]
        if results:
            call = f"local {', '.join(results)} = {call}"
        return f"{self._header(native, Dialect.LUA)}\n{call}"

    def _synthesize_typescript(self, native: Native, settings: DisplaySettings) -> str:
        inputs, outputs = partition_parameters(native.parameters)
        args = ", ".join(
            f"{param_name(param, index)}: {map_type(param.type, Dialect.TYPESCRIPT)}"
            for index, param in inputs
        )
        call = f"{display_name(native, settings)}({args});"

        results = self._results(native, outputs, Dialect.TYPESCRIPT)
        if len(results) == 1:
            name, type_name = results[0]
            call = f"const {name}: {type_name} = {call}"
        elif results:
            names = ", ".join(name for name, _ in results)
            types = ", ".join(type_name for _, type_name in results)
            call = f"const [{names}]: [{types}] = {call}"
        return f"{self._header(native, Dialect.TYPESCRIPT)}\n{call}"

    def _synthesize_csharp(self, native: Native, settings: DisplaySettings) -> str:
        params = []
        for index, param in enumerate(native.parameters):
            type_name = map_type(param.type, Dialect.CSHARP)
            if is_out_param(param.type):
                type_name = f"ref {type_name}"
            params.append(f"{type_name} {param_name(param, index)}")

        return_type = map_type(native.return_type, Dialect.CSHARP)
        declaration = f"{return_type} {display_name(native, settings)}({', '.join(params)});"
        return f"{self._header(native, Dialect.CSHARP)}\n{declaration}"

    def _results(
        self,
        native: Native,
        outputs: list[tuple[int, NativeParam]],
        dialect: Dialect,
    ) -> list[tuple[str, str]]:
        """Values a value-returning dialect hands back: retval, then outputs."""
        results: list[tuple[str, str]] = []
        if not is_void(native.return_type):
            results.append((RETVAL_NAME, map_type(native.return_type, dialect)))
        for index, param in outputs:
            results.append((param_name(param, index), map_type(param.type, dialect)))
        return results


_default_synthesizer = SignatureSynthesizer()


def synthesize(native: Native, settings: DisplaySettings) -> Signature:
    """Synthesize with a shared ``SignatureSynthesizer``."""
    return _default_synthesizer.synthesize(native, settings)


__all__ = [
    "Signature",
    "RowSignature",
    "SignatureSynthesizer",
    "synthesize",
    "display_name",
    "chosen_name",
    "to_pascal_case",
    "is_hex_identifier",
    "partition_parameters",
    "HIGHLIGHT_LANGUAGE",
]
