"""
Data models for the native catalog.

Models mirror the native database backend's JSON payloads. Wire keys
(``hash``, ``name_sp``, ``apiset``...) are accepted as aliases and the
records are exposed under descriptive attribute names.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class AccessTier(str, Enum):
    """Which side of the game runtime a native is callable from."""
    CLIENT = "client"
    SERVER = "server"
    SHARED = "shared"
    UNKNOWN = "unknown"


class Dialect(str, Enum):
    """Target presentation language for synthesized signatures."""
    RAW = "raw"
    LUA = "lua"
    TYPESCRIPT = "ts"
    CSHARP = "cs"


class NamingConvention(str, Enum):
    """Which of a native's names is shown to the user."""
    RAW = "raw"
    ALTERNATE = "alternate"


class NativeParam(BaseModel):
    """One positional parameter of a native."""
    model_config = {"populate_by_name": True}

    name: str
    type: str = Field(default="Any", description="Canonical type token, e.g. 'int' or 'Vector3*'")
    original_doc: str = Field(default="", alias="description")
    translated_doc: str = Field(default="", alias="description_cn")

    @field_validator("original_doc", "translated_doc", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def doc(self) -> str:
        """Translated doc when present, otherwise the original one."""
        return self.translated_doc or self.original_doc


class Native(BaseModel):
    """Canonical descriptor for one documented native function.

    The ``parameters`` order is the call-site positional order and is never
    re-sorted by anything in this package.
    """
    model_config = {"populate_by_name": True}

    id: str = Field(alias="hash", description="Stable unique key, usually a 0x-prefixed hash")
    secondary_hash: str | None = Field(default=None, alias="jhash")
    display_name: str = Field(default="", alias="name")
    alternate_name: str = Field(default="", alias="name_sp")
    namespace: str = Field(default="")
    access_tier: AccessTier = Field(default=AccessTier.UNKNOWN, alias="apiset")
    return_type: str = Field(default="void")
    parameters: list[NativeParam] = Field(default_factory=list, alias="params")
    build: int = Field(default=0, alias="build_number")
    has_attached_source: bool = Field(default=False, alias="source_available")
    has_attached_example: bool = Field(default=False, alias="example_available")
    original_description: str = Field(default="", alias="description_original")
    translated_description: str = Field(default="", alias="description_cn")

    @model_validator(mode="before")
    @classmethod
    def normalize_wire_fields(cls, data: Any) -> Any:
        """Replace JSON nulls with defaults and coerce unknown API sets."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        for key in ("name", "name_sp", "namespace", "description_original", "description_cn",
                    "display_name", "alternate_name", "original_description", "translated_description"):
            if key in data and data[key] is None:
                data[key] = ""
        for key in ("params", "parameters"):
            if key in data and data[key] is None:
                data[key] = []
        for key in ("return_type",):
            if not data.get(key):
                data[key] = "void"

        tier_key = "apiset" if "apiset" in data else "access_tier"
        tier = data.get(tier_key)
        if tier_key in data and not isinstance(tier, AccessTier):
            if tier not in [t.value for t in AccessTier]:
                data[tier_key] = AccessTier.UNKNOWN
        return data

    @property
    def name(self) -> str:
        """Name to show for the native; falls back to the id."""
        return self.display_name or self.id

    def merge_detail(self, detail: NativeDetail) -> None:
        """Merge a detail fetch into this in-memory record."""
        data = detail.data
        self.translated_description = data.translated_description
        if data.original_description:
            self.original_description = data.original_description
        self.parameters = [param.model_copy() for param in data.parameters]
        if data.alternate_name:
            self.alternate_name = data.alternate_name
        self.has_attached_source = detail.source_available

    def apply_translation(self, text: str) -> None:
        """Record a saved description translation."""
        self.translated_description = text

    def apply_param_translations(self, updates: list[NativeParam]) -> int:
        """Record saved parameter translations, matched by parameter name.

        Returns:
            Number of parameters updated.
        """
        by_name = {update.name: update.translated_doc for update in updates}
        updated = 0
        for param in self.parameters:
            if param.name in by_name:
                param.translated_doc = by_name[param.name]
                updated += 1
        return updated


class NativeDetail(BaseModel):
    """Envelope returned by the per-native detail endpoint."""
    data: Native
    source_available: bool = False


class SourceCode(BaseModel):
    """Decompiled implementation attached to a native."""
    model_config = {"populate_by_name": True}

    content: str = ""
    language: str = Field(default="c", alias="lang")
    source_type: str = Field(default="", alias="type")


class CodeExample(BaseModel):
    """User-submitted usage example for a native."""
    id: int = 0
    language: str
    code: str


class DisplaySettings(BaseModel):
    """User-controlled display configuration.

    Committed as a whole; every dependent view is re-derived on commit.
    """
    naming_convention: NamingConvention = NamingConvention.RAW
    dialect: Dialect = Dialect.RAW
    color_scheme: str = "dark"
    code_theme: str = "tomorrow"

    model_config = {"frozen": True}


__all__ = [
    "AccessTier",
    "Dialect",
    "NamingConvention",
    "NativeParam",
    "Native",
    "NativeDetail",
    "SourceCode",
    "CodeExample",
    "DisplaySettings",
]
