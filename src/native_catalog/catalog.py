"""
In-memory native catalog with filtering, ordering and namespace grouping.

The catalog holds every native fetched at startup. ``filter`` returns a flat
sequence of ``RenderGroup`` entries: a namespace header followed by the
natives of that namespace, in display order.
"""

from __future__ import annotations

import locale
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from .models import AccessTier, Native

logger = logging.getLogger("native-catalog")

ALL = "all"
SEARCH_SEPARATORS = ("_",)


@dataclass(frozen=True)
class RenderGroup:
    """One entry of the grouped catalog view.

    Either a namespace header (``native`` is None) or a row referencing a
    native.
    """
    namespace: str
    native: Native | None = None

    @classmethod
    def header(cls, namespace: str) -> RenderGroup:
        return cls(namespace=namespace)

    @classmethod
    def row(cls, native: Native) -> RenderGroup:
        return cls(namespace=native.namespace, native=native)

    @property
    def is_header(self) -> bool:
        return self.native is None


def collation_key(value: str) -> tuple[str, str]:
    """Case-insensitive collation under the process locale, with a case-sensitive tie break.

    ``main`` sets ``LC_COLLATE`` from the environment; under the default C
    locale this is plain code point order of the case-folded text.
    """
    return locale.strxfrm(value.casefold()), value


def strip_separators(value: str) -> str:
    for separator in SEARCH_SEPARATORS:
        value = value.replace(separator, "")
    return value


def sort_key(native: Native) -> tuple[tuple[str, str], tuple[str, str], str]:
    return collation_key(native.namespace), collation_key(native.name), native.id


class CatalogIndex:
    """Holds the full native set and derives filtered, grouped views.

    Usage:
        catalog = CatalogIndex(natives)
        groups = catalog.filter("player", access_filter="all", namespace_filter="PLAYER")
    """

    def __init__(self, natives: Iterable[Native] | None = None) -> None:
        self._natives: dict[str, Native] = {}
        if natives is not None:
            self.load(natives)

    def load(self, natives: Iterable[Native]) -> None:
        """Replace the catalog contents."""
        self._natives = {native.id: native for native in natives}
        logger.info(f"Catalog loaded with {len(self._natives)} natives")

    def get(self, native_id: str) -> Native | None:
        return self._natives.get(native_id)

    def __len__(self) -> int:
        return len(self._natives)

    def __contains__(self, native_id: object) -> bool:
        return native_id in self._natives

    def __iter__(self) -> Iterator[Native]:
        return iter(self._natives.values())

    def namespaces(self) -> list[str]:
        """Sorted unique namespaces, for populating the namespace filter."""
        return sorted({native.namespace for native in self._natives.values()}, key=collation_key)

    @staticmethod
    def matches_query(native: Native, query: str) -> bool:
        """Case-insensitive substring match on the native's identifiers.

        Args:
            native: Candidate native.
            query: Already lower-cased query; empty matches everything.
        """
        if not query:
            return True
        candidates = (
            native.id.lower(),
            native.display_name.lower(),
            native.alternate_name.lower(),
            strip_separators(native.name.lower()),
        )
        return any(query in candidate for candidate in candidates)

    def filter(
        self,
        query: str = "",
        access_filter: AccessTier | str = ALL,
        namespace_filter: str = ALL,
    ) -> list[RenderGroup]:
        """Filter, sort and group the catalog.

        Args:
            query: Free-text search.
            access_filter: Access tier value, or ``"all"``.
            namespace_filter: Exact namespace, or ``"all"``.

        Returns:
            Header and row groups in display order. Same inputs on an
            unchanged catalog always give the same sequence.
        """
        needle = query.strip().lower()
        access = access_filter.value if isinstance(access_filter, AccessTier) else access_filter

        matched = [
            native for native in self._natives.values()
            if self.matches_query(native, needle)
            and (access == ALL or native.access_tier.value == access)
            and (namespace_filter == ALL or native.namespace == namespace_filter)
        ]
        matched.sort(key=sort_key)

        groups: list[RenderGroup] = []
        last_namespace: str | None = None
        for native in matched:
            if native.namespace != last_namespace:
                groups.append(RenderGroup.header(native.namespace))
                last_namespace = native.namespace
            groups.append(RenderGroup.row(native))

        logger.debug(
            f"Catalog filter query='{needle}' access={access} namespace={namespace_filter}: "
            f"{len(matched)} matches"
        )
        return groups


__all__ = [
    "ALL",
    "RenderGroup",
    "CatalogIndex",
    "collation_key",
]
