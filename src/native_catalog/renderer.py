"""
Incremental rendering of the grouped catalog view.

The full grouped sequence can hold tens of thousands of entries, so rows are
materialized in fixed-size batches. The host asks for the next batch when
the scroll position gets near the bottom of what has been rendered so far.
Rendered rows are kept until the next ``reset``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Sequence

from .catalog import RenderGroup
from .models import Native
from .signatures import RowSignature

logger = logging.getLogger("native-catalog")

BATCH_SIZE = 100
SCROLL_THRESHOLD = 200  # pixels from the bottom that trigger the next batch
EMPTY_PLACEHOLDER = "No matching natives."

SOURCE_ICON = "[src]"
EXAMPLE_ICON = "[ex]"

RowFormatter = Callable[[Native], RowSignature]


@dataclass(frozen=True)
class RenderedRow:
    """A materialized entry of the catalog list.

    Attributes:
        namespace: Namespace of the header or of the row's native.
        native_id: Id of the row's native; None for headers.
        signature: Display parts of the row's signature; None for headers.
        has_source: Whether decompiled source is attached.
        has_example: Whether a usage example is attached.
        active: Whether the row was the current selection when rendered.
    """
    namespace: str
    native_id: str | None = None
    signature: RowSignature | None = None
    has_source: bool = False
    has_example: bool = False
    active: bool = False

    @property
    def is_header(self) -> bool:
        return self.native_id is None

    def text(self) -> str:
        """Plain-text form of the row."""
        if self.is_header:
            return f"== {self.namespace} =="

        signature = self.signature
        params = ", ".join(f"{type_name} {name}" for type_name, name in signature.parameters)
        icons = ""
        if self.has_source:
            icons += f" {SOURCE_ICON}"
        if self.has_example:
            icons += f" {EXAMPLE_ICON}"
        marker = "> " if self.active else "  "
        return f"{marker}{signature.return_type} {signature.name}{icons} ( {params} )"


def near_bottom(
    scroll_top: float,
    viewport_height: float,
    content_height: float,
    threshold: float = SCROLL_THRESHOLD,
) -> bool:
    """Whether the viewport is within ``threshold`` of the content's end."""
    return scroll_top + viewport_height >= content_height - threshold


class IncrementalRenderer:
    """Materializes a grouped sequence in bounded batches.

    Usage:
        renderer = IncrementalRenderer(row_formatter)
        renderer.reset(catalog.filter("player"))
        first = renderer.render_next_batch()
        more = renderer.on_scroll(scroll_top, viewport_height, content_height)
    """

    def __init__(
        self,
        row_formatter: RowFormatter,
        batch_size: int = BATCH_SIZE,
        is_active: Callable[[str], bool] | None = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            row_formatter: Produces the row signature for a native under the
                current display settings.
            batch_size: Maximum entries materialized per batch.
            is_active: Tells whether a native id is the current selection.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.row_formatter = row_formatter
        self.batch_size = batch_size
        self.is_active = is_active or (lambda native_id: False)
        self._queue: list[RenderGroup] = []
        self._rows: list[RenderedRow] = []
        self._cursor = 0

    def reset(self, groups: Sequence[RenderGroup]) -> None:
        """Drop everything rendered and start over on ``groups``."""
        self._queue = list(groups)
        self._rows = []
        self._cursor = 0
        logger.debug(f"Renderer reset with {len(self._queue)} entries")

    def render_next_batch(self) -> list[RenderedRow]:
        """Materialize up to ``batch_size`` entries from the cursor.

        Returns:
            The newly rendered rows; empty once everything is rendered.
        """
        if self.exhausted:
            return []

        limit = min(self._cursor + self.batch_size, len(self._queue))
        batch = [self._materialize(group) for group in self._queue[self._cursor:limit]]
        self._rows.extend(batch)
        self._cursor = limit
        logger.debug(f"Rendered batch of {len(batch)} ({self._cursor}/{len(self._queue)})")
        return batch

    def on_scroll(
        self,
        scroll_top: float,
        viewport_height: float,
        content_height: float,
    ) -> list[RenderedRow]:
        """Render the next batch if the viewport is near the bottom."""
        if near_bottom(scroll_top, viewport_height, content_height):
            return self.render_next_batch()
        return []

    def mark_active(self) -> list[RenderedRow]:
        """Re-evaluate the active flag of every rendered row after a selection change."""
        self._rows = [
            replace(row, active=not row.is_header and self.is_active(row.native_id))
            for row in self._rows
        ]
        return list(self._rows)

    def _materialize(self, group: RenderGroup) -> RenderedRow:
        if group.is_header:
            return RenderedRow(namespace=group.namespace)

        native = group.native
        return RenderedRow(
            namespace=native.namespace,
            native_id=native.id,
            signature=self.row_formatter(native),
            has_source=native.has_attached_source,
            has_example=native.has_attached_example,
            active=self.is_active(native.id),
        )

    @property
    def rows(self) -> list[RenderedRow]:
        """All rows rendered since the last reset."""
        return list(self._rows)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def total(self) -> int:
        return len(self._queue)

    @property
    def exhausted(self) -> bool:
        return self._cursor >= len(self._queue)

    @property
    def is_empty(self) -> bool:
        """True when the current sequence has nothing to show."""
        return not self._queue

    def render_text(self) -> str:
        """Rendered rows as plain text, or the empty placeholder."""
        if self.is_empty:
            return EMPTY_PLACEHOLDER
        return "\n".join(row.text() for row in self._rows)


__all__ = [
    "BATCH_SIZE",
    "SCROLL_THRESHOLD",
    "EMPTY_PLACEHOLDER",
    "RenderedRow",
    "IncrementalRenderer",
    "near_bottom",
]
