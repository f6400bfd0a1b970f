"""
Text rendering of the catalog for tool responses.

``TextCatalogView`` implements the controller's view contract by keeping
the latest rows and detail panel and buffering a plain-text transcript that
the MCP tools return.
"""

from __future__ import annotations

import dataclasses

from .controller import DetailPanel
from .presentation import access_tier_label
from .renderer import RenderedRow


def format_detail(panel: DetailPanel) -> str:
    """Plain-text detail panel for one native."""
    native = panel.native
    lines = [
        f"{native.name}  [{access_tier_label(native.access_tier)}]  {native.namespace}",
        f"Hash: {native.id}",
    ]
    if native.secondary_hash:
        lines.append(f"Jhash: {native.secondary_hash}")
    if native.alternate_name:
        lines.append(f"Alternate name: {native.alternate_name}")

    lines += ["", f"```{panel.signature.highlight}", panel.signature.definition_text, "```", "", "Parameters:"]
    if panel.parameters:
        for param in panel.parameters:
            doc = f" {param.doc}" if param.doc else ""
            lines.append(f"- {param.type} {param.name}:{doc}")
    else:
        lines.append(f"  {panel.parameters_placeholder}")

    lines += ["", "Description:", panel.description]
    if panel.original_description and panel.original_description != panel.description:
        lines += ["", "Original description:", panel.original_description]

    if not panel.loading:
        lines += ["", "Source available" if panel.source_available else "No source in the database."]
    return "\n".join(lines)


class TextCatalogView:
    """Buffers everything the controller paints as plain text."""

    def __init__(self) -> None:
        self.status = ""
        self.rows: list[RenderedRow] = []
        self.detail: DetailPanel | None = None
        self.errors: list[str] = []
        self._buffer: list[str] = []

    def show_status(self, text: str) -> None:
        self.status = text
        self._buffer.append(f"📚 {text}")

    def show_rows(self, rows: list[RenderedRow], replace: bool) -> None:
        if replace:
            self.rows = list(rows)
        else:
            self.rows.extend(rows)
        self._buffer.extend(row.text() for row in rows)

    def show_placeholder(self, text: str) -> None:
        self.rows = []
        self._buffer.append(text)

    def mark_active(self, native_id: str | None) -> None:
        self.rows = [
            dataclasses.replace(row, active=native_id is not None and row.native_id == native_id)
            for row in self.rows
        ]

    def show_detail(self, panel: DetailPanel) -> None:
        self.detail = panel
        self._buffer.append(format_detail(panel))

    def clear_detail(self) -> None:
        self.detail = None
        self._buffer.append("Selection cleared.")

    def show_error(self, message: str) -> None:
        self.errors.append(message)
        self._buffer.append(f"❌ {message}")

    def flush(self) -> str:
        """Return and clear the buffered transcript."""
        text = "\n".join(self._buffer)
        self._buffer.clear()
        return text


__all__ = [
    "TextCatalogView",
    "format_detail",
]
