"""Adapter for mapping feed rows to Qt model roles."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import Qt

from ..rows import Row, RowKind
from .roles import Roles


class RowAdapter:
    """Helper to retrieve data from rows based on Qt roles."""

    def data(self, row: Row, role: int) -> Any:
        """Return the value for the given *row* and *role*."""
        if role == Qt.DisplayRole:
            return self.display_text(row)
        if role == Qt.ToolTipRole:
            return "\n".join(row.details) or None
        if role == Roles.KIND:
            return row.kind.value
        if role == Roles.TITLE:
            return row.title
        if role == Roles.SUBTITLE:
            return row.subtitle
        if role == Roles.HEADER:
            return row.header
        if role == Roles.ARTWORK_URL:
            return row.artwork_url
        if role == Roles.DETAILS:
            return list(row.details)
        if role == Roles.ITEM:
            return row.item
        if role == Roles.ITEM_ID:
            return getattr(row.item, "id", None)
        return None

    @staticmethod
    def display_text(row: Row) -> str:
        """Plain-text rendering used by widget views."""
        lines = []
        if row.header:
            lines.append(row.header)
        if row.kind is RowKind.COMMENT:
            lines.append(f"{row.title}: {row.subtitle}")
        elif row.subtitle:
            lines.append(f"{row.title} — {row.subtitle}")
        else:
            lines.append(row.title)
        if row.details:
            lines.append(row.details[0])
        return "\n".join(lines)
