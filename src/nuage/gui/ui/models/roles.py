"""Role definitions shared by the feed list models."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict

from PySide6.QtCore import Qt


class Roles(IntEnum):
    """Custom roles exposed to QML or widgets."""

    KIND = Qt.UserRole + 1
    TITLE = Qt.UserRole + 2
    SUBTITLE = Qt.UserRole + 3
    HEADER = Qt.UserRole + 4
    ARTWORK_URL = Qt.UserRole + 5
    DETAILS = Qt.UserRole + 6
    ITEM = Qt.UserRole + 7
    ITEM_ID = Qt.UserRole + 8


def role_names(base: Dict[int, bytes] | None = None) -> Dict[int, bytes]:
    """Return a mapping of Qt role numbers to byte names."""

    mapping: Dict[int, bytes] = {} if base is None else dict(base)
    mapping.update(
        {
            Roles.KIND: b"kind",
            Roles.TITLE: b"title",
            Roles.SUBTITLE: b"subtitle",
            Roles.HEADER: b"header",
            Roles.ARTWORK_URL: b"artworkUrl",
            Roles.DETAILS: b"details",
            Roles.ITEM: b"item",
            Roles.ITEM_ID: b"itemId",
        }
    )
    return mapping
