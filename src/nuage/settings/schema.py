"""Schema helpers for the application settings file."""

from __future__ import annotations

import os
from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import DEFAULT_PAGE_SIZE, DEFAULT_PLAYLIST_CHUNK_SIZE, DEFAULT_PREFETCH_ROWS

NAVIGATION_KINDS = ["stream", "likes", "history", "following", "playlist"]

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "nuage/settings.schema.json",
    "type": "object",
    "required": ["schema", "lists", "ui"],
    "properties": {
        "schema": {"const": "nuage/settings@1"},
        "catalog_path": {"type": ["string", "null"]},
        "lists": {
            "type": "object",
            "properties": {
                "page_size": {"type": "integer", "minimum": 1, "maximum": 500},
                "prefetch_rows": {"type": "integer", "minimum": 0, "maximum": 200},
                "playlist_chunk_size": {"type": "integer", "minimum": 1, "maximum": 500},
            },
            "additionalProperties": False,
        },
        "ui": {
            "type": "object",
            "properties": {
                "volume": {"type": "number", "minimum": 0, "maximum": 100},
                "last_navigation": {"type": "string", "enum": NAVIGATION_KINDS},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "nuage/settings@1",
    "catalog_path": None,
    "lists": {
        "page_size": DEFAULT_PAGE_SIZE,
        "prefetch_rows": DEFAULT_PREFETCH_ROWS,
        "playlist_chunk_size": DEFAULT_PLAYLIST_CHUNK_SIZE,
    },
    "ui": {
        "volume": 75,
        "last_navigation": "stream",
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in ("lists", "ui") and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            if key == "catalog_path" and value not in {None, ""}:
                try:
                    merged[key] = os.fspath(value)
                except TypeError:
                    continue
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "NAVIGATION_KINDS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
