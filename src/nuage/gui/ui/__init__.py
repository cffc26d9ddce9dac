"""Widgets, item models and background tasks of the desktop client."""
