"""Expose Qt models used by the GUI."""
