"""Custom exception hierarchy for Nuage."""

from __future__ import annotations


class NuageError(Exception):
    """Base class for all custom errors raised by Nuage."""


# --- 3-layer hierarchy ---

class DomainError(NuageError):
    """Base class for domain-level errors."""


class InfrastructureError(NuageError):
    """Base class for infrastructure-level errors."""


class ApplicationError(NuageError):
    """Base class for application-level errors."""


# --- Infrastructure errors ---

class FetchError(InfrastructureError):
    """Raised when a page of results cannot be fetched or decoded."""


class DecodeError(FetchError):
    """Raised when a remote payload does not match the expected entity shape."""


class NotAuthenticatedError(FetchError):
    """Raised when a feed needs the signed-in user and there is none."""


class CatalogError(InfrastructureError):
    """Raised when the offline catalog file cannot be read."""


# --- Application errors ---

class PlaybackError(ApplicationError):
    """Raised when a playback request cannot be honoured."""


# --- Settings ---

class SettingsError(NuageError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
