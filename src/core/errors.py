"""Exceptions raised by the settings editor core.

Degenerate configuration input never raises; these cover misuse of the
editing lifecycle by the host.
"""

from __future__ import annotations


class SettingsEditorError(Exception):
    """Base class for settings editor errors."""


class SessionClosedError(SettingsEditorError):
    """Raised when an ended edit session is mutated or committed again."""


class UnknownFieldError(SettingsEditorError, KeyError):
    """Raised when a session is asked to set a field its editor does not own."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class UnknownWidgetTypeError(SettingsEditorError, KeyError):
    """Raised when no editor is registered for a widget type."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class FieldValueError(SettingsEditorError, ValueError):
    """Raised when raw input cannot be converted to a field's kind."""
