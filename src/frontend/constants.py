"""Shared constants for the Textual UI."""

from __future__ import annotations

ACCENT_BLUE = "#2AABEE"

WIDGET_TABLE_COLUMNS = (
    ("id", "id", 20),
    ("type", "type", 16),
)
