"""Ports (interfaces) used by the editing lifecycle.

A settings editor is anything exposing the four lifecycle operations. The
session drives them in a fixed order, so the host never calls them
directly.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.models import FieldSpec, FormState, Settings


class SettingsEditor(Protocol):
    """Lifecycle operations required by an edit session."""

    name: str
    fields: tuple[FieldSpec, ...]
    fragment_key: str
    sub_editor: Optional["SettingsEditor"]

    @property
    def known_keys(self) -> tuple[str, ...]:
        ...

    def default_settings(self) -> Settings:
        ...

    def on_settings_set(self, settings: Settings) -> FormState:
        ...

    def prepare_input_settings(self, settings: Settings) -> Settings:
        ...

    def prepare_output_settings(self, form: FormState) -> Settings:
        ...

    def field_spec(self, key: str) -> Optional[FieldSpec]:
        ...