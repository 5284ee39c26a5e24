"""Concrete settings editors and the editor registry.

Every editor is a ``CompositeSettingsEditor``: an immutable value listing
the fields it owns, the key its residual fragment travels under while
editing, and optionally the editor that owns that fragment.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from core.errors import FieldValueError, UnknownWidgetTypeError
from core.fragments import merge, partition
from core.models import FieldSpec, FormState, Settings

logger = logging.getLogger(__name__)

_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


@dataclass(frozen=True)
class CompositeSettingsEditor:
    """Editor owning ``fields`` and delegating everything else to a fragment."""

    name: str
    fields: tuple[FieldSpec, ...]
    fragment_key: str
    sub_editor: Optional["CompositeSettingsEditor"] = None

    def __post_init__(self) -> None:
        if self.fragment_key in self.known_keys:
            raise ValueError(f"{self.name}: fragment key {self.fragment_key!r} clashes with a field")

    @property
    def known_keys(self) -> tuple[str, ...]:
        return tuple(spec.key for spec in self.fields)

    def field_spec(self, key: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.key == key:
                return spec
        return None

    def default_settings(self) -> Settings:
        defaults: Settings = {spec.key: spec.default for spec in self.fields}
        if self.sub_editor is not None:
            defaults.update(self.sub_editor.default_settings())
        return defaults

    def on_settings_set(self, settings: Settings) -> FormState:
        fragment = settings.get(self.fragment_key)
        if not isinstance(fragment, dict):
            fragment = {}
        return FormState(
            fields={key: settings[key] for key in self.known_keys if key in settings},
            fragment=fragment,
        )

    def prepare_input_settings(self, settings: Settings) -> Settings:
        known, fragment = partition(settings, self.known_keys)
        return {**known, self.fragment_key: fragment}

    def prepare_output_settings(self, form: FormState) -> Settings:
        return merge(form.fields, form.fragment)


def resolve_settings(editor: CompositeSettingsEditor, settings: Any) -> Settings:
    """Layer caller settings over the editor defaults.

    Anything that is not a mapping (missing, null, a list) falls back to the
    defaults instead of failing.
    """

    defaults = editor.default_settings()
    if settings is None:
        return defaults
    if not isinstance(settings, Mapping):
        logger.warning("Ignoring malformed %s settings of type %s", editor.name, type(settings).__name__)
        return defaults
    return {**defaults, **dict(settings)}


def coerce_field_value(spec: FieldSpec, raw: Any) -> Any:
    """Convert raw input (usually text from a form or the CLI) to the field kind."""

    if spec.kind == "bool":
        if isinstance(raw, bool):
            return raw
        word = str(raw).strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise FieldValueError(f"{spec.key}: expected true or false, got {raw!r}")

    if spec.kind == "int":
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        stripped = str(raw).strip()
        try:
            return int(stripped)
        except ValueError:
            raise FieldValueError(f"{spec.key}: expected an integer, got {raw!r}") from None

    if spec.kind == "choice":
        value = str(raw).strip()
        if value not in spec.choices:
            allowed = ", ".join(spec.choices)
            raise FieldValueError(f"{spec.key}: expected one of {allowed}, got {raw!r}")
        return value

    return "" if raw is None else str(raw)


switch_rpc_editor = CompositeSettingsEditor(
    name="switch_rpc",
    fields=(
        FieldSpec("initialValue", False, kind="bool", label="Initial value"),
        FieldSpec(
            "retrieveValueMethod",
            "rpc",
            kind="choice",
            label="Retrieve on/off value using",
            choices=("none", "rpc", "attribute", "timeseries"),
        ),
        FieldSpec("valueKey", "value", label="Value key"),
        FieldSpec("getValueMethod", "getValue", label="RPC get value method"),
        FieldSpec("parseValueFunction", "return data ? true : false;", label="Parse value function"),
        FieldSpec("setValueMethod", "setValue", label="RPC set value method"),
        FieldSpec("convertValueFunction", "return value;", label="Convert value function"),
        FieldSpec("requestTimeout", 500, kind="int", label="RPC request timeout (ms)"),
        FieldSpec("requestPersistent", False, kind="bool", label="Persistent RPC request"),
        FieldSpec(
            "persistentPollingInterval",
            5000,
            kind="int",
            label="Persistent polling interval (ms)",
        ),
    ),
    fragment_key="extraSettings",
)

slide_toggle_editor = CompositeSettingsEditor(
    name="slide_toggle",
    fields=(
        FieldSpec("title", "", label="Title"),
        FieldSpec(
            "labelPosition",
            "after",
            kind="choice",
            label="Label position",
            choices=("before", "after"),
        ),
        FieldSpec(
            "sliderColor",
            "accent",
            kind="choice",
            label="Slider color",
            choices=("primary", "accent", "warn"),
        ),
    ),
    fragment_key="switchRpcSettings",
    sub_editor=switch_rpc_editor,
)

EDITORS: dict[str, CompositeSettingsEditor] = {
    slide_toggle_editor.name: slide_toggle_editor,
    switch_rpc_editor.name: switch_rpc_editor,
}


def get_editor(widget_type: str) -> CompositeSettingsEditor:
    """Return the editor registered for ``widget_type``."""

    try:
        return EDITORS[widget_type]
    except KeyError:
        raise UnknownWidgetTypeError(f"No settings editor for widget type: {widget_type}") from None
