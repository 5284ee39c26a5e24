"""Settings form rendering an edit session as Textual inputs."""

from __future__ import annotations

from typing import Any, Optional

from textual import on
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import Input, Select, Static, Switch

from core.errors import FieldValueError
from core.editors import coerce_field_value
from core.models import FieldSpec, FormState, Settings
from core.session import EditSession


class SettingsForm(Vertical):
    """Form for one edit session, with a nested form for its fragment."""

    class Changed(Message):
        """Posted after a field value was written to the session."""

        def __init__(self, form: "SettingsForm", key: str) -> None:
            super().__init__()
            self.form = form
            self.key = key

    def __init__(self, session: EditSession, title: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.session = session
        self._heading = title or session.editor.name
        self._id_prefix = session.editor.name.replace("_", "-")
        self._specs_by_id = {self._widget_id(spec): spec for spec in session.editor.fields}
        self._load_errors: list[str] = []
        # widget id -> (value shown on load, value stored on load)
        self._loaded: dict[str, tuple[Any, Any]] = {}
        self._fragment_form: Optional[SettingsForm] = None
        if session.editor.sub_editor is not None:
            self._fragment_form = SettingsForm(
                session.open_fragment_session(),
                title=session.editor.fragment_key,
                classes="fragment-form",
            )

    @property
    def dirty(self) -> bool:
        return self.session.dirty or (self._fragment_form is not None and self._fragment_form.dirty)

    def compose(self):
        yield Static(self._heading, classes="form-title")
        for spec in self.session.editor.fields:
            yield Static(spec.display_label, classes="form-label")
            yield self._field_widget(spec)
        yield Static("\n".join(self._load_errors), id=f"{self._id_prefix}-error", classes="settings-error")
        if self._fragment_form is not None:
            yield self._fragment_form

    def preview(self) -> Settings:
        """Flat settings including edits still pending in the nested form."""

        if self._fragment_form is None:
            return self.session.preview()
        form = FormState(fields=self.session.fields, fragment=self._fragment_form.preview())
        return self.session.editor.prepare_output_settings(form)

    def commit(self) -> Settings:
        if self._fragment_form is not None and self._fragment_form.session.is_open:
            self._fragment_form.session.commit()
        return self.session.commit()

    def discard(self) -> None:
        if self._fragment_form is not None and self._fragment_form.session.is_open:
            self._fragment_form.session.discard()
        if self.session.is_open:
            self.session.discard()

    def _widget_id(self, spec: FieldSpec) -> str:
        return f"{self._id_prefix}-{spec.key}"

    def _field_widget(self, spec: FieldSpec):
        widget_id = self._widget_id(spec)
        value = self.session.get_field(spec.key)
        if spec.kind == "bool":
            try:
                shown = coerce_field_value(spec, value)
            except FieldValueError:
                self._load_errors.append(f"Invalid value for {spec.display_label}: {value}")
                shown = False
            self._loaded[widget_id] = (shown, value)
            return Switch(value=shown, id=widget_id)
        if spec.kind == "choice":
            options = [(choice, choice) for choice in spec.choices]
            if value in spec.choices:
                self._loaded[widget_id] = (value, value)
                return Select(options, value=value, allow_blank=False, id=widget_id)
            # Keep the stored value until the user picks a valid one.
            self._load_errors.append(f"Invalid value for {spec.display_label}: {value}")
            return Select(options, allow_blank=True, id=widget_id)
        shown = "" if value is None else str(value)
        self._loaded[widget_id] = (shown, value)
        return Input(value=shown, placeholder=str(spec.default), id=widget_id)

    def _own_spec(self, control: Any) -> Optional[FieldSpec]:
        return self._specs_by_id.get(getattr(control, "id", None) or "")

    @on(Input.Changed)
    def _on_input_changed(self, event: Input.Changed) -> None:
        spec = self._own_spec(event.control)
        if spec is None:
            return
        event.stop()
        if spec.kind == "int" and not event.value.strip():
            self._set_error("")
            return
        self._apply(spec, event.value, event.control.id)

    @on(Select.Changed)
    def _on_select_changed(self, event: Select.Changed) -> None:
        spec = self._own_spec(event.control)
        if spec is None:
            return
        event.stop()
        # The blank sentinel is not a string; every choice is.
        if not isinstance(event.value, str):
            return
        self._apply(spec, event.value, event.control.id)

    @on(Switch.Changed)
    def _on_switch_changed(self, event: Switch.Changed) -> None:
        spec = self._own_spec(event.control)
        if spec is None:
            return
        event.stop()
        self._apply(spec, bool(event.value), event.control.id)

    def _apply(self, spec: FieldSpec, raw: Any, widget_id: str) -> None:
        if not self.session.is_open:
            # Ended forms stay mounted until the host replaces them.
            return
        shown, stored = self._loaded.get(widget_id, (None, None))
        if widget_id in self._loaded and raw == shown:
            # Back to what was loaded: keep the stored value as-is.
            value = stored
        else:
            try:
                value = coerce_field_value(spec, raw)
            except FieldValueError as exc:
                self._set_error(str(exc))
                return
            self._set_error("")
        current = self.session.get_field(spec.key)
        if value == current or (current is None and value == ""):
            return
        self.session.set_field(spec.key, value)
        self.post_message(self.Changed(self, spec.key))

    def _set_error(self, message: str) -> None:
        self.query_one(f"#{self._id_prefix}-error", Static).update(message)
