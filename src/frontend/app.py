"""Main Textual app for the widget settings config panel."""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from typing import Any

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, ScrollableContainer, Vertical
from textual.widgets import Button, DataTable, Footer, Static

import settings
from core.editors import get_editor
from core.errors import UnknownWidgetTypeError
from core.session import EditSession

from .constants import ACCENT_BLUE, WIDGET_TABLE_COLUMNS
from .forms import SettingsForm
from .modals import ReloadConfirmScreen, UnsavedChangesScreen
from .state import ConfigState

logger = logging.getLogger(__name__)


class ConfigPanelApp(App):
    """Config panel listing widgets and editing one widget's settings at a time."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.config_state = ConfigState()
        self._form: SettingsForm | None = None

    BINDINGS = [
        ("ctrl+s", "save_config", "Save"),
        ("ctrl+r", "reload_config", "Reload"),
        ("q", "request_quit", "Quit"),
        ("ctrl+c", "request_quit", "Quit"),
    ]

    CSS_PATH = "app.tcss"

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                    yield Static(f"file: {settings.CONFIG_PATH.name}", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static("", id="header-status")
                    yield Horizontal(
                        Button("Save", id="save-btn"),
                        Button("Reload", id="reload-btn"),
                        id="header-actions",
                    )

        with Horizontal(id="body"):
            with Container(id="widgets-left"):
                yield DataTable(id="widgets-table", cursor_type="row")
            with ScrollableContainer(id="editor-host"):
                yield Static("Select a widget to edit its settings.", id="editor-placeholder")
            with ScrollableContainer(id="preview-right"):
                yield Static("preview", classes="form-title")
                yield Static("", id="preview")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#widgets-table", DataTable)
        for label, key, width in WIDGET_TABLE_COLUMNS:
            table.add_column(label, key=key, width=width)
        table.zebra_stripes = True
        self.call_after_refresh(self._load_config)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-btn":
            self.action_save_config()
        elif event.button.id == "reload-btn":
            self.action_reload_config()

    async def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        widget_id = self._coerce_row_key(event.row_key)
        if widget_id == self.config_state.selected_widget:
            return
        self._stash_form()
        await self._open_widget(widget_id)

    def on_settings_form_changed(self, event: SettingsForm.Changed) -> None:
        self.mark_dirty()
        self._refresh_preview()

    def action_save_config(self) -> None:
        self._save_config()

    def action_reload_config(self) -> None:
        if self._has_unsaved_changes():
            self.push_screen(ReloadConfirmScreen(), self._handle_reload_choice)
        else:
            self.call_later(self._load_config)

    def action_request_quit(self) -> None:
        if self._has_unsaved_changes():
            self.push_screen(UnsavedChangesScreen(), self._handle_exit_choice)
        else:
            self.exit()

    def _handle_exit_choice(self, choice: str | None) -> None:
        if choice == "save":
            if self._save_config():
                self.exit()
        elif choice == "discard":
            self.exit()
        else:
            return

    def _handle_reload_choice(self, choice: str | None) -> None:
        if choice == "save":
            if self._save_config():
                self.call_later(self._load_config)
        elif choice == "reload":
            self.call_later(self._load_config)
        else:
            return

    def _has_unsaved_changes(self) -> bool:
        form = self._form
        return self.config_state.dirty or (form is not None and form.session.is_open and form.dirty)

    async def _load_config(self) -> None:
        if self._form is not None:
            self._form.discard()
        try:
            self.config_state.data = settings.load_config()
            self.config_state.error = None
        except settings.ConfigFileError as exc:
            self.config_state.data = None
            self.config_state.error = str(exc)
            logger.warning("Config load failed: %s", exc)
        self.config_state.dirty = False
        selected = self.config_state.selected_widget
        self.config_state.selected_widget = None
        self._refresh_table()
        self._refresh_header()
        if selected and settings.find_widget(self.config_state.data or {}, selected) is not None:
            await self._open_widget(selected)
        else:
            await self._clear_editor()

    def _save_config(self) -> bool:
        if self.config_state.data is None:
            self.config_state.error = "Nothing to save"
            self._refresh_header()
            return False
        # Write a copy first so a failed save leaves the open form untouched.
        data = self._data_with_pending_form()
        try:
            settings.save_config(data)
        except OSError as exc:
            self.config_state.error = f"save failed: {exc.strerror or exc}"
            self._refresh_header()
            return False
        self.config_state.data = data
        self.config_state.dirty = False
        self.config_state.error = None
        logger.info("Saved %s", settings.CONFIG_PATH)
        form = self._form
        if form is not None and form.session.is_open and form.dirty:
            # The saved settings now hold the edits; reopen on a fresh session.
            form.discard()
            widget_id = self.config_state.selected_widget
            self.config_state.selected_widget = None
            if widget_id:
                self.call_later(self._open_widget, widget_id)
        self._refresh_header()
        return True

    def _data_with_pending_form(self) -> dict[str, Any]:
        data = deepcopy(self.config_state.data or {})
        form = self._form
        if form is None or not form.session.is_open or not form.dirty:
            return data
        entry = settings.find_widget(data, self.config_state.selected_widget or "")
        if entry is not None:
            entry["settings"] = form.preview()
        return data

    def _stash_form(self) -> None:
        """Commit pending form edits into the in-memory config."""

        form = self._form
        if form is None or not form.session.is_open:
            return
        entry = settings.find_widget(self.config_state.data or {}, self.config_state.selected_widget or "")
        if entry is None or not form.dirty:
            form.discard()
            return
        entry["settings"] = form.commit()
        self.mark_dirty()

    async def _open_widget(self, widget_id: str) -> None:
        entry = settings.find_widget(self.config_state.data or {}, widget_id)
        if entry is None:
            return
        try:
            editor = get_editor(str(entry.get("type")))
        except UnknownWidgetTypeError as exc:
            self.config_state.error = str(exc)
            self._refresh_header()
            await self._clear_editor(str(exc))
            return
        session = EditSession.open(editor, entry.get("settings"))
        form = SettingsForm(session, title=f"{widget_id} ({editor.name})", id="settings-form")
        host = self.query_one("#editor-host", ScrollableContainer)
        await host.remove_children()
        await host.mount(form)
        self._form = form
        self.config_state.selected_widget = widget_id
        self._refresh_preview()

    async def _clear_editor(self, message: str = "Select a widget to edit its settings.") -> None:
        self._form = None
        host = self.query_one("#editor-host", ScrollableContainer)
        await host.remove_children()
        await host.mount(Static(message, id="editor-placeholder"))
        self.query_one("#preview", Static).update("")

    def mark_dirty(self) -> None:
        self.config_state.dirty = True
        self._refresh_header()

    def _refresh_table(self) -> None:
        table = self.query_one("#widgets-table", DataTable)
        table.clear()
        for entry in settings.get_widgets(self.config_state.data or {}):
            widget_id = str(entry.get("id"))
            table.add_row(widget_id, str(entry.get("type", "")), key=widget_id)

    def _refresh_preview(self) -> None:
        preview = self.query_one("#preview", Static)
        if self._form is None or not self._form.session.is_open:
            preview.update("")
            return
        preview.update(json.dumps(self._form.preview(), indent=2))

    def _refresh_header(self) -> None:
        status = self.query_one("#header-status", Static)
        save_btn = self.query_one("#save-btn", Button)
        reload_btn = self.query_one("#reload-btn", Button)

        status.remove_class("status-loaded", "status-modified", "status-error")
        if self.config_state.error:
            status.update(f"config: {self.config_state.error}")
            status.add_class("status-error")
        elif self._has_unsaved_changes():
            status.update("config: modified *")
            status.add_class("status-modified")
        else:
            status.update("config: loaded")
            status.add_class("status-loaded")

        save_btn.disabled = self.config_state.data is None
        reload_btn.disabled = False

    @staticmethod
    def _coerce_row_key(value: Any) -> str:
        if hasattr(value, "value"):
            return str(value.value)
        return str(value)

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("WIDGET", ACCENT_BLUE),
            (" SETTINGS > Config Panel", "bold"),
        )
