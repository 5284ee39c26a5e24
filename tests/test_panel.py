from __future__ import annotations

import asyncio
import json

import pytest
from textual.widgets import Input, Switch

import settings
from frontend.app import ConfigPanelApp


def _write_config(path, pump_settings: dict) -> None:
    path.write_text(
        json.dumps({"widgets": [{"id": "pump", "type": "slide_toggle", "settings": pump_settings}]}),
        encoding="utf-8",
    )


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    _write_config(path, {"title": "Pump", "rpcAction": "setValue"})
    monkeypatch.setattr(settings, "CONFIG_PATH", path)
    return path


async def _open_pump(app: ConfigPanelApp, pilot) -> None:
    await pilot.pause()
    await pilot.pause()
    await app._load_config()
    await app._open_widget("pump")
    await pilot.pause()
    await pilot.pause()


def test_nested_fragment_edit_reaches_preview_and_file(config_file) -> None:
    async def scenario():
        app = ConfigPanelApp()
        async with app.run_test() as pilot:
            await _open_pump(app, pilot)
            app.query_one("#switch-rpc-requestTimeout", Input).value = "900"
            await pilot.pause()
            preview = app._form.preview()
            saved = app._save_config()
            await pilot.pause()
            await pilot.pause()
            return preview, saved, app._has_unsaved_changes(), app._form.session.is_open

    preview, saved, unsaved, reopened = asyncio.run(scenario())

    assert preview["requestTimeout"] == 900
    assert preview["rpcAction"] == "setValue"
    assert saved is True
    assert unsaved is False
    assert reopened is True
    pump = json.loads(config_file.read_text(encoding="utf-8"))["widgets"][0]["settings"]
    assert pump["requestTimeout"] == 900
    assert pump["title"] == "Pump"
    assert pump["rpcAction"] == "setValue"
    assert "switchRpcSettings" not in pump
    assert "extraSettings" not in pump


def test_failed_save_keeps_form_editable(config_file, monkeypatch) -> None:
    def _refuse(data, path=None):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(settings, "save_config", _refuse)

    async def scenario():
        app = ConfigPanelApp()
        async with app.run_test() as pilot:
            await _open_pump(app, pilot)
            title = app.query_one("#slide-toggle-title", Input)
            title.value = "Tank"
            await pilot.pause()
            saved = app._save_config()
            title.value = "Tankx"
            await pilot.pause()
            return saved, app._form.session.is_open, app._form.preview(), app.config_state.error

    saved, is_open, preview, error = asyncio.run(scenario())

    assert saved is False
    assert is_open is True
    assert preview["title"] == "Tankx"
    assert error == "save failed: Permission denied"
    pump = json.loads(config_file.read_text(encoding="utf-8"))["widgets"][0]["settings"]
    assert pump == {"title": "Pump", "rpcAction": "setValue"}


def test_opening_widget_without_edits_stays_clean(config_file) -> None:
    _write_config(config_file, {"title": 5, "requestTimeout": "1000", "requestPersistent": "false"})

    async def scenario():
        app = ConfigPanelApp()
        async with app.run_test() as pilot:
            await _open_pump(app, pilot)
            switch = app.query_one("#switch-rpc-requestPersistent", Switch)
            return app._has_unsaved_changes(), app._form.preview(), switch.value

    unsaved, preview, switch_on = asyncio.run(scenario())

    assert unsaved is False
    assert preview["title"] == 5
    assert preview["requestTimeout"] == "1000"
    assert preview["requestPersistent"] == "false"
    assert switch_on is False


def test_typing_back_the_loaded_text_restores_stored_value(config_file) -> None:
    _write_config(config_file, {"title": 5})

    async def scenario():
        app = ConfigPanelApp()
        async with app.run_test() as pilot:
            await _open_pump(app, pilot)
            title = app.query_one("#slide-toggle-title", Input)
            title.value = "Tank"
            await pilot.pause()
            edited = app._form.preview()["title"]
            title.value = "5"
            await pilot.pause()
            return edited, app._form.preview()["title"]

    edited, restored = asyncio.run(scenario())

    assert edited == "Tank"
    assert restored == 5
