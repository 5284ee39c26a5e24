from __future__ import annotations

import json

import pytest

import app
import settings
from core.editors import slide_toggle_editor
from core.errors import FieldValueError, UnknownFieldError
from core.session import EditSession


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "widgets": [
                    {
                        "id": "pump",
                        "type": "slide_toggle",
                        "settings": {"title": "Pump", "rpcAction": "setValue"},
                    },
                    {"id": "mystery", "type": "gauge", "settings": {}},
                ]
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setattr(settings, "CONFIG_PATH", path)
    return path


def test_apply_assignments_routes_fragment_keys() -> None:
    session = EditSession.open(slide_toggle_editor, {"title": "A"})
    app.apply_assignments(
        session,
        [("sliderColor", "warn"), ("switchRpcSettings.requestTimeout", "250")],
    )
    output = session.commit()
    assert output["sliderColor"] == "warn"
    assert output["requestTimeout"] == 250


def test_apply_assignments_rejects_bad_values() -> None:
    session = EditSession.open(slide_toggle_editor, {})
    with pytest.raises(FieldValueError):
        app.apply_assignments(session, [("labelPosition", "above")])
    with pytest.raises(UnknownFieldError):
        app.apply_assignments(session, [("rpcAction", "x")])


def test_set_command_saves_flat_settings(config_file, capsys) -> None:
    code = app.main(["set", "pump", "title=Tank", "switchRpcSettings.requestPersistent=true"])
    assert code == 0

    saved = json.loads(config_file.read_text(encoding="utf-8"))
    pump = saved["widgets"][0]["settings"]
    assert pump["title"] == "Tank"
    assert pump["requestPersistent"] is True
    assert pump["rpcAction"] == "setValue"
    assert "switchRpcSettings" not in pump
    assert json.loads(capsys.readouterr().out) == pump


def test_show_command_prints_resolved_settings(config_file, capsys) -> None:
    assert app.main(["show", "pump"]) == 0
    shown = json.loads(capsys.readouterr().out)
    assert shown["title"] == "Pump"
    assert shown["labelPosition"] == "after"
    assert shown["valueKey"] == "value"


def test_defaults_command(capsys) -> None:
    assert app.main(["defaults", "switch_rpc"]) == 0
    assert json.loads(capsys.readouterr().out)["getValueMethod"] == "getValue"


def test_errors_exit_with_code_one(config_file, capsys) -> None:
    assert app.main(["show", "missing"]) == 1
    assert app.main(["show", "mystery"]) == 1
    assert app.main(["set", "pump", "noequals"]) == 1
    assert "error:" in capsys.readouterr().err
    saved = json.loads(config_file.read_text(encoding="utf-8"))
    assert saved["widgets"][0]["settings"] == {"title": "Pump", "rpcAction": "setValue"}


def test_missing_config_file(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(settings, "CONFIG_PATH", tmp_path / "absent.json")
    assert app.main(["show", "pump"]) == 1
    assert "absent.json missing" in capsys.readouterr().err
