"""Static configuration for the widget settings editor.

Widgets and logging options live in a single JSON file so they can be
edited by hand, from the CLI, or from the config panel.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# WIDGET_SETTINGS_CONFIG points the editor at another config file.
CONFIG_PATH = Path(os.getenv("WIDGET_SETTINGS_CONFIG") or PROJECT_ROOT / "config.json")


class ConfigFileError(Exception):
    """Raised when config.json is missing or has the wrong shape."""


def load_config(path: Optional[Path] = None) -> dict[str, Any]:
    """Load config.json and check the root is an object."""

    path = Path(path or CONFIG_PATH)
    try:
        loaded = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigFileError(f"{path.name} missing") from None
    except json.JSONDecodeError as exc:
        raise ConfigFileError(f"{path.name} error: {exc.msg}") from None
    if not isinstance(loaded, dict):
        raise ConfigFileError("config root must be an object")
    widgets = loaded.get("widgets", [])
    if not isinstance(widgets, list):
        raise ConfigFileError("widgets must be a list")
    return loaded


def save_config(data: dict[str, Any], path: Optional[Path] = None) -> None:
    path = Path(path or CONFIG_PATH)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=True) + "\n", encoding="utf-8")


def get_widgets(config: dict[str, Any]) -> list[dict[str, Any]]:
    """Return widget entries, skipping anything that is not an object."""

    widgets = config.get("widgets") or []
    return [entry for entry in widgets if isinstance(entry, dict) and entry.get("id")]


def find_widget(config: dict[str, Any], widget_id: str) -> Optional[dict[str, Any]]:
    for entry in get_widgets(config):
        if str(entry.get("id")) == widget_id:
            return entry
    return None


def logging_config(config: Optional[dict[str, Any]]) -> dict[str, Any]:
    section = (config or {}).get("logging")
    if isinstance(section, dict):
        return section
    return {}
