"""Application entry point for the widget settings editor."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from art import tprint

import settings
from core.editors import coerce_field_value, get_editor, resolve_settings
from core.errors import SettingsEditorError
from core.session import EditSession

NAME = "WIDGETS"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging(config: dict[str, Any], console_allowed: bool = True) -> None:
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    # The config panel owns the terminal, so it only ever logs to a file.
    if console_allowed and config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/widget-settings.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _load_config_or_none() -> Optional[dict[str, Any]]:
    try:
        return settings.load_config()
    except settings.ConfigFileError:
        return None


def _parse_assignments(pairs: list[str]) -> list[tuple[str, str]]:
    assignments = []
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise SettingsEditorError(f"Expected key=value, got {pair!r}")
        assignments.append((key.strip(), value))
    return assignments


def apply_assignments(session: EditSession, assignments: list[tuple[str, str]]) -> None:
    """Apply ``key=value`` edits, routing ``<fragment_key>.<field>`` to the sub-editor."""

    fragment_prefix = f"{session.editor.fragment_key}."
    nested = [(key[len(fragment_prefix):], value) for key, value in assignments if key.startswith(fragment_prefix)]
    local = [(key, value) for key, value in assignments if not key.startswith(fragment_prefix)]

    for key, value in local:
        spec = session.editor.field_spec(key)
        # Unknown keys still go through set_field so the session reports them.
        session.set_field(key, value if spec is None else coerce_field_value(spec, value))

    if nested:
        child = session.open_fragment_session()
        apply_assignments(child, nested)
        child.commit()


def _edit_widget(widget_id: str, pairs: list[str]) -> int:
    logger = logging.getLogger(__name__)
    config = settings.load_config()
    entry = settings.find_widget(config, widget_id)
    if entry is None:
        raise SettingsEditorError(f"No widget with id {widget_id!r}")

    editor = get_editor(str(entry.get("type")))
    session = EditSession.open(editor, entry.get("settings"))
    try:
        apply_assignments(session, _parse_assignments(pairs))
    except SettingsEditorError:
        session.discard()
        raise
    entry["settings"] = session.commit()
    settings.save_config(config)
    logger.info("Saved %s settings for widget %s", editor.name, widget_id)
    print(json.dumps(entry["settings"], indent=2))
    return 0


def _show_widget(widget_id: str) -> int:
    config = settings.load_config()
    entry = settings.find_widget(config, widget_id)
    if entry is None:
        raise SettingsEditorError(f"No widget with id {widget_id!r}")
    editor = get_editor(str(entry.get("type")))
    print(json.dumps(resolve_settings(editor, entry.get("settings")), indent=2))
    return 0


def _show_defaults(widget_type: str) -> int:
    print(json.dumps(get_editor(widget_type).default_settings(), indent=2))
    return 0


def _panel() -> int:
    _print_banner()
    from frontend.app import ConfigPanelApp

    ConfigPanelApp().run()
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="widget-settings")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("panel", help="Launch the config panel TUI")
    defaults_parser = subparsers.add_parser("defaults", help="Print default settings for a widget type")
    defaults_parser.add_argument("widget_type")
    show_parser = subparsers.add_parser("show", help="Print a widget's settings layered over defaults")
    show_parser.add_argument("widget_id")
    set_parser = subparsers.add_parser("set", help="Edit a widget's settings and save config.json")
    set_parser.add_argument("widget_id")
    set_parser.add_argument("assignments", nargs="+", metavar="key=value")

    args = parser.parse_args(argv)
    command = args.command or "panel"

    config = _load_config_or_none()
    _configure_logging(settings.logging_config(config), console_allowed=command != "panel")

    try:
        if command == "defaults":
            return _show_defaults(args.widget_type)
        if command == "show":
            return _show_widget(args.widget_id)
        if command == "set":
            return _edit_widget(args.widget_id, args.assignments)
        return _panel()
    except (SettingsEditorError, settings.ConfigFileError) as exc:
        logging.getLogger(__name__).error("%s failed: %s", command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: save failed: {exc.strerror or exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
