"""Modal dialogs for the config panel."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Static


class ChoiceScreen(ModalScreen[str]):
    """Ask a question and dismiss with the chosen action name."""

    TITLE_TEXT = ""
    BODY_TEXT = ""
    # (action, label, variant)
    CHOICES: tuple[tuple[str, str, str], ...] = ()

    def compose(self) -> ComposeResult:
        buttons = [
            Button(label, id=f"choice-{action}", variant=variant)
            for action, label, variant in self.CHOICES
        ]
        buttons.append(Button("Cancel", id="choice-cancel"))
        yield Container(
            Static(self.TITLE_TEXT, classes="modal-title"),
            Static(self.BODY_TEXT, classes="modal-body"),
            Horizontal(*buttons, classes="modal-actions"),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        self.dismiss(button_id.removeprefix("choice-") or "cancel")


class UnsavedChangesScreen(ChoiceScreen):
    """Prompt when exiting with unsaved widget settings."""

    TITLE_TEXT = "Unsaved changes"
    BODY_TEXT = "Save widget settings before exit?"
    CHOICES = (
        ("save", "Save", "success"),
        ("discard", "Discard", "error"),
    )


class ReloadConfirmScreen(ChoiceScreen):
    """Prompt when reloading with unsaved widget settings."""

    TITLE_TEXT = "Reload config?"
    BODY_TEXT = "Unsaved widget settings will be lost."
    CHOICES = (
        ("save", "Save", "default"),
        ("reload", "Reload", "warning"),
    )
