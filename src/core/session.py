"""Edit sessions drive an editor through its lifecycle.

A session is opened from host settings, mutated any number of times and
then either committed (returning flat settings) or discarded. The order
defaults -> partition -> form state -> merge is fixed here so editors only
supply the individual steps.
"""

from __future__ import annotations

import enum
import logging
from copy import deepcopy
from typing import Any, Callable, Optional

from core.editors import resolve_settings
from core.errors import SessionClosedError, SettingsEditorError, UnknownFieldError
from core.models import FormState, Settings
from core.ports import SettingsEditor

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    OPEN = "open"
    COMMITTED = "committed"
    DISCARDED = "discarded"


class EditSession:
    """One editing pass over a settings object."""

    def __init__(
        self,
        editor: SettingsEditor,
        form: FormState,
        on_commit: Optional[Callable[[Settings], None]] = None,
    ) -> None:
        self.editor = editor
        self.state = SessionState.OPEN
        self.dirty = False
        self._form = form
        self._on_commit = on_commit

    @classmethod
    def open(
        cls,
        editor: SettingsEditor,
        settings: Any = None,
        on_commit: Optional[Callable[[Settings], None]] = None,
    ) -> "EditSession":
        """Resolve ``settings`` over defaults and build the form state."""

        resolved = deepcopy(resolve_settings(editor, settings))
        prepared = editor.prepare_input_settings(resolved)
        form = editor.on_settings_set(prepared)
        logger.debug("Opened %s session with %s fragment keys", editor.name, len(form.fragment))
        return cls(editor, form, on_commit=on_commit)

    @property
    def is_open(self) -> bool:
        return self.state is SessionState.OPEN

    @property
    def fields(self) -> Settings:
        """Copy of the current known-field values."""
        return dict(self._form.fields)

    @property
    def fragment(self) -> Settings:
        """Copy of the current fragment; edit it through a fragment session."""
        return deepcopy(self._form.fragment)

    def get_field(self, key: str) -> Any:
        self._check_known(key)
        return self._form.fields.get(key)

    def set_field(self, key: str, value: Any) -> None:
        self._ensure_open()
        self._check_known(key)
        self._form.fields[key] = value
        self.dirty = True

    def replace_fragment(self, fragment: Settings) -> None:
        self._ensure_open()
        self._form.fragment = deepcopy(fragment) if isinstance(fragment, dict) else {}
        self.dirty = True

    def open_fragment_session(self) -> "EditSession":
        """Open a child session over the fragment using the sub-editor.

        Committing the child writes its output back into this session.
        """

        self._ensure_open()
        sub_editor = self.editor.sub_editor
        if sub_editor is None:
            raise SettingsEditorError(f"{self.editor.name} has no editor for its fragment")
        return EditSession.open(sub_editor, self._form.fragment, on_commit=self.replace_fragment)

    def preview(self) -> Settings:
        """Flat settings for the current form without ending the session."""
        self._ensure_open()
        return deepcopy(self.editor.prepare_output_settings(self._form))

    def commit(self) -> Settings:
        self._ensure_open()
        output = deepcopy(self.editor.prepare_output_settings(self._form))
        self.state = SessionState.COMMITTED
        logger.debug("Committed %s session (dirty=%s)", self.editor.name, self.dirty)
        if self._on_commit is not None:
            self._on_commit(output)
        return output

    def discard(self) -> None:
        self._ensure_open()
        self.state = SessionState.DISCARDED
        logger.debug("Discarded %s session", self.editor.name)

    def _ensure_open(self) -> None:
        if self.state is not SessionState.OPEN:
            raise SessionClosedError(f"{self.editor.name} session is already {self.state.value}")

    def _check_known(self, key: str) -> None:
        if key not in self.editor.known_keys:
            raise UnknownFieldError(f"{self.editor.name} does not manage field {key!r}")
