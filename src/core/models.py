"""Core data models.

Settings are plain dicts so they can round-trip through config.json
unchanged; the dataclasses below only describe the editing side.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Optional

Settings = dict[str, Any]

FIELD_KINDS = ("text", "choice", "bool", "int")


@dataclass(frozen=True)
class Partition:
    """Result of splitting a flat settings object by a known-key list."""

    known: Settings
    fragment: Settings

    def __iter__(self) -> Iterator[Settings]:
        # Allows ``known, fragment = partition(...)``.
        yield self.known
        yield self.fragment


@dataclass(frozen=True)
class FieldSpec:
    """A field managed directly by an editor."""

    key: str
    default: Any
    kind: str = "text"
    label: Optional[str] = None
    choices: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unsupported field kind: {self.kind}")
        if self.kind == "choice" and not self.choices:
            raise ValueError(f"Choice field {self.key!r} needs choices")

    @property
    def display_label(self) -> str:
        return self.label or self.key


@dataclass
class FormState:
    """Editable form state: one value per known field plus one fragment."""

    fields: Settings = field(default_factory=dict)
    fragment: Settings = field(default_factory=dict)
