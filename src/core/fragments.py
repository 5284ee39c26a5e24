"""Partition/merge helpers for flat settings objects.

A flat settings object is split into the fields an editor manages itself
and a residual fragment that is handed to a nested editor untouched.
Merging is shallow: a known value replaces the whole value under its key.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from copy import deepcopy
from typing import Any, Optional

from core.models import Partition, Settings


def partition(obj: Mapping[str, Any], known_keys: Iterable[str]) -> Partition:
    """Split ``obj`` into (known, fragment).

    Known keys missing from ``obj`` are omitted, never defaulted. The
    fragment is a deep copy, so callers may mutate it freely.
    """

    ordered = tuple(known_keys)
    keys = set(ordered)
    known = {key: obj[key] for key in ordered if key in obj}
    fragment = {key: deepcopy(value) for key, value in obj.items() if key not in keys}
    return Partition(known=known, fragment=fragment)


def merge(known: Mapping[str, Any], fragment: Optional[Mapping[str, Any]]) -> Settings:
    """Flatten ``known`` over ``fragment`` into a new dict (known wins)."""

    merged: Settings = dict(fragment or {})
    merged.update(known)
    return merged
