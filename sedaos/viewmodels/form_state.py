"""Immutable form snapshots and the reducer that advances them.

Views never mutate a form in place: each input event is turned into a new
snapshot by :func:`reduce_form`, and all validity flags are derived from the
snapshot on demand.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Tuple, TypeVar, Union


@dataclass(frozen=True)
class FormField:
    """Single text input; ``is_visible`` only matters for secret fields."""

    value: str = ""
    is_visible: bool = False


@dataclass(frozen=True)
class FieldChanged:
    name: str
    value: str


@dataclass(frozen=True)
class VisibilityToggled:
    name: str


@dataclass(frozen=True)
class FieldsCleared:
    names: Tuple[str, ...]


FormEvent = Union[FieldChanged, VisibilityToggled, FieldsCleared]
FormT = TypeVar("FormT")


def _field_names(form: Any) -> Tuple[str, ...]:
    return tuple(f.name for f in fields(form))


def _require_field(form: Any, name: str) -> Any:
    if name not in _field_names(form):
        raise KeyError(f"{type(form).__name__} has no field '{name}'")
    return getattr(form, name)


def _with_value(current: Any, value: str) -> Any:
    if isinstance(current, FormField):
        return replace(current, value=value)
    if isinstance(current, str):
        return value
    raise TypeError("Only text fields can be edited.")


def reduce_form(form: FormT, event: FormEvent) -> FormT:
    """Return the snapshot that follows ``form`` after ``event``."""
    if isinstance(event, FieldChanged):
        if not isinstance(event.value, str):
            raise TypeError("Field values must be strings.")
        current = _require_field(form, event.name)
        return replace(form, **{event.name: _with_value(current, event.value)})

    if isinstance(event, VisibilityToggled):
        current = _require_field(form, event.name)
        if not isinstance(current, FormField):
            raise TypeError(f"Field '{event.name}' has no visibility toggle.")
        return replace(form, **{event.name: replace(current, is_visible=not current.is_visible)})

    if isinstance(event, FieldsCleared):
        updates = {}
        for name in event.names:
            updates[name] = _with_value(_require_field(form, name), "")
        return replace(form, **updates)

    raise TypeError(f"Unsupported form event: {event!r}")


def value_of(form: Any, name: str) -> str:
    current = _require_field(form, name)
    if isinstance(current, FormField):
        return current.value
    return current
