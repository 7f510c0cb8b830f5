"""
Field updates for read-modify-write (PATCH) flows.

Each patchable field is either `UNSET` (keep the stored value) or `Set(value)`
(overwrite). Collections are replaced whole, never merged element-wise.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
R = TypeVar("R")


class Unset:
    _instance: Unset | None = None

    def __new__(cls) -> Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = Unset()


@dataclass(frozen=True, slots=True)
class Set(Generic[T]):
    value: T


FieldUpdate = Union[Set[T], Unset]


def changes(patch: Any) -> dict[str, Any]:
    """Return the `Set` fields of a patch dataclass as plain values."""
    return {
        field.name: update.value
        for field in dataclasses.fields(patch)
        if isinstance(update := getattr(patch, field.name), Set)
    }


def merge(record: R, patch: Any) -> R:
    """Copy `record` with every `Set` field of `patch` applied. `record` is left untouched."""
    updates = changes(patch)
    for name, value in updates.items():
        if isinstance(value, list):
            updates[name] = list(value)
    return dataclasses.replace(record, **updates)  # type: ignore[type-var]
