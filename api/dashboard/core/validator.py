from __future__ import annotations

from collections.abc import Hashable, Iterable


class Validator:
    """Accumulates one message per invalid field. The first failure for a field wins."""

    def __init__(self) -> None:
        self.errors: dict[str, str] = {}

    def valid(self) -> bool:
        return not self.errors

    def add_error(self, key: str, message: str) -> None:
        if key not in self.errors:
            self.errors[key] = message

    def check(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_error(key, message)


def permitted_value(value: Hashable, *permitted: Hashable) -> bool:
    return value in permitted


def unique(values: Iterable[Hashable] | None) -> bool:
    seen: set[Hashable] = set()
    for value in values or ():
        if value in seen:
            return False
        seen.add(value)
    return True


def byte_length(value: str) -> int:
    return len(value.encode("utf-8"))
