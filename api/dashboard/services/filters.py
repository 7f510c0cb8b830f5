"""
Paging and sorting parameters for list queries.

Only sort keys present in a caller-provided safelist are ever interpolated
into SQL text. A leading ``-`` on a key selects descending order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from dashboard.core.validator import Validator

MAX_PAGE_SIZE = 100
MAX_PAGE = 10_000_000
DESCENDING_MARKER = "-"


@dataclass(frozen=True, slots=True)
class Filters:
    page: int = 1
    page_size: int = 20
    sort: str = "id"
    sort_safelist: tuple[str, ...] = ("id", "-id")

    def sort_column(self) -> str:
        if self.sort not in self.sort_safelist:
            raise RuntimeError(f"unsafe sort parameter: {self.sort}")
        if self.sort.startswith(DESCENDING_MARKER):
            return self.sort[len(DESCENDING_MARKER):]
        return self.sort

    def sort_direction(self) -> str:
        if self.sort.startswith(DESCENDING_MARKER):
            return "DESC"
        return "ASC"

    def limit(self) -> int:
        return self.page_size

    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True, slots=True)
class Metadata:
    current_page: int = 0
    page_size: int = 0
    first_page: int = 0
    last_page: int = 0
    total_records: int = 0


def with_descending(*columns: str) -> tuple[str, ...]:
    return tuple(columns) + tuple(f"{DESCENDING_MARKER}{column}" for column in columns)


def validate_filters(v: Validator, filters: Filters) -> None:
    v.check(filters.page > 0, "page", "must be greater than zero")
    v.check(filters.page <= MAX_PAGE, "page", "must be a maximum of 10 million")
    v.check(filters.page_size > 0, "page_size", "must be greater than zero")
    v.check(filters.page_size <= MAX_PAGE_SIZE, "page_size", f"must be a maximum of {MAX_PAGE_SIZE}")
    v.check(filters.sort in filters.sort_safelist, "sort", "invalid sort value")


def calculate_metadata(total_records: int, page: int, page_size: int) -> Metadata:
    if total_records == 0:
        return Metadata()

    return Metadata(
        current_page=page,
        page_size=page_size,
        first_page=1,
        last_page=math.ceil(total_records / page_size),
        total_records=total_records,
    )
