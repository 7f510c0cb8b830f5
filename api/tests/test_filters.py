import pytest

from dashboard.core.validator import Validator
from dashboard.services.filters import Filters, Metadata, calculate_metadata, validate_filters, with_descending

SAFELIST = with_descending("id", "first_name", "last_name")


def _errors(filters: Filters) -> dict[str, str]:
    v = Validator()
    validate_filters(v, filters)
    return v.errors


@pytest.mark.parametrize("page", [1, 2, 7, 1_000])
@pytest.mark.parametrize("page_size", [1, 20, 99, 100])
def test_limit_and_offset_follow_page_arithmetic(page: int, page_size: int) -> None:
    filters = Filters(page=page, page_size=page_size, sort="id", sort_safelist=SAFELIST)

    assert filters.limit() == page_size
    assert filters.offset() == (page - 1) * page_size


@pytest.mark.parametrize("page,page_size", [(1, 1), (3, 20), (50, 100)])
def test_zero_records_yield_empty_metadata(page: int, page_size: int) -> None:
    assert calculate_metadata(0, page, page_size) == Metadata()


def test_last_page_rounds_up() -> None:
    metadata = calculate_metadata(53, 2, 20)

    assert metadata.last_page == 3
    assert metadata.first_page == 1
    assert metadata.current_page == 2
    assert metadata.page_size == 20
    assert metadata.total_records == 53


def test_exact_multiple_does_not_add_a_page() -> None:
    assert calculate_metadata(40, 1, 20).last_page == 2


@pytest.mark.parametrize("sort", ["id", "-id", "first_name", "-last_name"])
def test_safelisted_sort_keys_are_valid(sort: str) -> None:
    filters = Filters(page=1, page_size=20, sort=sort, sort_safelist=SAFELIST)

    assert _errors(filters) == {}
    assert filters.sort_column() == sort.removeprefix("-")


@pytest.mark.parametrize(
    "sort",
    ["name", "first", "id; drop table resources", "--id", "ID", "first_name desc", ""],
)
def test_unknown_sort_keys_are_rejected(sort: str) -> None:
    filters = Filters(page=1, page_size=20, sort=sort, sort_safelist=SAFELIST)

    assert _errors(filters) == {"sort": "invalid sort value"}
    with pytest.raises(RuntimeError, match="unsafe sort parameter"):
        filters.sort_column()


def test_sort_direction() -> None:
    assert Filters(sort="-first_name", sort_safelist=SAFELIST).sort_direction() == "DESC"
    assert Filters(sort="first_name", sort_safelist=SAFELIST).sort_direction() == "ASC"


def test_page_bounds_are_validated_not_clamped() -> None:
    assert _errors(Filters(page=0, page_size=20, sort="id", sort_safelist=SAFELIST)) == {
        "page": "must be greater than zero"
    }
    assert _errors(Filters(page=1, page_size=0, sort="id", sort_safelist=SAFELIST)) == {
        "page_size": "must be greater than zero"
    }
    assert _errors(Filters(page=1, page_size=101, sort="id", sort_safelist=SAFELIST)) == {
        "page_size": "must be a maximum of 100"
    }


def test_page_is_capped_so_the_offset_fits_a_bigint() -> None:
    assert _errors(Filters(page=10_000_000, page_size=100, sort="id", sort_safelist=SAFELIST)) == {}
    assert _errors(Filters(page=10**18, page_size=100, sort="id", sort_safelist=SAFELIST)) == {
        "page": "must be a maximum of 10 million"
    }
    assert Filters(page=10_000_000, page_size=100).offset() < 2**63 - 1
