from dashboard.api.errors import failed_validation
from dashboard.core.validator import Validator
from dashboard.services.filters import Filters, validate_filters


def read_csv(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def validated_filters(*, page: int, page_size: int, sort: str, sort_safelist: tuple[str, ...]) -> Filters:
    filters = Filters(page=page, page_size=page_size, sort=sort, sort_safelist=sort_safelist)
    v = Validator()
    validate_filters(v, filters)
    if not v.valid():
        raise failed_validation(v.errors)
    return filters
