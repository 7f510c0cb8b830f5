from datetime import date

from dashboard.core.validator import Validator
from dashboard.services.clearances import Clearance, validate_clearance
from dashboard.services.positions import Position, validate_position
from dashboard.services.resource_requests import ResourceRequest, validate_resource_request
from dashboard.services.resources import Resource, validate_resource


def _resource(**overrides) -> Resource:
    values = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "position": "Senior Consultant",
        "clearance": "NV1",
        "specialties": ["linux", "vmware"],
        "certifications": ["vcp"],
        "active": True,
        "sex": "Female",
    }
    values.update(overrides)
    return Resource(**values)


def _request(**overrides) -> ResourceRequest:
    values = {
        "customer": "Department of Examples",
        "start_date": date(2026, 1, 5),
        "end_date": date(2026, 6, 30),
        "hours_per_week": 40,
        "skills": ["kubernetes", "terraform"],
    }
    values.update(overrides)
    return ResourceRequest(**values)


def _validate(validate, candidate) -> dict[str, str]:
    v = Validator()
    validate(v, candidate)
    return v.errors


def test_valid_resource_has_no_errors() -> None:
    assert _validate(validate_resource, _resource()) == {}


def test_resource_without_id_is_valid_but_non_positive_id_is_not() -> None:
    assert _validate(validate_resource, _resource(id=None)) == {}
    assert _validate(validate_resource, _resource(id=0)) == {"id": "must be a positive number"}
    assert _validate(validate_resource, _resource(id=-4)) == {"id": "must be a positive number"}


def test_resource_reports_one_message_per_invalid_field() -> None:
    errors = _validate(
        validate_resource,
        _resource(
            first_name="",
            last_name="x" * 257,
            position="Wizard",
            clearance="",
            sex="",
            specialties=["linux", "vmware", "linux"],
            certifications=["vcp", "vcp"],
        ),
    )

    assert errors == {
        "firstName": "must be provided",
        "lastName": "must not be more than 256 bytes",
        "position": "does not exist",
        "clearance": "does not exist",
        "sex": "does not exist",
        "specialties": "must not contain duplicate values",
        "certifications": "must not contain duplicate values",
    }


def test_resource_name_length_is_measured_in_bytes() -> None:
    assert _validate(validate_resource, _resource(first_name="é" * 128)) == {}
    assert "firstName" in _validate(validate_resource, _resource(first_name="é" * 129))


def test_valid_resource_request_has_no_errors() -> None:
    assert _validate(validate_resource_request, _request()) == {}


def test_resource_request_requires_customer_and_skills() -> None:
    errors = _validate(validate_resource_request, _request(customer="", skills=[]))

    assert errors == {
        "customer": "must be provided",
        "skills": "at least one must be provided",
    }


def test_resource_request_rejects_duplicate_skills_regardless_of_position() -> None:
    errors = _validate(validate_resource_request, _request(skills=["go", "python", "rust", "go"]))

    assert errors == {"skills": "must not contain duplicate values"}


def test_resource_request_window_and_hours() -> None:
    errors = _validate(
        validate_resource_request,
        _request(start_date=date(2026, 3, 1), end_date=date(2026, 2, 1), hours_per_week=0),
    )

    assert errors == {
        "hoursPerWeek": "must be greater than zero",
        "endDate": "must not be before startDate",
    }


def test_position_and_clearance_strings() -> None:
    assert _validate(validate_position, Position(title="Consultant")) == {}
    assert _validate(validate_position, Position(title="")) == {"title": "must be provided"}
    assert _validate(validate_position, Position(title="t" * 257)) == {"title": "must not be more than 256 bytes"}
    assert _validate(validate_clearance, Clearance(description="NV2")) == {}
    assert _validate(validate_clearance, Clearance(description="")) == {"description": "must be provided"}


def test_resource_request_hours_cannot_exceed_a_week() -> None:
    assert _validate(validate_resource_request, _request(hours_per_week=168)) == {}
    assert _validate(validate_resource_request, _request(hours_per_week=169)) == {
        "hoursPerWeek": "must not be more than 168"
    }
    assert _validate(validate_resource_request, _request(hours_per_week=2**40)) == {
        "hoursPerWeek": "must not be more than 168"
    }
