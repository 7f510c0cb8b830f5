from datetime import date

from dashboard.schemas.resource_requests import ResourceRequestPatchRequest
from dashboard.schemas.resources import ResourcePatchRequest
from dashboard.services.patch import UNSET, Set, changes
from dashboard.services.resource_requests import ResourceRequest, ResourceRequestPatch
from dashboard.services.resources import Resource, ResourcePatch


def _resource() -> Resource:
    return Resource(
        id=7,
        first_name="Grace",
        last_name="Hopper",
        position="Consulting Architect",
        clearance="Baseline",
        specialties=["linux", "vmware"],
        certifications=["vcp"],
        active=True,
        sex="Female",
    )


def test_unset_fields_leave_the_snapshot_untouched() -> None:
    current = _resource()

    merged = ResourcePatch(active=Set(False)).apply_to(current)

    assert merged.active is False
    assert merged.first_name == "Grace"
    assert merged.last_name == "Hopper"
    assert merged.position == "Consulting Architect"
    assert merged.clearance == "Baseline"
    assert merged.specialties == ["linux", "vmware"]
    assert merged.certifications == ["vcp"]
    assert current.active is True


def test_collections_are_replaced_whole() -> None:
    merged = ResourcePatch(specialties=Set(["nsx"])).apply_to(_resource())

    assert merged.specialties == ["nsx"]
    assert merged.certifications == ["vcp"]


def test_empty_collection_is_a_real_value() -> None:
    merged = ResourcePatch(certifications=Set([])).apply_to(_resource())

    assert merged.certifications == []


def test_changes_only_reports_set_fields() -> None:
    patch = ResourcePatch(first_name=Set("Amazing"), sex=Set("Unknown"))

    assert patch.last_name is UNSET
    assert changes(patch) == {"first_name": "Amazing", "sex": "Unknown"}


def test_patch_request_turns_present_fields_into_set() -> None:
    payload = ResourcePatchRequest.model_validate({"active": False, "firstName": None})

    patch = payload.to_patch()

    assert patch.active == Set(False)
    assert patch.first_name is UNSET
    assert patch.specialties is UNSET


def test_resource_request_patch_allows_clearing_external_ids() -> None:
    payload = ResourceRequestPatchRequest.model_validate(
        {"opportunityId": None, "skills": ["python"], "version": 3}
    )

    patch = payload.to_patch()

    assert patch.opportunity_id == Set(None)
    assert patch.skills == Set(["python"])
    assert patch.engagement_id is UNSET
    assert payload.version == 3

    current = ResourceRequest(
        id=1,
        customer="Example Co",
        start_date=date(2026, 1, 1),
        end_date=date(2026, 3, 1),
        hours_per_week=20,
        skills=["go"],
        opportunity_id="OPP-1",
        engagement_id="ENG-1",
        version=3,
    )
    merged = patch.apply_to(current)

    assert merged.opportunity_id is None
    assert merged.engagement_id == "ENG-1"
    assert merged.skills == ["python"]
    assert merged.version == 3


def test_empty_patch_is_a_no_op() -> None:
    current = _resource()

    assert ResourcePatch().apply_to(current) == current
    assert ResourceRequestPatch() == ResourceRequestPatch()
