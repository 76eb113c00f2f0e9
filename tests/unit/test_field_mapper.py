"""
Tests unitarios para JobFieldMapper.

Verifica:
- Titulo por defecto y prioridad entre grafias alternativas.
- Rutas anidadas (job_family, location) y transformaciones.
- La ubicacion solo se expone como claves internas.
"""
from jobsync.application.services.field_mapper import (
    DEFAULT_TITLE,
    LOCATION_CODE_KEY,
    LOCATION_REFERENCE_KEY,
    JobFieldMapper,
    extract_location_code,
    first_non_empty,
    map_job_to_fields,
    public_fields,
)
from jobsync.domain.entities.location_map import LocationMap


def test_empty_job_maps_to_default_title_only():
    assert map_job_to_fields({}) == {"name": DEFAULT_TITLE}


def test_title_prefers_first_non_empty_spelling():
    job = {"title": "  ", "jobTitle": "Cashier", "name": "Other"}
    assert map_job_to_fields(job)["name"] == "Cashier"


def test_first_non_empty_skips_blank_values():
    job = {"a": "", "b": None, "c": [], "d": "value"}
    assert first_non_empty(job, ("a", "b", "c", "d")) == "value"
    assert first_non_empty(job, ("a", "b")) is None


def test_nested_job_family_is_flattened_and_id_stringified():
    job = {
        "title": "Baker",
        "job_family": {"job_family_id": 42, "job_family_name": "Bakery"},
    }
    fields = map_job_to_fields(job)
    assert fields["job-family-id"] == "42"
    assert fields["job-family-name"] == "Bakery"


def test_creation_date_is_normalized_to_iso():
    fields = map_job_to_fields({"title": "X", "creationDate": "2024-03-05T10:00:00Z"})
    assert fields["creation-date"] == "2024-03-05T10:00:00.000Z"


def test_unparseable_creation_date_is_kept_raw():
    fields = map_job_to_fields({"title": "X", "creation_date": "sometime soon"})
    assert fields["creation-date"] == "sometime soon"


def test_requisition_id_is_trimmed():
    fields = map_job_to_fields({"title": "X", "requisitionId": " REQ-1 "})
    assert fields["requisition-id"] == "REQ-1"


def test_location_code_prefers_nested_object():
    job = {"location": {"location_code": "OL_LOC_0020"}, "locationCode": "OTHER"}
    assert extract_location_code(job) == "OL_LOC_0020"


def test_location_code_is_internal_and_resolved_when_map_matches():
    location_map = LocationMap()
    location_map.register("OL_LOC_0020", "loc-20")

    fields = JobFieldMapper().map(
        {"title": "Cook", "location": {"location_code": "ol_loc_0020 "}},
        location_map,
    )

    assert fields[LOCATION_CODE_KEY] == "ol_loc_0020"
    assert fields[LOCATION_REFERENCE_KEY] == "loc-20"
    assert public_fields(fields) == {"name": "Cook"}


def test_unknown_location_code_has_no_reference():
    location_map = LocationMap()
    location_map.register("OL_LOC_0020", "loc-20")

    fields = map_job_to_fields({"title": "Cook", "locationCode": "NOPE"}, location_map)

    assert fields[LOCATION_CODE_KEY] == "NOPE"
    assert LOCATION_REFERENCE_KEY not in fields


def test_unknown_feed_keys_are_ignored():
    fields = map_job_to_fields({"title": "Cook", "salary_band": "B2"})
    assert "salary_band" not in fields
