"""
Tests unitarios para PayloadBuilder y ValidationRetryPolicy.
"""
from jobsync.application.services.field_mapper import LOCATION_CODE_KEY, LOCATION_REFERENCE_KEY
from jobsync.application.services.payload_builder import (
    PayloadBuilder,
    ValidationRetryPolicy,
    match_schema_key,
)
from jobsync.domain.entities.cms import CollectionFieldDef, CollectionSchema


def _schema(*slugs, location=None, reference=False) -> CollectionSchema:
    fields = [CollectionFieldDef(slug=s, display_name=s, type="PlainText") for s in slugs]
    if location:
        fields.append(
            CollectionFieldDef(slug=location, display_name=location, type="Reference" if reference else "PlainText")
        )
    return CollectionSchema(
        collection_id="c",
        display_name="Jobs",
        fields=fields,
        location_field_slug=location,
        location_field_is_reference=reference,
    )


def test_match_schema_key_exact_and_loose():
    keys = {"job-family-name", "name"}
    assert match_schema_key("name", keys) == "name"
    assert match_schema_key("job_family_name", keys) == "job-family-name"
    assert match_schema_key("salary", keys) is None


def test_match_schema_key_ambiguous_loose_is_rejected():
    assert match_schema_key("jobfamily", {"job-family", "job_family"}) is None


def test_build_drops_internal_and_unknown_keys():
    fields = {
        "name": "Cook",
        "requisition-id": "R1",
        "state": "open",
        LOCATION_CODE_KEY: "OL_LOC_0020",
    }
    built = PayloadBuilder().build(fields, _schema("name", "requisition-id"))

    assert built.field_data == {"name": "Cook", "requisition-id": "R1"}
    assert built.skipped_fields == ["state"]


def test_build_renames_loose_matches():
    built = PayloadBuilder().build({"name": "Cook", "job_family_name": "Kitchen"}, _schema("name", "job-family-name"))

    assert built.field_data["job-family-name"] == "Kitchen"
    assert built.renamed_fields == {"job_family_name": "job-family-name"}


def test_build_sets_reference_location_as_list():
    fields = {"name": "Cook", LOCATION_CODE_KEY: "OL_LOC_0020", LOCATION_REFERENCE_KEY: "loc-20"}
    built = PayloadBuilder().build(fields, _schema("name", location="location-code", reference=True))

    assert built.field_data == {"name": "Cook", "location-code": ["loc-20"]}


def test_build_omits_unresolved_reference_location():
    fields = {"name": "Cook", LOCATION_CODE_KEY: "OL_LOC_0099"}
    built = PayloadBuilder().build(fields, _schema("name", location="location-code", reference=True))

    assert "location-code" not in built.field_data


def test_build_sets_text_location_as_raw_code():
    fields = {"name": "Cook", LOCATION_CODE_KEY: "OL_LOC_0020", LOCATION_REFERENCE_KEY: "loc-20"}
    built = PayloadBuilder().build(fields, _schema("name", location="location-code"))

    assert built.field_data["location-code"] == "OL_LOC_0020"


def test_build_without_schema_sends_only_name():
    built = PayloadBuilder().build({"name": "Cook", "state": "open"}, _schema())

    assert built.field_data == {"name": "Cook"}
    assert built.skipped_fields == ["state"]


def test_retry_with_reference_form_when_location_rejected():
    schema = _schema("name", location="location-code", reference=True)
    fields = {"name": "Cook", LOCATION_REFERENCE_KEY: "loc-20"}
    sent = {"name": "Cook", "location-code": "OL_LOC_0020"}

    retry = ValidationRetryPolicy().retry_payload(sent, ["location-code"], fields, schema)

    assert retry == {"name": "Cook", "location-code": ["loc-20"]}


def test_retry_strips_few_invalid_fields_but_keeps_location():
    schema = _schema("name", "state", "requisition-id", location="location-code", reference=True)
    sent = {"name": "Cook", "state": "x", "requisition-id": "R1", "location-code": ["loc-20"]}
    fields = {"name": "Cook", LOCATION_REFERENCE_KEY: "loc-20"}

    retry = ValidationRetryPolicy().retry_payload(sent, ["state", "location-code"], fields, schema)

    assert retry == {"name": "Cook", "requisition-id": "R1", "location-code": ["loc-20"]}


def test_no_retry_above_threshold():
    schema = _schema("a", "b", "c", "d", "name")
    sent = {"name": "n", "a": 1, "b": 2, "c": 3, "d": 4}

    assert ValidationRetryPolicy().retry_payload(sent, ["a", "b", "c", "d"], {}, schema) is None
    assert ValidationRetryPolicy(max_invalid_fields=4).retry_payload(
        sent, ["a", "b", "c", "d"], {}, schema
    ) == {"name": "n"}


def test_no_retry_when_nothing_to_strip():
    schema = _schema("name")
    assert ValidationRetryPolicy().retry_payload({"name": "n"}, [], {}, schema) is None
    assert ValidationRetryPolicy().retry_payload({"name": "n"}, ["ghost"], {}, schema) is None
