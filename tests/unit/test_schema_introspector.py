import httpx
import pytest

from fakes import JOBS_COLLECTION, FakeWebflowStore, api_error
from jobsync.application.services.field_mapper import LOCATION_REFERENCE_KEY
from jobsync.application.services.payload_builder import PayloadBuilder
from jobsync.application.services.schema_introspector import (
    SchemaIntrospector,
    SchemaUnavailableError,
    detect_location_field,
)
from jobsync.domain.entities.cms import CollectionFieldDef


def _field(slug, name="", type_="PlainText") -> CollectionFieldDef:
    return CollectionFieldDef(slug=slug, display_name=name or slug, type=type_)


def test_detect_prefers_location_and_code_mentions():
    fields = [_field("name"), _field("store", "Location Code", "Reference")]
    assert detect_location_field(fields).slug == "store"


def test_detect_first_candidate_wins_on_ties():
    fields = [
        _field("location-code", type_="PlainText"),
        _field("location-code-ref", type_="Reference"),
    ]
    assert detect_location_field(fields).slug == "location-code"


def test_detect_returns_none_without_location_field():
    assert detect_location_field([_field("name"), _field("city")]) is None


@pytest.mark.asyncio
async def test_inspect_builds_schema_with_reference_location(store):
    schema = await SchemaIntrospector(store).inspect(JOBS_COLLECTION)

    assert schema.display_name == "Jobs"
    assert "requisition-id" in schema.valid_keys
    assert schema.location_field_slug == "location-code"
    assert schema.location_field_is_reference is True


@pytest.mark.asyncio
async def test_inspect_text_location_field():
    fake = FakeWebflowStore()
    fake.add_collection("c", [{"slug": "name", "type": "PlainText"}, {"slug": "location_code", "type": "PlainText"}])

    schema = await SchemaIntrospector(fake).inspect("c")

    assert schema.location_field_slug == "location_code"
    assert schema.location_field_is_reference is False


@pytest.mark.asyncio
async def test_inspect_raises_when_collection_unreachable(store):
    store.failures["get_collection"] = api_error(401, {"message": "unauthorized"}, method="GET")

    with pytest.raises(SchemaUnavailableError) as exc_info:
        await SchemaIntrospector(store).inspect(JOBS_COLLECTION)

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_inspect_wraps_network_errors(store):
    store.failures["get_collection"] = httpx.ReadTimeout("slow")

    with pytest.raises(SchemaUnavailableError) as exc_info:
        await SchemaIntrospector(store).inspect(JOBS_COLLECTION)

    assert exc_info.value.status_code is None


def test_reference_set_counts_as_reference():
    assert _field("location-code", type_="ReferenceSet").is_reference
    assert _field("location-code", type_="MultiReference").is_reference
    assert not _field("location-code", type_="PlainText").is_reference


@pytest.mark.asyncio
async def test_slugless_location_field_is_addressed_by_id():
    fake = FakeWebflowStore()
    fake.add_collection(
        "c",
        [
            {"slug": "name", "type": "PlainText"},
            {"id": "fld-loc", "displayName": "Location Code", "type": "Reference"},
        ],
    )

    schema = await SchemaIntrospector(fake).inspect("c")
    built = PayloadBuilder().build({"name": "Cook", LOCATION_REFERENCE_KEY: "loc-20"}, schema)

    assert schema.location_field_slug == "fld-loc"
    assert built.field_data["fld-loc"] == ["loc-20"]
