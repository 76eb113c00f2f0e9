"""
Tests unitarios para LocationResolver.

La coleccion de ubicaciones es opcional: cualquier fallo degrada a un mapa
vacio sin abortar la sincronizacion.
"""
import httpx
import pytest

from fakes import LOCATIONS_COLLECTION, api_error
from jobsync.application.services.location_resolver import (
    LocationResolver,
    find_code_field_slug,
    location_code_of,
)
from jobsync.core.config import SyncConfig


@pytest.mark.asyncio
async def test_build_registers_codes_from_item_names(store, sync_config):
    location_map = await LocationResolver(store, sync_config).build()

    assert len(location_map) == 2
    assert location_map.resolve("OL_LOC_0020") == "loc-20"
    assert location_map.resolve("ol_loc_0020 ") == "loc-20"
    assert LocationResolver.resolve("ol_loc_0031", location_map) == "loc-31"


@pytest.mark.asyncio
async def test_build_without_collection_returns_empty_map(store):
    config = SyncConfig(collection_id="col-jobs")
    location_map = await LocationResolver(store, config).build()

    assert not location_map
    assert store.calls == []


@pytest.mark.asyncio
async def test_build_degrades_when_items_cannot_be_read(store, sync_config):
    store.failures["list_items"] = api_error(500, "boom", method="GET")

    location_map = await LocationResolver(store, sync_config).build()

    assert not location_map


@pytest.mark.asyncio
async def test_build_degrades_on_network_error(store, sync_config):
    store.failures["get_collection"] = httpx.ConnectError("down")
    store.failures["list_items"] = httpx.ConnectError("down")

    location_map = await LocationResolver(store, sync_config).build()

    assert len(location_map) == 0


@pytest.mark.asyncio
async def test_schema_failure_still_uses_items(store, sync_config):
    store.failures["get_collection"] = api_error(403, "forbidden", method="GET")

    location_map = await LocationResolver(store, sync_config).build()

    assert location_map.resolve("OL_LOC_0031") == "loc-31"


@pytest.mark.asyncio
async def test_items_without_code_are_skipped(store, sync_config):
    store.add_item(LOCATIONS_COLLECTION, {"name": "   ", "city": "Nowhere"})

    location_map = await LocationResolver(store, sync_config).build()

    assert len(location_map) == 2


def test_location_code_of_prefers_name_then_code_field():
    item = {"id": "x", "fieldData": {"name": "", "loc-code": " LC_1 "}}
    assert location_code_of(item, "loc-code") == "LC_1"
    assert location_code_of({"fieldData": {"name": "N1", "code": "C1"}}) == "N1"
    assert location_code_of({"fieldData": {"code": "C1"}}) == "C1"
    assert location_code_of({"fieldData": {}}) == ""


def test_find_code_field_slug_matches_slug_or_name():
    fields = [
        {"slug": "name", "displayName": "Name"},
        {"slug": "site", "displayName": "Store Code"},
    ]
    assert find_code_field_slug(fields) == "site"
    assert find_code_field_slug([{"slug": "name"}]) is None
