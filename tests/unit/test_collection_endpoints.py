"""
Tests unitarios para los endpoints de la coleccion destino.
"""
from __future__ import annotations

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from fakes import JOBS_COLLECTION, LOCATIONS_COLLECTION, api_error
from jobsync.api.v1.dependencies.use_case_deps import get_collection_use_cases
from jobsync.application.use_cases.collection_use_cases import CollectionUseCases


@pytest.fixture
def app_with_store(store):
    """App FastAPI con CollectionUseCases sobre el CMS en memoria."""
    from jobsync.main import create_application
    app = create_application()
    use_cases = CollectionUseCases(store, JOBS_COLLECTION, {"locations": LOCATIONS_COLLECTION})
    app.dependency_overrides[get_collection_use_cases] = lambda: use_cases
    yield app
    app.dependency_overrides.clear()


async def _call(app, method: str, path: str, **kwargs) -> httpx.Response:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(method, path, **kwargs)


@pytest.mark.asyncio
async def test_get_collection_returns_items(app_with_store, store) -> None:
    store.add_item(JOBS_COLLECTION, {"name": "Cook"})

    response = await _call(app_with_store, "GET", "/api/v1/collection")

    assert response.status_code == 200
    data = response.json()
    assert data["collection"]["displayName"] == "Jobs"
    assert [i["fieldData"]["name"] for i in data["items"]] == ["Cook"]


@pytest.mark.asyncio
async def test_verify_counts_visibility_states(app_with_store, store) -> None:
    store.add_item(JOBS_COLLECTION, {"name": "Live"})
    store.add_item(JOBS_COLLECTION, {"name": "Draft"}, is_draft=True)
    store.add_item(JOBS_COLLECTION, {"name": "Archived"}, is_archived=True, is_draft=True)

    response = await _call(app_with_store, "GET", "/api/v1/collection/verify")

    data = response.json()
    assert data["total"] == 3
    assert data["live"] == 1
    assert data["drafts"] == 1
    assert data["archived"] == 1
    assert len(data["sample"]) == 3


@pytest.mark.asyncio
async def test_update_item_publishes(app_with_store, store) -> None:
    item_id = store.add_item(JOBS_COLLECTION, {"name": "Cook"}, is_draft=True, is_archived=True)

    response = await _call(
        app_with_store,
        "PATCH",
        f"/api/v1/collection/items/{item_id}",
        json={"fieldData": {"name": "Head Cook"}},
    )

    assert response.status_code == 200
    item = store.item(JOBS_COLLECTION, item_id)
    assert item["fieldData"]["name"] == "Head Cook"
    assert item["isDraft"] is False
    assert item["isArchived"] is False


@pytest.mark.asyncio
async def test_update_missing_item_returns_404(app_with_store) -> None:
    response = await _call(
        app_with_store,
        "PATCH",
        "/api/v1/collection/items/nope",
        json={"fieldData": {"name": "X"}},
    )

    assert response.status_code == 404
    assert response.json()["error"] == "ENTITY_NOT_FOUND"


@pytest.mark.asyncio
async def test_update_with_empty_field_data_is_rejected(app_with_store) -> None:
    response = await _call(app_with_store, "PATCH", "/api/v1/collection/items/x", json={"fieldData": {}})

    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_store_rejection_keeps_upstream_status(app_with_store, store) -> None:
    store.failures["get_collection"] = api_error(429, {"message": "rate limited"}, method="GET")

    response = await _call(app_with_store, "GET", "/api/v1/collection")

    assert response.status_code == 429
    assert response.json()["error"] == "STORE_OPERATION_FAILED"


@pytest.mark.asyncio
async def test_reference_items(app_with_store) -> None:
    response = await _call(app_with_store, "GET", "/api/v1/references/locations")

    assert response.status_code == 200
    data = response.json()
    assert data["collection_id"] == LOCATIONS_COLLECTION
    assert {i["id"] for i in data["items"]} == {"loc-20", "loc-31"}


@pytest.mark.asyncio
async def test_unconfigured_reference_kind(app_with_store) -> None:
    response = await _call(app_with_store, "GET", "/api/v1/references/categories")

    assert response.status_code == 500
    assert response.json()["error"] == "CONFIGURATION_ERROR"


@pytest.mark.asyncio
async def test_unknown_reference_kind(app_with_store) -> None:
    response = await _call(app_with_store, "GET", "/api/v1/references/planets")

    assert response.status_code == 400
