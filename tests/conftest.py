"""
Configuracion de fixtures para pytest.
"""
import pytest

from fakes import (
    JOB_FIELDS,
    JOBS_COLLECTION,
    LOCATIONS_COLLECTION,
    SITE_ID,
    FakeWebflowStore,
)
from jobsync.core.config import SyncConfig


@pytest.fixture
def store() -> FakeWebflowStore:
    """Store con la coleccion de ofertas y una coleccion de ubicaciones."""
    fake = FakeWebflowStore()
    fake.add_collection(JOBS_COLLECTION, JOB_FIELDS, display_name="Jobs")
    fake.add_collection(
        LOCATIONS_COLLECTION,
        [
            {"slug": "name", "displayName": "Name", "type": "PlainText"},
            {"slug": "city", "displayName": "City", "type": "PlainText"},
        ],
        display_name="Locations",
    )
    fake.add_item(LOCATIONS_COLLECTION, {"name": "OL_LOC_0020", "city": "Lima"}, item_id="loc-20")
    fake.add_item(LOCATIONS_COLLECTION, {"name": "OL_LOC_0031", "city": "Cusco"}, item_id="loc-31")
    return fake


@pytest.fixture
def sync_config() -> SyncConfig:
    return SyncConfig(
        collection_id=JOBS_COLLECTION,
        location_collection_id=LOCATIONS_COLLECTION,
        site_id=SITE_ID,
    )
