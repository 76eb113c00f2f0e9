"""
Entidades del dominio.
"""
from jobsync.domain.entities.cms import CollectionFieldDef, CollectionSchema, DestinationItem
from jobsync.domain.entities.location_map import LocationMap

__all__ = [
    "CollectionFieldDef",
    "CollectionSchema",
    "DestinationItem",
    "LocationMap",
]
