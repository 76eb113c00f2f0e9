"""
Identidad oferta <-> item del CMS.

Regla unica de deduplicacion: requisition-id si ambos lo tienen, si no el
nombre. Se prueba en ese orden de prioridad.

Del lado de la oferta el nombre es el mismo que escribe el mapper (con su
default), y del lado del item el requisition-id se lee bajo el slug real
de la coleccion, que puede diferir de "requisition-id".
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence, Set

from jobsync.application.services.field_mapper import DEFAULT_TITLE, job_requisition_id, job_title
from jobsync.application.services.payload_builder import match_schema_key
from jobsync.domain.entities.cms import CollectionSchema, DestinationItem

REQUISITION_FIELD = "requisition-id"


def _req_key(value: str) -> str:
    return f"req:{value}"


def _name_key(value: str) -> str:
    return f"name:{value}"


def job_name(job: Mapping[str, Any]) -> str:
    """Nombre con el que la oferta queda (o quedo) guardada en el CMS."""
    return job_title(job) or DEFAULT_TITLE


def requisition_key(schema: Optional[CollectionSchema]) -> str:
    """Slug de la coleccion que guarda el requisition-id."""
    if schema is None:
        return REQUISITION_FIELD
    return match_schema_key(REQUISITION_FIELD, schema.valid_keys) or REQUISITION_FIELD


def feed_identity_keys(jobs: Iterable[Mapping[str, Any]]) -> Set[str]:
    """Conjunto de claves (req:/name:) presentes en el feed actual."""
    keys: Set[str] = set()
    for job in jobs:
        req_id = job_requisition_id(job)
        if req_id:
            keys.add(_req_key(req_id))
        keys.add(_name_key(job_name(job)))
    return keys


def item_in_feed(item: DestinationItem, keys: Set[str], req_field: str = REQUISITION_FIELD) -> bool:
    """True si el item corresponde a alguna oferta del feed (req-id, si no nombre)."""
    req_id = item.text(req_field)
    if req_id and _req_key(req_id) in keys:
        return True
    name = item.text("name")
    return bool(name) and _name_key(name) in keys


def find_matching_item(
    job: Mapping[str, Any],
    items: Sequence[DestinationItem],
    req_field: str = REQUISITION_FIELD,
) -> Optional[DestinationItem]:
    """
    Item existente que representa la misma oferta.

    Un match por requisition-id gana siempre sobre un match por nombre,
    aunque el item por nombre aparezca antes en la lista.
    """
    req_id = job_requisition_id(job)
    if req_id:
        for item in items:
            if item.text(req_field) == req_id:
                return item

    name = job_name(job)
    for item in items:
        if item.text("name") == name:
            return item
    return None
