"""
Introspeccion del esquema de la coleccion destino.

El esquema es la base de todo el filtrado de campos: si no se puede leer,
la corrida entera se aborta (SchemaUnavailableError).
"""
from __future__ import annotations

from typing import List, Optional, Sequence

import httpx
from loguru import logger

from jobsync.application.interfaces.cms_store import CmsStore
from jobsync.domain.entities.cms import CollectionFieldDef, CollectionSchema
from jobsync.infrastructure.external.webflow.webflow_client import WebflowApiError

LOCATION_SLUG_PATTERNS = ("location-code", "locationcode", "location_code")


class SchemaUnavailableError(RuntimeError):
    """No se pudo leer la definicion de campos de la coleccion destino."""

    def __init__(self, collection_id: str, status_code: Optional[int], details: str) -> None:
        self.collection_id = collection_id
        self.status_code = status_code
        self.details = details
        super().__init__(f"No se pudo leer la coleccion {collection_id}: {details[:200]}")


def _mentions_location_code(field: CollectionFieldDef) -> bool:
    slug = field.slug.lower()
    name = field.display_name.lower()
    return ("location" in slug or "location" in name) and ("code" in slug or "code" in name)


def detect_location_field(fields: Sequence[CollectionFieldDef]) -> Optional[CollectionFieldDef]:
    """
    Campo que recibe la ubicacion.

    1ra pasada: slug o nombre contiene "location" y "code".
    2da pasada: slug exacto location-code / locationcode / location_code.
    Gana el primero en orden de iteracion; no hay puntaje entre candidatos.
    """
    candidates = [f for f in fields if _mentions_location_code(f)]
    if len(candidates) > 1:
        logger.warning(
            "Mas de un campo candidato para la ubicacion: "
            + ", ".join(f"{f.slug} ({f.type})" for f in candidates)
            + f". Se usa '{candidates[0].slug}'"
        )
    if candidates:
        return candidates[0]

    for f in fields:
        if f.slug.lower() in LOCATION_SLUG_PATTERNS:
            return f
    return None


class SchemaIntrospector:
    """Lee los campos de la coleccion destino una vez por corrida."""

    def __init__(self, store: CmsStore) -> None:
        self._store = store

    async def inspect(self, collection_id: str) -> CollectionSchema:
        try:
            collection = await self._store.get_collection(collection_id)
        except WebflowApiError as e:
            logger.error(f"No se pudo leer el esquema de {collection_id}: {e.status_code}")
            raise SchemaUnavailableError(collection_id, e.status_code, e.body) from e
        except httpx.HTTPError as e:
            logger.error(f"No se pudo leer el esquema de {collection_id}: {e}")
            raise SchemaUnavailableError(collection_id, None, str(e)) from e

        fields: List[CollectionFieldDef] = [
            CollectionFieldDef.from_api(raw) for raw in collection.get("fields") or []
        ]
        location_field = detect_location_field(fields)

        schema = CollectionSchema(
            collection_id=collection_id,
            display_name=collection.get("displayName") or collection.get("name") or "Unknown",
            fields=fields,
            location_field_slug=location_field.key if location_field else None,
            location_field_is_reference=location_field.is_reference if location_field else False,
        )

        if location_field:
            kind = "referencia" if schema.location_field_is_reference else "texto"
            logger.info(f"Campo de ubicacion: '{location_field.key}' ({kind})")
        else:
            logger.warning(f"La coleccion '{schema.display_name}' no tiene campo de codigo de ubicacion")

        logger.debug(f"Campos validos: {sorted(schema.valid_keys)}")
        return schema
