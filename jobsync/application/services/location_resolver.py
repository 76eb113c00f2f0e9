"""
Resolucion de codigos de ubicacion contra la coleccion de ubicaciones.

Diseño (resumen):
- build(): lee la coleccion de ubicaciones una vez por corrida y arma un
  LocationMap (codigo -> ID de item) con variantes de mayusculas/espacios.
- resolve(): lookup determinista exacto -> minusculas -> recortado -> sin espacios.

Degradacion: si la coleccion no se puede leer, build() devuelve un mapa
vacio y la sincronizacion continua sin referencias de ubicacion.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from jobsync.application.interfaces.cms_store import CmsStore
from jobsync.core.config import SyncConfig
from jobsync.domain.entities.location_map import LocationMap
from jobsync.infrastructure.external.webflow.webflow_client import WebflowApiError

_FALLBACK_CODE_KEYS = ("code", "location-code", "location_code")


def find_code_field_slug(fields: List[Dict[str, Any]]) -> Optional[str]:
    """Slug del primer campo cuyo slug o nombre contiene "code"."""
    for raw in fields:
        slug = (raw.get("slug") or "").lower()
        name = (raw.get("displayName") or raw.get("name") or "").lower()
        if "code" in slug or "code" in name:
            return raw.get("slug")
    return None


def location_code_of(item: Dict[str, Any], code_field_slug: Optional[str] = None) -> str:
    """
    Codigo de ubicacion de un item de la coleccion de ubicaciones.

    El campo `name` es la fuente autoritativa (ej: "OL_LOC_0020"); despues el
    campo detectado como codigo y por ultimo claves planas conocidas.
    """
    field_data = item.get("fieldData") or {}
    candidates = [field_data.get("name"), item.get("name")]
    if code_field_slug:
        candidates.append(field_data.get(code_field_slug))
    candidates.extend(field_data.get(key) for key in _FALLBACK_CODE_KEYS)

    for value in candidates:
        if value is None or isinstance(value, (dict, list)):
            continue
        code = str(value).strip()
        if code:
            return code
    return ""


class LocationResolver:
    """Construye y consulta el LocationMap de una corrida."""

    def __init__(self, store: CmsStore, config: SyncConfig) -> None:
        self._store = store
        self._config = config

    async def build(self) -> LocationMap:
        location_map = LocationMap()
        collection_id = self._config.location_collection_id
        if not collection_id:
            logger.warning("Coleccion de ubicaciones no configurada: se omiten referencias de ubicacion")
            return location_map

        code_field_slug: Optional[str] = None
        try:
            collection = await self._store.get_collection(collection_id)
            code_field_slug = find_code_field_slug(collection.get("fields") or [])
        except (WebflowApiError, httpx.HTTPError) as e:
            # El esquema solo aporta un fallback; los items siguen siendo utiles
            logger.warning(f"No se pudo leer el esquema de ubicaciones: {e}")

        try:
            items = await self._store.list_items(collection_id)
        except (WebflowApiError, httpx.HTTPError) as e:
            logger.warning(f"No se pudieron leer las ubicaciones, se continua sin referencias: {e}")
            return location_map

        skipped = 0
        for item in items:
            item_id = item.get("id")
            code = location_code_of(item, code_field_slug)
            if not item_id or not code:
                skipped += 1
                logger.debug(f"Ubicacion sin codigo utilizable: id={item_id}")
                continue
            location_map.register(code, item_id)

        logger.info(
            f"LocationMap: {len(location_map)} codigo(s) de {len(items)} ubicacion(es), {skipped} omitida(s)"
        )
        return location_map

    @staticmethod
    def resolve(code: Optional[str], location_map: LocationMap) -> Optional[str]:
        return location_map.resolve(code)
