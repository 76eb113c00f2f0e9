"""
Construccion del fieldData que se envia al CMS.

Reglas de filtrado (aplican a cada create/update):
- Las claves internas (prefijo "_") nunca salen.
- Una clave se incluye si coincide exacto con un slug valido, o si una
  variante insensible a mayusculas y a separadores (-/_) coincide con
  exactamente un slug: en ese caso se reescribe a ese slug.
- Lo demas se descarta y se reporta como omitido (no es error).
- El campo de ubicacion se asigna en un unico paso, segun su tipo, y queda
  exento del filtrado.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from loguru import logger

from jobsync.application.services.field_mapper import (
    INTERNAL_PREFIX,
    LOCATION_CODE_KEY,
    LOCATION_REFERENCE_KEY,
)
from jobsync.domain.entities.cms import CollectionSchema

DEFAULT_MAX_INVALID_FIELDS = 3


def _loose(key: str) -> str:
    return key.lower().replace("-", "").replace("_", "")


def match_schema_key(key: str, valid_keys: Set[str]) -> Optional[str]:
    """
    Slug de la coleccion al que corresponde `key`.

    Exacto primero; si no, la unica coincidencia laxa. Ambiguo o sin
    coincidencia -> None.
    """
    if key in valid_keys:
        return key
    loose = _loose(key)
    matches = [candidate for candidate in valid_keys if _loose(candidate) == loose]
    if len(matches) == 1:
        return matches[0]
    return None


def location_value(fields: Mapping[str, Any], schema: CollectionSchema) -> Optional[Any]:
    """
    Valor del campo de ubicacion segun su tipo.

    Referencia -> [id] si hay id resuelto; texto -> el codigo crudo.
    """
    if not schema.location_field_slug:
        return None
    if schema.location_field_is_reference:
        location_id = fields.get(LOCATION_REFERENCE_KEY)
        return [location_id] if location_id else None
    code = fields.get(LOCATION_CODE_KEY)
    return code or None


@dataclass
class BuiltPayload:
    """fieldData listo para enviar y las claves que quedaron fuera."""

    field_data: Dict[str, Any]
    skipped_fields: List[str] = field(default_factory=list)
    renamed_fields: Dict[str, str] = field(default_factory=dict)


class PayloadBuilder:
    """Filtra NormalizedFields contra el esquema de la coleccion."""

    def build(self, fields: Mapping[str, Any], schema: CollectionSchema) -> BuiltPayload:
        valid_keys = schema.valid_keys
        location_slug = schema.location_field_slug
        result = BuiltPayload(field_data={})

        for key, value in fields.items():
            if key.startswith(INTERNAL_PREFIX):
                continue
            if location_slug and key == location_slug:
                continue
            if not valid_keys:
                # Sin esquema solo se envia el nombre (requerido)
                if key == "name":
                    result.field_data[key] = value
                else:
                    result.skipped_fields.append(key)
                continue

            target = match_schema_key(key, valid_keys)
            if target is None or (target == location_slug):
                result.skipped_fields.append(key)
                continue
            if target != key:
                if target in result.field_data:
                    result.skipped_fields.append(key)
                    continue
                result.renamed_fields[key] = target
            result.field_data[target] = value

        if location_slug:
            value = location_value(fields, schema)
            if value is not None:
                result.field_data[location_slug] = value

        if "name" not in result.field_data and fields.get("name"):
            result.field_data["name"] = fields["name"]

        if result.skipped_fields:
            logger.debug(f"Campos omitidos (no existen en la coleccion): {result.skipped_fields}")
        return result


@dataclass(frozen=True)
class ValidationRetryPolicy:
    """
    Politica de un reintento ante rechazo por validacion.

    a) Si el campo de ubicacion fue rechazado y hay id de referencia, se
       reintenta con la forma [id].
    b) Si no, y hay como mucho max_invalid_fields campos invalidos, se
       quitan exactamente esos (nunca los exentos) y se reintenta.
    Nunca mas de max_retries reintentos por item.
    """

    max_invalid_fields: int = DEFAULT_MAX_INVALID_FIELDS
    max_retries: int = 1

    def retry_payload(
        self,
        field_data: Mapping[str, Any],
        invalid_fields: Sequence[str],
        fields: Mapping[str, Any],
        schema: CollectionSchema,
    ) -> Optional[Dict[str, Any]]:
        """fieldData para el reintento, o None si no corresponde reintentar."""
        if not invalid_fields:
            return None

        location_slug = schema.location_field_slug
        exempt = {location_slug} if location_slug else set()
        location_id = fields.get(LOCATION_REFERENCE_KEY)

        if location_slug and location_slug in invalid_fields and location_id:
            as_reference = [location_id]
            if field_data.get(location_slug) != as_reference:
                retry = dict(field_data)
                retry[location_slug] = as_reference
                logger.info(f"Reintentando con '{location_slug}' como referencia [{location_id}]")
                return retry

        if len(invalid_fields) > self.max_invalid_fields:
            logger.warning(
                f"{len(invalid_fields)} campos invalidos (> {self.max_invalid_fields}), no se reintenta"
            )
            return None

        to_strip = [f for f in invalid_fields if f not in exempt and f in field_data]
        if not to_strip:
            return None
        logger.info(f"Reintentando sin los campos invalidos: {to_strip}")
        return {k: v for k, v in field_data.items() if k not in to_strip}
