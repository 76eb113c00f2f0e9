"""
Mapeo de ofertas del feed a campos de la coleccion destino.

El feed no tiene un esquema fijo: cada atributo logico puede venir con
distintas grafias (camelCase, snake_case, kebab-case) o anidado en un
sub-objeto. Aqui cada atributo se define como una lista ordenada de rutas
alternativas y se toma la primera no vacia.

Este modulo es puro: no hace I/O ni conoce el esquema de Webflow. La
ubicacion solo se expone como claves internas (prefijo "_"); asignarla a un
campo real es responsabilidad del PayloadBuilder.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from jobsync.domain.entities.location_map import LocationMap
from jobsync.shared.utils.date_utils import parse_to_iso

INTERNAL_PREFIX = "_"
LOCATION_CODE_KEY = "_location_code_str"
LOCATION_REFERENCE_KEY = "_location_reference_id"
DEFAULT_TITLE = "Untitled Job"

TITLE_PATHS = ("title", "jobTitle", "name", "position")
REQUISITION_ID_PATHS = ("requisitionId", "requisition_id", "requisition-id")
LOCATION_CODE_PATHS = (
    "location.location_code",
    "location.locationCode",
    "locationCode",
    "location_code",
    "location-code",
)

_MISSING = object()


def _lookup(job: Mapping[str, Any], path: str) -> Any:
    """
    Resuelve una ruta simple o anidada ("job_family.job_family_id").

    Una clave literal con punto tiene prioridad sobre la ruta anidada.
    """
    if path in job:
        return job[path]
    current: Any = job
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def is_empty(value: Any) -> bool:
    if value is _MISSING or value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def first_non_empty(job: Mapping[str, Any], paths: Sequence[str]) -> Optional[Any]:
    """Primer valor no vacio entre las rutas, en orden; None si ninguno."""
    for path in paths:
        value = _lookup(job, path)
        if not is_empty(value):
            return value
    return None


def _as_text(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


@dataclass(frozen=True)
class FieldRule:
    """
    Regla de extraccion de un atributo logico.

    - target: slug canonico en la coleccion destino
    - paths: grafias alternativas, en orden de prioridad
    - transform: conversion opcional del valor encontrado
    """

    target: str
    paths: Tuple[str, ...]
    transform: Optional[Callable[[Any], Any]] = None


FIELD_RULES: Tuple[FieldRule, ...] = (
    FieldRule("requisition-id", REQUISITION_ID_PATHS, _as_text),
    FieldRule(
        "creation-date",
        ("creationDate", "creation_date", "creation-date", "createdAt", "created_at"),
        parse_to_iso,
    ),
    FieldRule(
        "description-2",
        (
            "description",
            "description2",
            "description_2",
            "description-2",
            "secondaryDescription",
            "secondary_description",
        ),
    ),
    FieldRule(
        "job-family-id",
        (
            "job_family.job_family_id",
            "jobFamily.jobFamilyId",
            "jobFamilyId",
            "job_family_id",
            "job-family-id",
        ),
        str,
    ),
    FieldRule(
        "job-family-name",
        (
            "job_family.job_family_name",
            "jobFamily.jobFamilyName",
            "jobFamilyName",
            "job_family_name",
            "job-family-name",
            "jobFamily.name",
        ),
    ),
    FieldRule("job-schedule", ("jobSchedule", "job_schedule", "job-schedule", "schedule")),
    FieldRule("job-shift", ("jobShift", "job_shift", "job-shift", "shift")),
    FieldRule(
        "location-description",
        ("locationDescription", "location_description", "location-description", "location.description"),
    ),
    FieldRule("location-id", ("locationId", "location_id", "location-id", "location.id")),
    FieldRule("location-name", ("locationName", "location_name", "location-name", "location.name")),
    FieldRule(
        "requisition-number",
        ("requisitionNumber", "requisition_number", "requisition-number", "reqNumber", "req_number"),
    ),
    FieldRule(
        "short-description",
        ("shortDescription", "short_description", "short-description", "summary"),
    ),
    FieldRule("state", ("state", "status")),
)


def job_title(job: Mapping[str, Any]) -> str:
    """Titulo de la oferta o cadena vacia (sin el default)."""
    value = first_non_empty(job, TITLE_PATHS)
    return str(value).strip() if value is not None else ""


def job_requisition_id(job: Mapping[str, Any]) -> str:
    value = first_non_empty(job, REQUISITION_ID_PATHS)
    return str(value).strip() if value is not None else ""


def extract_location_code(job: Mapping[str, Any]) -> str:
    """
    Codigo de ubicacion crudo, recortado.

    Prioridad: location.location_code -> location.locationCode -> planos.
    """
    value = first_non_empty(job, LOCATION_CODE_PATHS)
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


class JobFieldMapper:
    """
    Convierte una oferta del feed en NormalizedFields.

    Uso:
        mapper = JobFieldMapper()
        fields = mapper.map(job, location_map)
    """

    def __init__(self, rules: Sequence[FieldRule] = FIELD_RULES) -> None:
        self._rules: List[FieldRule] = list(rules)

    def map(self, job: Mapping[str, Any], location_map: Optional[LocationMap] = None) -> Dict[str, Any]:
        fields: Dict[str, Any] = {"name": job_title(job) or DEFAULT_TITLE}

        for rule in self._rules:
            value = first_non_empty(job, rule.paths)
            if value is None:
                continue
            if rule.transform is not None:
                try:
                    value = rule.transform(value)
                except (TypeError, ValueError) as e:
                    logger.debug(f"No se pudo transformar '{rule.target}': {e}")
            fields[rule.target] = value

        code = extract_location_code(job)
        if code:
            fields[LOCATION_CODE_KEY] = code
            if location_map:
                location_id = location_map.resolve(code)
                if location_id:
                    fields[LOCATION_REFERENCE_KEY] = location_id
                else:
                    logger.debug(f"Codigo de ubicacion '{code}' sin coincidencia en la coleccion de ubicaciones")

        return fields


_default_mapper = JobFieldMapper()


def map_job_to_fields(job: Mapping[str, Any], location_map: Optional[LocationMap] = None) -> Dict[str, Any]:
    """Atajo funcional sobre JobFieldMapper con las reglas por defecto."""
    return _default_mapper.map(job, location_map)


def public_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Copia de los campos sin claves internas."""
    return {k: v for k, v in fields.items() if not k.startswith(INTERNAL_PREFIX)}
