"""
Inventario de campos presentes en el feed.

Sirve de diagnostico en la UI: muestra que claves trae el proveedor para
ajustar las reglas del mapper cuando cambia su formato.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence


def _type_label(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return f"array[{_type_label(value[0])}]" if value else "array"
    if isinstance(value, dict):
        keys = ", ".join(value.keys())
        return f"object{{{keys}}}" if keys else "object"
    return type(value).__name__


def _sample(value: Any) -> Any:
    if isinstance(value, str) and len(value) > 50:
        return value[:50] + "..."
    if isinstance(value, list):
        return f"[{len(value)} items]"
    if isinstance(value, dict):
        return "{" + ", ".join(value.keys()) + "}"
    return value


def survey_feed_fields(jobs: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Campos de primer nivel y anidados un nivel ("location.location_code").

    Returns:
        {"all_fields": [...], "field_details": {campo: {type, sample_value, count}},
         "total_fields": n}
    """
    details: Dict[str, Dict[str, Any]] = {}

    def _note(name: str, value: Any) -> None:
        entry = details.get(name)
        if entry is None:
            details[name] = {"type": _type_label(value), "sample_value": _sample(value), "count": 1}
        else:
            entry["count"] += 1

    for job in jobs:
        for key, value in job.items():
            _note(key, value)
        for key, value in job.items():
            if isinstance(value, dict):
                for nested_key, nested_value in value.items():
                    _note(f"{key}.{nested_key}", nested_value)

    all_fields: List[str] = sorted(details)
    return {
        "all_fields": all_fields,
        "field_details": {name: details[name] for name in all_fields},
        "total_fields": len(all_fields),
    }
