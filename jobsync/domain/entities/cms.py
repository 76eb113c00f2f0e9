"""
Entidades del CMS destino (Webflow).

Se mantienen libres de I/O: solo representan lo que devuelve la API
y lo que el motor de sincronizacion necesita leer de ello.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

# Tipos de campo Webflow que exigen IDs de items de otra coleccion
REFERENCE_FIELD_TYPES = frozenset({"Reference", "ReferenceSet", "MultiReference", "ItemRef", "ItemRefSet"})


@dataclass(frozen=True)
class CollectionFieldDef:
    """Definicion de un campo de coleccion."""

    slug: str
    display_name: str
    type: str
    id: Optional[str] = None
    is_required: bool = False

    @property
    def key(self) -> str:
        """Clave con la que el campo aparece en fieldData (slug, o id si falta)."""
        return self.slug or (self.id or "")

    @property
    def is_reference(self) -> bool:
        return self.type in REFERENCE_FIELD_TYPES

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "CollectionFieldDef":
        return cls(
            slug=raw.get("slug") or "",
            display_name=raw.get("displayName") or raw.get("name") or "",
            type=raw.get("type") or "unknown",
            id=raw.get("id"),
            is_required=bool(raw.get("isRequired", False)),
        )


@dataclass
class CollectionSchema:
    """
    Resultado de inspeccionar la coleccion destino.

    valid_keys es la fuente de verdad de que claves de fieldData son legales.
    """

    collection_id: str
    display_name: str
    fields: List[CollectionFieldDef] = field(default_factory=list)
    location_field_slug: Optional[str] = None
    location_field_is_reference: bool = False

    @property
    def valid_keys(self) -> Set[str]:
        return {f.key for f in self.fields if f.key}


@dataclass
class DestinationItem:
    """Item de la coleccion destino tal como lo expone la API."""

    id: str
    field_data: Dict[str, Any] = field(default_factory=dict)
    is_draft: bool = False
    is_archived: bool = False
    created_on: Optional[str] = None
    last_updated: Optional[str] = None

    @property
    def name(self) -> str:
        return str(self.field_data.get("name") or "")

    def text(self, key: str) -> str:
        """Valor de un campo de fieldData como texto recortado."""
        return str(self.field_data.get(key) or "").strip()

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "DestinationItem":
        return cls(
            id=raw.get("id") or "",
            field_data=dict(raw.get("fieldData") or {}),
            is_draft=bool(raw.get("isDraft", False)),
            is_archived=bool(raw.get("isArchived", False)),
            created_on=raw.get("createdOn"),
            last_updated=raw.get("lastUpdated"),
        )
