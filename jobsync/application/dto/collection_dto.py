"""
DTOs de la coleccion destino (vista de items, verificacion y edicion).
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CollectionViewDTO(BaseModel):
    """Metadata de la coleccion y sus items tal como los devuelve Webflow."""

    collection: Dict[str, Any]
    items: List[Dict[str, Any]] = Field(default_factory=list)


class CollectionFieldDTO(BaseModel):
    slug: str
    name: str
    type: str


class ItemSampleDTO(BaseModel):
    id: str
    name: str
    is_draft: bool
    is_archived: bool


class CollectionVerificationDTO(BaseModel):
    """Conteo de items por estado de visibilidad."""

    success: bool = True
    collection_id: str
    collection_name: str
    field_count: int
    fields: List[CollectionFieldDTO] = Field(default_factory=list)
    total: int = 0
    drafts: int = 0
    live: int = 0
    archived: int = 0
    sample: List[ItemSampleDTO] = Field(default_factory=list)
    error: Optional[str] = None


class ItemUpdateDTO(BaseModel):
    """Edicion manual de un item desde la UI."""

    field_data: Dict[str, Any] = Field(..., alias="fieldData", description="Campos a actualizar")
    is_archived: bool = Field(False, alias="isArchived")

    model_config = {"populate_by_name": True}


class ReferenceItemsDTO(BaseModel):
    """Items de una coleccion de referencia (ubicaciones, categorias, comunidades)."""

    kind: str
    collection_id: str
    items: List[Dict[str, Any]] = Field(default_factory=list)
