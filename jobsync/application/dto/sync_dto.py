"""
DTOs de la sincronizacion de ofertas.
Definen la respuesta estructurada que consume la UI del operador.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class FeedFieldSurveyDTO(BaseModel):
    """Inventario de campos del feed (diagnostico)."""

    all_fields: List[str] = Field(default_factory=list)
    field_details: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    total_fields: int = 0


class SyncResponseDTO(BaseModel):
    """
    Resultado de ejecutar la sincronizacion.

    Ante un fallo, success=False con el par error/details legible por humanos.
    """

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    details: Optional[str] = None
    technical_details: Optional[str] = None

    synced: int = Field(0, description="Items creados")
    skipped: int = Field(0, description="Ofertas que ya estaban publicadas")
    unpublished: int = Field(0, description="Items retirados del sitio live")
    published: int = Field(0, description="Items en borrador publicados de nuevo")
    unarchived: int = Field(0, description="Items archivados reactivados")
    total: int = Field(0, description="Ofertas recibidas del feed")

    collection_id: Optional[str] = None
    collection_name: Optional[str] = None
    items_before_sync: Optional[int] = None
    items_after_sync: Optional[int] = None
    available_fields: List[str] = Field(default_factory=list)
    field_count: int = 0
    skipped_fields: List[str] = Field(default_factory=list)
    site_published: bool = False
    feed_fields: Optional[FeedFieldSurveyDTO] = None
    errors: List[str] = Field(default_factory=list)


class SyncPreviewItemDTO(BaseModel):
    """Accion prevista para una oferta."""

    name: str
    requisition_id: Optional[str] = None
    location_code: Optional[str] = None
    location_reference_id: Optional[str] = None
    action: str = Field(..., description="create | unarchive | skip")
    will_sync: bool
    existing_item_id: Optional[str] = None
    mapped_fields: Dict[str, Any] = Field(default_factory=dict)
    payload: Dict[str, Any] = Field(default_factory=dict)


class SyncPreviewDTO(BaseModel):
    """Vista previa de la sincronizacion: no modifica nada en el CMS."""

    success: bool
    error: Optional[str] = None
    details: Optional[str] = None
    technical_details: Optional[str] = None

    total: int = 0
    new: int = 0
    existing: int = 0
    to_unarchive: int = 0
    to_publish: List[str] = Field(default_factory=list)
    to_unpublish: List[str] = Field(default_factory=list)
    preview: List[SyncPreviewItemDTO] = Field(default_factory=list)

    collection_id: Optional[str] = None
    collection_name: Optional[str] = None
    available_fields: List[str] = Field(default_factory=list)
    field_count: int = 0
    location_field: Optional[str] = None
    location_field_is_reference: bool = False
    location_codes: int = 0
    feed_fields: Optional[FeedFieldSurveyDTO] = None
