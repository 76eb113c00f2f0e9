"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .collection_dto import (
    CollectionFieldDTO,
    CollectionVerificationDTO,
    CollectionViewDTO,
    ItemSampleDTO,
    ItemUpdateDTO,
    ReferenceItemsDTO,
)
from .sync_dto import (
    FeedFieldSurveyDTO,
    SyncPreviewDTO,
    SyncPreviewItemDTO,
    SyncResponseDTO,
)

__all__ = [
    "CollectionFieldDTO",
    "CollectionVerificationDTO",
    "CollectionViewDTO",
    "ItemSampleDTO",
    "ItemUpdateDTO",
    "ReferenceItemsDTO",
    "FeedFieldSurveyDTO",
    "SyncPreviewDTO",
    "SyncPreviewItemDTO",
    "SyncResponseDTO",
]
