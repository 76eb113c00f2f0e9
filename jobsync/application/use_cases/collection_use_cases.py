"""
Casos de uso de consulta y edicion de la coleccion destino.

Complementan la sincronizacion: la UI del operador los usa para revisar
el estado de los items y corregir uno a mano.
"""
from __future__ import annotations

from typing import Dict, List

from loguru import logger

from jobsync.application.dto.collection_dto import (
    CollectionFieldDTO,
    CollectionVerificationDTO,
    CollectionViewDTO,
    ItemSampleDTO,
    ItemUpdateDTO,
    ReferenceItemsDTO,
)
from jobsync.application.interfaces.cms_store import CmsStore
from jobsync.domain.entities.cms import CollectionFieldDef, DestinationItem
from jobsync.infrastructure.external.webflow.webflow_client import WebflowApiError
from jobsync.shared.exceptions.domain import (
    ConfigurationException,
    EntityNotFoundException,
    StoreOperationException,
    ValidationException,
)

REFERENCE_KINDS = ("locations", "categories", "communities")
SAMPLE_SIZE = 5


class CollectionUseCases:
    """
    Lecturas y ediciones puntuales sobre la coleccion de ofertas.

    Args:
        store: cliente del CMS
        collection_id: coleccion de ofertas
        reference_collections: tipo de referencia -> id de coleccion
    """

    def __init__(
        self,
        store: CmsStore,
        collection_id: str,
        reference_collections: Dict[str, str],
    ) -> None:
        self._store = store
        self._collection_id = collection_id
        self._references = reference_collections

    @staticmethod
    def _wrap(action: str, error: WebflowApiError) -> StoreOperationException:
        logger.error(f"Webflow rechazo '{action}': {error.status_code}")
        return StoreOperationException(
            message=f"Failed to {action}",
            status_code=error.status_code,
            body=error.body,
        )

    async def get_collection_with_items(self) -> CollectionViewDTO:
        """Metadata de la coleccion y todos sus items, sin transformar."""
        try:
            collection = await self._store.get_collection(self._collection_id)
            items = await self._store.list_items(self._collection_id)
        except WebflowApiError as e:
            raise self._wrap("fetch collection", e) from e
        return CollectionViewDTO(collection=collection, items=items)

    async def verify_collection(self) -> CollectionVerificationDTO:
        """Cuenta items por estado (borrador, live, archivado) y muestra algunos."""
        try:
            collection = await self._store.get_collection(self._collection_id)
            raw_items = await self._store.list_items(self._collection_id)
        except WebflowApiError as e:
            raise self._wrap("verify collection", e) from e

        fields = [CollectionFieldDef.from_api(raw) for raw in collection.get("fields") or []]
        items: List[DestinationItem] = [DestinationItem.from_api(raw) for raw in raw_items]

        archived = sum(1 for item in items if item.is_archived)
        drafts = sum(1 for item in items if item.is_draft and not item.is_archived)

        return CollectionVerificationDTO(
            collection_id=self._collection_id,
            collection_name=collection.get("displayName") or collection.get("name") or "Unknown",
            field_count=len(fields),
            fields=[CollectionFieldDTO(slug=f.slug, name=f.display_name, type=f.type) for f in fields],
            total=len(items),
            drafts=drafts,
            live=len(items) - drafts - archived,
            archived=archived,
            sample=[
                ItemSampleDTO(
                    id=item.id,
                    name=item.name or "Unnamed",
                    is_draft=item.is_draft,
                    is_archived=item.is_archived,
                )
                for item in items[:SAMPLE_SIZE]
            ],
        )

    async def update_item(self, item_id: str, dto: ItemUpdateDTO) -> Dict:
        """
        Edita un item y lo deja publicado.

        Raises:
            ValidationException: si fieldData viene vacio
            EntityNotFoundException: si el item no existe
            StoreOperationException: ante cualquier otro rechazo de Webflow
        """
        if not dto.field_data:
            raise ValidationException("fieldData no puede estar vacio", field="fieldData")

        body = {"fieldData": dto.field_data, "isArchived": dto.is_archived, "isDraft": False}
        try:
            updated = await self._store.update_item_live(self._collection_id, item_id, body)
        except WebflowApiError as e:
            if e.is_not_found:
                raise EntityNotFoundException("Item", item_id) from e
            raise self._wrap("update item", e) from e

        logger.info(f"Item {item_id} actualizado desde la UI")
        return updated

    async def list_reference_items(self, kind: str) -> ReferenceItemsDTO:
        """Items de una coleccion de referencia (para selectores de la UI)."""
        if kind not in REFERENCE_KINDS:
            raise ValidationException(
                f"Tipo de referencia desconocido: {kind}. Validos: {', '.join(REFERENCE_KINDS)}",
                field="kind",
            )
        collection_id = self._references.get(kind)
        if not collection_id:
            raise ConfigurationException(f"coleccion de referencia '{kind}'")

        try:
            items = await self._store.list_items(collection_id)
        except WebflowApiError as e:
            raise self._wrap(f"fetch {kind}", e) from e
        return ReferenceItemsDTO(kind=kind, collection_id=collection_id, items=items)
