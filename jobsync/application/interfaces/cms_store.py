"""
Interfaz del CMS destino usada por el motor de sincronizacion.

Este contrato existe para:
- Mantener Clean Architecture: los servicios no dependen de httpx directamente.
- Facilitar tests unitarios con un store en memoria.
"""

from __future__ import annotations

from typing import Any, Dict, List, Protocol


class CmsStore(Protocol):
    """
    Operaciones del CMS que consume la sincronizacion.

    Implementaciones:
    - WebflowClient (HTTP real).
    - Store en memoria para tests.

    Cualquier respuesta no-2xx se levanta como WebflowApiError.
    """

    async def get_collection(self, collection_id: str) -> Dict[str, Any]:
        ...

    async def list_items(self, collection_id: str) -> List[Dict[str, Any]]:
        ...

    async def create_item_live(self, collection_id: str, field_data: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def update_item(self, collection_id: str, item_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def update_item_live(self, collection_id: str, item_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def publish_item(self, collection_id: str, item_id: str) -> Dict[str, Any]:
        ...

    async def unpublish_item(self, collection_id: str, item_id: str) -> None:
        ...

    async def publish_site(self, site_id: str) -> Dict[str, Any]:
        ...
