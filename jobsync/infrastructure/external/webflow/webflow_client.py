"""
Cliente mínimo de Webflow CMS API v2 (sin SDKs externos).

Requisitos cubiertos:
- httpx asincrono
- autenticacion Bearer + header accept-version en cada request
- paginacion por offset/limit al listar items
- errores no-2xx expuestos como WebflowApiError (status + body)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger


@dataclass(frozen=True)
class WebflowCredentials:
    token: str


class WebflowApiError(RuntimeError):
    """Error de integración con Webflow (respuesta no-2xx)."""

    def __init__(self, method: str, path: str, status_code: int, body: str) -> None:
        self.method = method
        self.path = path
        self.status_code = status_code
        self.body = body or ""
        super().__init__(f"Webflow {method} {path} falló {status_code}: {self.body[:200]}")

    @property
    def payload(self) -> Optional[Dict[str, Any]]:
        try:
            data = json.loads(self.body)
        except (ValueError, TypeError):
            return None
        return data if isinstance(data, dict) else None

    @property
    def invalid_fields(self) -> List[str]:
        """
        Campos rechazados por validacion.

        Webflow responde 400 con {"details": [{"param": "<slug>", ...}]}.
        Los params pueden venir como "fieldData.<slug>".
        """
        data = self.payload or {}
        details = data.get("details")
        if not isinstance(details, list):
            return []
        fields: List[str] = []
        for detail in details:
            if not isinstance(detail, dict):
                continue
            param = detail.get("param")
            if not param:
                continue
            param = str(param).strip()
            if param.startswith("fieldData."):
                param = param[len("fieldData."):]
            if param and param not in fields:
                fields.append(param)
        return fields

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class WebflowClient:
    """
    Cliente HTTP de Webflow. Implementa el contrato CmsStore.

    Importante:
    - No interpreta fieldData: eso lo decide el motor de sincronizacion.
    - Cada llamada es un await independiente; el orden lo impone el caller.
    """

    def __init__(
        self,
        credentials: WebflowCredentials,
        *,
        base_url: str = "https://api.webflow.com/v2",
        api_version: str = "2.0.0",
        timeout_s: float = 30.0,
        page_size: int = 100,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._creds = credentials
        self._base_url = base_url.rstrip("/")
        self._api_version = api_version
        self._timeout_s = timeout_s
        self._page_size = page_size
        self._transport = transport

    def _headers(self, with_body: bool) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._creds.token}",
            "accept-version": self._api_version,
            "Accept": "application/json",
        }
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout_s,
            transport=self._transport,
        ) as client:
            resp = await client.request(
                method,
                path,
                json=json_body,
                params=params,
                headers=self._headers(json_body is not None),
            )

        if not 200 <= resp.status_code < 300:
            raise WebflowApiError(method, path, resp.status_code, resp.text)

        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError:
            logger.warning(f"Webflow {method} {path} devolvio un cuerpo no JSON")
            return {}
        return data if isinstance(data, dict) else {"items": data}

    # ------------------------------------------------------------------
    # Colecciones
    # ------------------------------------------------------------------

    async def get_collection(self, collection_id: str) -> Dict[str, Any]:
        """Metadata de la coleccion, incluyendo `fields`."""
        return await self._request("GET", f"/collections/{collection_id}")

    async def list_items(self, collection_id: str) -> List[Dict[str, Any]]:
        """
        Lista todos los items (staged) de una coleccion.

        Recorre la paginacion offset/limit hasta cubrir pagination.total.
        """
        items: List[Dict[str, Any]] = []
        offset = 0
        while True:
            payload = await self._request(
                "GET",
                f"/collections/{collection_id}/items",
                params={"offset": offset, "limit": self._page_size},
            )
            page = payload.get("items") or []
            items.extend(page)

            pagination = payload.get("pagination") or {}
            total = pagination.get("total")
            offset += len(page)
            if not page or total is None or offset >= int(total):
                break
        return items

    # ------------------------------------------------------------------
    # Escritura
    # ------------------------------------------------------------------

    async def create_item_live(self, collection_id: str, field_data: Dict[str, Any]) -> Dict[str, Any]:
        """Crea el item directamente publicado (nunca como borrador)."""
        body = {"fieldData": field_data, "isArchived": False, "isDraft": False}
        return await self._request("POST", f"/collections/{collection_id}/items/live", json_body=body)

    async def update_item(self, collection_id: str, item_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """PATCH sobre el item staged."""
        return await self._request("PATCH", f"/collections/{collection_id}/items/{item_id}", json_body=body)

    async def update_item_live(self, collection_id: str, item_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """PATCH sobre el item live: actualiza y publica en una sola operacion."""
        return await self._request("PATCH", f"/collections/{collection_id}/items/live/{item_id}", json_body=body)

    async def publish_item(self, collection_id: str, item_id: str) -> Dict[str, Any]:
        return await self.update_item_live(collection_id, item_id, {"isDraft": False})

    async def unpublish_item(self, collection_id: str, item_id: str) -> None:
        """Quita el item del sitio live; el item se conserva en el CMS."""
        await self._request("DELETE", f"/collections/{collection_id}/items/{item_id}/live")

    async def publish_site(self, site_id: str) -> Dict[str, Any]:
        # domains vacio = publicar en todos los dominios
        return await self._request("POST", f"/sites/{site_id}/publish", json_body={"domains": []})
