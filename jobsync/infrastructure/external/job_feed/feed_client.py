"""
Cliente del feed externo de ofertas.

Requisitos cubiertos:
- httpx asincrono, timeout por intento
- reintentos acotados (5xx, timeout, error de red) con backoff exponencial
- respuestas HTML / no JSON tratadas como caida del proveedor, no como bug
- formatos de payload: lista, {"jobs"|"data"|"items": [...]} u objeto suelto
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx
from loguru import logger

Sleep = Callable[[float], Awaitable[None]]

_DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "Mozilla/5.0 (compatible; WebflowSync/1.0)",
}


class FeedUnavailableError(RuntimeError):
    """
    El feed no entrego una lista de ofertas utilizable.

    kind: timeout | network | http | html | invalid_json
    """

    def __init__(
        self,
        kind: str,
        message: str,
        *,
        details: str = "",
        technical_details: str = "",
        status_code: Optional[int] = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.details = details
        self.technical_details = technical_details
        self.status_code = status_code
        super().__init__(message)


def _looks_like_html(text: str) -> bool:
    head = text.lstrip()[:500].lower()
    return "<!doctype" in head or "<html" in head


def _http_error_message(status_code: int) -> str:
    if status_code == 500:
        return (
            "The external API server is experiencing issues. We tried multiple times but the "
            "server is still returning errors. Please try again later or contact the API provider."
        )
    if status_code == 404:
        return "The API endpoint was not found. Please check if the API URL is correct."
    if status_code == 403:
        return "Access forbidden. The API may require authentication or have access restrictions."
    if status_code >= 500:
        return (
            "The external API server is down or experiencing issues. We tried multiple times but "
            "the server is still returning errors. Please try again later."
        )
    return f"The external API returned an error ({status_code})."


def extract_jobs(payload: Any) -> List[Dict[str, Any]]:
    """
    Normaliza el payload del feed a una lista de ofertas.

    Acepta lista directa, o un objeto con jobs/data/items (el primero que
    sea lista). Cualquier otro objeto se envuelve como lista de un elemento.
    """
    if isinstance(payload, list):
        return [job for job in payload if isinstance(job, dict)]
    if isinstance(payload, dict):
        for key in ("jobs", "data", "items"):
            value = payload.get(key)
            if isinstance(value, list):
                return [job for job in value if isinstance(job, dict)]
        return [payload]
    return []


class JobFeedClient:
    """
    Lector del feed de ofertas con politica de reintentos acotada.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout_s: float = 30.0,
        max_attempts: int = 3,
        backoff_base_s: float = 1.0,
        backoff_max_s: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._url = url
        self._timeout_s = timeout_s
        self._max_attempts = max(1, int(max_attempts))
        self._backoff_base_s = backoff_base_s
        self._backoff_max_s = backoff_max_s
        self._transport = transport
        self._sleep = sleep

    @property
    def url(self) -> str:
        return self._url

    def _backoff(self, attempt: int) -> float:
        return min(self._backoff_base_s * (2 ** (attempt - 1)), self._backoff_max_s)

    async def _get_with_retries(self) -> httpx.Response:
        """
        GET con reintentos.

        Estrategia:
        - 5xx: reintenta salvo en el ultimo intento (se devuelve la respuesta).
        - timeout / error de red: reintenta; en el ultimo intento levanta.
        - 4xx: sin reintento.
        """
        async with httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport) as client:
            for attempt in range(1, self._max_attempts + 1):
                try:
                    resp = await client.get(self._url, headers=_DEFAULT_HEADERS)
                except httpx.TimeoutException as e:
                    logger.warning(f"Feed timeout (intento {attempt}/{self._max_attempts}): {e}")
                    if attempt >= self._max_attempts:
                        raise FeedUnavailableError(
                            "timeout",
                            "Failed to fetch from external API after multiple attempts",
                            details=(
                                "Request timeout - the external API took too long to respond "
                                "after multiple attempts"
                            ),
                        ) from e
                    await self._sleep(self._backoff(attempt))
                    continue
                except httpx.TransportError as e:
                    logger.warning(f"Feed error de red (intento {attempt}/{self._max_attempts}): {e}")
                    if attempt >= self._max_attempts:
                        raise FeedUnavailableError(
                            "network",
                            "Failed to fetch from external API after multiple attempts",
                            details=str(e) or "Network error",
                        ) from e
                    await self._sleep(self._backoff(attempt))
                    continue

                if resp.status_code >= 500 and attempt < self._max_attempts:
                    wait = self._backoff(attempt)
                    logger.info(f"Feed respondio {resp.status_code}, reintentando en {wait:.1f}s...")
                    await self._sleep(wait)
                    continue
                return resp

        # Inalcanzable: el loop siempre retorna o levanta en el ultimo intento
        raise FeedUnavailableError("network", "Failed to fetch from external API")

    async def fetch_jobs(self) -> List[Dict[str, Any]]:
        """
        Descarga y normaliza la lista de ofertas.

        Raises:
            FeedUnavailableError: si tras los reintentos no hay JSON utilizable
        """
        resp = await self._get_with_retries()
        status_line = f"HTTP {resp.status_code}: {resp.reason_phrase}"

        if not resp.is_success:
            logger.error(f"Feed error tras reintentos: {resp.status_code} {resp.text[:200]}")
            raise FeedUnavailableError(
                "http",
                _http_error_message(resp.status_code),
                details=f"{status_line} (after {self._max_attempts} attempts)",
                technical_details=resp.text[:200],
                status_code=resp.status_code,
            )

        text = resp.text
        content_type = resp.headers.get("content-type", "")
        if "application/json" not in content_type and _looks_like_html(text):
            logger.error(f"Feed devolvio HTML en lugar de JSON: {text[:200]}")
            raise FeedUnavailableError(
                "html",
                "The external API returned an HTML error page instead of JSON. "
                "The API server may be down or experiencing issues.",
                details=status_line,
                technical_details="Response appears to be an HTML error page",
                status_code=resp.status_code,
            )

        try:
            payload = json.loads(text)
        except ValueError as e:
            if _looks_like_html(text):
                raise FeedUnavailableError(
                    "html",
                    "The external API returned an HTML error page instead of JSON. "
                    "The API server may be down or experiencing issues.",
                    details=status_line,
                    technical_details="Response appears to be an HTML error page",
                    status_code=resp.status_code,
                ) from e
            logger.error(f"Feed devolvio un cuerpo no parseable: {text[:200]}")
            raise FeedUnavailableError(
                "invalid_json",
                "The external API returned an invalid response format",
                details=status_line,
                technical_details=text[:500],
                status_code=resp.status_code,
            ) from e

        jobs = extract_jobs(payload)
        logger.info(f"Feed: {len(jobs)} oferta(s) recibidas")
        return jobs

    async def probe(self, timeout_s: float = 10.0) -> Dict[str, Any]:
        """
        Diagnostico de un solo intento: estado, headers y cuerpo truncado.

        No levanta: cualquier error se devuelve en el diccionario.
        """
        try:
            async with httpx.AsyncClient(timeout=timeout_s, transport=self._transport) as client:
                resp = await client.get(self._url, headers=_DEFAULT_HEADERS)
        except httpx.TimeoutException as e:
            return {"success": False, "error": "Request timeout", "error_type": type(e).__name__}
        except httpx.HTTPError as e:
            return {"success": False, "error": str(e), "error_type": type(e).__name__}

        body: Any = resp.text
        if "application/json" in resp.headers.get("content-type", ""):
            try:
                body = resp.json()
            except ValueError:
                body = resp.text

        return {
            "success": resp.is_success,
            "status": resp.status_code,
            "status_text": resp.reason_phrase,
            "headers": dict(resp.headers),
            "body": body[:1000] if isinstance(body, str) else body,
            "body_type": type(body).__name__,
            "is_array": isinstance(body, list),
        }
