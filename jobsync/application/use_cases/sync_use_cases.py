"""
Casos de uso de la sincronizacion feed de ofertas -> Webflow.

Dos modos:
- preview: solo lectura, calcula que pasaria.
- execute: corre la reconciliacion completa.

Politica de errores:
- Esquema destino inaccesible -> fatal, success=False, sin mutaciones.
- Feed caido tras reintentos -> success=False con mensaje para la UI.
- Ubicaciones o items existentes inaccesibles -> se degrada y se continua.
- Cualquier otra excepcion se propaga al endpoint (500).
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from jobsync.application.dto.sync_dto import (
    FeedFieldSurveyDTO,
    SyncPreviewDTO,
    SyncPreviewItemDTO,
    SyncResponseDTO,
)
from jobsync.application.interfaces.cms_store import CmsStore
from jobsync.application.services.feed_survey import survey_feed_fields
from jobsync.application.services.location_resolver import LocationResolver
from jobsync.application.services.reconciler import ACTION_CREATE, ACTION_SKIP, ACTION_UNARCHIVE, JobReconciler
from jobsync.application.services.schema_introspector import SchemaIntrospector, SchemaUnavailableError
from jobsync.core.config import SyncConfig
from jobsync.domain.entities.cms import DestinationItem
from jobsync.infrastructure.external.job_feed.feed_client import FeedUnavailableError, JobFeedClient
from jobsync.infrastructure.external.webflow.webflow_client import WebflowApiError
from jobsync.shared.exceptions.domain import SyncAlreadyRunningException


class JobSyncUseCases:
    """
    Orquesta una corrida: ubicaciones -> esquema -> feed -> items -> reconciliacion.
    """

    # Evita dos ejecuciones simultaneas (UI + scheduler) sobre la misma coleccion
    _run_lock: asyncio.Lock = asyncio.Lock()

    def __init__(
        self,
        store: CmsStore,
        feed: JobFeedClient,
        config: SyncConfig,
        *,
        reconciler: Optional[JobReconciler] = None,
    ) -> None:
        self._store = store
        self._feed = feed
        self._config = config
        self._introspector = SchemaIntrospector(store)
        self._locations = LocationResolver(store, config)
        self._reconciler = reconciler or JobReconciler(store, config)

    @classmethod
    def is_running(cls) -> bool:
        return cls._run_lock.locked()

    async def _load_existing_items(self) -> List[DestinationItem]:
        """Items actuales; si no se pueden leer se asume coleccion vacia."""
        try:
            raw_items = await self._store.list_items(self._config.collection_id)
        except (WebflowApiError, httpx.HTTPError) as e:
            logger.error(f"No se pudieron leer los items existentes, se asume coleccion vacia: {e}")
            return []
        return [DestinationItem.from_api(raw) for raw in raw_items]

    async def _count_items(self) -> Optional[int]:
        try:
            return len(await self._store.list_items(self._config.collection_id))
        except (WebflowApiError, httpx.HTTPError) as e:
            logger.warning(f"No se pudo verificar el total final de items: {e}")
            return None

    @staticmethod
    def _schema_failure(error: SchemaUnavailableError, dto_cls):
        status = f"HTTP {error.status_code}" if error.status_code else "Network error"
        return dto_cls(
            success=False,
            error="Failed to fetch collection structure from Webflow",
            details=status,
            technical_details=error.details[:500],
        )

    @staticmethod
    def _feed_failure(error: FeedUnavailableError, dto_cls):
        return dto_cls(
            success=False,
            error=error.message,
            details=error.details or error.kind,
            technical_details=error.technical_details or None,
        )

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------

    async def preview(self) -> SyncPreviewDTO:
        location_map = await self._locations.build()
        try:
            schema = await self._introspector.inspect(self._config.collection_id)
        except SchemaUnavailableError as e:
            return self._schema_failure(e, SyncPreviewDTO)

        try:
            jobs = await self._feed.fetch_jobs()
        except FeedUnavailableError as e:
            logger.warning(f"Preview sin feed ({e.kind}): {e.message}")
            return self._feed_failure(e, SyncPreviewDTO)

        existing_items = await self._load_existing_items()
        plan = self._reconciler.preview(jobs, schema, location_map, existing_items)

        entries = [
            SyncPreviewItemDTO(
                name=entry.name,
                requisition_id=entry.requisition_id or None,
                location_code=entry.location_code or None,
                location_reference_id=entry.location_reference_id,
                action=entry.action,
                will_sync=entry.will_sync,
                existing_item_id=entry.existing_item_id,
                mapped_fields=entry.mapped_fields,
                payload=entry.payload,
            )
            for entry in plan.entries
        ]
        return SyncPreviewDTO(
            success=True,
            total=len(jobs),
            new=sum(1 for e in plan.entries if e.action == ACTION_CREATE),
            existing=sum(1 for e in plan.entries if e.action == ACTION_SKIP),
            to_unarchive=sum(1 for e in plan.entries if e.action == ACTION_UNARCHIVE),
            to_publish=plan.to_publish,
            to_unpublish=plan.to_unpublish,
            preview=entries,
            collection_id=schema.collection_id,
            collection_name=schema.display_name,
            available_fields=sorted(schema.valid_keys),
            field_count=len(schema.valid_keys),
            location_field=schema.location_field_slug,
            location_field_is_reference=schema.location_field_is_reference,
            location_codes=len(location_map),
            feed_fields=FeedFieldSurveyDTO(**survey_feed_fields(jobs)),
        )

    # ------------------------------------------------------------------
    # Execute
    # ------------------------------------------------------------------

    async def execute(self) -> SyncResponseDTO:
        """
        Ejecuta la sincronizacion completa.

        Raises:
            SyncAlreadyRunningException: si ya hay una corrida en curso
        """
        if self._run_lock.locked():
            raise SyncAlreadyRunningException()
        async with self._run_lock:
            logger.info(f"Iniciando sincronizacion de ofertas -> coleccion {self._config.collection_id}")
            return await self._execute()

    async def _execute(self) -> SyncResponseDTO:
        location_map = await self._locations.build()

        try:
            schema = await self._introspector.inspect(self._config.collection_id)
        except SchemaUnavailableError as e:
            logger.error(f"Sincronizacion abortada: {e}")
            return self._schema_failure(e, SyncResponseDTO)

        try:
            jobs = await self._feed.fetch_jobs()
        except FeedUnavailableError as e:
            logger.error(f"Sincronizacion abortada, feed no disponible ({e.kind}): {e.message}")
            return self._feed_failure(e, SyncResponseDTO)

        base = {
            "collection_id": schema.collection_id,
            "collection_name": schema.display_name,
            "available_fields": sorted(schema.valid_keys),
            "field_count": len(schema.valid_keys),
        }

        if not jobs:
            logger.warning("El feed no trajo ofertas: no se modifica la coleccion")
            return SyncResponseDTO(success=True, message="No jobs found in external API", **base)

        existing_items = await self._load_existing_items()
        items_before = len(existing_items)

        outcome = await self._reconciler.run(jobs, schema, location_map, existing_items)
        items_after = await self._count_items()

        message = (
            f'Sync completed: {outcome.synced} jobs synced to "{schema.display_name}", '
            f"{outcome.skipped} skipped, {outcome.unpublished} unpublished, "
            f"{outcome.published} published, {outcome.unarchived} unarchived"
        )
        logger.success(message)

        return SyncResponseDTO(
            success=True,
            message=message,
            synced=outcome.synced,
            skipped=outcome.skipped,
            unpublished=outcome.unpublished,
            published=outcome.published,
            unarchived=outcome.unarchived,
            total=len(jobs),
            items_before_sync=items_before,
            items_after_sync=items_after,
            skipped_fields=outcome.skipped_fields,
            site_published=outcome.site_published,
            feed_fields=FeedFieldSurveyDTO(**survey_feed_fields(jobs)),
            errors=outcome.errors,
            **base,
        )

    async def check_feed(self) -> Dict[str, Any]:
        """Diagnostico rapido del feed (un solo intento)."""
        result = await self._feed.probe()
        result["url"] = self._feed.url
        return result
