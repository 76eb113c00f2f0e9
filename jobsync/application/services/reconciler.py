"""
Reconciliacion feed de ofertas -> coleccion Webflow.

Diseño (resumen):
- Por cada oferta, en orden del feed:
  - sin item equivalente -> se crea publicado (nunca borrador)      [synced]
  - item equivalente archivado -> se actualiza, desarchiva y publica [unarchived]
  - item equivalente vivo -> no se toca                              [skipped]
- Barrido final sobre los items existentes no archivados:
  - presente en el feed y en borrador -> se publica                  [published]
  - ausente del feed -> se retira del sitio live (se conserva)       [unpublished]
- Si hubo cambios de visibilidad, una unica publicacion del sitio.

Un fallo en una oferta queda en errors[] y no detiene las siguientes.
Este motor nunca borra items del CMS.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx
from loguru import logger

from jobsync.application.interfaces.cms_store import CmsStore
from jobsync.application.services.field_mapper import (
    LOCATION_CODE_KEY,
    LOCATION_REFERENCE_KEY,
    JobFieldMapper,
    job_requisition_id,
    job_title,
    public_fields,
)
from jobsync.application.services.identity import (
    feed_identity_keys,
    find_matching_item,
    item_in_feed,
    requisition_key,
)
from jobsync.application.services.payload_builder import (
    PayloadBuilder,
    ValidationRetryPolicy,
)
from jobsync.core.config import SyncConfig
from jobsync.domain.entities.cms import CollectionSchema, DestinationItem
from jobsync.domain.entities.location_map import LocationMap
from jobsync.infrastructure.external.webflow.webflow_client import WebflowApiError

ACTION_CREATE = "create"
ACTION_UNARCHIVE = "unarchive"
ACTION_SKIP = "skip"


@dataclass
class SyncOutcome:
    """Contadores y errores de una corrida."""

    synced: int = 0
    skipped: int = 0
    unarchived: int = 0
    published: int = 0
    unpublished: int = 0
    errors: List[str] = field(default_factory=list)
    skipped_fields: List[str] = field(default_factory=list)
    site_published: bool = False

    def note_skipped_fields(self, keys: Sequence[str]) -> None:
        for key in keys:
            if key not in self.skipped_fields:
                self.skipped_fields.append(key)


@dataclass
class PreviewEntry:
    """Accion que tomaria la sincronizacion para una oferta."""

    name: str
    requisition_id: str
    location_code: str
    location_reference_id: Optional[str]
    action: str
    existing_item_id: Optional[str]
    mapped_fields: Dict[str, Any]
    payload: Dict[str, Any]

    @property
    def will_sync(self) -> bool:
        return self.action != ACTION_SKIP


@dataclass
class SyncPlan:
    """Vista previa completa: acciones por oferta y efecto del barrido."""

    entries: List[PreviewEntry] = field(default_factory=list)
    to_publish: List[str] = field(default_factory=list)
    to_unpublish: List[str] = field(default_factory=list)


class _ItemFailed(Exception):
    """Fallo definitivo de una oferta (ya con mensaje legible)."""


def _error_text(error: Exception) -> str:
    if isinstance(error, WebflowApiError):
        return error.body[:500] or f"HTTP {error.status_code}"
    return str(error) or type(error).__name__


def _item_label(item: DestinationItem) -> str:
    return item.name or item.id


class JobReconciler:
    """
    Orquestador de la reconciliacion para una coleccion.

    No lee configuracion global: todo llega por constructor o por argumento.
    """

    def __init__(
        self,
        store: CmsStore,
        config: SyncConfig,
        *,
        mapper: Optional[JobFieldMapper] = None,
        payload_builder: Optional[PayloadBuilder] = None,
        retry_policy: Optional[ValidationRetryPolicy] = None,
    ) -> None:
        self._store = store
        self._config = config
        self._mapper = mapper or JobFieldMapper()
        self._builder = payload_builder or PayloadBuilder()
        self._retry_policy = retry_policy or ValidationRetryPolicy(
            max_invalid_fields=config.max_invalid_fields_for_retry
        )

    # ------------------------------------------------------------------
    # Vista previa (solo lectura)
    # ------------------------------------------------------------------

    def preview(
        self,
        jobs: Sequence[Mapping[str, Any]],
        schema: CollectionSchema,
        location_map: LocationMap,
        existing_items: Sequence[DestinationItem],
    ) -> SyncPlan:
        """Calcula lo que haria run() sin invocar ninguna operacion del store."""
        plan = SyncPlan()
        known = list(existing_items)
        req_field = requisition_key(schema)

        for job in jobs:
            fields = self._mapper.map(job, location_map)
            match = find_matching_item(job, known, req_field)
            if match is None:
                action = ACTION_CREATE
            elif match.is_archived:
                action = ACTION_UNARCHIVE
            else:
                action = ACTION_SKIP
            built = self._builder.build(fields, schema) if action != ACTION_SKIP else None

            plan.entries.append(
                PreviewEntry(
                    name=fields["name"],
                    requisition_id=job_requisition_id(job),
                    location_code=fields.get(LOCATION_CODE_KEY, ""),
                    location_reference_id=fields.get(LOCATION_REFERENCE_KEY),
                    action=action,
                    existing_item_id=match.id if match else None,
                    mapped_fields=public_fields(fields),
                    payload=built.field_data if built else {},
                )
            )
            if match is None:
                # Una oferta repetida en el feed no se crea dos veces
                known.append(DestinationItem(id="", field_data=dict(built.field_data) if built else {}))

        keys = feed_identity_keys(jobs)
        for item in existing_items:
            if item.is_archived:
                continue
            if item_in_feed(item, keys, req_field):
                if item.is_draft:
                    plan.to_publish.append(_item_label(item))
            else:
                plan.to_unpublish.append(_item_label(item))
        return plan

    # ------------------------------------------------------------------
    # Ejecucion
    # ------------------------------------------------------------------

    async def run(
        self,
        jobs: Sequence[Mapping[str, Any]],
        schema: CollectionSchema,
        location_map: LocationMap,
        existing_items: Sequence[DestinationItem],
    ) -> SyncOutcome:
        outcome = SyncOutcome()
        known: List[DestinationItem] = list(existing_items)

        for job in jobs:
            label = job_title(job) or "Unknown"
            try:
                await self._process_job(job, schema, location_map, known, outcome)
            except _ItemFailed as e:
                logger.error(str(e))
                outcome.errors.append(str(e))
            except Exception as e:
                logger.error(f"Error procesando la oferta '{label}': {e}")
                outcome.errors.append(f'Error processing job "{label}": {_error_text(e)}')

        await self._sweep(jobs, existing_items, requisition_key(schema), outcome)
        await self._publish_site_if_needed(outcome)

        logger.info(
            f"Reconciliacion: synced={outcome.synced}, skipped={outcome.skipped}, "
            f"unarchived={outcome.unarchived}, published={outcome.published}, "
            f"unpublished={outcome.unpublished}, errores={len(outcome.errors)}"
        )
        return outcome

    async def _process_job(
        self,
        job: Mapping[str, Any],
        schema: CollectionSchema,
        location_map: LocationMap,
        known: List[DestinationItem],
        outcome: SyncOutcome,
    ) -> None:
        match = find_matching_item(job, known, requisition_key(schema))

        if match is not None and not match.is_archived:
            outcome.skipped += 1
            return

        fields = self._mapper.map(job, location_map)
        built = self._builder.build(fields, schema)
        outcome.note_skipped_fields(built.skipped_fields)

        if match is not None:
            await self._unarchive(match, built.field_data)
            outcome.unarchived += 1
            return

        created = await self._create(fields, built.field_data, schema)
        outcome.synced += 1
        known.append(created)

    async def _unarchive(self, item: DestinationItem, field_data: Dict[str, Any]) -> None:
        """
        Actualiza, desarchiva y publica un item.

        Prefiere el PATCH live (una sola operacion); si falla, PATCH staged.
        """
        body = {"fieldData": field_data, "isArchived": False, "isDraft": False}
        collection_id = self._config.collection_id
        try:
            await self._store.update_item_live(collection_id, item.id, body)
        except WebflowApiError as e:
            logger.warning(f"PATCH live fallo para '{_item_label(item)}' ({e.status_code}), probando PATCH staged")
            try:
                await self._store.update_item(collection_id, item.id, body)
            except WebflowApiError as fallback_error:
                raise _ItemFailed(
                    f'Failed to unarchive item "{_item_label(item)}": {_error_text(fallback_error)[:100]}'
                ) from fallback_error

        item.is_archived = False
        item.is_draft = False
        item.field_data.update(field_data)
        logger.info(f"Item desarchivado y publicado: '{_item_label(item)}'")

    async def _create(
        self,
        fields: Mapping[str, Any],
        field_data: Dict[str, Any],
        schema: CollectionSchema,
    ) -> DestinationItem:
        """Crea el item publicado, con a lo sumo un reintento por validacion."""
        collection_id = self._config.collection_id
        name = fields.get("name", "")
        payload = field_data
        attempts = 0

        while True:
            try:
                created = await self._store.create_item_live(collection_id, payload)
                break
            except WebflowApiError as e:
                retry = None
                if attempts < self._retry_policy.max_retries:
                    retry = self._retry_policy.retry_payload(payload, e.invalid_fields, fields, schema)
                if retry is None:
                    raise _ItemFailed(f'Failed to create job "{name}": {_error_text(e)}') from e
                attempts += 1
                payload = retry

        item = DestinationItem.from_api(created or {})
        if not item.field_data:
            item.field_data = dict(payload)
        logger.info(f"Oferta creada y publicada: '{name}' (id={item.id or '?'})")
        return item

    async def _sweep(
        self,
        jobs: Sequence[Mapping[str, Any]],
        existing_items: Sequence[DestinationItem],
        req_field: str,
        outcome: SyncOutcome,
    ) -> None:
        keys = feed_identity_keys(jobs)
        collection_id = self._config.collection_id

        for item in existing_items:
            if item.is_archived:
                continue
            label = _item_label(item)

            if item_in_feed(item, keys, req_field):
                if not item.is_draft:
                    continue
                try:
                    await self._store.publish_item(collection_id, item.id)
                except (WebflowApiError, httpx.HTTPError) as e:
                    logger.warning(f"No se pudo publicar '{label}': {e}")
                    outcome.errors.append(f'Failed to publish item "{label}": {_error_text(e)[:100]}')
                    continue
                item.is_draft = False
                outcome.published += 1
                continue

            try:
                await self._store.unpublish_item(collection_id, item.id)
            except WebflowApiError as e:
                if not e.is_not_found:
                    logger.warning(f"No se pudo despublicar '{label}' ({e.status_code})")
                    outcome.errors.append(f'Failed to unpublish item "{label}": {_error_text(e)[:100]}')
                    continue
                # 404: ya no estaba publicado
            except httpx.HTTPError as e:
                logger.warning(f"No se pudo despublicar '{label}': {e}")
                outcome.errors.append(f'Error unpublishing item "{label}": {e}')
                continue
            item.is_draft = True
            outcome.unpublished += 1

    async def _publish_site_if_needed(self, outcome: SyncOutcome) -> None:
        if outcome.published == 0 and outcome.unpublished == 0:
            return
        site_id = self._config.site_id
        if not site_id:
            logger.warning("SITE_ID no configurado: publica el sitio manualmente para reflejar los cambios")
            return
        try:
            await self._store.publish_site(site_id)
            outcome.site_published = True
            logger.info(f"Sitio {site_id} publicado")
        except (WebflowApiError, httpx.HTTPError) as e:
            # Los estados de cada item ya son correctos
            logger.warning(f"Fallo la publicacion del sitio: {e}")
