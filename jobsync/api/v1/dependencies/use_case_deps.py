"""
Dependencias para inyeccion de casos de uso.

Los clientes HTTP se construyen por request a partir de `settings`; los
tests reemplazan estas dependencias con app.dependency_overrides.
"""
from loguru import logger

from jobsync.application.use_cases.collection_use_cases import CollectionUseCases
from jobsync.application.use_cases.sync_use_cases import JobSyncUseCases
from jobsync.core.config import Settings, SyncConfig, settings
from jobsync.infrastructure.external.job_feed.feed_client import JobFeedClient
from jobsync.infrastructure.external.webflow.webflow_client import (
    WebflowClient,
    WebflowCredentials,
)
from jobsync.shared.exceptions.domain import ConfigurationException


def build_webflow_client(s: Settings) -> WebflowClient:
    """
    Crea el cliente de Webflow.

    Raises:
        ConfigurationException: si falta el token o la coleccion destino
    """
    if not s.WEBFLOW_API_TOKEN:
        raise ConfigurationException("WEBFLOW_API_TOKEN")
    if not s.WEBFLOW_COLLECTION_ID:
        raise ConfigurationException("WEBFLOW_COLLECTION_ID")
    return WebflowClient(
        WebflowCredentials(token=s.WEBFLOW_API_TOKEN),
        base_url=s.WEBFLOW_API_BASE_URL,
        api_version=s.WEBFLOW_API_VERSION,
        timeout_s=s.WEBFLOW_TIMEOUT_S,
    )


def build_feed_client(s: Settings) -> JobFeedClient:
    """
    Crea el cliente del feed de ofertas.

    Raises:
        ConfigurationException: si JOB_FEED_URL no esta configurada
    """
    if not s.JOB_FEED_URL:
        raise ConfigurationException("JOB_FEED_URL")
    return JobFeedClient(
        s.JOB_FEED_URL,
        timeout_s=s.JOB_FEED_TIMEOUT_S,
        max_attempts=s.JOB_FEED_MAX_ATTEMPTS,
        backoff_base_s=s.JOB_FEED_BACKOFF_BASE_S,
        backoff_max_s=s.JOB_FEED_BACKOFF_MAX_S,
    )


def build_sync_use_cases(s: Settings) -> JobSyncUseCases:
    """Arma el caso de uso de sincronizacion (tambien lo usa el scheduler)."""
    config = SyncConfig.from_settings(s)
    logger.debug(f"Sync configurado para la coleccion {config.collection_id}")
    return JobSyncUseCases(build_webflow_client(s), build_feed_client(s), config)


async def get_sync_use_cases() -> JobSyncUseCases:
    """
    Dependencia para obtener los casos de uso de sincronizacion.

    Returns:
        JobSyncUseCases: Instancia lista para preview/execute
    """
    return build_sync_use_cases(settings)


async def get_collection_use_cases() -> CollectionUseCases:
    """
    Dependencia para obtener los casos de uso de la coleccion.

    Returns:
        CollectionUseCases: Instancia de casos de uso de la coleccion
    """
    references = {
        "locations": settings.WEBFLOW_LOCATION_COLLECTION_ID,
        "categories": settings.WEBFLOW_CATEGORY_COLLECTION_ID,
        "communities": settings.WEBFLOW_COMMUNITY_COLLECTION_ID,
    }
    return CollectionUseCases(
        build_webflow_client(settings),
        settings.WEBFLOW_COLLECTION_ID,
        {kind: cid for kind, cid in references.items() if cid},
    )
