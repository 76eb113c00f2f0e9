"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, List

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI
from loguru import logger

from jobsync.core.config import settings
from jobsync.shared.exceptions.base import AppException

SYNC_JOB_ID = "webflow_job_sync"


async def run_scheduled_sync() -> None:
    """Corrida periodica de la sincronizacion; nunca propaga errores al scheduler."""
    from jobsync.api.v1.dependencies.use_case_deps import build_sync_use_cases

    try:
        result = await build_sync_use_cases(settings).execute()
    except AppException as e:
        logger.warning(f"Sincronizacion programada omitida: {e.message}")
        return
    except Exception as e:
        logger.exception(f"Error en sincronizacion programada: {e}")
        return

    if result.success:
        logger.info(f"Sincronizacion programada: {result.message}")
    else:
        logger.error(f"Sincronizacion programada fallida: {result.error} ({result.details})")


def _start_scheduler() -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        run_scheduled_sync,
        trigger=IntervalTrigger(minutes=settings.SYNC_INTERVAL_MINUTES),
        id=SYNC_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info(f"Sincronizacion periodica cada {settings.SYNC_INTERVAL_MINUTES} min")
    return scheduler


def _validate_config() -> List[str]:
    """Valida que la configuracion critica este presente."""
    warnings = []

    if not settings.WEBFLOW_API_TOKEN:
        warnings.append("WEBFLOW_API_TOKEN no configurado - la sincronizacion no funcionara")
    if not settings.WEBFLOW_COLLECTION_ID:
        warnings.append("WEBFLOW_COLLECTION_ID no configurado - no hay coleccion destino")
    if not settings.JOB_FEED_URL:
        warnings.append("JOB_FEED_URL no configurada - no hay feed de ofertas")
    if not settings.WEBFLOW_LOCATION_COLLECTION_ID:
        warnings.append("WEBFLOW_LOCATION_COLLECTION_ID no configurado - las ubicaciones no se resolveran")
    if not settings.WEBFLOW_SITE_ID:
        warnings.append("WEBFLOW_SITE_ID no configurado - el sitio no se publicara tras cambios")

    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")
    return warnings


def _print_available_urls() -> None:
    """Imprime las URLs disponibles de la aplicacion."""
    access_host = "localhost" if settings.HOST == "0.0.0.0" else settings.HOST
    base_url = f"http://{access_host}:{settings.PORT}"

    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")
    logger.opt(colors=True).info(f"<cyan>  Swagger UI:  {base_url}/docs</cyan>")
    logger.opt(colors=True).info(f"<cyan>  Sync:        {base_url}/api/v1/sync-jobs</cyan>")
    logger.opt(colors=True).info(f"<cyan>  Health:      {base_url}/health</cyan>")
    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
        logger.info(f"Entorno: {settings.ENVIRONMENT}")

        _validate_config()

        if settings.LOG_FILE:
            logger.add(
                settings.LOG_FILE,
                rotation="500 MB",
                retention="10 days",
                level=settings.LOG_LEVEL
            )

        app.state.scheduler = None
        if settings.SYNC_INTERVAL_MINUTES > 0:
            app.state.scheduler = _start_scheduler()

        logger.success("Aplicacion iniciada correctamente")
        _print_available_urls()

    return startup


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        logger.info("Cerrando aplicacion...")

        scheduler = getattr(app.state, "scheduler", None)
        if scheduler is not None:
            scheduler.shutdown(wait=False)
            logger.info("Scheduler detenido")

        logger.success("Aplicacion cerrada correctamente")

    return shutdown


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Ciclo de vida: startup al entrar, shutdown al salir."""
    await startup_handler(app)()
    try:
        yield
    finally:
        await shutdown_handler(app)()
