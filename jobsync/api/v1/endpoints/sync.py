"""
Endpoints de sincronizacion de ofertas hacia Webflow.
Permiten al operador previsualizar y ejecutar la sincronizacion desde la UI.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from loguru import logger

from jobsync.api.v1.dependencies.use_case_deps import get_sync_use_cases
from jobsync.application.dto.sync_dto import SyncPreviewDTO, SyncResponseDTO
from jobsync.application.use_cases.sync_use_cases import JobSyncUseCases
from jobsync.shared.exceptions.base import AppException


router = APIRouter(prefix="/sync-jobs", tags=["Sync"])


def _failure(error: str, exc: Exception, dto_cls) -> JSONResponse:
    body = dto_cls(success=False, error=error, details=str(exc) or type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )


@router.get(
    "",
    response_model=SyncPreviewDTO,
    summary="Previsualizar la sincronizacion (no modifica el CMS)"
)
async def preview_sync(
    use_cases: JobSyncUseCases = Depends(get_sync_use_cases),
):
    """
    Calcula, para cada oferta del feed, si se crearia, desarchivaria u omitiria,
    junto con el fieldData exacto que se enviaria.
    """
    try:
        return await use_cases.preview()
    except AppException:
        raise
    except Exception as e:
        logger.exception(f"Error en preview de sincronizacion: {e}")
        return _failure("Failed to preview sync", e, SyncPreviewDTO)


@router.post(
    "",
    response_model=SyncResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Ejecutar la sincronizacion feed -> Webflow"
)
async def execute_sync(
    use_cases: JobSyncUseCases = Depends(get_sync_use_cases),
):
    """
    Ejecuta la reconciliacion completa.

    - Esquema o feed no disponibles: 200 con success=false y el motivo.
    - Ya hay una corrida en curso: 409.
    - Error inesperado: 500 con success=false.
    """
    try:
        return await use_cases.execute()
    except AppException:
        raise
    except Exception as e:
        logger.exception(f"Error en sincronizacion de ofertas: {e}")
        return _failure("Failed to sync jobs", e, SyncResponseDTO)


@router.get(
    "/feed-check",
    summary="Diagnostico del feed de ofertas"
)
async def check_feed(
    use_cases: JobSyncUseCases = Depends(get_sync_use_cases),
) -> Dict[str, Any]:
    """Una sola peticion al feed: estado, cabeceras y primeros bytes del cuerpo."""
    return await use_cases.check_feed()
