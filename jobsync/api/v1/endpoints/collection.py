"""
Endpoints de consulta y edicion de la coleccion destino.
"""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from jobsync.api.v1.dependencies.use_case_deps import get_collection_use_cases
from jobsync.application.dto.collection_dto import (
    CollectionVerificationDTO,
    CollectionViewDTO,
    ItemUpdateDTO,
    ReferenceItemsDTO,
)
from jobsync.application.use_cases.collection_use_cases import CollectionUseCases


router = APIRouter(prefix="/collection", tags=["Collection"])
references_router = APIRouter(prefix="/references", tags=["Collection"])


@router.get(
    "",
    response_model=CollectionViewDTO,
    summary="Coleccion de ofertas con todos sus items"
)
async def get_collection(
    use_cases: CollectionUseCases = Depends(get_collection_use_cases),
) -> CollectionViewDTO:
    return await use_cases.get_collection_with_items()


@router.get(
    "/verify",
    response_model=CollectionVerificationDTO,
    summary="Conteo de items por estado"
)
async def verify_collection(
    use_cases: CollectionUseCases = Depends(get_collection_use_cases),
) -> CollectionVerificationDTO:
    """Totales de items en borrador, live y archivados, con una muestra."""
    return await use_cases.verify_collection()


@router.patch(
    "/items/{item_id}",
    summary="Editar un item y publicarlo"
)
async def update_item(
    item_id: str,
    dto: ItemUpdateDTO = Body(...),
    use_cases: CollectionUseCases = Depends(get_collection_use_cases),
) -> Dict[str, Any]:
    """
    Actualiza fieldData (y opcionalmente isArchived) dejando el item publicado.
    """
    item = await use_cases.update_item(item_id, dto)
    return {"success": True, "item": item}


@references_router.get(
    "/{kind}",
    response_model=ReferenceItemsDTO,
    summary="Items de una coleccion de referencia"
)
async def list_reference_items(
    kind: str,
    use_cases: CollectionUseCases = Depends(get_collection_use_cases),
) -> ReferenceItemsDTO:
    """kind: locations | categories | communities."""
    return await use_cases.list_reference_items(kind)
