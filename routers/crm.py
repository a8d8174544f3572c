"""
Router del CRM (solo administradores).
Pipeline de negocios, KPIs, exportación a CSV y acciones sobre cada negocio.
"""

from fastapi import APIRouter, Depends, HTTPException, Response
from models.database_models import Negocio, NegocioCreate, NegocioUpdate, StatusChange, DormantRequest
from tools.auth import require_admin
from tools.database import get_negocios, get_negocio_by_id, update_negocio
from tools.crm import (
    PIPELINE_COLUMNS,
    DORMANT_PERIODS,
    build_board,
    change_status,
    create_negocio_from_form,
    new_negocio_defaults,
    remove_negocio,
    search_negocios,
    set_dormant,
)
from tools.kpis import calculate_kpis
from tools.csv_export import export_negocios_csv, export_filename
from config import CRM_ASESORES


router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/config")
async def crm_config():
    """Columnas, periodos de dormido, asesores y plantilla de negocio nuevo."""
    return {
        "columns": [{"id": s.value, "name": name} for s, name in PIPELINE_COLUMNS],
        "dormant_periods": DORMANT_PERIODS,
        "asesores": CRM_ASESORES,
        "defaults": new_negocio_defaults(),
    }


# ─── Consultas ───
@router.get("/negocios")
async def list_negocios(
    transaction_type: str = None,
    show_dormant: bool = False,
    asesor: str = None,
    q: str = None,
):
    negocios = await get_negocios(transaction_type, show_dormant, asesor)
    return search_negocios(negocios, q)


@router.get("/tablero")
async def board(
    transaction_type: str = None,
    show_dormant: bool = False,
    asesor: str = None,
    q: str = None,
):
    negocios = await get_negocios(transaction_type, show_dormant, asesor)
    return build_board(search_negocios(negocios, q))


@router.get("/kpis")
async def kpis(transaction_type: str = None, asesor: str = None):
    negocios = await get_negocios(transaction_type, show_dormant=True, asesor=asesor)
    return calculate_kpis(negocios)


@router.get("/exportar")
async def export_csv(show_dormant: bool = True):
    negocios = await get_negocios(show_dormant=show_dormant)
    return Response(
        content=export_negocios_csv(negocios),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.get("/negocios/{negocio_id}", response_model=Negocio)
async def get_negocio(negocio_id: str):
    negocio = await get_negocio_by_id(negocio_id)
    if not negocio:
        raise HTTPException(status_code=404, detail="Negocio no encontrado")
    return negocio


# ─── Altas y ediciones ───
@router.post("/negocios")
async def create_negocio(body: NegocioCreate):
    negocio = await create_negocio_from_form(body.model_dump(mode="json"))
    if negocio is None:
        raise HTTPException(status_code=502, detail="Error al crear el negocio")
    return negocio


@router.patch("/negocios/{negocio_id}")
async def edit_negocio(negocio_id: str, body: NegocioUpdate):
    if not await get_negocio_by_id(negocio_id):
        raise HTTPException(status_code=404, detail="Negocio no encontrado")

    data = body.model_dump(mode="json", exclude_unset=True)
    if "estatus" in data:
        # El estatus se mueve con /estatus para registrar la fecha de cierre
        await _change_status(negocio_id, data.pop("estatus"))
    if not data:
        return await get_negocio_by_id(negocio_id)

    negocio = await update_negocio(negocio_id, data)
    if negocio is None:
        raise HTTPException(status_code=502, detail="Error al actualizar el negocio")
    return negocio


async def _change_status(negocio_id: str, estatus: str) -> dict:
    try:
        negocio = await change_status(negocio_id, estatus)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if negocio is None:
        raise HTTPException(status_code=502, detail="Error al actualizar el estatus")
    return negocio


@router.put("/negocios/{negocio_id}/estatus")
async def move_negocio(negocio_id: str, body: StatusChange):
    return await _change_status(negocio_id, body.estatus)


@router.put("/negocios/{negocio_id}/dormido")
async def sleep_negocio(negocio_id: str, body: DormantRequest):
    negocio = await set_dormant(negocio_id, body.days)
    if negocio is None:
        raise HTTPException(status_code=502, detail="Error al actualizar el estado dormido")
    return negocio


@router.delete("/negocios/{negocio_id}")
async def delete_negocio(negocio_id: str, confirm: bool = False):
    if not confirm:
        raise HTTPException(
            status_code=400,
            detail="Confirma la eliminación del negocio con confirm=true",
        )
    if not await remove_negocio(negocio_id):
        raise HTTPException(status_code=502, detail="Error al eliminar el negocio")
    return {"status": "deleted", "id": negocio_id}
