"""
Router de Zonas y Condominios.
Catálogo público y edición para administradores, incluidas las reseñas de Google.
"""

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile
from models.database_models import Zone, Condo
from tools.auth import require_admin
from tools.database import (
    get_zones,
    get_zone_by_id,
    create_zone,
    update_zone,
    delete_zone,
    get_all_condos,
    get_condos_by_zone,
    get_condo_by_id,
    get_condo_by_slug,
    create_condo,
    update_condo,
    delete_condo,
)
from tools.review_manager import refresh_condo_reviews, select_reviews, analyze_reviews
from tools.blog import slugify
from tools.storage import upload_images


router = APIRouter()


def _with_reviews(condo: dict) -> dict:
    reviews = select_reviews(condo)
    return {**condo, "reviews": reviews, "review_stats": analyze_reviews(reviews)}


# ─── Condominios ───
@router.get("/condominios")
async def list_condos():
    return await get_all_condos()


@router.get("/condominios/slug/{slug}")
async def condo_by_slug(slug: str):
    condo = await get_condo_by_slug(slug)
    if not condo:
        raise HTTPException(status_code=404, detail="Condominio no encontrado")
    return _with_reviews(condo)


@router.get("/condominios/{condo_id}")
async def get_condo(condo_id: str):
    condo = await get_condo_by_id(condo_id)
    if not condo:
        raise HTTPException(status_code=404, detail="Condominio no encontrado")
    return _with_reviews(condo)


@router.post("/condominios", dependencies=[Depends(require_admin)])
async def add_condo(body: Condo):
    data = body.model_dump(mode="json", exclude={"id"}, exclude_none=True)
    data["slug"] = data.get("slug") or slugify(body.name)
    if not data.get("zone_name"):
        zone = await get_zone_by_id(body.zone_id)
        data["zone_name"] = (zone or {}).get("name", "")

    condo = await create_condo(data)
    if condo is None:
        raise HTTPException(status_code=502, detail="Error al crear el condominio")
    return condo


@router.put("/condominios/{condo_id}", dependencies=[Depends(require_admin)])
async def edit_condo(condo_id: str, data: dict = Body(...)):
    if not await get_condo_by_id(condo_id):
        raise HTTPException(status_code=404, detail="Condominio no encontrado")
    data.pop("id", None)
    condo = await update_condo(condo_id, data)
    if condo is None:
        raise HTTPException(status_code=502, detail="Error al actualizar el condominio")
    return condo


@router.delete("/condominios/{condo_id}", dependencies=[Depends(require_admin)])
async def remove_condo(condo_id: str):
    if not await delete_condo(condo_id):
        raise HTTPException(status_code=502, detail="Error al eliminar el condominio")
    return {"status": "deleted", "id": condo_id}


@router.post("/condominios/{condo_id}/resenas/actualizar", dependencies=[Depends(require_admin)])
async def refresh_reviews(condo_id: str):
    """Vuelve a descargar las reseñas de Google del condominio."""
    if not await get_condo_by_id(condo_id):
        raise HTTPException(status_code=404, detail="Condominio no encontrado")
    condo = await refresh_condo_reviews(condo_id)
    if condo is None:
        raise HTTPException(status_code=502, detail="Error al actualizar las reseñas")
    return _with_reviews(condo)


@router.put("/condominios/{condo_id}/resenas/seleccion", dependencies=[Depends(require_admin)])
async def choose_reviews(condo_id: str, review_ids: list[str] = Body(...)):
    """Reseñas de Google que se muestran en la ficha pública."""
    condo = await update_condo(condo_id, {"selected_google_reviews": review_ids})
    if condo is None:
        raise HTTPException(status_code=502, detail="Error al guardar la selección de reseñas")
    return _with_reviews(condo)


@router.post("/condominios/{condo_id}/imagenes", dependencies=[Depends(require_admin)])
async def upload_condo_images(condo_id: str, files: list[UploadFile] = File(...)):
    condo = await get_condo_by_id(condo_id)
    if not condo:
        raise HTTPException(status_code=404, detail="Condominio no encontrado")

    payload = [(f.filename, await f.read(), f.content_type) for f in files]
    try:
        urls = await upload_images("condos", payload)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=502, detail=str(e))

    updated = await update_condo(condo_id, {"image_urls": (condo.get("image_urls") or []) + urls})
    if updated is None:
        raise HTTPException(status_code=502, detail="Error al actualizar el condominio")
    return updated


# ─── Zonas ───
@router.get("")
async def list_zones():
    return await get_zones()


@router.post("", dependencies=[Depends(require_admin)])
async def add_zone(body: Zone):
    zone = await create_zone(body.model_dump(mode="json", exclude={"id", "created_at"}))
    if zone is None:
        raise HTTPException(status_code=502, detail="Error al crear la zona")
    return zone


@router.get("/{zone_id}")
async def get_zone(zone_id: str):
    zone = await get_zone_by_id(zone_id)
    if not zone:
        raise HTTPException(status_code=404, detail="Zona no encontrada")
    return zone


@router.get("/{zone_id}/condominios")
async def zone_condos(zone_id: str):
    return await get_condos_by_zone(zone_id)


@router.put("/{zone_id}", dependencies=[Depends(require_admin)])
async def edit_zone(zone_id: str, data: dict = Body(...)):
    if not await get_zone_by_id(zone_id):
        raise HTTPException(status_code=404, detail="Zona no encontrada")
    data.pop("id", None)
    zone = await update_zone(zone_id, data)
    if zone is None:
        raise HTTPException(status_code=502, detail="Error al actualizar la zona")
    return zone


@router.delete("/{zone_id}", dependencies=[Depends(require_admin)])
async def remove_zone(zone_id: str):
    if not await delete_zone(zone_id):
        raise HTTPException(status_code=502, detail="Error al eliminar la zona")
    return {"status": "deleted", "id": zone_id}
