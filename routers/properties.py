"""
Router de Propiedades.
Listado público, ficha con contador de visitas, similares, clics de WhatsApp
y el asistente de alta para asesores.
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from models.database_models import Property
from tools.auth import get_current_user
from tools.database import (
    get_published_properties,
    get_property_by_id,
    get_similar_properties,
    get_zones,
    increment_property_counter,
    delete_property,
    is_admin_user,
)
from tools.property_validation import (
    WIZARD_STEPS,
    initial_form_data,
    validate_step,
    transaction_type_change,
    zone_change,
)
from tools.property_manager import submit_wizard
from tools.policy_calculator import quote, DEFAULT_DISCOUNT
from tools.storage import upload_images
from config import SIMILAR_PROPERTIES_LIMIT


router = APIRouter()


# ─── Listado público ───
@router.get("")
async def list_properties(
    transaction_type: str = None,
    property_type: str = None,
    zone: str = None,
    condo: str = None,
    min_price: float = None,
    max_price: float = None,
    limit: int = None,
):
    return await get_published_properties(
        transaction_type=transaction_type,
        property_type=property_type,
        zone=zone,
        condo=condo,
        min_price=min_price,
        max_price=max_price,
        limit=limit,
    )


# ─── Asistente de alta ───
def _form_data(body: Property) -> dict:
    """Solo los campos que envió el cliente, ya convertidos a sus tipos."""
    return body.model_dump(mode="json", exclude_unset=True)


@router.get("/asistente")
async def wizard_config():
    """Pasos del asistente y valores iniciales del formulario."""
    return {"steps": WIZARD_STEPS, "initial": initial_form_data()}


@router.post("/asistente/validar/{step}")
async def validate_wizard_step(step: str, body: Property):
    """
    Valida un paso. Devuelve siempre el mismo formato:
    {"valid": bool, "errors": {campo: mensaje}, "message": primer error o null}
    """
    data = _form_data(body)
    try:
        result = validate_step(step, data)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"valid": result.is_valid, "errors": result.errors, "message": result.first_error}


@router.get("/asistente/cambio-operacion")
async def on_transaction_type_change(transaction_type: str):
    try:
        return transaction_type_change(transaction_type)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/asistente/cambio-zona")
async def on_zone_change(zone: str):
    return zone_change(zone)


@router.post("")
async def create_property_from_wizard(
    body: Property,
    user: dict = Depends(get_current_user),
):
    validation, saved = await submit_wizard(_form_data(body), advisor_id=user["id"])
    if not validation.is_valid:
        raise HTTPException(
            status_code=422,
            detail={"errors": validation.errors, "message": validation.first_error},
        )
    if saved is None:
        raise HTTPException(status_code=502, detail="Error al guardar la propiedad")
    return saved


@router.post("/fotos")
async def upload_property_photos(
    files: list[UploadFile] = File(...),
    user: dict = Depends(get_current_user),
):
    """Sube las fotos del paso 3 y devuelve sus URLs en el mismo orden."""
    payload = [(f.filename, await f.read(), f.content_type) for f in files]
    try:
        urls = await upload_images("properties", payload)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"image_urls": urls}


# ─── Póliza jurídica ───
@router.get("/poliza")
async def policy_quote(rent: float, discount: float = DEFAULT_DISCOUNT):
    try:
        return quote(rent, discount)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


# ─── Ficha ───
@router.get("/{property_id}")
async def get_property(property_id: str, count_view: bool = True):
    prop = await get_property_by_id(property_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Propiedad no encontrada")

    if count_view:
        views = await increment_property_counter(property_id, "views")
        if views is not None:
            prop["views"] = views
    return prop


@router.get("/{property_id}/similares")
async def similar_properties(property_id: str):
    prop = await get_property_by_id(property_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Propiedad no encontrada")

    similar = await get_similar_properties(
        current_property_id=property_id,
        property_type=prop.get("property_type"),
        transaction_type=prop.get("transaction_type"),
        zone=prop.get("zone"),
        condo=prop.get("condo"),
        price=prop.get("price"),
        max_results=SIMILAR_PROPERTIES_LIMIT,
    )

    zone_names = {z["id"]: z.get("name", "") for z in await get_zones()}
    return [{**p, "zone_name": zone_names.get(p.get("zone"), "")} for p in similar]


@router.post("/{property_id}/whatsapp")
async def register_whatsapp_click(property_id: str):
    clicks = await increment_property_counter(property_id, "whatsapp_clicks")
    if clicks is None:
        raise HTTPException(status_code=404, detail="Propiedad no encontrada")
    return {"whatsapp_clicks": clicks}


# ─── Edición del asesor ───
async def _owned_property(property_id: str, user: dict) -> dict:
    prop = await get_property_by_id(property_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Propiedad no encontrada")
    if prop.get("advisor") != user["id"] and not await is_admin_user(user["id"]):
        raise HTTPException(status_code=403, detail="No puedes modificar esta propiedad")
    return prop


@router.put("/{property_id}")
async def update_property_from_wizard(
    property_id: str,
    body: Property,
    user: dict = Depends(get_current_user),
):
    prop = await _owned_property(property_id, user)
    validation, saved = await submit_wizard(
        {**prop, **_form_data(body)},
        advisor_id=prop.get("advisor") or user["id"],
        property_id=property_id,
    )
    if not validation.is_valid:
        raise HTTPException(
            status_code=422,
            detail={"errors": validation.errors, "message": validation.first_error},
        )
    if saved is None:
        raise HTTPException(status_code=502, detail="Error al guardar la propiedad")
    return saved


@router.delete("/{property_id}")
async def remove_property(property_id: str, user: dict = Depends(get_current_user)):
    await _owned_property(property_id, user)
    if not await delete_property(property_id):
        raise HTTPException(status_code=502, detail="Error al eliminar la propiedad")
    return {"status": "deleted", "id": property_id}
