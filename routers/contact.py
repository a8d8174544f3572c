"""
Router de Contacto.
Los mensajes del formulario público entran al CRM como negocios en "propuesta".
"""

from fastapi import APIRouter, HTTPException
from models.database_models import ContactRequest
from tools.database import get_property_by_id
from tools.crm import create_negocio_from_contact
from tools.email_handler import notify_team_new_lead


router = APIRouter()


@router.post("")
async def contact(body: ContactRequest):
    if not (body.telefono or body.correo):
        raise HTTPException(status_code=422, detail="Déjanos un teléfono o correo para contactarte")

    propiedad = None
    if body.propiedad_id:
        propiedad = await get_property_by_id(body.propiedad_id)

    negocio = await create_negocio_from_contact(
        nombre_completo=body.nombre_completo,
        telefono=body.telefono,
        correo=body.correo,
        mensaje=body.mensaje,
        origen_url=body.origen_url,
        propiedad=propiedad,
    )
    if negocio is None:
        raise HTTPException(status_code=502, detail="Error al registrar tu mensaje")

    await notify_team_new_lead(negocio, propiedad)
    return {"status": "ok", "negocio_id": negocio.get("id")}
