"""
Router de Asesores.
Perfil del asesor autenticado y sus propiedades.
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from models.database_models import Advisor
from tools.auth import get_current_user
from tools.database import (
    get_advisors,
    get_advisor_by_user,
    upsert_advisor_profile,
    get_properties_by_advisor,
    is_admin_user,
)
from tools.storage import upload_image


router = APIRouter()

PROFILE_FIELDS = ("name", "email", "phone", "bio", "photo", "social_media")


@router.get("")
async def list_advisors():
    """Asesores para la página pública de asesores."""
    return [
        {k: a.get(k) for k in ("id", "name", "bio", "photo", "phone", "verified", "social_media")}
        for a in await get_advisors()
    ]


@router.get("/perfil")
async def my_profile(user: dict = Depends(get_current_user)):
    profile = await get_advisor_by_user(user["id"])
    if not profile:
        raise HTTPException(status_code=404, detail="Perfil de asesor no encontrado")
    return profile


@router.put("/perfil")
async def update_my_profile(body: Advisor, user: dict = Depends(get_current_user)):
    changes = body.model_dump(include=set(PROFILE_FIELDS), exclude_unset=True)
    if "email" not in changes and user.get("email"):
        changes["email"] = user["email"]

    profile = await upsert_advisor_profile(user["id"], changes)
    if profile is None:
        raise HTTPException(status_code=502, detail="Error al guardar el perfil")
    return profile


@router.post("/perfil/foto")
async def upload_my_photo(file: UploadFile = File(...), user: dict = Depends(get_current_user)):
    try:
        url = await upload_image("advisors", file.filename, await file.read(), file.content_type)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=502, detail=str(e))

    profile = await upsert_advisor_profile(user["id"], {"photo": url})
    if profile is None:
        raise HTTPException(status_code=502, detail="Error al guardar el perfil")
    return profile


@router.get("/mis-propiedades")
async def my_properties(user: dict = Depends(get_current_user)):
    return await get_properties_by_advisor(user["id"])


@router.get("/es-admin")
async def am_i_admin(user: dict = Depends(get_current_user)):
    is_admin = bool(user["metadata"].get("is_admin")) or await is_admin_user(user["id"])
    return {"is_admin": is_admin}
