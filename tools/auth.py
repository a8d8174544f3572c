"""
Autenticación con Supabase Auth.
Dependencias de FastAPI para rutas de asesores y del panel de administración.
"""

from fastapi import Depends, Header, HTTPException
from tools.database import get_client, is_admin_user


def _bearer_token(authorization: str | None) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="No autenticado")
    return authorization.split(" ", 1)[1].strip()


async def get_current_user(authorization: str = Header(default=None)) -> dict:
    """Usuario dueño del token `Authorization: Bearer <jwt>`."""
    token = _bearer_token(authorization)
    try:
        response = get_client().auth.get_user(token)
    except Exception as e:
        print(f"⚠️ Token inválido: {e}")
        raise HTTPException(status_code=401, detail="Sesión inválida o expirada")

    user = getattr(response, "user", None)
    if user is None:
        raise HTTPException(status_code=401, detail="Sesión inválida o expirada")

    return {
        "id": user.id,
        "email": user.email,
        "metadata": {**(user.app_metadata or {}), **(user.user_metadata or {})},
    }


async def require_admin(user: dict = Depends(get_current_user)) -> dict:
    """Solo administradores (tabla `admins` o bandera is_admin en el usuario)."""
    if user["metadata"].get("is_admin") or await is_admin_user(user["id"]):
        return user
    raise HTTPException(status_code=403, detail="Acceso solo para administradores")
