"""
CRM de Pizo.
Pipeline de negocios por estatus, cambios de estatus, periodos de "dormido"
y búsqueda rápida sobre los leads cargados.
"""

import math
from datetime import datetime, timedelta, timezone
from config import DEFAULT_COMISION, DEFAULT_PORCENTAJE_PIZO
from models.database_models import NegocioStatus, PropertyType, TransactionType
from tools.database import (
    create_negocio,
    update_negocio,
    delete_negocio,
)


# ─────────────────────────────────────────────
# Columnas del pipeline (orden fijo)
# ─────────────────────────────────────────────
PIPELINE_COLUMNS: list[tuple[NegocioStatus, str]] = [
    (NegocioStatus.PROPUESTA, "Propuesta"),
    (NegocioStatus.EVALUACION, "Evaluación"),
    (NegocioStatus.COMERCIALIZACION, "Comercialización"),
    (NegocioStatus.CONGELADORA, "Congeladora"),
    (NegocioStatus.CERRADA, "Cerrada"),
    (NegocioStatus.CANCELADA, "Cancelada"),
]

DORMANT_PERIODS = [
    {"label": "1 día", "value": 1},
    {"label": "2 días", "value": 2},
    {"label": "3 días", "value": 3},
    {"label": "5 días", "value": 5},
    {"label": "7 días", "value": 7},
    {"label": "2 semanas", "value": 14},
    {"label": "1 mes", "value": 30},
    {"label": "2 meses", "value": 60},
    {"label": "6 meses", "value": 180},
]

SEARCH_FIELDS = (
    "nombre_completo",
    "telefono",
    "correo",
    "condo_name",
    "origen_texto",
    "notas",
)


def parse_datetime(value) -> datetime | None:
    """Acepta datetime o ISO string. Las fechas sin zona se asumen UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


# ─────────────────────────────────────────────
# Agrupación
# ─────────────────────────────────────────────
def group_by_status(negocios: list[dict]) -> dict[str, list[dict]]:
    """
    Reparte los negocios en las seis columnas por coincidencia exacta de estatus.
    Un negocio con un estatus desconocido no aparece en ninguna columna.
    """
    columns: dict[str, list[dict]] = {status.value: [] for status, _ in PIPELINE_COLUMNS}
    for negocio in negocios:
        estatus = negocio.get("estatus")
        if estatus in columns:
            columns[estatus].append(negocio)
    return columns


def build_board(negocios: list[dict], now: datetime = None) -> list[dict]:
    """Tablero kanban listo para pintar: columnas con conteo y tarjetas."""
    grouped = group_by_status(negocios)
    return [
        {
            "id": status.value,
            "name": name,
            "count": len(grouped[status.value]),
            "cards": [build_card(n, now) for n in grouped[status.value]],
        }
        for status, name in PIPELINE_COLUMNS
    ]


def build_card(negocio: dict, now: datetime = None) -> dict:
    """Campos de presentación de una tarjeta del pipeline."""
    return {
        "negocio": negocio,
        "tipo": format_property_type(negocio.get("property_type") or ""),
        "operacion": "Renta" if negocio.get("transaction_type") == "renta" else "Venta",
        "precio": format_compact_currency(negocio.get("price") or 0),
        "dormant_status": format_dormant_status(negocio, now),
    }


# ─────────────────────────────────────────────
# Acciones sobre un negocio
# ─────────────────────────────────────────────
async def change_status(negocio_id: str, new_status: str, now: datetime = None) -> dict | None:
    """
    Mueve un negocio a otra columna con una sola escritura.
    Si la escritura falla solo se registra; no hay reintento ni rollback.
    """
    try:
        status = NegocioStatus(new_status)
    except ValueError:
        raise ValueError(f"Estatus desconocido: {new_status}")

    data = {"estatus": status.value}
    if status == NegocioStatus.CERRADA:
        data["fecha_cierre"] = (now or datetime.now(timezone.utc)).isoformat()

    result = await update_negocio(negocio_id, data)
    if result is None:
        print(f"❌ No se pudo cambiar el estatus del negocio {negocio_id} a {status.value}")
    else:
        print(f"✅ Negocio {negocio_id} → {status.value}")
    return result


async def remove_negocio(negocio_id: str) -> bool:
    """Elimina un negocio (la confirmación la pide quien llama)."""
    deleted = await delete_negocio(negocio_id)
    if deleted:
        print(f"🗑️ Negocio {negocio_id} eliminado")
    return deleted


async def set_dormant(negocio_id: str, days: int, now: datetime = None) -> dict | None:
    """Duerme un negocio `days` días. Con days=0 lo despierta."""
    if days < 0:
        raise ValueError("El periodo de dormido no puede ser negativo")

    if days == 0:
        data = {"dormido": False, "dormido_hasta": None}
    else:
        until = (now or datetime.now(timezone.utc)) + timedelta(days=days)
        data = {"dormido": True, "dormido_hasta": until.isoformat()}

    result = await update_negocio(negocio_id, data)
    if result is None:
        print(f"❌ Error al actualizar el estado dormido del negocio {negocio_id}")
    return result


# ─────────────────────────────────────────────
# Dormido
# ─────────────────────────────────────────────
def dormant_days_remaining(negocio: dict, now: datetime = None) -> int | None:
    """
    Días completos que faltan para despertar, redondeando hacia arriba.
    0 si la fecha ya pasó; None si el negocio no está dormido.
    """
    until = parse_datetime(negocio.get("dormido_hasta"))
    if not negocio.get("dormido") or until is None:
        return None

    now = now or datetime.now(timezone.utc)
    if until <= now:
        return 0

    return math.ceil((until - now).total_seconds() / 86400)


def format_dormant_status(negocio: dict, now: datetime = None) -> str | None:
    days = dormant_days_remaining(negocio, now)
    if days is None:
        return None
    if days == 0:
        return "Hasta hoy"
    if days == 1:
        return "Hasta mañana"
    return f"Hasta dentro de {days} días"


# ─────────────────────────────────────────────
# Búsqueda y formato
# ─────────────────────────────────────────────
def search_negocios(negocios: list[dict], term: str) -> list[dict]:
    """Filtro local por texto libre sobre los datos de cliente, condominio, origen y notas."""
    if not term or not term.strip():
        return list(negocios)

    needle = term.strip().lower()
    return [
        n for n in negocios
        if any(needle in str(n.get(field) or "").lower() for field in SEARCH_FIELDS)
    ]


def format_compact_currency(amount: float) -> str:
    """$1.5 MDP, $850K, $900."""
    if not amount:
        return "$0"

    if amount >= 1_000_000:
        value = f"{amount / 1_000_000:.1f}".removesuffix(".0")
        return f"${value} MDP"

    if amount >= 1000:
        value = f"{amount / 1000:.1f}".removesuffix(".0")
        return f"${value}K"

    return f"${amount:,.0f}"


def format_property_type(property_type: str) -> str:
    if property_type == PropertyType.DEPARTAMENTO.value:
        return "Depa."
    return property_type[:1].upper() + property_type[1:]


# ─────────────────────────────────────────────
# Alta de negocios
# ─────────────────────────────────────────────
def new_negocio_defaults(asesor: str = "") -> dict:
    """Plantilla de un negocio nuevo creado a mano en el CRM."""
    return {
        "propiedad_id": "",
        "property_type": PropertyType.CASA.value,
        "condo_name": "",
        "transaction_type": TransactionType.VENTA.value,
        "price": 0,
        "comision": DEFAULT_COMISION,
        "estatus": NegocioStatus.PROPUESTA.value,
        "origen_texto": "",
        "origen_url": "",
        "asesor": asesor,
        "porcentaje_pizo": DEFAULT_PORCENTAJE_PIZO,
        "dormido": False,
        "nombre_completo": "",
        "telefono": "",
        "correo": "",
    }


async def create_negocio_from_form(data: dict, now: datetime = None) -> dict | None:
    """Crea un negocio desde el editor del CRM, completando valores por defecto."""
    payload = {**new_negocio_defaults(), **{k: v for k, v in data.items() if v is not None}}
    if payload.get("porcentaje_pizo") is None:
        payload["porcentaje_pizo"] = DEFAULT_PORCENTAJE_PIZO
    payload["fecha_creacion"] = (now or datetime.now(timezone.utc)).isoformat()
    return await create_negocio(payload)


async def create_negocio_from_contact(
    nombre_completo: str,
    telefono: str = None,
    correo: str = None,
    mensaje: str = None,
    origen_url: str = None,
    propiedad: dict = None,
    now: datetime = None,
) -> dict | None:
    """
    Alta de un lead desde el formulario público.
    Si viene de la ficha de una propiedad se copian sus datos al negocio.
    """
    data = {
        "nombre_completo": nombre_completo,
        "telefono": telefono or "",
        "correo": correo or "",
        "notas": mensaje or "",
        "origen_texto": "Formulario web",
        "origen_url": origen_url or "",
    }

    if propiedad:
        data.update({
            "propiedad_id": propiedad.get("id") or "",
            "property_type": propiedad.get("property_type") or PropertyType.CASA.value,
            "condo_name": propiedad.get("condo_name") or "",
            "transaction_type": propiedad.get("transaction_type") or TransactionType.VENTA.value,
            "price": propiedad.get("price") or 0,
            "asesor": propiedad.get("advisor") or "",
        })

    result = await create_negocio_from_form(data, now)
    if result:
        print(f"📥 Nuevo lead web: {nombre_completo} ({telefono or correo})")
    return result
