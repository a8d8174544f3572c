"""
Gestor de Propiedades.
Guardado del asistente de alta, formato comercial y mensaje para WhatsApp.
"""

from datetime import datetime, timezone
from urllib.parse import quote
from models.database_models import PropertyStatus, TransactionType
from tools.property_validation import ValidationResult, validate_wizard
from tools.crm import format_property_type
from tools.database import create_property, update_property


async def submit_wizard(
    data: dict,
    advisor_id: str,
    property_id: str = None,
    now: datetime = None,
) -> tuple[ValidationResult, dict | None]:
    """
    Valida el formulario completo y publica la propiedad.

    Returns:
        (resultado de validación, registro guardado). El registro es None si la
        validación falló o si Supabase no devolvió la fila.
    """
    validation = validate_wizard(data)
    if not validation.is_valid:
        return validation, None

    now = (now or datetime.now(timezone.utc)).isoformat()
    payload = {k: v for k, v in data.items() if k != "id"}
    payload["status"] = PropertyStatus.PUBLICADA.value
    payload["advisor"] = payload.get("advisor") or advisor_id

    if property_id:
        # Los contadores se incrementan aparte; no se pisan con el formulario
        for key in ("views", "whatsapp_clicks", "created_at", "updated_at"):
            payload.pop(key, None)
        saved = await update_property(property_id, payload)
    else:
        payload.update({
            "created_at": now,
            "publication_date": now,
            "views": 0,
            "whatsapp_clicks": 0,
        })
        saved = await create_property(payload)

    if saved:
        print(f"✅ Propiedad publicada: {saved.get('id')} ({payload.get('condo_name', '')})")
    else:
        print("❌ Error al guardar la propiedad")
    return validation, saved


def format_price(amount: float) -> str:
    """Precio en pesos mexicanos sin decimales: $1,250,000."""
    return f"${amount or 0:,.0f}"


def format_property_summary(prop: dict) -> str:
    """Resumen corto de una propiedad para compartir por WhatsApp."""
    operation = prop.get("transaction_type", TransactionType.VENTA.value)
    price = format_price(prop.get("price", 0))
    if operation == TransactionType.RENTA.value:
        price_text = f"💰 {price}/mes"
    else:
        price_text = f"💰 {price}"

    details = []
    if prop.get("bedrooms"):
        details.append(f"🛏️ {prop['bedrooms']} rec.")
    if prop.get("bathrooms"):
        details.append(f"🚿 {prop['bathrooms']:g} baños")
    if prop.get("construccion_m2"):
        details.append(f"📐 {prop['construccion_m2']:g} m²")
    if prop.get("parking_spots"):
        details.append(f"🚗 {prop['parking_spots']}")

    title = format_property_type(prop.get("property_type", "casa"))
    condo = prop.get("condo_name")
    lines = [f"🏠 *{title} en {condo}*" if condo else f"🏠 *{title}*", price_text]
    if details:
        lines.append(" · ".join(details))

    if operation in (TransactionType.RENTA.value, TransactionType.VENTA_RENTA.value):
        extras = []
        if prop.get("furnished"):
            extras.append("Amueblada")
        if prop.get("pets_allowed"):
            extras.append("Acepta mascotas")
        if prop.get("maintenance_included"):
            extras.append("Mantenimiento incluido")
        if extras:
            lines.append(f"✨ {' · '.join(extras)}")

    return "\n".join(lines)


def whatsapp_link(phone: str, prop: dict, property_url: str = "") -> str:
    """Enlace wa.me con el mensaje prellenado sobre la propiedad."""
    message = f"Hola, me interesa esta propiedad:\n{format_property_summary(prop)}"
    if property_url:
        message += f"\n{property_url}"
    digits = "".join(ch for ch in phone or "" if ch.isdigit())
    return f"https://wa.me/{digits}?text={quote(message)}"
