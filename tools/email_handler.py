"""
Handler de Email.
Integración con SendGrid para avisar al equipo comercial de nuevos leads.

Docs: https://docs.sendgrid.com/api-reference
"""

import httpx
from config import SENDGRID_API_KEY, SENDGRID_FROM_EMAIL, TEAM_EMAIL, COMPANY_NAME, SITE_URL
from tools.crm import format_compact_currency, format_property_type


SENDGRID_API_URL = "https://api.sendgrid.com/v3"


# ─────────────────────────────────────────────
# Enviar emails
# ─────────────────────────────────────────────
async def send_email(
    to_email: str,
    subject: str,
    body_text: str,
    body_html: str = None,
) -> dict:
    """
    Envía un email vía SendGrid.

    Args:
        to_email: Email del destinatario
        subject: Asunto del email
        body_text: Cuerpo en texto plano
        body_html: Cuerpo en HTML (opcional, si no se pasa se genera del texto)

    Returns:
        Respuesta de SendGrid
    """
    if not body_html:
        body_html = _text_to_html(body_text)

    payload = {
        "personalizations": [
            {
                "to": [{"email": to_email}],
                "subject": subject,
            }
        ],
        "from": {
            "email": SENDGRID_FROM_EMAIL,
            "name": COMPANY_NAME,
        },
        "content": [
            {"type": "text/plain", "value": body_text},
            {"type": "text/html", "value": body_html},
        ],
    }

    headers = {
        "Authorization": f"Bearer {SENDGRID_API_KEY}",
        "Content-Type": "application/json",
    }

    async with httpx.AsyncClient() as client:
        response = await client.post(
            f"{SENDGRID_API_URL}/mail/send",
            json=payload,
            headers=headers,
        )
        response.raise_for_status()
        print(f"📧 Email enviado a {to_email}: {subject}")
        return {"status": "sent", "to": to_email}


async def notify_team_new_lead(negocio: dict, propiedad: dict = None) -> dict | None:
    """
    Avisa al equipo de un lead que llegó por el formulario web.
    Si el aviso falla el lead ya está guardado, así que solo se registra.
    """
    if not TEAM_EMAIL or not SENDGRID_API_KEY:
        print("⚠️ Email del equipo no configurado, se omite el aviso")
        return None

    nombre = negocio.get("nombre_completo") or "Sin nombre"
    lines = [
        "Nuevo lead desde el sitio web.",
        "",
        f"Nombre: {nombre}",
        f"Teléfono: {negocio.get('telefono') or '-'}",
        f"Correo: {negocio.get('correo') or '-'}",
    ]
    if negocio.get("notas"):
        lines += ["", f"Mensaje: {negocio['notas']}"]
    if propiedad:
        lines += [
            "",
            f"Propiedad: {format_property_type(propiedad.get('property_type', ''))} "
            f"en {propiedad.get('condo_name') or 'N/A'} "
            f"({format_compact_currency(propiedad.get('price') or 0)})",
            f"{SITE_URL}/propiedad/{propiedad.get('id')}",
        ]
    if negocio.get("origen_url"):
        lines += [f"Origen: {negocio['origen_url']}"]

    try:
        return await send_email(
            to_email=TEAM_EMAIL,
            subject=f"📥 Nuevo lead: {nombre}",
            body_text="\n".join(lines),
        )
    except Exception as e:
        print(f"⚠️ Error avisando al equipo del nuevo lead: {e}")
        return None


# ─────────────────────────────────────────────
# Utilidades
# ─────────────────────────────────────────────
def _text_to_html(text: str) -> str:
    """Convierte texto plano a HTML básico."""
    lines = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    paragraphs = lines.split("\n\n")
    html_parts = []
    for p in paragraphs:
        p = p.replace("\n", "<br>")
        html_parts.append(f"<p>{p}</p>")

    return f"""
    <div style="font-family:Arial,sans-serif; max-width:600px; margin:0 auto; padding:20px;">
        <div style="background:#7c3aed; color:white; padding:16px; border-radius:8px 8px 0 0;">
            <strong>🏠 {COMPANY_NAME}</strong>
        </div>
        <div style="padding:16px; background:#f9f9f9; border-radius:0 0 8px 8px;">
            {"".join(html_parts)}
        </div>
    </div>
    """
