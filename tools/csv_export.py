"""
Exportación del CRM a CSV (Leads_CRM_YYYY-MM-DD.csv).
Los valores salen sin acentos ni caracteres fuera de ASCII.
"""

import unicodedata
from datetime import date
from tools.crm import parse_datetime


CSV_HEADERS = [
    "ID",
    "Tipo de Propiedad",
    "Condominio",
    "Tipo de Transaccion",
    "Precio",
    "Comision (%)",
    "Asesor Aliado",
    "Porcentaje Pizo (%)",
    "Estatus",
    "Fecha Creacion",
    "Fecha Cierre",
    "Dormido",
    "Dormido Hasta",
    "Notas",
    "Origen Texto",
    "Origen URL",
    "Asesor",
    "Nombre Cliente",
    "Telefono Cliente",
    "Correo Cliente",
]

STATUS_LABELS = {
    "evaluación": "evaluacion",
    "comercialización": "comercializacion",
}


def clean_text(value) -> str:
    """Quita acentos y cualquier carácter no ASCII."""
    if value is None:
        return ""
    normalized = unicodedata.normalize("NFD", str(value))
    return normalized.encode("ascii", "ignore").decode("ascii")


def escape_cell(value) -> str:
    text = clean_text(value)
    if any(ch in text for ch in (",", '"', "\n")):
        return '"' + text.replace('"', '""') + '"'
    return text


def format_date(value) -> str:
    dt = parse_datetime(value)
    return dt.strftime("%d/%m/%Y") if dt else ""


def _number(value) -> str:
    if value is None or value == "":
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def negocio_row(negocio: dict) -> list[str]:
    estatus = negocio.get("estatus") or ""
    row = [
        negocio.get("id"),
        negocio.get("property_type"),
        negocio.get("condo_name"),
        negocio.get("transaction_type"),
        _number(negocio.get("price")),
        _number(negocio.get("comision")),
        negocio.get("asesor_aliado"),
        _number(negocio.get("porcentaje_pizo")),
        STATUS_LABELS.get(estatus, estatus),
        format_date(negocio.get("fecha_creacion")),
        format_date(negocio.get("fecha_cierre")),
        "Si" if negocio.get("dormido") else "No",
        format_date(negocio.get("dormido_hasta")),
        negocio.get("notas"),
        negocio.get("origen_texto"),
        negocio.get("origen_url"),
        negocio.get("asesor"),
        negocio.get("nombre_completo"),
        negocio.get("telefono"),
        negocio.get("correo"),
    ]
    return [escape_cell(v) for v in row]


def export_negocios_csv(negocios: list[dict]) -> str:
    lines = [",".join(CSV_HEADERS)]
    lines.extend(",".join(negocio_row(n)) for n in negocios)
    return "\n".join(lines)


def export_filename(today: date = None) -> str:
    return f"Leads_CRM_{(today or date.today()).isoformat()}.csv"
