"""
Validación del asistente de alta de propiedades.
Cada paso es una función pura: estado del formulario → errores por campo.
"""

from datetime import datetime, timezone
from pydantic import BaseModel, Field
from config import MIN_PROPERTY_PRICE
from models.database_models import TransactionType


WIZARD_STEPS = [
    {"id": "type", "label": "Tipo"},
    {"id": "details", "label": "Detalles"},
    {"id": "photos", "label": "Fotos"},
    {"id": "review", "label": "Revisión"},
]

RENTAL_TYPES = (TransactionType.RENTA.value, TransactionType.VENTA_RENTA.value)

SERVICE_FIELDS = (
    "includes_wifi",
    "includes_water",
    "includes_gas",
    "includes_electricity",
)


class ValidationResult(BaseModel):
    errors: dict[str, str] = Field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def first_error(self) -> str | None:
        """Primer mensaje específico, o None si todo es válido."""
        return next(iter(self.errors.values()), None)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        for key, message in other.errors.items():
            self.errors.setdefault(key, message)
        return self


def initial_form_data() -> dict:
    """Estado inicial del asistente para una propiedad nueva."""
    return {
        "property_type": "casa",
        "transaction_type": TransactionType.RENTA.value,
        "price": 0,
        "bathrooms": 1,
        "bedrooms": 1,
        "furnished": False,
        "zone": "",
        "condo": "",
        "condo_name": "",
        "publication_date": datetime.now(timezone.utc).isoformat(),
        "image_urls": [],
        "construction_year": None,
        "maintenance_cost": 0,
        "maintenance_included": True,
        "services_included": False,
        "includes_wifi": False,
        "includes_water": False,
        "includes_gas": False,
        "includes_electricity": False,
        "pets_allowed": False,
        "status": "borrador",
        "parking_spots": 1,
        "advisor": "",
        "views": 0,
        "whatsapp_clicks": 0,
        "descripcion": "",
        "cuarto_estudio": False,
        "cuarto_lavado": False,
        "balcon": False,
        "jardin": False,
        "roof_garden": False,
        "bodega": False,
        "calentador_agua": False,
        "cocina_equipada": False,
        "contrato_minimo": 12,
        "deposito_renta": 1,
        "estado_conservacion": "como_nuevo",
        "tipo_gas": "estacionario",
    }


# ─────────────────────────────────────────────
# Reglas
# ─────────────────────────────────────────────
def is_valid_price(price) -> bool:
    return bool(price) and price >= MIN_PROPERTY_PRICE


def services_selection_valid(data: dict) -> bool:
    """Si los servicios están incluidos debe marcarse al menos uno."""
    if not data.get("services_included"):
        return True
    return any(data.get(f) for f in SERVICE_FIELDS)


def validate_type_step(data: dict) -> ValidationResult:
    result = ValidationResult()

    price = data.get("price")
    if not price:
        result.errors["price"] = "El precio es requerido"
    elif price < MIN_PROPERTY_PRICE:
        result.errors["price"] = "El precio debe ser mayor a $1,000"

    if not data.get("zone"):
        result.errors["zone"] = "La zona es requerida"
    elif not data.get("condo"):
        result.errors["condo"] = "El condominio es requerido"

    if data.get("transaction_type") in RENTAL_TYPES:
        if not data.get("maintenance_included") and (data.get("maintenance_cost") or 0) <= 0:
            result.errors["maintenance_cost"] = (
                "Debe especificar un costo de mantenimiento mayor a 0"
            )
        if not services_selection_valid(data):
            result.errors["services"] = "Debe seleccionar al menos un servicio incluido"

    return result


def validate_details_step(data: dict) -> ValidationResult:
    result = ValidationResult()
    if not data.get("construccion_m2") or data["construccion_m2"] <= 0:
        result.errors["construccion_m2"] = "Los metros de construcción son requeridos"
    return result


def validate_photos_step(data: dict) -> ValidationResult:
    result = ValidationResult()
    if not data.get("image_urls"):
        result.errors["image_urls"] = "Debe subir al menos una foto"
    return result


STEP_VALIDATORS = {
    "type": validate_type_step,
    "details": validate_details_step,
    "photos": validate_photos_step,
}


def validate_step(step: str, data: dict) -> ValidationResult:
    """Valida un paso por id. El paso de revisión no tiene reglas propias."""
    if step == "review":
        return ValidationResult()
    validator = STEP_VALIDATORS.get(step)
    if validator is None:
        raise ValueError(f"Paso desconocido: {step}")
    return validator(data)


def validate_wizard(data: dict) -> ValidationResult:
    """Todas las reglas, en el orden de los pasos."""
    result = ValidationResult()
    for validator in STEP_VALIDATORS.values():
        result.merge(validator(data))
    return result


# ─────────────────────────────────────────────
# Efectos de cambiar campos clave
# ─────────────────────────────────────────────
def transaction_type_change(transaction_type: str) -> dict:
    """Campos a sobrescribir cuando cambia el tipo de operación."""
    if transaction_type == TransactionType.VENTA.value:
        return {
            "transaction_type": transaction_type,
            "furnished": False,
            "pets_allowed": False,
            "services_included": False,
            "includes_wifi": False,
            "includes_water": False,
            "includes_gas": False,
            "includes_electricity": False,
            "maintenance_included": False,
            "maintenance_cost": 0,
            "deposito_renta": 0,
            "contrato_minimo": 0,
        }
    if transaction_type in RENTAL_TYPES:
        return {
            "transaction_type": transaction_type,
            "furnished": False,
            "pets_allowed": False,
            "services_included": False,
            "deposito_renta": 1,
            "contrato_minimo": 12,
        }
    raise ValueError(f"Tipo de operación desconocido: {transaction_type}")


def zone_change(zone_id: str) -> dict:
    """Al cambiar de zona se limpia el condominio elegido."""
    return {"zone": zone_id, "condo": "", "condo_name": ""}
