"""
Modelos de datos Pydantic para las tablas de Pizo en Supabase.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


# ─────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────
class NegocioStatus(str, Enum):
    PROPUESTA = "propuesta"
    EVALUACION = "evaluación"
    COMERCIALIZACION = "comercialización"
    CONGELADORA = "congeladora"
    CERRADA = "cerrada"
    CANCELADA = "cancelada"


class TransactionType(str, Enum):
    RENTA = "renta"
    VENTA = "venta"
    VENTA_RENTA = "ventaRenta"


class PropertyType(str, Enum):
    CASA = "casa"
    DEPARTAMENTO = "departamento"
    TERRENO = "terreno"
    LOCAL = "local"


class PropertyStatus(str, Enum):
    BORRADOR = "borrador"
    PUBLICADA = "publicada"
    EN_CIERRE = "en_cierre"
    VENDIDA = "vendida"
    DESCARTADA = "descartada"


class EstadoConservacion(str, Enum):
    NUEVO = "nuevo"
    COMO_NUEVO = "como_nuevo"
    REMODELADO = "remodelado"
    ACEPTABLE = "aceptable"
    REQUIERE_REPARACIONES = "requiere_reparaciones"


class TipoGas(str, Enum):
    ESTACIONARIO = "estacionario"
    NATURAL = "natural"


class CondoStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PolicyType(str, Enum):
    KANUN = "kanun"
    ELEMENTAL = "elemental"


# ─────────────────────────────────────────────
# CRM
# ─────────────────────────────────────────────
class Negocio(BaseModel):
    """Lead del pipeline comercial (negocio)."""
    id: Optional[str] = None
    propiedad_id: Optional[str] = None
    property_type: Optional[str] = PropertyType.CASA.value
    condo_name: Optional[str] = None
    transaction_type: Optional[str] = TransactionType.VENTA.value
    price: Optional[float] = 0
    comision: Optional[float] = 5
    porcentaje_pizo: Optional[float] = 50
    asesor: Optional[str] = None
    asesor_aliado: Optional[str] = None
    # Texto libre: un estatus desconocido se conserva tal cual
    estatus: Optional[str] = NegocioStatus.PROPUESTA.value
    nombre_completo: Optional[str] = None
    telefono: Optional[str] = None
    correo: Optional[str] = None
    notas: Optional[str] = None
    origen_texto: Optional[str] = None
    origen_url: Optional[str] = None
    dormido: Optional[bool] = False
    dormido_hasta: Optional[datetime] = None
    fecha_creacion: Optional[datetime] = None
    fecha_cierre: Optional[datetime] = None


class NegocioCreate(BaseModel):
    propiedad_id: Optional[str] = None
    property_type: PropertyType = PropertyType.CASA
    condo_name: Optional[str] = None
    transaction_type: TransactionType = TransactionType.VENTA
    price: float = Field(default=0, ge=0)
    comision: float = Field(default=5, ge=0, le=100)
    porcentaje_pizo: float = Field(default=50, ge=0, le=100)
    asesor: Optional[str] = None
    asesor_aliado: Optional[str] = None
    estatus: NegocioStatus = NegocioStatus.PROPUESTA
    nombre_completo: Optional[str] = None
    telefono: Optional[str] = None
    correo: Optional[str] = None
    notas: Optional[str] = None
    origen_texto: Optional[str] = None
    origen_url: Optional[str] = None


class NegocioUpdate(BaseModel):
    """Edición parcial desde el editor de campos."""
    propiedad_id: Optional[str] = None
    property_type: Optional[PropertyType] = None
    condo_name: Optional[str] = None
    transaction_type: Optional[TransactionType] = None
    price: Optional[float] = Field(default=None, ge=0)
    comision: Optional[float] = Field(default=None, ge=0, le=100)
    porcentaje_pizo: Optional[float] = Field(default=None, ge=0, le=100)
    asesor: Optional[str] = None
    asesor_aliado: Optional[str] = None
    estatus: Optional[NegocioStatus] = None
    nombre_completo: Optional[str] = None
    telefono: Optional[str] = None
    correo: Optional[str] = None
    notas: Optional[str] = None
    origen_texto: Optional[str] = None
    origen_url: Optional[str] = None


class StatusChange(BaseModel):
    estatus: str


class DormantRequest(BaseModel):
    days: int = Field(ge=0)   # 0 = despertar


class ContactRequest(BaseModel):
    """Formulario de contacto público (web o ficha de propiedad)."""
    nombre_completo: str
    telefono: Optional[str] = None
    correo: Optional[str] = None
    mensaje: Optional[str] = None
    propiedad_id: Optional[str] = None
    origen_url: Optional[str] = None


# ─────────────────────────────────────────────
# Propiedades
# ─────────────────────────────────────────────
class Property(BaseModel):
    """Modelo de un inmueble publicado por un asesor."""
    id: Optional[str] = None
    advisor: str = ""
    zone: str = ""
    condo: str = ""
    condo_name: str = ""
    image_urls: list[str] = Field(default_factory=list)
    property_type: PropertyType = PropertyType.CASA
    transaction_type: TransactionType = TransactionType.RENTA
    price: float = 0
    descripcion: str = ""
    status: PropertyStatus = PropertyStatus.BORRADOR
    bedrooms: int = 1
    bathrooms: float = 1
    parking_spots: int = 1
    construction_year: Optional[int] = None
    construccion_m2: Optional[float] = None
    cuarto_estudio: bool = False
    cuarto_lavado: bool = False
    niveles_casa: Optional[int] = None
    piso_depto: Optional[int] = None
    balcon: bool = False
    jardin: bool = False
    roof_garden: bool = False
    bodega: bool = False
    estado_conservacion: Optional[EstadoConservacion] = EstadoConservacion.COMO_NUEVO
    calentador_agua: bool = False
    tipo_gas: Optional[TipoGas] = TipoGas.ESTACIONARIO
    cocina_equipada: bool = False
    # Renta
    maintenance_cost: Optional[float] = 0
    maintenance_included: bool = True
    furnished: bool = False
    services_included: bool = False
    includes_wifi: bool = False
    includes_water: bool = False
    includes_gas: bool = False
    includes_electricity: bool = False
    pets_allowed: bool = False
    contrato_minimo: Optional[int] = 12
    deposito_renta: Optional[int] = 1
    # Estadísticas
    views: int = 0
    whatsapp_clicks: int = 0
    created_at: Optional[datetime] = None
    publication_date: Optional[datetime] = None


# ─────────────────────────────────────────────
# Zonas y condominios
# ─────────────────────────────────────────────
class Review(BaseModel):
    """Reseña (de Google o capturada manualmente)."""
    id: Optional[str] = None
    author_name: str
    rating: int = Field(ge=0, le=5)
    text: str = ""
    profile_photo_url: Optional[str] = None
    time: int = 0                 # epoch en milisegundos
    relative_time_description: str = ""
    custom_date: Optional[datetime] = None


class PlaceDetails(BaseModel):
    name: str = ""
    formatted_address: str = ""
    website: Optional[str] = None
    photos: list[str] = Field(default_factory=list)


class Zone(BaseModel):
    id: Optional[str] = None
    name: str
    short_description: Optional[str] = None
    long_description: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None


class Condo(BaseModel):
    id: Optional[str] = None
    name: str
    zone_id: str
    zone_name: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    polygon_id: Optional[str] = None
    slug: Optional[str] = None
    rent_price_min: Optional[float] = None
    rent_price_avg: Optional[float] = None
    rent_price_max: Optional[float] = None
    sale_price_min: Optional[float] = None
    sale_price_avg: Optional[float] = None
    sale_price_max: Optional[float] = None
    status: CondoStatus = CondoStatus.ACTIVE
    amenities: list[str] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list)
    logo_url: Optional[str] = None
    portada: Optional[str] = None
    google_place_id: Optional[str] = None
    google_rating: Optional[float] = None
    total_ratings: Optional[int] = None
    filtered_rating_count: Optional[int] = None
    cached_reviews: list[Review] = Field(default_factory=list)
    manual_reviews: list[Review] = Field(default_factory=list)
    selected_google_reviews: list[str] = Field(default_factory=list)
    place_details: Optional[PlaceDetails] = None
    reviews_last_updated: Optional[datetime] = None
    image_amenity_tags: dict[str, list[str]] = Field(default_factory=dict)
    street_view_image: Optional[str] = None
    street_view_link: Optional[str] = None
    created_at: Optional[datetime] = None


# ─────────────────────────────────────────────
# Blog
# ─────────────────────────────────────────────
class BlogPost(BaseModel):
    id: Optional[str] = None
    title: str
    content: str = ""             # HTML enriquecido
    author: str = ""
    contributor_id: Optional[str] = None
    cover_image: str = ""
    tags: list[str] = Field(default_factory=list)
    publish_date: Optional[str] = None
    published: bool = False
    seo_title: Optional[str] = None
    slug: Optional[str] = None
    summary: Optional[str] = None
    meta_description: Optional[str] = None
    key_phrases: list[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class BlogContributor(BaseModel):
    id: Optional[str] = None
    name: str
    email: str = ""
    bio: str = ""
    photo: Optional[str] = None
    active: bool = True
    social_media: dict[str, str] = Field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ─────────────────────────────────────────────
# Asesores
# ─────────────────────────────────────────────
class Advisor(BaseModel):
    """Perfil de asesor vinculado a un usuario de Supabase Auth."""
    id: Optional[str] = None
    user_id: Optional[str] = None
    name: str = ""
    email: str = ""
    phone: str = ""
    bio: str = ""
    photo: Optional[str] = None
    verified: bool = False
    social_media: dict[str, str] = Field(default_factory=dict)
