"""
Configuración centralizada del backend de Pizo.
Carga variables de entorno y define constantes del negocio.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ─────────────────────────────────────────────
# Supabase (Database + Storage)
# ─────────────────────────────────────────────
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")
SUPABASE_STORAGE_BUCKET = os.getenv("SUPABASE_STORAGE_BUCKET", "imagenes")


# ─────────────────────────────────────────────
# Google Places (reseñas de condominios)
# ─────────────────────────────────────────────
GOOGLE_PLACES_API_KEY = os.getenv("GOOGLE_PLACES_API_KEY", "")


# ─────────────────────────────────────────────
# SendGrid (Email)
# ─────────────────────────────────────────────
SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY", "")
SENDGRID_FROM_EMAIL = os.getenv("SENDGRID_FROM_EMAIL", "")
TEAM_EMAIL = os.getenv("TEAM_EMAIL", "")  # Email del equipo comercial


# ─────────────────────────────────────────────
# App Settings
# ─────────────────────────────────────────────
SITE_URL = os.getenv("SITE_URL", "https://pizo.mx")
DEBUG = os.getenv("DEBUG", "true").lower() == "true"
COMPANY_NAME = os.getenv("COMPANY_NAME", "Pizo")
SCHEDULER_TIMEZONE = os.getenv("SCHEDULER_TIMEZONE", "America/Mexico_City")


# ─────────────────────────────────────────────
# Propiedades
# ─────────────────────────────────────────────
MIN_PROPERTY_PRICE = 1000
MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10MB
SIMILAR_PROPERTIES_LIMIT = 4
SIMILAR_PRICE_TOLERANCE = 0.30      # ±30% para considerar precios similares


# ─────────────────────────────────────────────
# CRM (negocios)
# ─────────────────────────────────────────────
DEFAULT_COMISION = 5           # % de comisión sobre el precio
DEFAULT_PORCENTAJE_PIZO = 50   # % de la comisión que corresponde a Pizo
CRM_ASESORES = [
    a.strip() for a in os.getenv("CRM_ASESORES", "Guille,Andres,Adri").split(",") if a.strip()
]


# ─────────────────────────────────────────────
# Blog
# ─────────────────────────────────────────────
BLOG_POSTS_PER_PAGE = 9
