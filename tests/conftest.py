"""
Pytest fixtures para el backend de Pizo.
Supabase nunca se contacta: los accesores se parchean en cada test.
"""
import os
import sys
from datetime import datetime, timezone

import pytest

# Raíz del proyecto en el path (layout plano: main, config, tools/, routers/)
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

os.environ.setdefault("DEBUG", "true")


# ============================================================
# Fechas
# ============================================================

@pytest.fixture
def now():
    """Instante fijo para cálculos de dormido."""
    return datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)


# ============================================================
# Registros de ejemplo
# ============================================================

@pytest.fixture
def negocios():
    """Negocios en distintas columnas del pipeline."""
    return [
        {
            "id": "n1",
            "estatus": "propuesta",
            "property_type": "casa",
            "transaction_type": "venta",
            "condo_name": "Altozano",
            "price": 3_500_000,
            "comision": 5,
            "porcentaje_pizo": 50,
            "nombre_completo": "María López",
            "telefono": "4421234567",
            "correo": "maria@example.com",
            "dormido": False,
        },
        {
            "id": "n2",
            "estatus": "evaluación",
            "property_type": "departamento",
            "transaction_type": "renta",
            "condo_name": "Zibatá Norte",
            "price": 18_000,
            "comision": 100,
            "porcentaje_pizo": None,
            "nombre_completo": "José Pérez",
            "notas": "Busca con roof garden",
            "dormido": True,
            "dormido_hasta": "2024-05-12T12:00:00+00:00",
        },
        {
            "id": "n3",
            "estatus": "cancelada",
            "property_type": "terreno",
            "transaction_type": "venta",
            "price": 1_000_000,
            "comision": 5,
            "porcentaje_pizo": 50,
            "dormido": False,
        },
        {
            "id": "n4",
            "estatus": "form",
            "property_type": "casa",
            "transaction_type": "ventaRenta",
            "price": 2_000_000,
            "comision": 4,
            "porcentaje_pizo": 40,
            "dormido": False,
        },
    ]


@pytest.fixture
def valid_property():
    """Formulario completo de una casa en renta que pasa todas las validaciones."""
    return {
        "property_type": "casa",
        "transaction_type": "renta",
        "price": 25_000,
        "zone": "z1",
        "condo": "c1",
        "condo_name": "Altozano",
        "maintenance_included": True,
        "maintenance_cost": 0,
        "services_included": False,
        "construccion_m2": 180,
        "bedrooms": 3,
        "bathrooms": 2.5,
        "parking_spots": 2,
        "image_urls": ["https://cdn.example.com/1.jpg"],
    }
