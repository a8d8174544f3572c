"""
Cotizador de pólizas jurídicas de arrendamiento (Kanun y Elemental).
"""

from models.database_models import PolicyType


# (renta mínima, renta máxima, costo kanun, costo elemental)
POLICY_TABLE = [
    (3000, 3999, 1400, 1150),
    (4000, 4999, 1800, 1500),
    (5000, 5999, 2200, 1800),
    (6000, 6999, 2600, 2150),
    (7000, 7999, 3000, 2400),
    (8000, 9999, 3200, 2800),
    (10000, 14999, 4000, 3160),
    (15000, 19999, 5250, 3600),
    (20000, 24999, 7600, 4300),
    (25000, 29999, 9650, 5400),
    (30000, 34999, 10400, 6500),
    (35000, 39999, 13350, 7500),
    (40000, 44999, 15100, 8900),
    (45000, 49999, 17900, 10000),
    (50000, 54999, 20000, 11000),
    (55000, 59999, 22400, 12000),
]

# Arriba de la tabla se cobra un porcentaje de la renta
HIGH_RENT_THRESHOLD = 60000
HIGH_RENT_RATES = {
    PolicyType.KANUN: 0.30,
    PolicyType.ELEMENTAL: 0.20,
}

DEFAULT_DISCOUNT = 35


def calculate_policy_cost(rent: float, policy_type: str = PolicyType.ELEMENTAL.value) -> float:
    """
    Costo de la póliza para una renta mensual.

    Raises:
        ValueError: renta <= 0 o tipo de póliza desconocido
    """
    if rent <= 0:
        raise ValueError("La renta debe ser mayor a 0")
    kind = PolicyType(policy_type)

    if rent >= HIGH_RENT_THRESHOLD:
        return round(rent * HIGH_RENT_RATES[kind], 2)

    for min_rent, max_rent, kanun, elemental in POLICY_TABLE:
        if min_rent <= rent <= max_rent:
            return kanun if kind == PolicyType.KANUN else elemental

    # Rentas menores al primer rango, o con centavos entre dos rangos
    row = POLICY_TABLE[0]
    for candidate in POLICY_TABLE:
        if candidate[0] <= rent:
            row = candidate
    return row[2] if kind == PolicyType.KANUN else row[3]


def calculate_discounted_policy_cost(
    rent: float,
    policy_type: str = PolicyType.ELEMENTAL.value,
    discount_percentage: float = DEFAULT_DISCOUNT,
) -> float:
    cost = calculate_policy_cost(rent, policy_type)
    return round(cost * (1 - discount_percentage / 100), 2)


def quote(rent: float, discount_percentage: float = DEFAULT_DISCOUNT) -> dict:
    """Cotización de ambas pólizas, con y sin descuento."""
    return {
        kind.value: {
            "cost": calculate_policy_cost(rent, kind.value),
            "discounted_cost": calculate_discounted_policy_cost(rent, kind.value, discount_percentage),
        }
        for kind in PolicyType
    }
