"""
Indicadores del panel lateral del CRM.
"""

from config import DEFAULT_PORCENTAJE_PIZO
from models.database_models import NegocioStatus, TransactionType
from tools.crm import PIPELINE_COLUMNS


def potential_commission(negocio: dict) -> float:
    """Comisión de Pizo: precio × comisión% × porcentaje Pizo% (0 o vacío cuenta como 50)."""
    price = negocio.get("price") or 0
    comision = negocio.get("comision") or 0
    porcentaje_pizo = negocio.get("porcentaje_pizo") or DEFAULT_PORCENTAJE_PIZO
    return price * comision / 100 * porcentaje_pizo / 100


def calculate_kpis(negocios: list[dict]) -> dict:
    """Resumen de los negocios cargados (los cancelados no suman comisión)."""
    vigentes = [n for n in negocios if n.get("estatus") != NegocioStatus.CANCELADA.value]

    by_transaction = {t.value: 0 for t in TransactionType}
    for n in negocios:
        t = n.get("transaction_type")
        if t in by_transaction:
            by_transaction[t] += 1

    # Las columnas del pipeline siempre aparecen; otros estatus se cuentan tal cual
    by_status = {status.value: 0 for status, _ in PIPELINE_COLUMNS}
    for n in negocios:
        s = n.get("estatus")
        if s:
            by_status[s] = by_status.get(s, 0) + 1

    dormant = sum(1 for n in negocios if n.get("dormido"))

    return {
        "total": len(negocios),
        "active": len(negocios) - dormant,
        "dormant": dormant,
        "by_transaction_type": by_transaction,
        "by_status": by_status,
        "total_value": sum(n.get("price") or 0 for n in negocios),
        "potential_commission": round(sum(potential_commission(n) for n in vigentes), 2),
    }
