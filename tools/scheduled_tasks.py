"""
Tareas programadas con APScheduler.
Despierta negocios dormidos y refresca las reseñas de Google de los condominios.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from datetime import datetime
from config import SCHEDULER_TIMEZONE


# ─────────────────────────────────────────────
# Scheduler global
# ─────────────────────────────────────────────
scheduler = AsyncIOScheduler(timezone=SCHEDULER_TIMEZONE)


# ─────────────────────────────────────────────
# Job: Despertar negocios dormidos
# ─────────────────────────────────────────────
async def job_wake_dormant_negocios() -> int:
    """
    Regresa al pipeline los negocios cuyo periodo de dormido ya venció.
    Frecuencia: cada hora
    """
    from tools.database import get_expired_dormant_negocios
    from tools.crm import set_dormant

    print(f"🔄 [{datetime.now().strftime('%H:%M')}] Revisando negocios dormidos...")

    woken = 0
    try:
        for negocio in await get_expired_dormant_negocios():
            if await set_dormant(negocio["id"], 0):
                woken += 1
        print(f"✅ Negocios despertados: {woken}")
    except Exception as e:
        print(f"❌ Error despertando negocios: {e}")
    return woken


# ─────────────────────────────────────────────
# Job: Reseñas de condominios
# ─────────────────────────────────────────────
async def job_refresh_condo_reviews() -> int:
    """
    Descarga de nuevo las reseñas de Google de cada condominio.
    Frecuencia: 1 vez al día (04:00)
    """
    from tools.review_manager import refresh_all_condo_reviews

    print(f"⭐ [{datetime.now().strftime('%H:%M')}] Actualizando reseñas de condominios...")

    try:
        refreshed = await refresh_all_condo_reviews()
        print(f"✅ Reseñas: {refreshed} condominios actualizados")
        return refreshed
    except Exception as e:
        print(f"❌ Error actualizando reseñas: {e}")
        return 0


# ─────────────────────────────────────────────
# Configurar y arrancar scheduler
# ─────────────────────────────────────────────
def setup_scheduled_tasks():
    """Configura todos los jobs programados y arranca el scheduler."""

    # Dormidos: cada hora en punto
    scheduler.add_job(
        job_wake_dormant_negocios,
        CronTrigger(minute=0),
        id="wake_dormant",
        name="Despertar negocios dormidos",
        replace_existing=True,
    )

    # Reseñas: 04:00
    scheduler.add_job(
        job_refresh_condo_reviews,
        CronTrigger(hour=4, minute=0),
        id="condo_reviews",
        name="Reseñas de condominios",
        replace_existing=True,
    )

    scheduler.start()

    print("⏰ Tareas programadas configuradas:")
    print("  • Negocios dormidos: cada hora")
    print("  • Reseñas de condominios: 04:00")


def stop_scheduled_tasks():
    """Detiene el scheduler."""
    if scheduler.running:
        scheduler.shutdown()
        print("⏰ Tareas programadas detenidas")
