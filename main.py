"""
Pizo: marketplace inmobiliario
Entry point de la aplicación FastAPI.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from config import DEBUG, COMPANY_NAME
from routers import properties, crm, zones, blog, advisors, zibata_map, contact, seo
from tools.scheduled_tasks import setup_scheduled_tasks, stop_scheduled_tasks


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Eventos de startup y shutdown."""
    print(f"🏠 Backend de {COMPANY_NAME} iniciado")
    print(f"📡 Modo: {'DEBUG' if DEBUG else 'PRODUCCIÓN'}")

    # Arrancar tareas programadas
    if not DEBUG:
        setup_scheduled_tasks()
    else:
        print("⏰ Tareas programadas desactivadas en modo DEBUG")

    yield

    # Detener tareas programadas
    stop_scheduled_tasks()
    print("👋 Backend detenido")


app = FastAPI(
    title=f"{COMPANY_NAME} API",
    description="Propiedades, CRM de negocios, zonas y blog del marketplace inmobiliario",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Routers ───
app.include_router(properties.router, prefix="/api/propiedades", tags=["Propiedades"])
app.include_router(crm.router, prefix="/api/crm", tags=["CRM"])
app.include_router(zones.router, prefix="/api/zonas", tags=["Zonas"])
app.include_router(blog.router, prefix="/api/blog", tags=["Blog"])
app.include_router(advisors.router, prefix="/api/asesores", tags=["Asesores"])
app.include_router(zibata_map.router, prefix="/api/mapa", tags=["Mapa"])
app.include_router(contact.router, prefix="/api/contacto", tags=["Contacto"])
app.include_router(seo.router, tags=["SEO"])


# ─── Health Check ───
@app.get("/")
async def root():
    return {
        "status": "online",
        "service": COMPANY_NAME,
        "message": f"🏠 API de {COMPANY_NAME} funcionando",
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}
