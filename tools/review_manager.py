"""
Gestor de Reseñas de condominios (Google Places API v1).
Descarga, filtra y cachea las reseñas de cada condominio en Supabase.

Docs: https://developers.google.com/maps/documentation/places/web-service/place-details
"""

import httpx
from datetime import datetime, timezone
from urllib.parse import quote
from config import GOOGLE_PLACES_API_KEY
from tools.database import get_condo_by_id, get_all_condos, update_condo


# ─────────────────────────────────────────────
# Configuración
# ─────────────────────────────────────────────
PLACES_API_URL = "https://places.googleapis.com/v1"
PLACES_FIELD_MASK = (
    "displayName,formattedAddress,rating,userRatingCount,websiteUri,photos,reviews"
)
PHOTO_MAX_HEIGHT = 800
MIN_GOOD_RATING = 4
AVATAR_FALLBACK_URL = "https://ui-avatars.com/api/?name={name}&background=random"


# ─────────────────────────────────────────────
# Google Places
# ─────────────────────────────────────────────
async def fetch_place_details(place_id: str, api_key: str = None) -> dict | None:
    """
    Descarga los detalles y reseñas de un lugar.

    Returns:
        Dict con rating, user_ratings_total, reviews, filteredCount y
        place_details, o None si falla la petición.
    """
    api_key = api_key or GOOGLE_PLACES_API_KEY
    if not api_key:
        print("⚠️ GOOGLE_PLACES_API_KEY no configurada")
        return None

    url = f"{PLACES_API_URL}/places/{place_id}"
    headers = {
        "X-Goog-Api-Key": api_key,
        "X-Goog-FieldMask": PLACES_FIELD_MASK,
    }

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(
                url,
                headers=headers,
                params={"languageCode": "es"},
            )
            response.raise_for_status()
            data = response.json()
    except Exception as e:
        print(f"❌ Error consultando Google Places ({place_id}): {e}")
        return None

    return build_place_result(data, api_key)


def build_place_result(data: dict, api_key: str) -> dict:
    reviews = process_reviews(data.get("reviews") or [])
    return {
        "rating": data.get("rating"),
        "user_ratings_total": data.get("userRatingCount"),
        "reviews": reviews,
        "filteredCount": len(reviews),
        "place_details": {
            "name": (data.get("displayName") or {}).get("text", ""),
            "formatted_address": data.get("formattedAddress", ""),
            "website": data.get("websiteUri"),
            "photos": [photo_url(p, api_key) for p in data.get("photos") or [] if p.get("name")],
        },
    }


def photo_url(photo: dict, api_key: str) -> str:
    return (
        f"{PLACES_API_URL}/{photo['name']}/media"
        f"?key={api_key}&maxHeightPx={PHOTO_MAX_HEIGHT}"
    )


def _publish_time_ms(value: str | None) -> int:
    if not value:
        return 0
    try:
        return int(datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp() * 1000)
    except ValueError:
        return 0


def process_review(raw: dict) -> dict:
    """Convierte una reseña de Places v1 al formato guardado en el condominio."""
    author = (raw.get("authorAttribution") or {}).get("displayName") or "Anónimo"
    text = raw.get("text")
    if isinstance(text, dict):
        text = text.get("text", "")
    time_ms = _publish_time_ms(raw.get("publishTime"))
    photo = (raw.get("authorAttribution") or {}).get("photoUri")

    return {
        "id": raw.get("name") or str(time_ms),
        "author_name": author,
        "rating": raw.get("rating", 0),
        "relative_time_description": raw.get("relativePublishTimeDescription") or "Recientemente",
        "text": text or "",
        "profile_photo_url": photo or AVATAR_FALLBACK_URL.format(name=quote(author)),
        "time": time_ms,
    }


def process_reviews(raw_reviews: list[dict]) -> list[dict]:
    """Solo reseñas de 4 y 5 estrellas; si no hay ninguna se conservan todas."""
    reviews = [process_review(r) for r in raw_reviews]
    good = [r for r in reviews if (r["rating"] or 0) >= MIN_GOOD_RATING]
    return good or reviews


# ─────────────────────────────────────────────
# Cache por condominio
# ─────────────────────────────────────────────
async def refresh_condo_reviews(condo_id: str) -> dict | None:
    """
    Actualiza las reseñas cacheadas de un condominio.
    La selección manual de reseñas de Google se conserva.
    """
    condo = await get_condo_by_id(condo_id)
    if not condo:
        print(f"⚠️ Condominio no encontrado: {condo_id}")
        return None

    place_id = condo.get("google_place_id")
    if not place_id:
        print(f"⚠️ El condominio {condo.get('name', condo_id)} no tiene google_place_id")
        return None

    result = await fetch_place_details(place_id)
    if result is None:
        return None

    updated = await update_condo(condo_id, {
        "cached_reviews": result["reviews"],
        "google_rating": result["rating"],
        "total_ratings": result["user_ratings_total"],
        "filtered_rating_count": result["filteredCount"],
        "place_details": result["place_details"],
        "reviews_last_updated": datetime.now(timezone.utc).isoformat(),
        "selected_google_reviews": condo.get("selected_google_reviews") or [],
    })
    if updated:
        print(f"✅ Reseñas actualizadas: {condo.get('name', condo_id)} ({result['filteredCount']})")
    return updated


async def refresh_all_condo_reviews() -> int:
    """Refresca todos los condominios con google_place_id. Devuelve cuántos se actualizaron."""
    condos = [c for c in await get_all_condos() if c.get("google_place_id")]
    refreshed = 0
    for condo in condos:
        if await refresh_condo_reviews(condo["id"]):
            refreshed += 1
    return refreshed


def select_reviews(condo: dict) -> list[dict]:
    """Reseñas que se muestran en la ficha: las de Google elegidas más las manuales."""
    selected_ids = set(condo.get("selected_google_reviews") or [])
    google = [
        r for r in condo.get("cached_reviews") or []
        if r.get("id") in selected_ids or str(r.get("time")) in selected_ids
    ]
    manual = list(condo.get("manual_reviews") or [])
    return sorted(google + manual, key=lambda r: r.get("time") or 0, reverse=True)


def analyze_reviews(reviews: list[dict]) -> dict:
    """Promedio y distribución por estrellas."""
    distribution = {stars: 0 for stars in range(5, 0, -1)}
    for review in reviews:
        rating = int(review.get("rating") or 0)
        if rating in distribution:
            distribution[rating] += 1

    rated = [r.get("rating") or 0 for r in reviews if r.get("rating")]
    average = round(sum(rated) / len(rated), 1) if rated else 0
    return {
        "count": len(reviews),
        "average": average,
        "distribution": distribution,
    }
