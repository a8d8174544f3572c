"""
Cliente de base de datos Supabase.
Operaciones CRUD para todas las tablas de Pizo.
Todas las escrituras son incondicionales (la última escritura gana).
"""

from datetime import datetime, timezone
from config import SUPABASE_URL, SUPABASE_KEY, SIMILAR_PRICE_TOLERANCE
from supabase import create_client, Client

# ─────────────────────────────────────────────
# Conexión
# ─────────────────────────────────────────────
_client: Client | None = None


def get_client() -> Client:
    """Obtiene o crea el cliente de Supabase."""
    global _client
    if _client is None:
        if not SUPABASE_URL or not SUPABASE_KEY:
            raise RuntimeError(
                "❌ SUPABASE_URL y SUPABASE_KEY no configurados en .env"
            )
        _client = create_client(SUPABASE_URL, SUPABASE_KEY)
    return _client


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _first(result) -> dict | None:
    return result.data[0] if result.data else None


# ─────────────────────────────────────────────
# Helpers genéricos por tabla
# ─────────────────────────────────────────────
async def _get_by_id(table: str, record_id: str, label: str) -> dict | None:
    try:
        result = get_client().table(table).select("*").eq("id", record_id).execute()
        return _first(result)
    except Exception as e:
        print(f"❌ Error obteniendo {label}: {e}")
        return None


async def _insert(table: str, data: dict, label: str) -> dict | None:
    try:
        result = get_client().table(table).insert(data).execute()
        return _first(result)
    except Exception as e:
        print(f"❌ Error creando {label}: {e}")
        return None


async def _update(table: str, record_id: str, data: dict, label: str) -> dict | None:
    try:
        payload = {**data, "updated_at": _now()}
        result = get_client().table(table).update(payload).eq("id", record_id).execute()
        return _first(result)
    except Exception as e:
        print(f"❌ Error actualizando {label}: {e}")
        return None


async def _delete(table: str, record_id: str, label: str) -> bool:
    try:
        get_client().table(table).delete().eq("id", record_id).execute()
        return True
    except Exception as e:
        print(f"❌ Error eliminando {label}: {e}")
        return False


# ─────────────────────────────────────────────
# PROPERTIES
# ─────────────────────────────────────────────
async def get_property_by_id(property_id: str) -> dict | None:
    """Obtiene una propiedad por ID."""
    return await _get_by_id("properties", property_id, "propiedad")


async def create_property(data: dict) -> dict | None:
    """Crea una nueva propiedad."""
    return await _insert("properties", data, "propiedad")


async def update_property(property_id: str, data: dict) -> dict | None:
    """Actualiza una propiedad."""
    return await _update("properties", property_id, data, "propiedad")


async def delete_property(property_id: str) -> bool:
    """Elimina una propiedad de forma definitiva."""
    return await _delete("properties", property_id, "propiedad")


async def get_properties(
    status: str = None,
    transaction_type: str = None,
    property_type: str = None,
    zone: str = None,
    condo: str = None,
    min_price: float = None,
    max_price: float = None,
    limit: int = None,
) -> list[dict]:
    """Lista propiedades con filtros opcionales."""
    try:
        query = get_client().table("properties").select("*")
        if status:
            query = query.eq("status", status)
        if transaction_type:
            query = query.eq("transaction_type", transaction_type)
        if property_type:
            query = query.eq("property_type", property_type)
        if zone:
            query = query.eq("zone", zone)
        if condo:
            query = query.eq("condo", condo)
        if min_price is not None:
            query = query.gte("price", min_price)
        if max_price is not None:
            query = query.lte("price", max_price)
        query = query.order("created_at", desc=True)
        if limit:
            query = query.limit(limit)
        result = query.execute()
        return result.data or []
    except Exception as e:
        print(f"❌ Error obteniendo propiedades: {e}")
        return []


async def get_published_properties(**filters) -> list[dict]:
    """Propiedades visibles en el sitio público."""
    return await get_properties(status="publicada", **filters)


async def get_properties_by_advisor(advisor_id: str) -> list[dict]:
    """Propiedades creadas por un asesor."""
    try:
        result = (
            get_client()
            .table("properties")
            .select("*")
            .eq("advisor", advisor_id)
            .order("created_at", desc=True)
            .execute()
        )
        return result.data or []
    except Exception as e:
        print(f"❌ Error obteniendo propiedades del asesor: {e}")
        return []


async def increment_property_counter(property_id: str, field: str) -> int | None:
    """
    Incrementa `views` o `whatsapp_clicks`.
    Lectura + escritura sin bloqueo: dos incrementos simultáneos pueden perder uno.
    """
    if field not in ("views", "whatsapp_clicks"):
        raise ValueError(f"Contador desconocido: {field}")
    try:
        current = _first(
            get_client().table("properties").select(field).eq("id", property_id).execute()
        )
        if current is None:
            return None
        value = (current.get(field) or 0) + 1
        get_client().table("properties").update({field: value}).eq("id", property_id).execute()
        return value
    except Exception as e:
        print(f"⚠️ Error incrementando {field}: {e}")
        return None


async def get_similar_properties(
    current_property_id: str,
    property_type: str,
    transaction_type: str,
    zone: str = None,
    condo: str = None,
    price: float = None,
    max_results: int = 4,
) -> list[dict]:
    """
    Busca propiedades publicadas parecidas a la actual.
    Orden de llenado: mismo condominio, misma zona, mismo tipo en rango de precio.
    """
    results: list[dict] = []
    seen = {current_property_id}

    def _base():
        return (
            get_client()
            .table("properties")
            .select("*")
            .eq("status", "publicada")
            .eq("transaction_type", transaction_type)
            .neq("id", current_property_id)
        )

    def _add(rows: list[dict]):
        for row in rows:
            if len(results) >= max_results:
                return
            if row.get("id") in seen:
                continue
            seen.add(row.get("id"))
            results.append(row)

    try:
        if condo:
            _add(_base().eq("condo", condo).limit(max_results).execute().data or [])

        if len(results) < max_results and zone:
            _add(_base().eq("zone", zone).limit(max_results + len(seen)).execute().data or [])

        if len(results) < max_results:
            query = _base().eq("property_type", property_type)
            if price:
                query = query.gte("price", price * (1 - SIMILAR_PRICE_TOLERANCE))
                query = query.lte("price", price * (1 + SIMILAR_PRICE_TOLERANCE))
            _add(query.limit(max_results + len(seen)).execute().data or [])

        return results
    except Exception as e:
        print(f"❌ Error buscando propiedades similares: {e}")
        return results


# ─────────────────────────────────────────────
# NEGOCIOS (CRM)
# ─────────────────────────────────────────────
async def get_negocio_by_id(negocio_id: str) -> dict | None:
    """Obtiene un negocio por su ID."""
    return await _get_by_id("negocios", negocio_id, "negocio")


async def create_negocio(data: dict) -> dict | None:
    """Crea un nuevo negocio."""
    return await _insert("negocios", data, "negocio")


async def update_negocio(negocio_id: str, data: dict) -> dict | None:
    """Actualiza un negocio existente."""
    return await _update("negocios", negocio_id, data, "negocio")


async def delete_negocio(negocio_id: str) -> bool:
    """Elimina un negocio."""
    return await _delete("negocios", negocio_id, "negocio")


async def get_negocios(
    transaction_type: str = None,
    show_dormant: bool = False,
    asesor: str = None,
) -> list[dict]:
    """Obtiene negocios con filtros. Los dormidos se ocultan salvo que se pidan."""
    try:
        query = get_client().table("negocios").select("*")
        if transaction_type:
            query = query.eq("transaction_type", transaction_type)
        if not show_dormant:
            query = query.eq("dormido", False)
        if asesor:
            query = query.eq("asesor", asesor)
        result = query.order("fecha_creacion", desc=True).execute()
        return result.data or []
    except Exception as e:
        print(f"❌ Error obteniendo negocios: {e}")
        return []


async def get_expired_dormant_negocios(now: str = None) -> list[dict]:
    """Negocios dormidos cuyo periodo ya terminó."""
    try:
        result = (
            get_client()
            .table("negocios")
            .select("*")
            .eq("dormido", True)
            .lte("dormido_hasta", now or _now())
            .execute()
        )
        return result.data or []
    except Exception as e:
        print(f"❌ Error obteniendo negocios dormidos: {e}")
        return []


# ─────────────────────────────────────────────
# ZONES
# ─────────────────────────────────────────────
async def get_zones() -> list[dict]:
    """Lista todas las zonas."""
    try:
        result = get_client().table("zones").select("*").order("name").execute()
        return result.data or []
    except Exception as e:
        print(f"❌ Error obteniendo zonas: {e}")
        return []


async def get_zone_by_id(zone_id: str) -> dict | None:
    """Obtiene una zona por ID."""
    return await _get_by_id("zones", zone_id, "zona")


async def create_zone(data: dict) -> dict | None:
    """Crea una zona."""
    return await _insert("zones", {**data, "created_at": _now()}, "zona")


async def update_zone(zone_id: str, data: dict) -> dict | None:
    """Actualiza una zona."""
    return await _update("zones", zone_id, data, "zona")


async def delete_zone(zone_id: str) -> bool:
    """Elimina una zona."""
    return await _delete("zones", zone_id, "zona")


# ─────────────────────────────────────────────
# CONDOMINIUMS
# ─────────────────────────────────────────────
async def get_condos_by_zone(zone_id: str) -> list[dict]:
    """Condominios de una zona."""
    try:
        result = (
            get_client()
            .table("condominiums")
            .select("*")
            .eq("zone_id", zone_id)
            .order("name")
            .execute()
        )
        return result.data or []
    except Exception as e:
        print(f"❌ Error obteniendo condominios: {e}")
        return []


async def get_all_condos() -> list[dict]:
    """Todos los condominios."""
    try:
        result = get_client().table("condominiums").select("*").execute()
        return result.data or []
    except Exception as e:
        print(f"❌ Error obteniendo condominios: {e}")
        return []


async def get_condo_by_id(condo_id: str) -> dict | None:
    """Obtiene un condominio por ID."""
    return await _get_by_id("condominiums", condo_id, "condominio")


async def get_condo_by_slug(slug: str) -> dict | None:
    """Obtiene un condominio por su slug (ruta /qro/zibata/{slug})."""
    try:
        result = get_client().table("condominiums").select("*").eq("slug", slug).execute()
        return _first(result)
    except Exception as e:
        print(f"❌ Error buscando condominio por slug: {e}")
        return None


async def create_condo(data: dict) -> dict | None:
    """Crea un condominio."""
    return await _insert("condominiums", {**data, "created_at": _now()}, "condominio")


async def update_condo(condo_id: str, data: dict) -> dict | None:
    """Actualiza un condominio."""
    return await _update("condominiums", condo_id, data, "condominio")


async def delete_condo(condo_id: str) -> bool:
    """Elimina un condominio."""
    return await _delete("condominiums", condo_id, "condominio")


# ─────────────────────────────────────────────
# ADVISORS & ADMINS
# ─────────────────────────────────────────────
async def get_advisor_by_user(user_id: str) -> dict | None:
    """Perfil de asesor asociado a un usuario de Auth."""
    try:
        result = get_client().table("advisors").select("*").eq("user_id", user_id).execute()
        return _first(result)
    except Exception as e:
        print(f"❌ Error obteniendo asesor: {e}")
        return None


async def get_advisors() -> list[dict]:
    """Lista de asesores."""
    try:
        result = get_client().table("advisors").select("*").order("name").execute()
        return result.data or []
    except Exception as e:
        print(f"❌ Error obteniendo asesores: {e}")
        return []


async def upsert_advisor_profile(user_id: str, data: dict) -> dict | None:
    """Actualiza el perfil del asesor o lo crea si no existe."""
    existing = await get_advisor_by_user(user_id)
    if existing:
        return await _update("advisors", existing["id"], data, "asesor")
    return await _insert(
        "advisors",
        {"user_id": user_id, **data, "created_at": _now()},
        "asesor",
    )


async def is_admin_user(user_id: str) -> bool:
    """True si el usuario está registrado en la tabla `admins`."""
    try:
        by_id = get_client().table("admins").select("id").eq("id", user_id).execute()
        if by_id.data:
            return True
        by_user = get_client().table("admins").select("id").eq("user_id", user_id).execute()
        return bool(by_user.data)
    except Exception as e:
        print(f"⚠️ Error verificando rol de admin: {e}")
        return False


# ─────────────────────────────────────────────
# BLOG
# ─────────────────────────────────────────────
async def get_blog_posts(published_only: bool = False) -> list[dict]:
    """Lista posts del blog, más recientes primero."""
    try:
        query = get_client().table("blog_posts").select("*")
        if published_only:
            query = query.eq("published", True)
        result = query.order("publish_date", desc=True).execute()
        return result.data or []
    except Exception as e:
        print(f"❌ Error obteniendo posts: {e}")
        return []


async def get_blog_post_by_id(post_id: str) -> dict | None:
    """Obtiene un post por ID."""
    return await _get_by_id("blog_posts", post_id, "post")


async def create_blog_post(data: dict) -> dict | None:
    """Crea un post."""
    return await _insert("blog_posts", {**data, "created_at": _now()}, "post")


async def update_blog_post(post_id: str, data: dict) -> dict | None:
    """Actualiza un post."""
    return await _update("blog_posts", post_id, data, "post")


async def delete_blog_post(post_id: str) -> bool:
    """Elimina un post."""
    return await _delete("blog_posts", post_id, "post")


async def get_contributors(active_only: bool = False) -> list[dict]:
    """Autores del blog."""
    try:
        query = get_client().table("blog_contributors").select("*")
        if active_only:
            query = query.eq("active", True)
        result = query.order("name").execute()
        return result.data or []
    except Exception as e:
        print(f"❌ Error obteniendo autores: {e}")
        return []


async def get_contributor_by_id(contributor_id: str) -> dict | None:
    """Obtiene un autor por ID."""
    return await _get_by_id("blog_contributors", contributor_id, "autor")


async def create_contributor(data: dict) -> dict | None:
    """Crea un autor."""
    return await _insert("blog_contributors", {**data, "created_at": _now()}, "autor")


async def update_contributor(contributor_id: str, data: dict) -> dict | None:
    """Actualiza un autor."""
    return await _update("blog_contributors", contributor_id, data, "autor")


async def delete_contributor(contributor_id: str) -> bool:
    """Elimina un autor."""
    return await _delete("blog_contributors", contributor_id, "autor")
