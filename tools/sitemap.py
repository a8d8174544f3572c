"""
sitemap.xml y robots.txt del sitio público.
"""

import re
from datetime import datetime, timezone
from xml.sax.saxutils import escape
from config import SITE_URL
from tools.database import get_zones, get_all_condos, get_blog_posts

STATIC_ROUTES = [
    ("", "daily", 1.0),
    ("/nosotros", "monthly", 0.8),
    ("/contacto", "monthly", 0.8),
    ("/explorar", "daily", 0.9),
    ("/blog", "weekly", 0.7),
    ("/asesores", "monthly", 0.6),
    ("/aviso-de-privacidad", "yearly", 0.3),
    ("/terminos-y-condiciones", "yearly", 0.3),
]

ROBOTS_DISALLOW = ["/admin/", "/asesor/", "/propiedad/", "/busqueda"]


def sanitize_url_segment(segment: str) -> str:
    """'Zibatá Norte' → 'zibat-norte' (solo a-z, 0-9 y guiones)."""
    text = (segment or "").lower().strip()
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"[^a-z0-9-]", "", text)
    return re.sub(r"-+", "-", text)


def build_entries(zones: list[dict], condos: list[dict], posts: list[dict]) -> list[dict]:
    entries = [
        {"loc": f"{SITE_URL}{path}", "changefreq": freq, "priority": priority}
        for path, freq, priority in STATIC_ROUTES
    ]

    for zone in zones:
        if zone.get("name"):
            entries.append({
                "loc": f"{SITE_URL}/{sanitize_url_segment(zone['name'])}",
                "changefreq": "weekly",
                "priority": 0.7,
            })

    for condo in condos:
        if condo.get("name") and condo.get("zone_name"):
            entries.append({
                "loc": (
                    f"{SITE_URL}/qro/{sanitize_url_segment(condo['zone_name'])}"
                    f"/{sanitize_url_segment(condo['name'])}"
                ),
                "changefreq": "weekly",
                "priority": 0.8,
            })

    for post in posts:
        if post.get("published") and (post.get("slug") or post.get("id")):
            entries.append({
                "loc": f"{SITE_URL}/blog/{post.get('slug') or post['id']}",
                "changefreq": "monthly",
                "priority": 0.6,
                "lastmod": post.get("updated_at") or post.get("publish_date"),
            })

    return entries


def render_sitemap(entries: list[dict], now: datetime = None) -> str:
    lastmod_default = (now or datetime.now(timezone.utc)).isoformat()
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for entry in entries:
        lines += [
            "  <url>",
            f"    <loc>{escape(entry['loc'])}</loc>",
            f"    <lastmod>{escape(entry.get('lastmod') or lastmod_default)}</lastmod>",
            f"    <changefreq>{entry['changefreq']}</changefreq>",
            f"    <priority>{entry['priority']:.1f}</priority>",
            "  </url>",
        ]
    lines.append("</urlset>")
    return "\n".join(lines)


async def generate_sitemap() -> str:
    """Sitemap completo. Si Supabase falla, los accesores devuelven [] y queda solo lo estático."""
    zones = await get_zones()
    condos = await get_all_condos()
    posts = await get_blog_posts(published_only=True)
    return render_sitemap(build_entries(zones, condos, posts))


def render_robots() -> str:
    lines = ["User-agent: *", "Allow: /"]
    lines += [f"Disallow: {path}" for path in ROBOTS_DISALLOW]
    lines += ["", f"Sitemap: {SITE_URL}/sitemap.xml"]
    return "\n".join(lines) + "\n"
