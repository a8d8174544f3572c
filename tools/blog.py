"""
Blog de Pizo: slugs, paginación pública y preparación de posts del editor.
"""

import html
import math
import re
import unicodedata
from datetime import datetime, timezone
from config import BLOG_POSTS_PER_PAGE
from tools.database import get_blog_posts, get_blog_post_by_id, get_contributors

SUMMARY_LENGTH = 160


def slugify(text: str) -> str:
    """'Vivir en Zibatá: guía 2024' → 'vivir-en-zibata-guia-2024'."""
    normalized = unicodedata.normalize("NFD", text or "")
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii").lower()
    return re.sub(r"[^a-z0-9]+", "-", ascii_text).strip("-")


def strip_html(content: str) -> str:
    text = re.sub(r"<[^>]+>", " ", content or "")
    return re.sub(r"\s+", " ", html.unescape(text)).strip()


def build_summary(content: str, length: int = SUMMARY_LENGTH) -> str:
    text = strip_html(content)
    if len(text) <= length:
        return text
    return text[:length].rsplit(" ", 1)[0] + "..."


def _sort_key(post: dict) -> str:
    return post.get("publish_date") or post.get("created_at") or ""


async def get_post_by_slug(slug: str) -> dict | None:
    """
    Post publicado por slug. Los posts antiguos no tienen slug,
    así que también se acepta el ID del documento.
    """
    posts = await get_blog_posts(published_only=True)
    for post in posts:
        if post.get("slug") == slug:
            return post

    post = await get_blog_post_by_id(slug)
    if post and post.get("published"):
        return post
    return None


def paginate(posts: list[dict], page: int = 1, per_page: int = BLOG_POSTS_PER_PAGE) -> dict:
    """Página de posts publicados, más recientes primero."""
    published = sorted(
        (p for p in posts if p.get("published")),
        key=_sort_key,
        reverse=True,
    )
    total_pages = max(1, math.ceil(len(published) / per_page))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return {
        "posts": published[start:start + per_page],
        "page": page,
        "total_pages": total_pages,
        "total": len(published),
    }


def related_posts(post: dict, posts: list[dict], limit: int = 3) -> list[dict]:
    """Otros posts publicados que comparten etiquetas con el actual."""
    tags = set(post.get("tags") or [])
    candidates = [
        p for p in posts
        if p.get("published") and p.get("id") != post.get("id")
    ]
    candidates.sort(
        key=lambda p: (len(tags & set(p.get("tags") or [])), _sort_key(p)),
        reverse=True,
    )
    return candidates[:limit]


def prepare_post(data: dict, now: datetime = None) -> dict:
    """Completa slug, resumen, meta descripción y fechas antes de guardar."""
    now = now or datetime.now(timezone.utc)
    post = {k: v for k, v in data.items() if k != "id"}

    if not post.get("slug"):
        post["slug"] = slugify(post.get("title", ""))
    else:
        post["slug"] = slugify(post["slug"])

    if not post.get("summary"):
        post["summary"] = build_summary(post.get("content", ""))
    if not post.get("meta_description"):
        post["meta_description"] = post["summary"]
    if not post.get("seo_title"):
        post["seo_title"] = post.get("title", "")
    if post.get("published") and not post.get("publish_date"):
        post["publish_date"] = now.date().isoformat()

    post["updated_at"] = now.isoformat()
    return post


async def get_author_options() -> list[dict]:
    """Autores activos para el selector del editor."""
    contributors = await get_contributors(active_only=True)
    return [
        {"id": c["id"], "name": c.get("name", ""), "photo": c.get("photo")}
        for c in contributors
    ]
