"""
Router del Blog.
Lectura pública por slug y paginada; editor y autores para administradores.
"""

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile
from models.database_models import BlogPost, BlogContributor
from tools.auth import require_admin
from tools.database import (
    get_blog_posts,
    get_blog_post_by_id,
    create_blog_post,
    update_blog_post,
    delete_blog_post,
    get_contributors,
    get_contributor_by_id,
    create_contributor,
    update_contributor,
    delete_contributor,
)
from tools.blog import paginate, get_post_by_slug, prepare_post, related_posts, get_author_options
from tools.storage import upload_image


router = APIRouter()
admin = APIRouter(dependencies=[Depends(require_admin)])


async def _upload_one(folder: str, file: UploadFile) -> str:
    try:
        return await upload_image(folder, file.filename, await file.read(), file.content_type)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=502, detail=str(e))


# ─── Posts (admin) ───
@admin.get("/posts")
async def all_posts():
    return await get_blog_posts()


@admin.post("/posts")
async def add_post(body: BlogPost):
    post = await create_blog_post(prepare_post(body.model_dump(exclude={"created_at"})))
    if post is None:
        raise HTTPException(status_code=502, detail="Error al crear el post")
    return post


@admin.put("/posts/{post_id}")
async def edit_post(post_id: str, data: dict = Body(...)):
    existing = await get_blog_post_by_id(post_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Post no encontrado")

    merged = {**existing, **data}
    if "slug" not in data and "title" in data and data["title"] != existing.get("title"):
        merged["slug"] = None
    payload = prepare_post(merged)
    payload.pop("created_at", None)

    post = await update_blog_post(post_id, payload)
    if post is None:
        raise HTTPException(status_code=502, detail="Error al actualizar el post")
    return post


@admin.delete("/posts/{post_id}")
async def remove_post(post_id: str):
    if not await delete_blog_post(post_id):
        raise HTTPException(status_code=502, detail="Error al eliminar el post")
    return {"status": "deleted", "id": post_id}


@admin.post("/imagenes")
async def upload_cover(file: UploadFile = File(...)):
    """Portada o imagen insertada en el contenido."""
    return {"url": await _upload_one("blog", file)}


# ─── Autores (admin) ───
@admin.get("/autores")
async def all_contributors():
    return await get_contributors()


@admin.post("/autores")
async def add_contributor(body: BlogContributor):
    contributor = await create_contributor(
        body.model_dump(exclude={"id", "created_at", "updated_at"})
    )
    if contributor is None:
        raise HTTPException(status_code=502, detail="Error al crear el autor")
    return contributor


@admin.put("/autores/{contributor_id}")
async def edit_contributor(contributor_id: str, data: dict = Body(...)):
    if not await get_contributor_by_id(contributor_id):
        raise HTTPException(status_code=404, detail="Autor no encontrado")
    data.pop("id", None)
    contributor = await update_contributor(contributor_id, data)
    if contributor is None:
        raise HTTPException(status_code=502, detail="Error al actualizar el autor")
    return contributor


@admin.delete("/autores/{contributor_id}")
async def remove_contributor(contributor_id: str):
    if not await delete_contributor(contributor_id):
        raise HTTPException(status_code=502, detail="Error al eliminar el autor")
    return {"status": "deleted", "id": contributor_id}


@admin.post("/autores/{contributor_id}/foto")
async def upload_contributor_photo(contributor_id: str, file: UploadFile = File(...)):
    if not await get_contributor_by_id(contributor_id):
        raise HTTPException(status_code=404, detail="Autor no encontrado")
    url = await _upload_one("contributors", file)
    contributor = await update_contributor(contributor_id, {"photo": url})
    if contributor is None:
        raise HTTPException(status_code=502, detail="Error al actualizar el autor")
    return contributor


router.include_router(admin, prefix="/admin")


# ─── Público ───
@router.get("")
async def list_posts(page: int = 1):
    return paginate(await get_blog_posts(published_only=True), page)


@router.get("/autores")
async def author_options():
    return await get_author_options()


@router.get("/{slug}")
async def read_post(slug: str):
    post = await get_post_by_slug(slug)
    if not post:
        raise HTTPException(status_code=404, detail="Post no encontrado")

    contributor = None
    if post.get("contributor_id"):
        contributor = await get_contributor_by_id(post["contributor_id"])

    others = await get_blog_posts(published_only=True)
    return {"post": post, "contributor": contributor, "related": related_posts(post, others)}
