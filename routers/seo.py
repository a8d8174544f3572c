"""
Router SEO: sitemap.xml y robots.txt.
"""

from fastapi import APIRouter, Response
from fastapi.responses import PlainTextResponse
from tools.sitemap import generate_sitemap, render_robots


router = APIRouter()


@router.get("/sitemap.xml")
async def sitemap():
    return Response(content=await generate_sitemap(), media_type="application/xml")


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots():
    return render_robots()
