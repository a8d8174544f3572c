"""
Router del Mapa de Zibatá.
Polígonos, centros para iconos, estado de hover/destacado y SVG listo para incrustar.
"""

from fastapi import APIRouter, Response
from tools.zone_map import (
    VIEWBOX,
    load_polygons,
    polygon_center,
    icon_positions,
    is_mobile,
    render_order,
    click_target,
    info_panel,
    render_svg,
)


router = APIRouter()


@router.get("/poligonos")
async def polygons():
    return {
        "viewbox": VIEWBOX,
        "polygons": [
            {**p, "center": polygon_center(p["path"])}
            for p in load_polygons()
        ],
    }


@router.get("/centros")
async def centers(ids: str = None):
    """Posiciones de iconos. `ids` es una lista separada por comas."""
    wanted = [i.strip() for i in ids.split(",") if i.strip()] if ids else None
    return icon_positions(wanted)


@router.get("/estado")
async def map_state(hovered: str = None, highlighted: str = None, width: int = None):
    mobile = is_mobile(width)
    return {
        "mobile": mobile,
        "polygons": [
            {"id": p["id"], "style": p["style"]}
            for p in render_order(hovered, highlighted, mobile)
        ],
        "info": info_panel(hovered, highlighted, mobile),
    }


@router.get("/click/{polygon_id}")
async def click(polygon_id: str, width: int = None):
    return {"target": click_target(polygon_id, mobile=is_mobile(width))}


@router.get("/zibata.svg")
async def svg(hovered: str = None, highlighted: str = None, width: int = None):
    return Response(
        content=render_svg(hovered, highlighted, is_mobile(width)),
        media_type="image/svg+xml",
    )
