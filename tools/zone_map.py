"""
Mapa interactivo de Zibatá.
Polígonos SVG estáticos de condominios, estado de hover/destacado y SVG final.
"""

import json
import re
from functools import lru_cache
from pathlib import Path
from xml.sax.saxutils import escape, quoteattr


DATA_FILE = Path(__file__).parent / "data" / "polygons_zibata.json"
VIEWBOX = (0, 0, 3307, 2108)
MOBILE_MAX_WIDTH = 768
CONDO_ROUTE = "/qro/zibata/{slug}"

STYLE_NORMAL = {
    "fill": "#D3D3D3", "stroke": "#ffffff", "stroke_width": 4, "opacity": 0.85, "z_index": 10,
}
STYLE_HOVERED = {
    "fill": "#8A2BE2", "stroke": "#4B0082", "stroke_width": 6, "opacity": 1, "z_index": 20,
}
STYLE_HIGHLIGHTED = {
    "fill": "#FF69B4", "stroke": "#FF1493", "stroke_width": 5, "opacity": 1, "z_index": 30,
}
STYLE_HIGHLIGHTED_HOVERED = {
    "fill": "#BD72F0", "stroke": "#FF1493", "stroke_width": 6, "opacity": 1, "z_index": 40,
}

_NUMBER = r"-?\d+(?:\.\d+)?"
# "M{x} {y}m-{r},0a{r},{r} ..." : círculo dibujado con dos arcos
_CIRCLE_RE = re.compile(
    rf"^\s*M\s*({_NUMBER})[\s,]+({_NUMBER})\s*m\s*{_NUMBER}[\s,]+{_NUMBER}\s*a"
)
_PAIR_RE = re.compile(rf"({_NUMBER})[\s,]+({_NUMBER})")


# ─────────────────────────────────────────────
# Datos
# ─────────────────────────────────────────────
@lru_cache(maxsize=1)
def load_polygons() -> tuple[dict, ...]:
    """Polígonos del mapa (id, path, fill, name, photo, slug). Se leen una sola vez."""
    with open(DATA_FILE, encoding="utf-8") as f:
        polygons = tuple(json.load(f))
    print(f"🗺️ {len(polygons)} polígonos de Zibatá cargados")
    return polygons


def get_polygon(polygon_id: str) -> dict | None:
    return next((p for p in load_polygons() if p["id"] == polygon_id), None)


# ─────────────────────────────────────────────
# Geometría
# ─────────────────────────────────────────────
def polygon_center(path: str) -> tuple[float, float] | None:
    """
    Centro aproximado de un path SVG.

    Para el patrón de círculo devuelve las coordenadas del move-to.
    En otro caso toma el punto medio de la caja que envuelve todos los pares
    de coordenadas encontrados (no es el centroide real).
    """
    circle = _CIRCLE_RE.match(path or "")
    if circle:
        return float(circle.group(1)), float(circle.group(2))

    pairs = [(float(x), float(y)) for x, y in _PAIR_RE.findall(path or "")]
    if not pairs:
        return None

    xs = [x for x, _ in pairs]
    ys = [y for _, y in pairs]
    return (min(xs) + max(xs)) / 2, (min(ys) + max(ys)) / 2


def icon_positions(polygon_ids: list[str] = None) -> list[dict]:
    """Coordenadas donde dibujar un icono encima de cada polígono."""
    polygons = load_polygons()
    if polygon_ids is not None:
        wanted = set(polygon_ids)
        polygons = [p for p in polygons if p["id"] in wanted]

    positions = []
    for polygon in polygons:
        center = polygon_center(polygon["path"])
        if center is None:
            continue
        positions.append({"id": polygon["id"], "x": center[0], "y": center[1]})
    return positions


# ─────────────────────────────────────────────
# Interacción
# ─────────────────────────────────────────────
def is_mobile(viewport_width: int | None) -> bool:
    return viewport_width is not None and viewport_width <= MOBILE_MAX_WIDTH


def polygon_style(
    polygon_id: str,
    hovered_id: str = None,
    highlighted_id: str = None,
    mobile: bool = False,
) -> dict:
    """Estilo de un polígono según esté destacado, con hover, ambos o ninguno."""
    hovered = not mobile and hovered_id is not None and polygon_id == hovered_id
    highlighted = highlighted_id is not None and polygon_id == highlighted_id

    if highlighted and hovered:
        style = STYLE_HIGHLIGHTED_HOVERED
    elif highlighted:
        style = STYLE_HIGHLIGHTED
    elif hovered:
        style = STYLE_HOVERED
    else:
        style = STYLE_NORMAL

    return {
        **style,
        "css_class": "destacado" if highlighted else None,
        "cursor": "default" if mobile else "pointer",
    }


def render_order(
    hovered_id: str = None,
    highlighted_id: str = None,
    mobile: bool = False,
) -> list[dict]:
    """Polígonos con su estilo, de abajo hacia arriba (el destacado al final)."""
    styled = [
        {**polygon, "style": polygon_style(polygon["id"], hovered_id, highlighted_id, mobile)}
        for polygon in load_polygons()
    ]
    return sorted(styled, key=lambda p: p["style"]["z_index"])


def click_target(polygon_id: str, mobile: bool = False, on_click=None) -> str | None:
    """
    Destino de un clic. En móvil no hay clic.
    Si se pasa `on_click` se usa su resultado en lugar de la ruta del condominio.
    """
    if mobile:
        return None
    if on_click is not None:
        return on_click(polygon_id)

    polygon = get_polygon(polygon_id)
    if polygon and polygon.get("slug"):
        return CONDO_ROUTE.format(slug=polygon["slug"])
    return None


def info_panel(hovered_id: str = None, highlighted_id: str = None, mobile: bool = False) -> dict | None:
    """Datos del panel lateral que aparece con el hover (solo escritorio)."""
    if mobile or not hovered_id:
        return None
    polygon = get_polygon(hovered_id)
    if polygon is None:
        return None
    return {
        "id": polygon["id"],
        "name": polygon.get("name", ""),
        "photo": polygon.get("photo", ""),
        "destacado": hovered_id == highlighted_id,
    }


# ─────────────────────────────────────────────
# SVG
# ─────────────────────────────────────────────
def render_svg(hovered_id: str = None, highlighted_id: str = None, mobile: bool = False) -> str:
    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="{" ".join(map(str, VIEWBOX))}">'
    ]
    for polygon in render_order(hovered_id, highlighted_id, mobile):
        style = polygon["style"]
        attrs = [
            f"id={quoteattr(polygon['id'])}",
            f"d={quoteattr(polygon['path'])}",
            f'fill="{style["fill"]}"',
            f'stroke="{style["stroke"]}"',
            f'stroke-width="{style["stroke_width"]}"',
            f'opacity="{style["opacity"]}"',
        ]
        if style["css_class"]:
            attrs.append(f'class="{style["css_class"]}"')
        if not mobile and polygon.get("slug"):
            attrs.append(f"data-href={quoteattr(CONDO_ROUTE.format(slug=polygon['slug']))}")
        lines.append(f"  <path {' '.join(attrs)}><title>{escape(polygon.get('name', ''))}</title></path>")
    lines.append("</svg>")
    return "\n".join(lines)
