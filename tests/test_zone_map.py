"""
Tests del mapa interactivo de Zibatá.
"""
import pytest

from tools.zone_map import (
    click_target,
    get_polygon,
    icon_positions,
    info_panel,
    is_mobile,
    load_polygons,
    polygon_center,
    polygon_style,
    render_order,
    render_svg,
)


class TestPolygonCenter:
    """Centro aproximado de paths SVG."""

    def test_circle_idiom_uses_move_to(self):
        path = "M1550 800m-70,0a70,70 0 1,0 140,0a70,70 0 1,0 -140,0"
        assert polygon_center(path) == (1550.0, 800.0)

    def test_circle_with_decimals(self):
        assert polygon_center("M10.5,20.25 m-5 0 a5,5 0 1,0 10,0") == (10.5, 20.25)

    def test_bounding_box_midpoint(self):
        assert polygon_center("M0 0L100 0L100 50L0 50Z") == (50.0, 25.0)

    def test_bounding_box_not_centroid(self):
        # Triángulo: el centroide sería (33.3, 33.3), la caja da (50, 50)
        assert polygon_center("M0 0L100 0L0 100Z") == (50.0, 50.0)

    def test_empty_path(self):
        assert polygon_center("") is None


class TestDataset:
    """Polígonos estáticos."""

    def test_loaded_once(self):
        assert load_polygons() is load_polygons()

    def test_every_polygon_has_fields(self):
        polygons = load_polygons()
        assert len(polygons) > 100
        for polygon in polygons:
            assert {"id", "path", "name", "slug"} <= set(polygon)

    def test_ids_unique(self):
        ids = [p["id"] for p in load_polygons()]
        assert len(ids) == len(set(ids))

    def test_every_polygon_has_center(self):
        assert len(icon_positions()) == len(load_polygons())

    def test_icon_positions_filter(self):
        positions = icon_positions(["PARQUEZIELO"])
        assert [p["id"] for p in positions] == ["PARQUEZIELO"]


class TestStyles:
    """Estados visual de los polígonos."""

    def test_normal(self):
        style = polygon_style("A")
        assert (style["fill"], style["stroke"], style["stroke_width"]) == ("#D3D3D3", "#ffffff", 4)
        assert style["opacity"] == 0.85
        assert style["z_index"] == 10

    def test_hovered(self):
        style = polygon_style("A", hovered_id="A")
        assert (style["fill"], style["stroke"], style["z_index"]) == ("#8A2BE2", "#4B0082", 20)

    def test_highlighted(self):
        style = polygon_style("A", highlighted_id="A")
        assert (style["fill"], style["stroke"], style["z_index"]) == ("#FF69B4", "#FF1493", 30)
        assert style["css_class"] == "destacado"

    def test_highlighted_and_hovered(self):
        style = polygon_style("A", hovered_id="A", highlighted_id="A")
        assert (style["fill"], style["stroke"], style["stroke_width"], style["z_index"]) == (
            "#BD72F0", "#FF1493", 6, 40,
        )

    def test_mobile_ignores_hover(self):
        assert polygon_style("A", hovered_id="A", mobile=True)["z_index"] == 10
        assert polygon_style("A", hovered_id="A", highlighted_id="A", mobile=True)["z_index"] == 30

    def test_render_order_puts_highlighted_last(self):
        ordered = render_order(hovered_id="path_5", highlighted_id="PARQUEZIELO")
        assert ordered[-1]["id"] == "PARQUEZIELO"
        assert ordered[-2]["id"] == "path_5"
        assert len(ordered) == len(load_polygons())


class TestInteraction:
    """Clics, hover y breakpoints."""

    @pytest.mark.parametrize("width,mobile", [(None, False), (375, True), (768, True), (769, False)])
    def test_is_mobile(self, width, mobile):
        assert is_mobile(width) is mobile

    def test_click_goes_to_condo_page(self):
        assert click_target("PARQUEZIELO") == "/qro/zibata/parquezielo"

    def test_click_disabled_on_mobile(self):
        assert click_target("PARQUEZIELO", mobile=True) is None

    def test_click_callback_wins(self):
        assert click_target("PARQUEZIELO", on_click=lambda pid: f"cb:{pid}") == "cb:PARQUEZIELO"

    def test_unknown_polygon(self):
        assert get_polygon("NO-EXISTE") is None
        assert click_target("NO-EXISTE") is None

    def test_info_panel(self):
        panel = info_panel("PARQUEZIELO", highlighted_id="PARQUEZIELO")
        assert panel["name"] == "PARQUEZIELO"
        assert panel["destacado"] is True
        assert info_panel("PARQUEZIELO", mobile=True) is None
        assert info_panel(None) is None


class TestSvg:
    """SVG renderizado."""

    def test_viewbox_and_paths(self):
        svg = render_svg()
        assert 'viewBox="0 0 3307 2108"' in svg
        assert svg.count("<path ") == len(load_polygons())

    def test_highlighted_has_class(self):
        svg = render_svg(highlighted_id="PARQUEZIELO")
        assert 'class="destacado"' in svg
        assert svg.count('class="destacado"') == 1

    def test_mobile_has_no_links(self):
        assert "data-href" not in render_svg(mobile=True)
