"""
Tests del pipeline de negocios (tools/crm.py).
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from tools.crm import (
    PIPELINE_COLUMNS,
    DORMANT_PERIODS,
    build_board,
    change_status,
    create_negocio_from_contact,
    dormant_days_remaining,
    format_compact_currency,
    format_dormant_status,
    format_property_type,
    group_by_status,
    new_negocio_defaults,
    remove_negocio,
    search_negocios,
    set_dormant,
)


class TestGroupByStatus:
    """Agrupación de negocios en columnas."""

    def test_six_columns_in_fixed_order(self, negocios):
        grouped = group_by_status(negocios)
        assert list(grouped) == [
            "propuesta", "evaluación", "comercialización",
            "congeladora", "cerrada", "cancelada",
        ]

    def test_each_negocio_in_its_column(self, negocios):
        grouped = group_by_status(negocios)
        assert [n["id"] for n in grouped["propuesta"]] == ["n1"]
        assert [n["id"] for n in grouped["evaluación"]] == ["n2"]
        assert [n["id"] for n in grouped["cancelada"]] == ["n3"]

    def test_unknown_status_is_dropped(self, negocios):
        grouped = group_by_status(negocios)
        all_ids = {n["id"] for column in grouped.values() for n in column}
        assert "n4" not in all_ids

    def test_empty_input(self):
        assert all(column == [] for column in group_by_status([]).values())

    def test_no_negocio_appears_twice(self, negocios):
        grouped = group_by_status(negocios)
        ids = [n["id"] for column in grouped.values() for n in column]
        assert len(ids) == len(set(ids))


class TestBuildBoard:
    """Tablero con conteos y tarjetas."""

    def test_counts_and_names(self, negocios, now):
        board = build_board(negocios, now)
        assert [c["name"] for c in board] == [name for _, name in PIPELINE_COLUMNS]
        assert sum(c["count"] for c in board) == 3

    def test_card_fields(self, negocios, now):
        board = build_board(negocios, now)
        card = board[1]["cards"][0]
        assert card["tipo"] == "Depa."
        assert card["operacion"] == "Renta"
        assert card["precio"] == "$18K"
        assert card["dormant_status"] == "Hasta dentro de 2 días"


class TestDormant:
    """Cálculo de días restantes de dormido."""

    def test_not_dormant_returns_none(self, now):
        assert dormant_days_remaining({"dormido": False}, now) is None

    def test_past_date_is_zero(self, now):
        negocio = {"dormido": True, "dormido_hasta": now - timedelta(hours=1)}
        assert dormant_days_remaining(negocio, now) == 0
        assert format_dormant_status(negocio, now) == "Hasta hoy"

    def test_exactly_now_is_zero(self, now):
        assert dormant_days_remaining({"dormido": True, "dormido_hasta": now}, now) == 0

    def test_partial_day_rounds_up(self, now):
        negocio = {"dormido": True, "dormido_hasta": now + timedelta(hours=3)}
        assert dormant_days_remaining(negocio, now) == 1
        assert format_dormant_status(negocio, now) == "Hasta mañana"

    def test_iso_string_dates(self, now):
        negocio = {"dormido": True, "dormido_hasta": "2024-05-15T13:00:00+00:00"}
        assert dormant_days_remaining(negocio, now) == 6
        assert format_dormant_status(negocio, now) == "Hasta dentro de 6 días"

    def test_naive_dates_are_utc(self, now):
        negocio = {"dormido": True, "dormido_hasta": "2024-05-11T12:00:00"}
        assert dormant_days_remaining(negocio, now) == 1

    def test_periods(self):
        assert [p["value"] for p in DORMANT_PERIODS] == [1, 2, 3, 5, 7, 14, 30, 60, 180]
        assert DORMANT_PERIODS[5]["label"] == "2 semanas"


class TestSearch:
    """Búsqueda local."""

    def test_empty_term_returns_all(self, negocios):
        assert len(search_negocios(negocios, "")) == len(negocios)
        assert len(search_negocios(negocios, None)) == len(negocios)

    def test_case_insensitive_name(self, negocios):
        assert [n["id"] for n in search_negocios(negocios, "maría")] == ["n1"]

    def test_searches_notes_and_condo(self, negocios):
        assert [n["id"] for n in search_negocios(negocios, "ROOF")] == ["n2"]
        assert [n["id"] for n in search_negocios(negocios, "zibatá")] == ["n2"]

    def test_phone(self, negocios):
        assert [n["id"] for n in search_negocios(negocios, "442123")] == ["n1"]


class TestFormatting:
    """Formato de moneda compacta y tipo de propiedad."""

    @pytest.mark.parametrize("amount,expected", [
        (1_500_000, "$1.5 MDP"),
        (2_000_000, "$2 MDP"),
        (850_000, "$850K"),
        (18_500, "$18.5K"),
        (900, "$900"),
        (0, "$0"),
    ])
    def test_compact_currency(self, amount, expected):
        assert format_compact_currency(amount) == expected

    def test_property_type(self):
        assert format_property_type("departamento") == "Depa."
        assert format_property_type("casa") == "Casa"
        assert format_property_type("") == ""


class TestActions:
    """Acciones que escriben en Supabase (parcheadas)."""

    async def test_change_status_single_write(self):
        with patch("tools.crm.update_negocio", new=AsyncMock(return_value={"id": "n1"})) as mock_update:
            result = await change_status("n1", "comercialización")
        assert result == {"id": "n1"}
        mock_update.assert_awaited_once_with("n1", {"estatus": "comercialización"})

    async def test_change_status_to_cerrada_sets_closing_date(self, now):
        with patch("tools.crm.update_negocio", new=AsyncMock(return_value={"id": "n1"})) as mock_update:
            await change_status("n1", "cerrada", now=now)
        data = mock_update.await_args.args[1]
        assert data["estatus"] == "cerrada"
        assert data["fecha_cierre"] == now.isoformat()

    async def test_change_status_rejects_unknown(self):
        with patch("tools.crm.update_negocio", new=AsyncMock()) as mock_update:
            with pytest.raises(ValueError):
                await change_status("n1", "form")
        mock_update.assert_not_awaited()

    async def test_change_status_failure_returns_none(self):
        with patch("tools.crm.update_negocio", new=AsyncMock(return_value=None)):
            assert await change_status("n1", "propuesta") is None

    async def test_set_dormant(self, now):
        with patch("tools.crm.update_negocio", new=AsyncMock(return_value={"id": "n1"})) as mock_update:
            await set_dormant("n1", 14, now=now)
        data = mock_update.await_args.args[1]
        assert data["dormido"] is True
        assert data["dormido_hasta"] == (now + timedelta(days=14)).isoformat()

    async def test_set_dormant_zero_wakes(self):
        with patch("tools.crm.update_negocio", new=AsyncMock(return_value={"id": "n1"})) as mock_update:
            await set_dormant("n1", 0)
        mock_update.assert_awaited_once_with("n1", {"dormido": False, "dormido_hasta": None})

    async def test_set_dormant_negative(self):
        with pytest.raises(ValueError):
            await set_dormant("n1", -1)

    async def test_remove_negocio(self):
        with patch("tools.crm.delete_negocio", new=AsyncMock(return_value=True)):
            assert await remove_negocio("n1") is True


class TestPipelineFlow:
    """Mover un negocio y volver a pintar el tablero."""

    async def test_closed_negocio_moves_to_cerrada_column(self, negocios, now):
        store = {n["id"]: dict(n) for n in negocios}

        async def fake_update(negocio_id, data):
            store[negocio_id].update(data)
            return store[negocio_id]

        before = {
            column: [n["id"] for n in items]
            for column, items in group_by_status(list(store.values())).items()
        }
        assert before["propuesta"] == ["n1"]
        assert before["cerrada"] == []

        with patch("tools.crm.update_negocio", new=AsyncMock(side_effect=fake_update)):
            await change_status("n1", "cerrada", now=now)

        after = {
            column: [n["id"] for n in items]
            for column, items in group_by_status(list(store.values())).items()
        }
        assert after == {**before, "propuesta": [], "cerrada": ["n1"]}

        board = {column["id"]: column for column in build_board(list(store.values()), now)}
        assert board["propuesta"]["count"] == 0
        assert board["cerrada"]["count"] == 1
        assert board["cerrada"]["cards"][0]["negocio"]["fecha_cierre"] == now.isoformat()
        assert sum(column["count"] for column in board.values()) == 3


class TestNewNegocios:
    """Alta de negocios."""

    def test_defaults(self):
        defaults = new_negocio_defaults("Guille")
        assert defaults["estatus"] == "propuesta"
        assert defaults["comision"] == 5
        assert defaults["porcentaje_pizo"] == 50
        assert defaults["transaction_type"] == "venta"
        assert defaults["property_type"] == "casa"
        assert defaults["asesor"] == "Guille"

    async def test_from_contact_copies_property(self, now):
        propiedad = {
            "id": "p1",
            "property_type": "departamento",
            "condo_name": "Altozano",
            "transaction_type": "renta",
            "price": 22_000,
            "advisor": "u1",
        }
        with patch("tools.crm.create_negocio", new=AsyncMock(return_value={"id": "n9"})) as mock_create:
            result = await create_negocio_from_contact(
                nombre_completo="Ana",
                telefono="4420000000",
                mensaje="¿Sigue disponible?",
                propiedad=propiedad,
                now=now,
            )
        assert result == {"id": "n9"}
        data = mock_create.await_args.args[0]
        assert data["estatus"] == "propuesta"
        assert data["propiedad_id"] == "p1"
        assert data["transaction_type"] == "renta"
        assert data["price"] == 22_000
        assert data["notas"] == "¿Sigue disponible?"
        assert data["origen_texto"] == "Formulario web"
        assert data["fecha_creacion"] == now.isoformat()

    async def test_from_contact_without_property(self):
        with patch("tools.crm.create_negocio", new=AsyncMock(return_value={"id": "n9"})) as mock_create:
            await create_negocio_from_contact(nombre_completo="Ana", correo="ana@example.com")
        data = mock_create.await_args.args[0]
        assert data["propiedad_id"] == ""
        assert data["property_type"] == "casa"
        assert data["correo"] == "ana@example.com"
