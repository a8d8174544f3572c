"""
Tests de reseñas de condominios (Google Places v1).
"""
from unittest.mock import AsyncMock, MagicMock, patch

from tools.review_manager import (
    analyze_reviews,
    build_place_result,
    fetch_place_details,
    process_review,
    process_reviews,
    refresh_condo_reviews,
    select_reviews,
)


PLACE_RESPONSE = {
    "displayName": {"text": "Altozano Residencial"},
    "formattedAddress": "Zibatá, Qro.",
    "rating": 4.6,
    "userRatingCount": 38,
    "websiteUri": "https://altozano.mx",
    "photos": [{"name": "places/abc/photos/p1"}],
    "reviews": [
        {
            "name": "places/abc/reviews/r1",
            "rating": 5,
            "text": {"text": "Muy tranquilo"},
            "relativePublishTimeDescription": "hace un mes",
            "publishTime": "2024-04-01T10:00:00Z",
            "authorAttribution": {"displayName": "Laura", "photoUri": "https://foto/laura"},
        },
        {
            "name": "places/abc/reviews/r2",
            "rating": 2,
            "text": {"text": "Mucho tráfico"},
            "authorAttribution": {},
        },
    ],
}


class TestProcessReviews:
    """Normalización de reseñas."""

    def test_full_review(self):
        review = process_review(PLACE_RESPONSE["reviews"][0])
        assert review["id"] == "places/abc/reviews/r1"
        assert review["author_name"] == "Laura"
        assert review["text"] == "Muy tranquilo"
        assert review["profile_photo_url"] == "https://foto/laura"
        assert review["relative_time_description"] == "hace un mes"
        assert review["time"] == 1711965600000

    def test_fallbacks(self):
        review = process_review({"rating": 3, "text": "Texto plano"})
        assert review["author_name"] == "Anónimo"
        assert review["relative_time_description"] == "Recientemente"
        assert review["text"] == "Texto plano"
        assert review["profile_photo_url"].startswith("https://ui-avatars.com/api/?name=An%C3%B3nimo")
        assert review["time"] == 0

    def test_keeps_only_good_reviews(self):
        reviews = process_reviews(PLACE_RESPONSE["reviews"])
        assert [r["rating"] for r in reviews] == [5]

    def test_all_bad_keeps_all(self):
        reviews = process_reviews([{"rating": 1}, {"rating": 3}])
        assert len(reviews) == 2


class TestPlaceResult:
    """Armado del resultado de Places."""

    def test_build(self):
        result = build_place_result(PLACE_RESPONSE, "KEY")
        assert result["rating"] == 4.6
        assert result["user_ratings_total"] == 38
        assert result["filteredCount"] == 1
        assert result["place_details"]["name"] == "Altozano Residencial"
        assert result["place_details"]["photos"] == [
            "https://places.googleapis.com/v1/places/abc/photos/p1/media?key=KEY&maxHeightPx=800"
        ]

    async def test_fetch_sends_field_mask(self):
        response = MagicMock()
        response.json.return_value = PLACE_RESPONSE
        client = MagicMock()
        client.get = AsyncMock(return_value=response)

        with patch("tools.review_manager.httpx.AsyncClient") as mock_cls:
            mock_cls.return_value.__aenter__.return_value = client
            result = await fetch_place_details("abc", api_key="KEY")

        assert result["filteredCount"] == 1
        url = client.get.await_args.args[0]
        kwargs = client.get.await_args.kwargs
        assert url == "https://places.googleapis.com/v1/places/abc"
        assert kwargs["headers"]["X-Goog-Api-Key"] == "KEY"
        assert "reviews" in kwargs["headers"]["X-Goog-FieldMask"]
        assert kwargs["params"] == {"languageCode": "es"}

    async def test_fetch_without_key(self):
        with patch("tools.review_manager.GOOGLE_PLACES_API_KEY", ""):
            assert await fetch_place_details("abc") is None

    async def test_fetch_error_returns_none(self):
        client = MagicMock()
        client.get = AsyncMock(side_effect=Exception("timeout"))
        with patch("tools.review_manager.httpx.AsyncClient") as mock_cls:
            mock_cls.return_value.__aenter__.return_value = client
            assert await fetch_place_details("abc", api_key="KEY") is None


class TestCondoCache:
    """Cache de reseñas por condominio."""

    async def test_refresh_preserves_selection(self):
        condo = {"id": "c1", "name": "Altozano", "google_place_id": "abc", "selected_google_reviews": ["r9"]}
        place = build_place_result(PLACE_RESPONSE, "KEY")

        with patch("tools.review_manager.get_condo_by_id", new=AsyncMock(return_value=condo)), \
             patch("tools.review_manager.fetch_place_details", new=AsyncMock(return_value=place)), \
             patch("tools.review_manager.update_condo", new=AsyncMock(return_value={"id": "c1"})) as mock_update:
            result = await refresh_condo_reviews("c1")

        assert result == {"id": "c1"}
        data = mock_update.await_args.args[1]
        assert data["selected_google_reviews"] == ["r9"]
        assert data["google_rating"] == 4.6
        assert data["filtered_rating_count"] == 1
        assert len(data["cached_reviews"]) == 1

    async def test_refresh_without_place_id(self):
        with patch("tools.review_manager.get_condo_by_id", new=AsyncMock(return_value={"id": "c1"})), \
             patch("tools.review_manager.update_condo", new=AsyncMock()) as mock_update:
            assert await refresh_condo_reviews("c1") is None
        mock_update.assert_not_awaited()

    def test_select_reviews(self):
        condo = {
            "cached_reviews": [
                {"id": "g1", "rating": 5, "time": 300},
                {"id": "g2", "rating": 4, "time": 200},
            ],
            "manual_reviews": [{"id": "m1", "rating": 5, "time": 100}],
            "selected_google_reviews": ["g2"],
        }
        assert [r["id"] for r in select_reviews(condo)] == ["g2", "m1"]

    def test_select_reviews_empty(self):
        assert select_reviews({}) == []

    def test_analyze(self):
        stats = analyze_reviews([{"rating": 5}, {"rating": 4}, {"rating": 4}])
        assert stats["count"] == 3
        assert stats["average"] == 4.3
        assert stats["distribution"] == {5: 1, 4: 2, 3: 0, 2: 0, 1: 0}
