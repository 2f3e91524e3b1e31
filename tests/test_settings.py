"""
Tests for the locale and theme preference cookies.
"""
from supaplate.modules.settings.service import locale_from_accept_language, resolve_locale


class TestLocale:
    def test_locale_persists_across_requests(self, client):
        response = client.post("/api/settings/locale", params={"locale": "ko"})

        assert response.status_code == 200
        assert "locale=ko" in response.headers["set-cookie"]
        assert client.get("/api/settings").json()["locale"] == "ko"

    def test_unsupported_locale(self, client):
        response = client.post("/api/settings/locale", params={"locale": "fr"})

        assert response.status_code == 400
        assert "set-cookie" not in response.headers

    def test_falls_back_to_accept_language(self, client):
        response = client.get("/api/settings", headers={"Accept-Language": "fr-FR,es;q=0.8,en;q=0.5"})

        assert response.json()["locale"] == "es"

    def test_accept_language_quality_order(self):
        assert locale_from_accept_language("en;q=0.3, ko-KR;q=0.9") == "ko"
        assert locale_from_accept_language("de, fr") is None
        assert locale_from_accept_language(None) is None

    def test_defaults_to_english(self):
        assert resolve_locale(None, None) == "en"
        assert resolve_locale("xx", "de") == "en"


class TestTheme:
    def test_theme_persists_across_requests(self, client):
        assert client.get("/api/settings").json()["theme"] == "dark"

        response = client.post("/api/settings/theme", json={"theme": "light"})

        assert response.status_code == 200
        cookie = response.headers["set-cookie"]
        assert cookie.startswith("theme=light")
        assert "HttpOnly" not in cookie
        assert client.get("/api/settings").json()["theme"] == "light"

    def test_null_clears_theme(self, client):
        client.post("/api/settings/theme", json={"theme": "light"})

        response = client.post("/api/settings/theme", json={"theme": None})

        assert response.status_code == 200
        assert client.get("/api/settings").json()["theme"] == "dark"

    def test_invalid_theme(self, client):
        response = client.post("/api/settings/theme", json={"theme": "sepia"})

        assert response.status_code == 400
