"""
Tests for application wiring: CORS policy
"""

import pytest

from cmdb.main import CORS_ALLOWED_METHODS, cors_settings


def preflight(client, method):
    return client.options(
        "/api/servers",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": method,
        },
    )


class TestCORS:
    @pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE"])
    def test_preflight_allows_listed_methods(self, client, method):
        response = preflight(client, method)

        assert response.status_code == 200
        allowed = response.headers["access-control-allow-methods"]
        assert {m.strip() for m in allowed.split(",")} == set(CORS_ALLOWED_METHODS)

    @pytest.mark.parametrize("method", ["PATCH", "TRACE"])
    def test_preflight_rejects_other_methods(self, client, method):
        response = preflight(client, method)
        assert response.status_code == 400

    def test_wildcard_origins_disable_credentials(self, monkeypatch):
        monkeypatch.delenv("CORS_ALLOWED_ORIGINS", raising=False)
        assert cors_settings() == {"allow_origins": ["*"], "allow_credentials": False}

    def test_explicit_origins_enable_credentials(self, monkeypatch):
        monkeypatch.setenv(
            "CORS_ALLOWED_ORIGINS", "https://cmdb.example.com, http://localhost:5173"
        )
        assert cors_settings() == {
            "allow_origins": ["https://cmdb.example.com", "http://localhost:5173"],
            "allow_credentials": True,
        }
