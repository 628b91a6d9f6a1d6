from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from companion import main as companion_main
from companion import supabase_client
from companion.settings import CompanionSettings
from companion.supabase_client import SupabaseNotConfigured, SupabaseService

PROJECT_URL = "https://demo-project.supabase.co"


@pytest.fixture()
def fake_create_client(monkeypatch):
    calls: list[dict[str, Any]] = []

    def _create_client(url, key, options=None):
        calls.append({"url": url, "key": key, "options": options})
        return object()

    monkeypatch.setattr(supabase_client, "create_client", _create_client)
    return calls


def _settings(**overrides: Any) -> CompanionSettings:
    values: dict[str, Any] = {
        "SUPABASE_URL": PROJECT_URL,
        "SUPABASE_SERVICE_ROLE_KEY": "service-role-key",
    }
    values.update(overrides)
    return CompanionSettings(_env_file=None, **values)


@pytest.mark.parametrize(
    "overrides",
    [
        {"SUPABASE_URL": None},
        {"SUPABASE_SERVICE_ROLE_KEY": None},
        {"SUPABASE_URL": "", "SUPABASE_SERVICE_ROLE_KEY": ""},
    ],
)
def test_supabase_service_fails_fast_when_unconfigured(fake_create_client, overrides):
    with pytest.raises(SupabaseNotConfigured):
        SupabaseService(_settings(**overrides))
    assert fake_create_client == []


def test_create_app_fails_at_startup_without_supabase(fake_create_client):
    with pytest.raises(SupabaseNotConfigured):
        companion_main.create_app(_settings(SUPABASE_URL=None))


def test_supabase_service_exposes_client_and_url(fake_create_client):
    service = SupabaseService(_settings())

    assert service.get_project_url() == PROJECT_URL
    assert service.get_client() is not None

    (call,) = fake_create_client
    assert call["url"] == PROJECT_URL
    assert call["key"] == "service-role-key"
    assert call["options"].auto_refresh_token is False
    assert call["options"].persist_session is False


def test_hello_and_supabase_routes(fake_create_client):
    with TestClient(companion_main.create_app(_settings())) as c:
        r = c.get("/")
        assert r.status_code == 200
        assert r.text == "Hello World!"

        r = c.get("/supabase")
        assert r.json() == {"projectUrl": PROJECT_URL}


def test_cors_allows_default_frontend_origin(fake_create_client):
    settings = _settings()
    assert settings.FRONTEND_URL == "http://localhost:3000"

    with TestClient(companion_main.create_app(settings)) as c:
        r = c.options(
            "/supabase",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
            },
        )
        assert r.status_code == 200
        assert r.headers["access-control-allow-origin"] == "http://localhost:3000"

        r = c.get("/", headers={"Origin": "http://evil.example"})
        assert "access-control-allow-origin" not in r.headers


def test_cors_origin_from_settings(fake_create_client):
    app = companion_main.create_app(_settings(FRONTEND_URL="https://app.example.com"))
    with TestClient(app) as c:
        r = c.get("/", headers={"Origin": "https://app.example.com"})
        assert r.headers["access-control-allow-origin"] == "https://app.example.com"
