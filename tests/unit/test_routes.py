"""
test_routes.py — Unit tests for the endpoint API routes

Runs the FastAPI app in-process with TestClient against a seeded temporary
data directory.
"""

import pytest
from fastapi.testclient import TestClient

from dashboard.server import create_app


@pytest.fixture
def client(seeded):
    return TestClient(create_app())


class TestReadRoutes:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok", "endpoints": 2}

    def test_list_endpoints(self, client):
        r = client.get("/endpoints")
        assert r.status_code == 200
        assert [e["Name"] for e in r.json()] == ["local", "prod"]

    def test_get_endpoint(self, client):
        body = client.get("/endpoints/2").json()
        assert body["URL"] == "https://10.0.0.5:2376"
        assert body["TLSConfig"]["TLS"] is True
        assert body["TLSConfig"]["TLSCACert"] is None

    def test_unknown_endpoint_404(self, client):
        r = client.get("/endpoints/99")
        assert r.status_code == 404
        assert r.json()["detail"] == "Endpoint 99 not found"

    def test_list_groups(self, client):
        assert client.get("/endpoint_groups").json() == [
            {"Id": 1, "Name": "Unassigned"},
            {"Id": 2, "Name": "Production"},
        ]


class TestUpdateRoute:
    def test_partial_update(self, client):
        r = client.put("/endpoints/2", json={"name": "prod-2", "PublicURL": "docker.example.com"})
        assert r.status_code == 200
        body = r.json()
        assert body["Name"] == "prod-2"
        assert body["PublicURL"] == "docker.example.com"
        assert body["URL"] == "https://10.0.0.5:2376"
        assert body["GroupId"] == 2

    def test_update_persisted(self, client):
        client.put("/endpoints/1", json={"GroupId": 2})
        assert client.get("/endpoints/1").json()["GroupId"] == 2

    def test_null_clears_public_url(self, client):
        body = client.put("/endpoints/2", json={"PublicURL": None}).json()
        assert body["PublicURL"] == ""

    def test_disable_tls(self, client):
        body = client.put("/endpoints/2", json={"TLS": False}).json()
        assert body["TLSConfig"]["TLS"] is False
        assert body["TLSConfig"]["TLSSkipVerify"] is False

    def test_unknown_endpoint_404(self, client):
        assert client.put("/endpoints/99", json={"name": "x"}).status_code == 404

    def test_unknown_group_400(self, client):
        r = client.put("/endpoints/2", json={"GroupId": 42})
        assert r.status_code == 400
        assert "42" in r.json()["detail"]

    def test_missing_ca_400(self, client):
        r = client.put("/endpoints/2", json={"TLS": True, "TLSSkipVerify": False, "TLSSkipClientVerify": True})
        assert r.status_code == 400
        assert "CA certificate" in r.json()["detail"]
        assert client.get("/endpoints/2").json()["TLSConfig"]["TLSSkipVerify"] is True

    def test_invalid_type_422(self, client):
        assert client.put("/endpoints/2", json={"type": "serial"}).status_code == 422


class TestApiKey:
    def test_open_without_key(self, client, monkeypatch):
        monkeypatch.delenv("DOCKHAND_API_KEY", raising=False)
        assert client.get("/endpoints").status_code == 200

    def test_key_required_when_configured(self, client, monkeypatch):
        monkeypatch.setenv("DOCKHAND_API_KEY", "s3cret")
        assert client.get("/endpoints").status_code == 401
        assert client.get("/endpoints", headers={"Authorization": "Bearer s3cret"}).status_code == 200
        assert client.get("/endpoints", headers={"X-Dockhand-Key": "s3cret"}).status_code == 200

    def test_health_exempt(self, client, monkeypatch):
        monkeypatch.setenv("DOCKHAND_API_KEY", "s3cret")
        assert client.get("/health").status_code == 200


class TestPlugins:
    def test_enabled_plugins_loaded_in_order(self):
        from plugins import register_all

        assert [p.name for p in register_all()] == ["health", "endpoints", "endpoint_groups"]

    def test_only_health_is_public(self):
        from plugins import public_paths, register_all

        assert public_paths(register_all()) == {"/health"}

    def test_unknown_plugin_fails_loudly(self):
        from plugins import load_plugin

        with pytest.raises(ModuleNotFoundError):
            load_plugin("does_not_exist")


class TestHandlersRunInThreadpool:
    def test_storage_backed_handlers_are_sync(self):
        import importlib
        import inspect

        # the packages re-export their APIRouter as `router`, so import the modules by path
        endpoints_router = importlib.import_module("plugins.endpoints.router")
        groups_router = importlib.import_module("plugins.endpoint_groups.router")

        for handler in (
            endpoints_router.list_endpoints,
            endpoints_router.get_endpoint,
            endpoints_router.update_endpoint,
            groups_router.list_endpoint_groups,
        ):
            assert not inspect.iscoroutinefunction(handler)
