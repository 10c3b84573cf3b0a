"""
conftest.py — Shared pytest fixtures for the dockhand unit tests.
"""

import asyncio
import copy
import json
import sys
from pathlib import Path

import pytest

# src/ is the Python root for all packages (core, plugins, cli, dashboard)
_SRC = Path(__file__).parent.parent.parent / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

import core.storage as storage  # noqa: E402
from cli.client import EndpointAPIError  # noqa: E402
from core.models import Endpoint, Group, TLSConfiguration  # noqa: E402


_PEM_DIR = Path(__file__).parent / "data"


@pytest.fixture
def client_pem():
    """Self-signed client certificate with its plain and passphrase-protected keys."""
    return {
        "cert": (_PEM_DIR / "client-cert.pem").read_text(),
        "key": (_PEM_DIR / "client-key.pem").read_text(),
        "encrypted_key": (_PEM_DIR / "client-key-encrypted.pem").read_text(),
    }


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point every storage path at a temporary directory."""
    monkeypatch.setattr(storage, "ENDPOINTS_FILE", tmp_path / "endpoints.json")
    monkeypatch.setattr(storage, "GROUPS_FILE", tmp_path / "groups.json")
    monkeypatch.setattr(storage, "TLS_STORE_DIR", tmp_path / "tls")
    monkeypatch.setattr(storage, "DASHBOARD_STATE", tmp_path / "state.json")
    return tmp_path


@pytest.fixture
def sample_records():
    """Two stored endpoint records: a local socket and a TLS-enabled remote host."""
    return [
        {
            "Id": 1,
            "Name": "local",
            "URL": "unix:///var/run/docker.sock",
            "PublicURL": "",
            "GroupId": 1,
            "TLSConfig": {
                "TLS": False,
                "TLSSkipVerify": False,
                "TLSSkipClientVerify": False,
                "TLSCACertPath": None,
                "TLSCertPath": None,
                "TLSKeyPath": None,
            },
        },
        {
            "Id": 2,
            "Name": "prod",
            "URL": "https://10.0.0.5:2376",
            "PublicURL": "10.0.0.5",
            "GroupId": 2,
            "TLSConfig": {
                "TLS": True,
                "TLSSkipVerify": True,
                "TLSSkipClientVerify": True,
                "TLSCACertPath": None,
                "TLSCertPath": None,
                "TLSKeyPath": None,
            },
        },
    ]


@pytest.fixture
def sample_groups():
    return [{"Id": 1, "Name": "Unassigned"}, {"Id": 2, "Name": "Production"}]


@pytest.fixture
def seeded(data_dir, sample_records, sample_groups):
    """Temporary data directory pre-filled with sample endpoints and groups."""
    storage.save_endpoint_records(sample_records)
    (data_dir / "groups.json").write_text(json.dumps({"groups": sample_groups}))
    return data_dir


@pytest.fixture
def remote_endpoint():
    """Remote endpoint with full TLS material stored."""
    return Endpoint(
        id=2,
        name="prod",
        url="https://10.0.0.5:2376",
        public_url="10.0.0.5",
        group_id=2,
        tls_config=TLSConfiguration(
            tls=True,
            tls_skip_verify=False,
            tls_skip_client_verify=False,
            tls_ca_cert="CA-PEM",
            tls_cert="CERT-PEM",
            tls_key="KEY-PEM",
        ),
    )


@pytest.fixture
def local_endpoint():
    return Endpoint(id=1, name="local", url="unix:///var/run/docker.sock")


class FakeEndpointService:
    """In-memory stand-in for cli.client.EndpointService."""

    def __init__(self, endpoint, groups=None, fail_endpoint=False, fail_groups=False, fail_update=False):
        self._endpoint = endpoint
        self._groups = groups if groups is not None else [Group(1, "Unassigned"), Group(2, "Production")]
        self.fail_endpoint = fail_endpoint
        self.fail_groups = fail_groups
        self.fail_update = fail_update
        self.updates = []
        self.list_calls = 0
        # set to an asyncio.Event to hold update_endpoint until it is released
        self.update_gate = None

    async def endpoint(self, endpoint_id):
        await asyncio.sleep(0)
        if self.fail_endpoint:
            raise EndpointAPIError(f"Endpoint {endpoint_id} not found (404)", 404)
        return copy.deepcopy(self._endpoint)

    async def groups(self):
        await asyncio.sleep(0)
        if self.fail_groups:
            raise EndpointAPIError("GET /endpoint_groups failed: connection refused")
        return list(self._groups)

    async def endpoints(self):
        self.list_calls += 1
        return [copy.deepcopy(self._endpoint)]

    async def update_endpoint(self, endpoint_id, request, on_progress=None):
        self.updates.append((endpoint_id, request))
        if self.update_gate is not None:
            await self.update_gate.wait()
        if on_progress is not None:
            on_progress(0.5)
            on_progress(1.0)
        if self.fail_update:
            raise EndpointAPIError("Invalid TLS configuration: PEM lib (400)", 400)
        return copy.deepcopy(self._endpoint)


@pytest.fixture
def fake_service_factory():
    return FakeEndpointService
