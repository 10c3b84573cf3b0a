"""
test_models.py — Unit tests for core/models.py

Covers connection-kind classification, display stripping of URL schemes and
the wire (de)serialisation of endpoint records.
"""

import pytest

from core.models import (
    ConnectionKind,
    Endpoint,
    Group,
    TLSConfiguration,
    classify_connection,
    strip_protocol,
    with_protocol,
)

# ── classify_connection ────────────────────────────────────────────────────────


class TestClassifyConnection:
    @pytest.mark.parametrize(
        "url",
        ["unix:///var/run/docker.sock", "unix://relative.sock", "unix://"],
    )
    def test_local_socket_urls_are_local(self, url):
        assert classify_connection(url) == ConnectionKind.LOCAL

    @pytest.mark.parametrize(
        "url",
        [
            "https://10.0.0.5:2376",
            "tcp://10.0.0.5:2375",
            "10.0.0.5:2375",
            "/var/run/docker.sock",
            "UNIX:///var/run/docker.sock",
            "",
        ],
    )
    def test_everything_else_is_remote(self, url):
        assert classify_connection(url) == ConnectionKind.REMOTE

    def test_endpoint_kind_uses_stored_url(self, local_endpoint, remote_endpoint):
        assert local_endpoint.kind == ConnectionKind.LOCAL
        assert remote_endpoint.kind == ConnectionKind.REMOTE


# ── strip_protocol / with_protocol ─────────────────────────────────────────────


class TestStripProtocol:
    def test_strips_scheme(self):
        assert strip_protocol("https://10.0.0.5:2376") == "10.0.0.5:2376"

    def test_strips_unix_scheme_keeping_path(self):
        assert strip_protocol("unix:///var/run/docker.sock") == "/var/run/docker.sock"

    def test_url_without_scheme_is_unchanged(self):
        assert strip_protocol("10.0.0.5:2376") == "10.0.0.5:2376"

    def test_stripped_local_url_would_classify_remote(self):
        """Classification must run on the original URL, not the display value."""
        url = "unix:///var/run/docker.sock"
        assert classify_connection(url) == ConnectionKind.LOCAL
        assert classify_connection(strip_protocol(url)) == ConnectionKind.REMOTE


class TestWithProtocol:
    def test_restores_reference_scheme(self):
        assert with_protocol("10.0.0.9:2376", "https://10.0.0.5:2376") == "https://10.0.0.9:2376"

    def test_untouched_display_url_round_trips(self):
        original = "unix:///var/run/docker.sock"
        assert with_protocol(strip_protocol(original), original) == original

    def test_explicit_scheme_wins(self):
        assert with_protocol("tcp://10.0.0.9:2375", "https://10.0.0.5:2376") == "tcp://10.0.0.9:2375"

    def test_reference_without_scheme_leaves_url_bare(self):
        assert with_protocol("10.0.0.9:2375", "10.0.0.5:2375") == "10.0.0.9:2375"


# ── Wire format ────────────────────────────────────────────────────────────────


class TestWireFormat:
    def test_endpoint_from_api(self):
        ep = Endpoint.from_api(
            {
                "Id": 3,
                "Name": "edge",
                "URL": "tcp://edge:2375",
                "PublicURL": None,
                "GroupId": 2,
                "TLSConfig": {"TLS": True, "TLSSkipVerify": True, "TLSCACert": None, "TLSCert": "C", "TLSKey": "K"},
            }
        )
        assert ep.id == 3
        assert ep.public_url == ""
        assert ep.group_id == 2
        assert ep.tls_config.tls is True
        assert ep.tls_config.tls_skip_verify is True
        assert ep.tls_config.tls_skip_client_verify is False
        assert ep.tls_config.tls_cert == "C"

    def test_endpoint_from_api_defaults(self):
        ep = Endpoint.from_api({"Id": "7", "URL": "unix:///s.sock"})
        assert ep.id == 7
        assert ep.group_id == 1
        assert ep.tls_config == TLSConfiguration()

    def test_endpoint_to_api_uses_wire_names(self, remote_endpoint):
        data = remote_endpoint.to_api()
        assert data["URL"] == "https://10.0.0.5:2376"
        assert data["PublicURL"] == "10.0.0.5"
        assert data["TLSConfig"]["TLSCACert"] == "CA-PEM"
        assert Endpoint.from_api(data) == remote_endpoint

    def test_group_from_api(self):
        assert Group.from_api({"Id": 2, "Name": "Production"}) == Group(2, "Production")
