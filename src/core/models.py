"""
core/models.py — Endpoint, group and TLS configuration records.

Records are plain dataclasses.  ``from_api`` / ``to_api`` translate to and
from the JSON shape used on the wire (``Id``, ``Name``, ``URL``, ``TLSConfig``
and friends) so that neither the server nor the client hard-codes field
names outside this module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from core.config import DEFAULT_GROUP_ID, LOCAL_SOCKET_PREFIX

__all__ = [
    "ConnectionKind",
    "TLSConfiguration",
    "Endpoint",
    "Group",
    "classify_connection",
    "strip_protocol",
    "with_protocol",
]


class ConnectionKind(str, Enum):
    """How an endpoint is reached.  Derived from the URL scheme, never stored."""

    LOCAL = "local"
    REMOTE = "remote"


# ── URL helpers ────────────────────────────────────────────────────────────────


def classify_connection(url: str) -> ConnectionKind:
    """Return LOCAL for local-socket URLs (``unix://…``), REMOTE for anything else."""
    if url.startswith(LOCAL_SOCKET_PREFIX):
        return ConnectionKind.LOCAL
    return ConnectionKind.REMOTE


def strip_protocol(url: str) -> str:
    """Drop a leading ``scheme://`` for display; other URLs are returned as-is."""
    _scheme, sep, rest = url.partition("://")
    return rest if sep else url


def with_protocol(url: str, reference_url: str) -> str:
    """Give a scheme-less ``url`` the scheme of ``reference_url``.

    Used when a display URL (scheme stripped) is sent back: an untouched URL
    comes back byte-identical to the stored one.
    """
    if "://" in url:
        return url
    scheme, sep, _rest = reference_url.partition("://")
    return f"{scheme}://{url}" if sep else url


# ── Records ────────────────────────────────────────────────────────────────────


@dataclass
class TLSConfiguration:
    """TLS flags plus the PEM material currently stored for an endpoint."""

    tls: bool = False
    tls_skip_verify: bool = False
    tls_skip_client_verify: bool = False
    tls_ca_cert: str | None = None
    tls_cert: str | None = None
    tls_key: str | None = None

    @classmethod
    def from_api(cls, data: dict | None) -> TLSConfiguration:
        data = data or {}
        return cls(
            tls=bool(data.get("TLS", False)),
            tls_skip_verify=bool(data.get("TLSSkipVerify", False)),
            tls_skip_client_verify=bool(data.get("TLSSkipClientVerify", False)),
            tls_ca_cert=data.get("TLSCACert"),
            tls_cert=data.get("TLSCert"),
            tls_key=data.get("TLSKey"),
        )

    def to_api(self) -> dict:
        return {
            "TLS": self.tls,
            "TLSSkipVerify": self.tls_skip_verify,
            "TLSSkipClientVerify": self.tls_skip_client_verify,
            "TLSCACert": self.tls_ca_cert,
            "TLSCert": self.tls_cert,
            "TLSKey": self.tls_key,
        }


@dataclass
class Endpoint:
    """A managed connection target."""

    id: int
    name: str
    url: str
    public_url: str = ""
    group_id: int = DEFAULT_GROUP_ID
    tls_config: TLSConfiguration = field(default_factory=TLSConfiguration)

    @property
    def kind(self) -> ConnectionKind:
        return classify_connection(self.url)

    @classmethod
    def from_api(cls, data: dict) -> Endpoint:
        return cls(
            id=int(data["Id"]),
            name=data.get("Name", ""),
            url=data.get("URL", ""),
            public_url=data.get("PublicURL") or "",
            group_id=int(data.get("GroupId", DEFAULT_GROUP_ID)),
            tls_config=TLSConfiguration.from_api(data.get("TLSConfig")),
        )

    def to_api(self) -> dict:
        return {
            "Id": self.id,
            "Name": self.name,
            "URL": self.url,
            "PublicURL": self.public_url,
            "GroupId": self.group_id,
            "TLSConfig": self.tls_config.to_api(),
        }


@dataclass
class Group:
    """Endpoint group: read-only reference data for the group selector."""

    id: int
    name: str

    @classmethod
    def from_api(cls, data: dict) -> Group:
        return cls(id=int(data["Id"]), name=data.get("Name", ""))

    def to_api(self) -> dict:
        return {"Id": self.id, "Name": self.name}
