"""
core/update.py — Partial endpoint updates.

An :class:`EndpointUpdateRequest` distinguishes three states per field:

  OMITTED  — leave the stored value alone (key absent from the JSON body)
  None     — clear the stored value (JSON ``null``)
  value    — replace the stored value

:func:`build_update_request` turns the edit form into such a request,
deriving the TLS flags from the selected mode and omitting certificate
material that is either irrelevant under that mode or unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

from core.models import ConnectionKind, Endpoint, strip_protocol, with_protocol
from core.tls import SecurityFormData

__all__ = ["OMITTED", "EndpointUpdateRequest", "EndpointForm", "build_update_request"]


class _Omitted:
    _instance: _Omitted | None = None

    def __new__(cls) -> _Omitted:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "OMITTED"


OMITTED: Any = _Omitted()


@dataclass
class EndpointUpdateRequest:
    """Partial update for one endpoint.  Unset fields default to OMITTED."""

    name: Any = OMITTED
    url: Any = OMITTED
    public_url: Any = OMITTED
    group_id: Any = OMITTED
    tls: Any = OMITTED
    tls_skip_verify: Any = OMITTED
    tls_skip_client_verify: Any = OMITTED
    tls_ca_cert: Any = OMITTED
    tls_cert: Any = OMITTED
    tls_key: Any = OMITTED
    type: Any = OMITTED

    # attribute → JSON key
    WIRE_NAMES = {
        "name": "name",
        "url": "URL",
        "public_url": "PublicURL",
        "group_id": "GroupId",
        "tls": "TLS",
        "tls_skip_verify": "TLSSkipVerify",
        "tls_skip_client_verify": "TLSSkipClientVerify",
        "tls_ca_cert": "TLSCACert",
        "tls_cert": "TLSCert",
        "tls_key": "TLSKey",
        "type": "type",
    }

    def is_omitted(self, attr: str) -> bool:
        return getattr(self, attr) is OMITTED

    def to_payload(self) -> dict:
        """JSON body for the update call; omitted fields are left out entirely."""
        payload = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is OMITTED:
                continue
            if isinstance(value, ConnectionKind):
                value = value.value
            payload[self.WIRE_NAMES[f.name]] = value
        return payload

    @classmethod
    def from_payload(cls, payload: dict) -> EndpointUpdateRequest:
        """Inverse of :meth:`to_payload`; absent keys become OMITTED."""
        kwargs = {}
        for attr, wire in cls.WIRE_NAMES.items():
            if wire in payload:
                kwargs[attr] = payload[wire]
        request = cls(**kwargs)
        if request.type is not OMITTED and request.type is not None:
            request.type = ConnectionKind(request.type)
        return request


@dataclass
class EndpointForm:
    """Editable state of the endpoint edit view."""

    name: str
    url: str
    public_url: str = ""
    group_id: int = 1
    security: SecurityFormData = field(default_factory=SecurityFormData)

    @classmethod
    def from_endpoint(cls, endpoint: Endpoint) -> EndpointForm:
        return cls(
            name=endpoint.name,
            url=strip_protocol(endpoint.url),
            public_url=endpoint.public_url,
            group_id=endpoint.group_id,
            security=SecurityFormData.from_configuration(endpoint.tls_config),
        )


def _certificate(value: str | None, stored: str | None, irrelevant: bool) -> Any:
    if irrelevant or value == stored:
        return OMITTED
    return value


def build_update_request(
    endpoint: Endpoint,
    form: EndpointForm,
    kind: ConnectionKind | None = None,
) -> EndpointUpdateRequest:
    """Translate the edit form into the update the backend expects.

    ``kind`` defaults to the classification of the endpoint's stored URL.
    """
    security = form.security
    flags = security.flags
    stored = endpoint.tls_config

    return EndpointUpdateRequest(
        name=form.name,
        url=with_protocol(form.url, endpoint.url),
        public_url=form.public_url,
        group_id=form.group_id,
        tls=flags.tls,
        tls_skip_verify=flags.skip_verify,
        tls_skip_client_verify=flags.skip_client_verify,
        tls_ca_cert=_certificate(security.tls_ca_cert, stored.tls_ca_cert, flags.skip_verify),
        tls_cert=_certificate(security.tls_cert, stored.tls_cert, flags.skip_client_verify),
        tls_key=_certificate(security.tls_key, stored.tls_key, flags.skip_client_verify),
        type=kind if kind is not None else endpoint.kind,
    )
