"""
core/tls.py — TLS security modes and client SSL context construction.

The edit form offers four mutually exclusive security postures.  The
backend instead understands three independent flags.  This module owns the
translation in both directions:

  tls_only         → skip server verification, skip client verification
  tls_ca           → verify the server against a CA, no client certificate
  tls_client_noca  → present a client certificate, skip server verification
  tls_client_ca    → full mutual verification

With TLS disabled both skip flags are always False.
"""

from __future__ import annotations

import ssl
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import NamedTuple

from core.models import TLSConfiguration


class TLSMode(str, Enum):
    TLS_ONLY = "tls_only"
    TLS_CA = "tls_ca"
    TLS_CLIENT_NOCA = "tls_client_noca"
    TLS_CLIENT_CA = "tls_client_ca"


_SKIPS_SERVER_VERIFY = frozenset({TLSMode.TLS_CLIENT_NOCA, TLSMode.TLS_ONLY})
_SKIPS_CLIENT_VERIFY = frozenset({TLSMode.TLS_CA, TLSMode.TLS_ONLY})


class TLSFlags(NamedTuple):
    tls: bool
    skip_verify: bool
    skip_client_verify: bool


def resolve_tls_flags(tls: bool, mode: TLSMode) -> TLSFlags:
    """Map the form's TLS toggle and mode onto the three backend flags."""
    mode = TLSMode(mode)
    return TLSFlags(
        tls=tls,
        skip_verify=tls and mode in _SKIPS_SERVER_VERIFY,
        skip_client_verify=tls and mode in _SKIPS_CLIENT_VERIFY,
    )


def mode_from_flags(skip_verify: bool, skip_client_verify: bool) -> TLSMode:
    """Recover the form mode from stored skip flags (inverse of resolve_tls_flags)."""
    if skip_verify and skip_client_verify:
        return TLSMode.TLS_ONLY
    if skip_client_verify:
        return TLSMode.TLS_CA
    if skip_verify:
        return TLSMode.TLS_CLIENT_NOCA
    return TLSMode.TLS_CLIENT_CA


@dataclass
class SecurityFormData:
    """Security section of the edit form, as the operator left it."""

    tls: bool = False
    tls_mode: TLSMode = TLSMode.TLS_CLIENT_CA
    tls_ca_cert: str | None = None
    tls_cert: str | None = None
    tls_key: str | None = None

    @classmethod
    def from_configuration(cls, config: TLSConfiguration) -> SecurityFormData:
        """Pre-fill the form from what is stored, so untouched certificates compare equal."""
        return cls(
            tls=config.tls,
            tls_mode=mode_from_flags(config.tls_skip_verify, config.tls_skip_client_verify),
            tls_ca_cert=config.tls_ca_cert,
            tls_cert=config.tls_cert,
            tls_key=config.tls_key,
        )

    @property
    def flags(self) -> TLSFlags:
        return resolve_tls_flags(self.tls, self.tls_mode)


# ── SSL context ────────────────────────────────────────────────────────────────


def _refuse_passphrase() -> bytes:
    # keeps OpenSSL from prompting on the terminal for an encrypted key
    raise ValueError("encrypted private keys are not supported")


def create_ssl_context(
    ca_cert: str | None,
    cert: str | None,
    key: str | None,
    skip_client_verification: bool,
    skip_server_verification: bool,
) -> ssl.SSLContext:
    """Build a client SSLContext from PEM text.

    Raises ValueError when required material is missing or the key is
    encrypted, and ssl.SSLError when the PEM data cannot be loaded.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

    if skip_server_verification:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    if not skip_client_verification:
        if not cert or not key:
            raise ValueError("client certificate and key are required")
        # load_cert_chain only accepts file paths
        with tempfile.TemporaryDirectory(prefix="dockhand-tls-") as tmp:
            cert_path = Path(tmp) / "cert.pem"
            key_path = Path(tmp) / "key.pem"
            cert_path.write_text(cert, encoding="utf-8")
            key_path.write_text(key, encoding="utf-8")
            context.load_cert_chain(certfile=str(cert_path), keyfile=str(key_path), password=_refuse_passphrase)

    if not skip_server_verification:
        if not ca_cert:
            raise ValueError("CA certificate is required")
        context.load_verify_locations(cadata=ca_cert)

    return context
