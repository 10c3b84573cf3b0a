"""
core/config.py — Centralised path constants and environment defaults.

All other modules import paths from here rather than computing them from
__file__.  This guarantees consistency regardless of where a module lives
in the source tree.

Usage::

    from core.config import DATA_DIR, ENDPOINTS_FILE, TLS_STORE_DIR
"""

from pathlib import Path

# ── Repository layout ──────────────────────────────────────────────────────────

SRC_DIR: Path = Path(__file__).parent.parent       # …/dockhand/src/
REPO_ROOT: Path = SRC_DIR.parent                   # …/dockhand/

# Runtime data produced at run-time (gitignored)
DATA_DIR: Path = REPO_ROOT / "data"

# Endpoint records and the read-only group list served by the API
ENDPOINTS_FILE: Path = DATA_DIR / "endpoints.json"
GROUPS_FILE: Path = DATA_DIR / "groups.json"

# TLS material, one sub-folder per endpoint id: tls/<id>/{ca,cert,key}.pem
TLS_STORE_DIR: Path = DATA_DIR / "tls"
TLS_CA_CERT_FILE: str = "ca.pem"
TLS_CERT_FILE: str = "cert.pem"
TLS_KEY_FILE: str = "key.pem"

# CLI application state (active endpoint context), persisted between runs
DASHBOARD_STATE: Path = DATA_DIR / "state.json"

# ── Feature flags / defaults (overridable via env) ────────────────────────────

DASHBOARD_PORT: int = 9080
DASHBOARD_URL_DEFAULT: str = f"http://localhost:{DASHBOARD_PORT}"

# URL scheme marking an endpoint reached through a local socket
LOCAL_SOCKET_PREFIX: str = "unix://"
REMOTE_DEFAULT_PREFIX: str = "tcp://"

# Group every endpoint belongs to until it is moved elsewhere
DEFAULT_GROUP_ID: int = 1
DEFAULT_GROUP_NAME: str = "Unassigned"
