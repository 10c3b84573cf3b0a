"""
core/storage.py — File I/O for endpoint records, groups, TLS material and CLI state.

Handles reading/writing:
  - Endpoint records  (data/endpoints.json)
  - Endpoint groups   (data/groups.json, read-only)
  - TLS files         (data/tls/<endpoint id>/{ca,cert,key}.pem)
  - CLI state         (data/state.json)

All path constants are imported from core.config so this module has no
hard-coded filesystem assumptions.  Endpoint records keep the paths of their
TLS files; the PEM contents are read back when a record is turned into an
:class:`~core.models.Endpoint`.
"""

from __future__ import annotations

import copy
import json
import shutil
import ssl
import threading
from enum import Enum
from pathlib import Path

from core.config import (
    DASHBOARD_STATE,
    DEFAULT_GROUP_ID,
    DEFAULT_GROUP_NAME,
    ENDPOINTS_FILE,
    GROUPS_FILE,
    LOCAL_SOCKET_PREFIX,
    REMOTE_DEFAULT_PREFIX,
    TLS_CA_CERT_FILE,
    TLS_CERT_FILE,
    TLS_KEY_FILE,
    TLS_STORE_DIR,
)
from core.errors import EndpointNotFoundError, EndpointValidationError
from core.logger import LOGGER
from core.models import ConnectionKind, Endpoint, Group, TLSConfiguration, classify_connection
from core.tls import create_ssl_context

__all__ = [
    "TLSFileType",
    "load_endpoint_records", "save_endpoint_records",
    "list_endpoints", "get_endpoint", "update_endpoint",
    "load_groups",
    "store_tls_file", "get_path_for_tls_file", "delete_tls_file", "remove_tls_folder",
    "load_state", "save_state",
]


# route handlers run in the threadpool; updates are read-modify-write on one file
_UPDATE_LOCK = threading.Lock()


class TLSFileType(Enum):
    CA = TLS_CA_CERT_FILE
    CERT = TLS_CERT_FILE
    KEY = TLS_KEY_FILE


# record key holding the on-disk path, and the update-request attribute feeding it
_TLS_FIELDS = (
    (TLSFileType.CA, "TLSCACertPath", "tls_ca_cert"),
    (TLSFileType.CERT, "TLSCertPath", "tls_cert"),
    (TLSFileType.KEY, "TLSKeyPath", "tls_key"),
)


# ── TLS file store ─────────────────────────────────────────────────────────────


def get_path_for_tls_file(folder: str, file_type: TLSFileType) -> Path:
    return TLS_STORE_DIR / folder / file_type.value


def store_tls_file(folder: str, file_type: TLSFileType, content: str) -> Path:
    """Write ``content`` to tls/<folder>/<file>; return the absolute path."""
    path = get_path_for_tls_file(folder, file_type)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def delete_tls_file(folder: str, file_type: TLSFileType) -> None:
    get_path_for_tls_file(folder, file_type).unlink(missing_ok=True)


def remove_tls_folder(folder: str) -> None:
    shutil.rmtree(TLS_STORE_DIR / folder, ignore_errors=True)


def _read_pem(path: str | None) -> str | None:
    if not path:
        return None
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError:
        LOGGER.warning("TLS file %s is missing", path)
        return None


# ── Endpoint records ───────────────────────────────────────────────────────────


def load_endpoint_records() -> list:
    """Load data/endpoints.json; return an empty list on any failure."""
    try:
        with open(ENDPOINTS_FILE, encoding="utf-8") as fh:
            return json.load(fh).get("endpoints", [])
    except Exception:
        return []


def save_endpoint_records(records: list) -> None:
    ENDPOINTS_FILE.parent.mkdir(parents=True, exist_ok=True)
    with open(ENDPOINTS_FILE, "w", encoding="utf-8") as f:
        json.dump({"endpoints": records}, f, indent=2)


def _record_to_endpoint(record: dict) -> Endpoint:
    tls = record.get("TLSConfig") or {}
    return Endpoint(
        id=int(record["Id"]),
        name=record.get("Name", ""),
        url=record.get("URL", ""),
        public_url=record.get("PublicURL") or "",
        group_id=int(record.get("GroupId", DEFAULT_GROUP_ID)),
        tls_config=TLSConfiguration(
            tls=bool(tls.get("TLS", False)),
            tls_skip_verify=bool(tls.get("TLSSkipVerify", False)),
            tls_skip_client_verify=bool(tls.get("TLSSkipClientVerify", False)),
            tls_ca_cert=_read_pem(tls.get("TLSCACertPath")),
            tls_cert=_read_pem(tls.get("TLSCertPath")),
            tls_key=_read_pem(tls.get("TLSKeyPath")),
        ),
    )


def _find_record(records: list, endpoint_id: int) -> int:
    for index, record in enumerate(records):
        if int(record.get("Id", -1)) == endpoint_id:
            return index
    raise EndpointNotFoundError(endpoint_id)


def list_endpoints() -> list[Endpoint]:
    return [_record_to_endpoint(r) for r in load_endpoint_records()]


def get_endpoint(endpoint_id: int) -> Endpoint:
    records = load_endpoint_records()
    return _record_to_endpoint(records[_find_record(records, endpoint_id)])


def _normalize_url(url: str, kind: ConnectionKind) -> str:
    """Re-attach a scheme to a bare host:port, based on the connection kind."""
    if "://" in url:
        return url
    prefix = LOCAL_SOCKET_PREFIX if kind == ConnectionKind.LOCAL else REMOTE_DEFAULT_PREFIX
    return prefix + url


def _apply_tls(record: dict, request) -> None:
    folder = str(record["Id"])
    current = record.get("TLSConfig") or {}

    if not request.tls:
        remove_tls_folder(folder)
        record["TLSConfig"] = {
            "TLS": False,
            "TLSSkipVerify": False,
            "TLSSkipClientVerify": False,
            "TLSCACertPath": None,
            "TLSCertPath": None,
            "TLSKeyPath": None,
        }
        return

    skip_verify = (
        current.get("TLSSkipVerify", False) if request.is_omitted("tls_skip_verify") else bool(request.tls_skip_verify)
    )
    skip_client_verify = (
        current.get("TLSSkipClientVerify", False)
        if request.is_omitted("tls_skip_client_verify")
        else bool(request.tls_skip_client_verify)
    )
    skipped = {
        TLSFileType.CA: skip_verify,
        TLSFileType.CERT: skip_client_verify,
        TLSFileType.KEY: skip_client_verify,
    }

    # Resolve the material the endpoint ends up with before touching the disk
    resolved: dict[TLSFileType, str | None] = {}
    for file_type, path_key, attr in _TLS_FIELDS:
        if skipped[file_type]:
            resolved[file_type] = None
        elif request.is_omitted(attr):
            resolved[file_type] = _read_pem(current.get(path_key))
        else:
            resolved[file_type] = getattr(request, attr)

    try:
        create_ssl_context(
            resolved[TLSFileType.CA],
            resolved[TLSFileType.CERT],
            resolved[TLSFileType.KEY],
            skip_client_verification=skip_client_verify,
            skip_server_verification=skip_verify,
        )
    except (ValueError, ssl.SSLError) as exc:
        raise EndpointValidationError(f"Invalid TLS configuration: {exc}") from exc

    tls_config = {"TLS": True, "TLSSkipVerify": skip_verify, "TLSSkipClientVerify": skip_client_verify}
    for file_type, path_key, _attr in _TLS_FIELDS:
        content = resolved[file_type]
        if content is None:
            delete_tls_file(folder, file_type)
            tls_config[path_key] = None
        else:
            tls_config[path_key] = str(store_tls_file(folder, file_type, content))
    record["TLSConfig"] = tls_config


def update_endpoint(endpoint_id: int, request) -> Endpoint:
    """Apply an EndpointUpdateRequest to the stored record and persist it.

    Omitted fields keep their stored value.  Raises EndpointNotFoundError or
    EndpointValidationError; nothing is written when validation fails.
    """
    with _UPDATE_LOCK:
        return _update_endpoint(endpoint_id, request)


def _update_endpoint(endpoint_id: int, request) -> Endpoint:
    records = load_endpoint_records()
    index = _find_record(records, endpoint_id)
    record = copy.deepcopy(records[index])

    if not request.is_omitted("group_id"):
        known = {g.id for g in load_groups()}
        if request.group_id is None or int(request.group_id) not in known:
            raise EndpointValidationError(f"Endpoint group {request.group_id} does not exist")
        record["GroupId"] = int(request.group_id)

    if not request.is_omitted("name"):
        record["Name"] = request.name

    if not request.is_omitted("url"):
        kind = request.type if request.type else classify_connection(record.get("URL", ""))
        record["URL"] = _normalize_url(request.url, ConnectionKind(kind))

    if not request.is_omitted("public_url"):
        record["PublicURL"] = request.public_url or ""

    if not request.is_omitted("tls"):
        _apply_tls(record, request)

    records[index] = record
    save_endpoint_records(records)
    LOGGER.info("Endpoint %s updated (%s)", endpoint_id, record.get("Name", ""))
    return _record_to_endpoint(record)


# ── Groups ─────────────────────────────────────────────────────────────────────


def load_groups() -> list[Group]:
    """Load data/groups.json; only the default group when it is missing or unreadable."""
    try:
        with open(GROUPS_FILE, encoding="utf-8") as fh:
            return [Group.from_api(g) for g in json.load(fh).get("groups", [])]
    except Exception:
        return [Group(id=DEFAULT_GROUP_ID, name=DEFAULT_GROUP_NAME)]


# ── CLI state ──────────────────────────────────────────────────────────────────


def load_state() -> dict:
    try:
        return json.loads(DASHBOARD_STATE.read_text())
    except Exception:
        return {}


def save_state(state: dict) -> None:
    DASHBOARD_STATE.parent.mkdir(parents=True, exist_ok=True)
    DASHBOARD_STATE.write_text(json.dumps(state, indent=2))
